"""
Value objects for the pricing core
"""

from .pools import (
    DEFAULT_FEE_BPS,
    ZCURVE_DEFAULT_FEE_BPS,
    USDT_POOL_KEY,
    USDT_TOKEN,
    Pool,
    PoolKey,
    coin_pool_id,
    coin_pool_key,
    compute_pool_id,
    compute_pool_key,
    resolve_pool_id,
    resolve_pool_key,
    zcurve_pool_id,
    zcurve_pool_key,
)
from .tokens import COINS_ADDRESS, HUB_ASSET_ID, HUB_TOKEN, UINT256_MAX, ZERO_ADDRESS, Token

__all__ = [
    "DEFAULT_FEE_BPS",
    "ZCURVE_DEFAULT_FEE_BPS",
    "USDT_POOL_KEY",
    "USDT_TOKEN",
    "Pool",
    "PoolKey",
    "coin_pool_id",
    "coin_pool_key",
    "compute_pool_id",
    "compute_pool_key",
    "resolve_pool_id",
    "resolve_pool_key",
    "zcurve_pool_id",
    "zcurve_pool_key",
    "COINS_ADDRESS",
    "HUB_ASSET_ID",
    "HUB_TOKEN",
    "UINT256_MAX",
    "ZERO_ADDRESS",
    "Token",
]
