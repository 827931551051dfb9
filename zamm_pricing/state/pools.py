"""
Pool keys, pool ids and pool reserve snapshots.

A pool key is the ordered tuple `(id0, id1, token0, token1, feeOrHook)` the
exchange contract hashes into a pool id:

    pool_id = keccak256(abi.encode(uint256 id0, uint256 id1,
                                   address token0, address token1,
                                   uint256 feeOrHook))

Pools flagged as custom (e.g. the fixed-fee USDT/ETH pair) carry their key and
id verbatim; the codec never recomputes them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from eth_abi import encode
from eth_utils import keccak, to_checksum_address

from ..errors import InvalidAssetPair
from .tokens import (
    COINS_ADDRESS,
    HUB_TOKEN,
    ZERO_ADDRESS,
    Address,
    Amount,
    AssetId,
    Token,
    normalize_address,
    require_uint256,
)


DEFAULT_FEE_BPS = 100  # 1% pool fee
ZCURVE_DEFAULT_FEE_BPS = 30  # fee of pools seeded by a finished zCurve sale
POOL_KEY_ABI_TYPES = ("uint256", "uint256", "address", "address", "uint256")


@dataclass(frozen=True)
class PoolKey:
    id0: AssetId
    id1: AssetId
    token0: Address
    token1: Address
    fee_or_hook: int

    def __post_init__(self) -> None:
        require_uint256("id0", self.id0)
        require_uint256("id1", self.id1)
        require_uint256("fee_or_hook", self.fee_or_hook)
        object.__setattr__(self, "token0", normalize_address(self.token0))
        object.__setattr__(self, "token1", normalize_address(self.token1))
        if self.id0 == self.id1 and self.token0 == self.token1:
            raise InvalidAssetPair(f"pool key legs are the same asset: ({self.token0}, {self.id0})")

    @property
    def has_hub(self) -> bool:
        return self.id0 == 0 and self.token0 == ZERO_ADDRESS

    def as_abi_tuple(self) -> Tuple[int, int, str, str, int]:
        return (self.id0, self.id1, self.token0, self.token1, self.fee_or_hook)


def compute_pool_key(token_a: Token, token_b: Token, fee_or_hook: int = DEFAULT_FEE_BPS) -> PoolKey:
    """
    Canonicalize a token pair into a pool key.

    The hub asset is always the first leg. Other legs are ordered by the
    number of set bits in their contract address, then by address, then by
    ascending coin id inside one contract, so key(a, b) == key(b, a).

    Raises:
        InvalidAssetPair: If both legs are the same asset
    """
    if token_a.same_asset(token_b):
        raise InvalidAssetPair(f"cannot pair an asset with itself: ({token_a.address}, {token_a.id})")
    t0, t1 = sorted((token_a, token_b), key=Token.sort_key)
    return PoolKey(id0=t0.id, id1=t1.id, token0=t0.address, token1=t1.address, fee_or_hook=fee_or_hook)


def compute_pool_id(pool_key: PoolKey) -> int:
    """keccak256 of the ABI-encoded pool key, as an unsigned int."""
    encoded = encode(list(POOL_KEY_ABI_TYPES), list(pool_key.as_abi_tuple()))
    return int.from_bytes(keccak(encoded), "big")


def coin_pool_key(coin_id: AssetId, fee_or_hook: int = DEFAULT_FEE_BPS, *, coins_address: Address = COINS_ADDRESS) -> PoolKey:
    """Key of the hub/coin pool for a coin minted by the Coins contract."""
    return compute_pool_key(HUB_TOKEN, Token(id=coin_id, address=coins_address), fee_or_hook)


def coin_pool_id(coin_id: AssetId, fee_or_hook: int = DEFAULT_FEE_BPS, *, coins_address: Address = COINS_ADDRESS) -> int:
    return compute_pool_id(coin_pool_key(coin_id, fee_or_hook, coins_address=coins_address))


def zcurve_pool_key(coin_id: AssetId, fee_or_hook: int = ZCURVE_DEFAULT_FEE_BPS, *, cookbook_address: Address) -> PoolKey:
    """
    Key of the hub/coin pool a zCurve sale graduates into.

    The coin is minted by the sale contract itself, so its address is the
    second leg. A fee of 0 means "unset" and falls back to the sale default.
    """
    return coin_pool_key(coin_id, fee_or_hook or ZCURVE_DEFAULT_FEE_BPS, coins_address=cookbook_address)


def zcurve_pool_id(coin_id: AssetId, fee_or_hook: int = ZCURVE_DEFAULT_FEE_BPS, *, cookbook_address: Address) -> int:
    return compute_pool_id(zcurve_pool_key(coin_id, fee_or_hook, cookbook_address=cookbook_address))


def _custom_leg(token_a: Token, token_b: Token) -> Optional[Token]:
    if token_a.is_custom_pool:
        return token_a
    if token_b.is_custom_pool:
        return token_b
    return None


def resolve_pool_key(token_a: Token, token_b: Token, fee_or_hook: int = DEFAULT_FEE_BPS) -> PoolKey:
    """
    Pool key for a pair, honoring custom-pool overrides.

    If either token is flagged custom, its override key is returned verbatim.
    """
    if token_a.same_asset(token_b):
        raise InvalidAssetPair(f"cannot pair an asset with itself: ({token_a.address}, {token_a.id})")
    custom = _custom_leg(token_a, token_b)
    if custom is not None:
        if custom.pool_key is None:
            raise InvalidAssetPair(f"custom pool token {custom.symbol or custom.id} has no pool_key override")
        return custom.pool_key
    return compute_pool_key(token_a, token_b, fee_or_hook)


def resolve_pool_id(token_a: Token, token_b: Token, fee_or_hook: int = DEFAULT_FEE_BPS) -> int:
    """Pool id for a pair, honoring custom-pool overrides."""
    if token_a.same_asset(token_b):
        raise InvalidAssetPair(f"cannot pair an asset with itself: ({token_a.address}, {token_a.id})")
    custom = _custom_leg(token_a, token_b)
    if custom is not None:
        if custom.pool_id is not None:
            return custom.pool_id
        if custom.pool_key is None:
            raise InvalidAssetPair(f"custom pool token {custom.symbol or custom.id} has no pool override")
        return compute_pool_id(custom.pool_key)
    return compute_pool_id(compute_pool_key(token_a, token_b, fee_or_hook))


@dataclass(frozen=True)
class Pool:
    """
    Reserve snapshot of a two-asset pool.

    `reserve_hub` is the reserve of the key's first leg (the hub asset when the
    pair contains it) and `reserve_asset` the second leg. Snapshots are read
    fresh from chain by the caller before every estimate.
    """

    pool_key: PoolKey
    reserve_hub: Amount
    reserve_asset: Amount
    fee_bps: int = DEFAULT_FEE_BPS
    pool_id: Optional[int] = None

    def __post_init__(self) -> None:
        require_uint256("reserve_hub", self.reserve_hub)
        require_uint256("reserve_asset", self.reserve_asset)
        if not isinstance(self.fee_bps, int) or isinstance(self.fee_bps, bool):
            raise TypeError("fee_bps must be an int")
        if not (0 <= self.fee_bps < 10_000):
            raise ValueError(f"fee_bps must be in [0, 10000): {self.fee_bps}")
        if self.pool_id is None:
            object.__setattr__(self, "pool_id", compute_pool_id(self.pool_key))
        else:
            require_uint256("pool_id", self.pool_id)

    @classmethod
    def for_pair(
        cls,
        token_a: Token,
        token_b: Token,
        reserve_a: Amount,
        reserve_b: Amount,
        *,
        fee_bps: Optional[int] = None,
        default_fee_bps: int = DEFAULT_FEE_BPS,
    ) -> "Pool":
        """Build a snapshot from reserves given in (token_a, token_b) order."""
        custom = _custom_leg(token_a, token_b)
        if fee_bps is None:
            fee_bps = custom.fee_bps if custom is not None and custom.fee_bps is not None else default_fee_bps
        key = resolve_pool_key(token_a, token_b, fee_bps)
        pool_id = resolve_pool_id(token_a, token_b, fee_bps)
        first = (key.id0, key.token0)
        if first == (token_a.id, token_a.address):
            a_first = True
        elif first == (token_b.id, token_b.address):
            a_first = False
        else:
            # Override key names neither leg first; use canonical order.
            a_first = token_a.sort_key() <= token_b.sort_key()
        r0, r1 = (reserve_a, reserve_b) if a_first else (reserve_b, reserve_a)
        return cls(pool_key=key, reserve_hub=r0, reserve_asset=r1, fee_bps=fee_bps, pool_id=pool_id)

    @property
    def has_liquidity(self) -> bool:
        return self.reserve_hub > 0 and self.reserve_asset > 0

    def reserves_for(self, *, sell_hub: bool) -> Tuple[Amount, Amount]:
        """(reserve_in, reserve_out) for a swap selling the first leg when `sell_hub`."""
        if sell_hub:
            return self.reserve_hub, self.reserve_asset
        return self.reserve_asset, self.reserve_hub

    def __repr__(self) -> str:
        return (
            f"Pool(pool_id={hex(self.pool_id)[:18]}..., "
            f"reserves=({self.reserve_hub}, {self.reserve_asset}), fee_bps={self.fee_bps})"
        )


USDT_ADDRESS: Address = to_checksum_address("0xdac17f958d2ee523a2206206994597c13d831ec7")

# USDT/ETH pool with a fixed 30 bps fee, created outside the coin factory.
USDT_POOL_KEY = PoolKey(id0=0, id1=0, token0=ZERO_ADDRESS, token1=USDT_ADDRESS, fee_or_hook=30)

USDT_TOKEN = Token(
    id=0,
    address=USDT_ADDRESS,
    decimals=6,
    symbol="USDT",
    is_custom_pool=True,
    pool_key=USDT_POOL_KEY,
    pool_id=compute_pool_id(USDT_POOL_KEY),
    fee_bps=30,
)
