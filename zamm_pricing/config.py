"""
Pricing configuration.

Protocol defaults (fee tier, slippage presets, tolerance ceiling) live here so
the pure functions take them as plain arguments. Values can be overridden from
`ZAMM_*` environment variables or a YAML file; both loaders fail closed on
malformed input.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

from .core.cache import DEFAULT_CACHE_SIZE, DEFAULT_CACHE_TTL_SECONDS, QuoteCache
from .core.slippage import (
    DEFAULT_SLIPPAGE_BPS,
    MAX_TOLERANCE_BPS,
    SINGLE_HUB_SLIPPAGE_BPS,
    SLIPPAGE_PRESETS,
    resolve_tolerance,
)
from .state.pools import DEFAULT_FEE_BPS
from .state.tokens import COINS_ADDRESS, Address, Token, normalize_address


FEE_TIERS: Tuple[int, ...] = (5, 30, 100, 300)


def _env_int(name: str, default: int, *, lo: int, hi: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError:
        return int(default)
    if v < lo:
        return int(lo)
    if v > hi:
        return int(hi)
    return int(v)


def _env_float(name: str, default: float, *, lo: float, hi: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return float(default)
    try:
        v = float(raw.strip())
    except ValueError:
        return float(default)
    return min(max(v, lo), hi)


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _require_bps(name: str, value: Any, *, hi: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if not (0 <= value <= hi):
        raise ValueError(f"{name} must be in [0, {hi}]: {value}")


@dataclass(frozen=True)
class PricingConfig:
    """Runtime defaults for quoting."""

    default_fee_bps: int = DEFAULT_FEE_BPS
    fee_tiers: Tuple[int, ...] = FEE_TIERS
    default_slippage_bps: int = DEFAULT_SLIPPAGE_BPS
    single_hub_slippage_bps: int = SINGLE_HUB_SLIPPAGE_BPS
    max_tolerance_bps: int = MAX_TOLERANCE_BPS
    # (label, bps) pairs; a mapping passed in is converted on construction.
    slippage_presets: Tuple[Tuple[str, int], ...] = tuple(SLIPPAGE_PRESETS.items())
    coins_address: Address = COINS_ADDRESS
    cache_size: int = DEFAULT_CACHE_SIZE
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS

    def __post_init__(self) -> None:
        _require_bps("default_fee_bps", self.default_fee_bps, hi=9_999)
        if not self.fee_tiers:
            raise ValueError("fee_tiers must not be empty")
        for tier in self.fee_tiers:
            _require_bps("fee_tiers[]", tier, hi=9_999)
        object.__setattr__(self, "fee_tiers", tuple(sorted(set(self.fee_tiers))))
        _require_bps("max_tolerance_bps", self.max_tolerance_bps, hi=10_000)
        _require_bps("default_slippage_bps", self.default_slippage_bps, hi=self.max_tolerance_bps)
        _require_bps("single_hub_slippage_bps", self.single_hub_slippage_bps, hi=self.max_tolerance_bps)
        if isinstance(self.slippage_presets, Mapping):
            object.__setattr__(self, "slippage_presets", tuple(self.slippage_presets.items()))
        else:
            object.__setattr__(self, "slippage_presets", tuple((label, bps) for label, bps in self.slippage_presets))
        for label, bps in self.slippage_presets:
            if not isinstance(label, str) or not label.strip():
                raise ValueError("slippage preset labels must be non-empty strings")
            _require_bps(f"slippage_presets[{label!r}]", bps, hi=self.max_tolerance_bps)
        object.__setattr__(self, "coins_address", normalize_address(self.coins_address))
        if not isinstance(self.cache_size, int) or isinstance(self.cache_size, bool) or self.cache_size <= 0:
            raise ValueError(f"cache_size must be a positive int: {self.cache_size}")
        if self.cache_ttl_seconds <= 0:
            raise ValueError(f"cache_ttl_seconds must be positive: {self.cache_ttl_seconds}")

    @property
    def preset_map(self) -> Dict[str, int]:
        return dict(self.slippage_presets)

    def tolerance(self, value: Union[str, int, None] = None, *, single_hub: bool = False) -> int:
        """
        Resolve a preset label, custom bps, or None to a tolerance.

        None selects the default; `single_hub` switches that default to the
        wider tolerance used for single-sided hub liquidity.
        """
        presets = self.preset_map
        if isinstance(value, str) and value.strip() in presets:
            value = presets[value.strip()]
        default_bps = self.single_hub_slippage_bps if single_hub else self.default_slippage_bps
        return resolve_tolerance(
            value,
            default_bps=default_bps,
            max_tolerance_bps=self.max_tolerance_bps,
        )

    def require_fee_tier(self, fee_bps: int) -> int:
        """Reject pool fees outside the configured tiers (custom pools bypass this)."""
        _require_bps("fee_bps", fee_bps, hi=9_999)
        if fee_bps not in self.fee_tiers:
            raise ValueError(f"fee_bps {fee_bps} is not a configured fee tier: {list(self.fee_tiers)}")
        return fee_bps

    def coin(self, coin_id: int, *, symbol: str = "", decimals: int = 18, fee_bps: Optional[int] = None) -> Token:
        """Token for a coin minted by the configured Coins contract."""
        if fee_bps is not None:
            self.require_fee_tier(fee_bps)
        return Token(id=coin_id, address=self.coins_address, decimals=decimals, symbol=symbol, fee_bps=fee_bps)

    def new_cache(self) -> QuoteCache:
        return QuoteCache(max_size=self.cache_size, ttl_seconds=self.cache_ttl_seconds)

    @classmethod
    def from_env(cls) -> "PricingConfig":
        """
        Build a config from the environment.

        Integer variables are clamped to their valid range; unparsable values
        fall back to the default.
        """
        max_tol = _env_int("ZAMM_MAX_TOLERANCE_BPS", MAX_TOLERANCE_BPS, lo=0, hi=10_000)
        return cls(
            default_fee_bps=_env_int("ZAMM_DEFAULT_FEE_BPS", DEFAULT_FEE_BPS, lo=0, hi=9_999),
            default_slippage_bps=_env_int(
                "ZAMM_DEFAULT_SLIPPAGE_BPS", min(DEFAULT_SLIPPAGE_BPS, max_tol), lo=0, hi=max_tol
            ),
            single_hub_slippage_bps=_env_int(
                "ZAMM_SINGLE_HUB_SLIPPAGE_BPS", min(SINGLE_HUB_SLIPPAGE_BPS, max_tol), lo=0, hi=max_tol
            ),
            max_tolerance_bps=max_tol,
            slippage_presets=tuple((label, bps) for label, bps in SLIPPAGE_PRESETS.items() if bps <= max_tol),
            coins_address=_env_str("ZAMM_COINS_ADDRESS", COINS_ADDRESS),
            cache_size=_env_int("ZAMM_QUOTE_CACHE_SIZE", DEFAULT_CACHE_SIZE, lo=1, hi=10_000),
            cache_ttl_seconds=_env_float("ZAMM_QUOTE_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS, lo=0.001, hi=3600.0),
        )

    @classmethod
    def from_mapping(cls, obj: Any) -> "PricingConfig":
        if obj is None:
            return cls()
        if not isinstance(obj, dict):
            raise ValueError("pricing config must be a mapping")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(obj) - known)
        if unknown:
            raise ValueError(f"unknown pricing config keys: {unknown}")
        kwargs = dict(obj)
        if "fee_tiers" in kwargs:
            if not isinstance(kwargs["fee_tiers"], list):
                raise ValueError("fee_tiers must be a list")
            kwargs["fee_tiers"] = tuple(kwargs["fee_tiers"])
        if "slippage_presets" in kwargs and not isinstance(kwargs["slippage_presets"], dict):
            raise ValueError("slippage_presets must be a mapping")
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "PricingConfig":
        raw = Path(path).read_text(encoding="utf-8")
        return cls.from_mapping(yaml.safe_load(raw))
