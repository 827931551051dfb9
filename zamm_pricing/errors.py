"""Exception types for the pricing core.

All of these describe rejected input (configuration mistakes or mathematically
impossible requests). None of them is transient, so callers should surface
them instead of retrying.

Zero liquidity and zero amounts are not errors: the quoting functions return
``0`` for those.
"""

from __future__ import annotations


class PricingError(ValueError):
    """Base class for rejected pricing inputs."""


class InvalidAssetPair(PricingError):
    """Raised when both legs of a pool key name the same asset."""


class OutputExceedsReserves(PricingError):
    """Raised when an exact-out request asks for the whole reserve or more."""

    def __init__(self, amount_out: int, reserve_out: int) -> None:
        self.amount_out = amount_out
        self.reserve_out = reserve_out
        super().__init__(f"amount_out ({amount_out}) >= reserve_out ({reserve_out})")


class ToleranceOutOfRange(PricingError):
    """Raised when a slippage tolerance falls outside ``[0, max_tolerance_bps]``."""

    def __init__(self, tolerance_bps: int, max_tolerance_bps: int) -> None:
        self.tolerance_bps = tolerance_bps
        self.max_tolerance_bps = max_tolerance_bps
        super().__init__(f"tolerance_bps must be in [0, {max_tolerance_bps}]: {tolerance_bps}")


class InvalidCurveParameters(PricingError):
    """Raised when a sale curve configuration cannot yield a monotone cost."""
