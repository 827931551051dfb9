"""
Slippage bounds (deterministic, integer-only).

The bound returned here is the exact integer submitted to the settlement
call; callers must not adjust it.

    min_out = floor(amount * (10_000 - tolerance_bps) / 10_000)
    max_in  = ceil(amount * (10_000 + tolerance_bps) / 10_000)
"""

from __future__ import annotations

from typing import Dict, Union

from ..errors import ToleranceOutOfRange
from ..state.tokens import UINT256_MAX, Amount, require_uint256


BPS_DENOM = 10_000
MAX_TOLERANCE_BPS = 5_000  # 50%; anything above is a configuration error

DEFAULT_SLIPPAGE_BPS = 200  # 2%
SINGLE_HUB_SLIPPAGE_BPS = 500  # 5%, single-sided hub liquidity

SLIPPAGE_PRESETS: Dict[str, int] = {
    "0.5%": 50,
    "1%": 100,
    "2%": 200,
    "3%": 300,
    "5%": 500,
}


def _check_tolerance(tolerance_bps: int, max_tolerance_bps: int) -> None:
    if not isinstance(max_tolerance_bps, int) or isinstance(max_tolerance_bps, bool):
        raise TypeError("max_tolerance_bps must be an int")
    if not (0 <= max_tolerance_bps <= BPS_DENOM):
        raise ValueError(f"max_tolerance_bps must be in [0, {BPS_DENOM}]: {max_tolerance_bps}")
    if not isinstance(tolerance_bps, int) or isinstance(tolerance_bps, bool):
        raise TypeError("tolerance_bps must be an int")
    if not (0 <= tolerance_bps <= max_tolerance_bps):
        raise ToleranceOutOfRange(tolerance_bps, max_tolerance_bps)


def min_out(amount: Amount, tolerance_bps: int, *, max_tolerance_bps: int = MAX_TOLERANCE_BPS) -> Amount:
    """Smallest acceptable output for a quoted `amount` (rounds down)."""
    require_uint256("amount", amount)
    _check_tolerance(tolerance_bps, max_tolerance_bps)
    return (amount * (BPS_DENOM - tolerance_bps)) // BPS_DENOM


def max_in(amount: Amount, tolerance_bps: int, *, max_tolerance_bps: int = MAX_TOLERANCE_BPS) -> Amount:
    """
    Largest acceptable input for a quoted `amount` (rounds up).

    Raises:
        ValueError: If the bound overflows uint256
    """
    require_uint256("amount", amount)
    _check_tolerance(tolerance_bps, max_tolerance_bps)
    bound = (amount * (BPS_DENOM + tolerance_bps) + BPS_DENOM - 1) // BPS_DENOM
    if bound > UINT256_MAX:
        raise ValueError(f"max_in bound overflows uint256: {bound}")
    return bound


def resolve_tolerance(
    value: Union[str, int, None],
    *,
    default_bps: int = DEFAULT_SLIPPAGE_BPS,
    max_tolerance_bps: int = MAX_TOLERANCE_BPS,
) -> int:
    """
    Map a preset label ("0.5%", "1%", ...) or a custom bps value to a tolerance.

    None selects `default_bps`. Strings that are not preset labels are parsed as
    integer bps.
    """
    if value is None:
        bps = default_bps
    elif isinstance(value, str):
        label = value.strip()
        if label in SLIPPAGE_PRESETS:
            bps = SLIPPAGE_PRESETS[label]
        else:
            try:
                bps = int(label)
            except ValueError as exc:
                raise ValueError(f"unknown slippage preset: {value!r}") from exc
    else:
        bps = value
    _check_tolerance(bps, max_tolerance_bps)
    return bps
