"""
Constant-product quote kernel (v1 semantics).

Mirrors the exchange contract's integer pricing:
- The fee is folded into the input leg by scaling with 10_000:
      eff_in = amount_in * (10_000 - fee_bps)
- Exact-in output rounds down:
      amount_out = floor(eff_in * reserve_out / (reserve_in * 10_000 + eff_in))
- Exact-out input rounds up:
      amount_in = ceil(reserve_in * amount_out * 10_000 / ((reserve_out - amount_out) * (10_000 - fee_bps)))

Both roundings leave the remainder in the pool. Swapping them changes who bears
the rounding loss and desynchronizes previews from settlement.

Zero amounts and empty reserves quote to 0; they are not errors.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import OutputExceedsReserves


BPS_DENOM = 10_000
UINT256_MAX = (1 << 256) - 1


def _require_uint(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0 or value > UINT256_MAX:
        raise ValueError(f"{name} must be in [0, 2**256 - 1]: {value}")


def _require_uint_result(name: str, value: int) -> int:
    if value > UINT256_MAX:
        raise ValueError(f"{name} overflows uint256: {value}")
    return value


def _require_fee_bps(fee_bps: int) -> None:
    if not isinstance(fee_bps, int) or isinstance(fee_bps, bool):
        raise TypeError("fee_bps must be an int")
    if not (0 <= fee_bps < BPS_DENOM):
        raise ValueError(f"fee_bps must be in [0, {BPS_DENOM}): {fee_bps}")


def _ceil_div_nonneg(numerator: int, denominator: int) -> int:
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    if numerator < 0:
        raise ValueError("numerator must be non-negative")
    return (numerator + denominator - 1) // denominator


@dataclass(frozen=True)
class SwapExactInResult:
    amount_in: int
    amount_out: int
    fee_bps: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


@dataclass(frozen=True)
class SwapExactOutResult:
    amount_in: int
    amount_out: int
    fee_bps: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def amount_out_exact_in(*, amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int) -> int:
    """`floor(eff_in * reserve_out / (reserve_in * 10_000 + eff_in))`, 0 without liquidity."""
    _require_uint("amount_in", amount_in)
    _require_uint("reserve_in", reserve_in)
    _require_uint("reserve_out", reserve_out)
    _require_fee_bps(fee_bps)

    if amount_in == 0 or reserve_in == 0 or reserve_out == 0:
        return 0

    amount_in_with_fee = amount_in * (BPS_DENOM - fee_bps)
    numerator = amount_in_with_fee * reserve_out
    denominator = reserve_in * BPS_DENOM + amount_in_with_fee
    return numerator // denominator


def amount_in_exact_out(*, amount_out: int, reserve_in: int, reserve_out: int, fee_bps: int) -> int:
    """
    `ceil(reserve_in * amount_out * 10_000 / ((reserve_out - amount_out) * (10_000 - fee_bps)))`.

    Raises:
        OutputExceedsReserves: If amount_out >= reserve_out
        ValueError: If the required input overflows uint256
    """
    _require_uint("amount_out", amount_out)
    _require_uint("reserve_in", reserve_in)
    _require_uint("reserve_out", reserve_out)
    _require_fee_bps(fee_bps)

    if amount_out == 0:
        return 0
    if amount_out >= reserve_out:
        raise OutputExceedsReserves(amount_out, reserve_out)
    if reserve_in == 0:
        return 0

    numerator = reserve_in * amount_out * BPS_DENOM
    denominator = (reserve_out - amount_out) * (BPS_DENOM - fee_bps)
    return _require_uint_result("amount_in", _ceil_div_nonneg(numerator, denominator))


def swap_exact_in(*, reserve_in: int, reserve_out: int, amount_in: int, fee_bps: int) -> SwapExactInResult:
    """Exact-in quote + post-state (the whole input, fee included, stays in the pool)."""
    amount_out = amount_out_exact_in(
        amount_in=amount_in, reserve_in=reserve_in, reserve_out=reserve_out, fee_bps=fee_bps
    )
    if amount_out > reserve_out:
        raise AssertionError("amount_out exceeds reserve_out")

    if amount_in == 0 or reserve_in == 0 or reserve_out == 0:
        new_reserve_in, new_reserve_out = reserve_in, reserve_out
    else:
        new_reserve_in = _require_uint_result("new_reserve_in", reserve_in + amount_in)
        new_reserve_out = reserve_out - amount_out

    return SwapExactInResult(
        amount_in=amount_in,
        amount_out=amount_out,
        fee_bps=fee_bps,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=reserve_in * reserve_out,
        k_after=new_reserve_in * new_reserve_out,
    )


def swap_exact_out(*, reserve_in: int, reserve_out: int, amount_out: int, fee_bps: int) -> SwapExactOutResult:
    """Exact-out quote + post-state for the requested `amount_out`."""
    amount_in = amount_in_exact_out(
        amount_out=amount_out, reserve_in=reserve_in, reserve_out=reserve_out, fee_bps=fee_bps
    )

    if amount_in == 0:
        new_reserve_in, new_reserve_out = reserve_in, reserve_out
        amount_out = 0
    else:
        new_reserve_in = _require_uint_result("new_reserve_in", reserve_in + amount_in)
        new_reserve_out = reserve_out - amount_out

    return SwapExactOutResult(
        amount_in=amount_in,
        amount_out=amount_out,
        fee_bps=fee_bps,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=reserve_in * reserve_out,
        k_after=new_reserve_in * new_reserve_out,
    )
