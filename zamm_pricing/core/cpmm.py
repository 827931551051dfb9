"""
Constant Product Market Maker (CPMM) quoting.

This module exposes the swap math the dashboard previews with. Results must
match the exchange contract bit-for-bit, so every step is integer-only and the
rounding direction is fixed:

- exact-in output rounds down,
- exact-out input rounds up.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per quote
- Space Complexity: O(1) auxiliary
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..kernels.python.cpmm_quote_v1 import amount_in_exact_out as _kernel_amount_in_v1
from ..kernels.python.cpmm_quote_v1 import amount_out_exact_in as _kernel_amount_out_v1
from ..kernels.python.cpmm_quote_v1 import swap_exact_in as _kernel_swap_exact_in_v1
from ..kernels.python.cpmm_quote_v1 import swap_exact_out as _kernel_swap_exact_out_v1
from ..state.tokens import Amount


@dataclass(frozen=True)
class SwapQuote:
    amount_in: Amount
    amount_out: Amount
    fee_bps: int
    reserves_after: Tuple[Amount, Amount]


def compute_output(amount_in: Amount, reserve_in: Amount, reserve_out: Amount, fee_bps: int) -> Amount:
    """
    Output of an exact-in swap.

    Formula:
        eff_in = amount_in * (10_000 - fee_bps)
        amount_out = floor(eff_in * reserve_out / (reserve_in * 10_000 + eff_in))

    Returns 0 when amount_in is 0 or either reserve is empty.

    Raises:
        TypeError: If an argument is not an int
        ValueError: If an argument is outside its domain (fee_bps must be < 10_000)
    """
    return _kernel_amount_out_v1(
        amount_in=amount_in,
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        fee_bps=fee_bps,
    )


def compute_input(amount_out: Amount, reserve_in: Amount, reserve_out: Amount, fee_bps: int) -> Amount:
    """
    Input required for an exact-out swap.

    Formula:
        amount_in = ceil(reserve_in * amount_out * 10_000 / ((reserve_out - amount_out) * (10_000 - fee_bps)))

    Returns 0 when amount_out is 0 or reserve_in is empty.

    Raises:
        OutputExceedsReserves: If amount_out >= reserve_out
        ValueError: If the required input overflows uint256
    """
    return _kernel_amount_in_v1(
        amount_out=amount_out,
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        fee_bps=fee_bps,
    )


def quote_exact_in(amount_in: Amount, reserve_in: Amount, reserve_out: Amount, fee_bps: int) -> SwapQuote:
    """Exact-in quote together with the reserves the pool would hold afterwards."""
    res = _kernel_swap_exact_in_v1(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=amount_in,
        fee_bps=fee_bps,
    )
    if res.k_after < res.k_before:
        raise ValueError(f"Invariant violation: new_k ({res.k_after}) < old_k ({res.k_before})")
    return SwapQuote(
        amount_in=res.amount_in,
        amount_out=res.amount_out,
        fee_bps=fee_bps,
        reserves_after=(res.new_reserve_in, res.new_reserve_out),
    )


def quote_exact_out(amount_out: Amount, reserve_in: Amount, reserve_out: Amount, fee_bps: int) -> SwapQuote:
    """Exact-out quote together with the reserves the pool would hold afterwards."""
    res = _kernel_swap_exact_out_v1(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_out=amount_out,
        fee_bps=fee_bps,
    )
    if res.k_after < res.k_before:
        raise ValueError(f"Invariant violation: new_k ({res.k_after}) < old_k ({res.k_before})")
    return SwapQuote(
        amount_in=res.amount_in,
        amount_out=res.amount_out,
        fee_bps=fee_bps,
        reserves_after=(res.new_reserve_in, res.new_reserve_out),
    )
