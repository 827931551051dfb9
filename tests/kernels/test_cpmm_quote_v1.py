# [TESTER] v1

from __future__ import annotations

import pytest

from zamm_pricing.errors import OutputExceedsReserves
from zamm_pricing.kernels.python.cpmm_quote_v1 import (
    UINT256_MAX,
    amount_in_exact_out,
    amount_out_exact_in,
    swap_exact_in,
    swap_exact_out,
)


def test_amount_out_matches_contract_formula() -> None:
    out = amount_out_exact_in(amount_in=10_000, reserve_in=1_000_000, reserve_out=2_000_000, fee_bps=30)
    assert out == (10_000 * 9_970 * 2_000_000) // (1_000_000 * 10_000 + 10_000 * 9_970)


def test_amount_out_zero_cases_are_not_errors() -> None:
    assert amount_out_exact_in(amount_in=0, reserve_in=10, reserve_out=10, fee_bps=30) == 0
    assert amount_out_exact_in(amount_in=5, reserve_in=0, reserve_out=10, fee_bps=30) == 0
    assert amount_out_exact_in(amount_in=5, reserve_in=10, reserve_out=0, fee_bps=30) == 0


def test_amount_in_is_true_ceiling() -> None:
    # 1 * 1 * 10_000 / (3 * 10_000) = 1/3 -> 1
    assert amount_in_exact_out(amount_out=1, reserve_in=1, reserve_out=4, fee_bps=0) == 1
    # Exactly divisible: no +1 bump.
    # 100 * 50 * 10_000 / (50 * 10_000) = 100
    assert amount_in_exact_out(amount_out=50, reserve_in=100, reserve_out=100, fee_bps=0) == 100


def test_amount_in_rejects_draining_the_pool() -> None:
    with pytest.raises(OutputExceedsReserves) as ei:
        amount_in_exact_out(amount_out=10, reserve_in=10, reserve_out=10, fee_bps=30)
    assert ei.value.amount_out == 10
    assert ei.value.reserve_out == 10
    with pytest.raises(OutputExceedsReserves):
        amount_in_exact_out(amount_out=11, reserve_in=10, reserve_out=10, fee_bps=30)


def test_amount_in_zero_cases() -> None:
    assert amount_in_exact_out(amount_out=0, reserve_in=10, reserve_out=10, fee_bps=30) == 0
    assert amount_in_exact_out(amount_out=1, reserve_in=0, reserve_out=10, fee_bps=30) == 0


def test_fee_domain_is_checked() -> None:
    with pytest.raises(ValueError):
        amount_out_exact_in(amount_in=1, reserve_in=1, reserve_out=1, fee_bps=10_000)
    with pytest.raises(ValueError):
        amount_out_exact_in(amount_in=1, reserve_in=1, reserve_out=1, fee_bps=-1)
    with pytest.raises(TypeError):
        amount_out_exact_in(amount_in=1, reserve_in=1, reserve_out=1, fee_bps=30.0)  # type: ignore[arg-type]


def test_swap_exact_in_keeps_full_input_in_pool() -> None:
    res = swap_exact_in(reserve_in=1_000_000, reserve_out=2_000_000, amount_in=10_000, fee_bps=30)
    assert res.new_reserve_in == 1_010_000
    assert res.new_reserve_out == 2_000_000 - res.amount_out
    assert res.k_after >= res.k_before


def test_swap_exact_in_without_liquidity_leaves_reserves() -> None:
    res = swap_exact_in(reserve_in=0, reserve_out=2_000_000, amount_in=10_000, fee_bps=30)
    assert res.amount_out == 0
    assert (res.new_reserve_in, res.new_reserve_out) == (0, 2_000_000)


def test_swap_exact_out_updates_reserves_for_requested_amount_out() -> None:
    res = swap_exact_out(reserve_in=1, reserve_out=4, amount_out=1, fee_bps=0)
    assert res.amount_in == 1
    assert res.new_reserve_in == 2
    assert res.new_reserve_out == 3
    assert res.k_after >= res.k_before


def test_amount_in_overflow_is_rejected() -> None:
    with pytest.raises(ValueError, match="overflows"):
        amount_in_exact_out(amount_out=UINT256_MAX - 1, reserve_in=UINT256_MAX, reserve_out=UINT256_MAX, fee_bps=30)
    with pytest.raises(ValueError, match="overflows"):
        swap_exact_in(reserve_in=UINT256_MAX, reserve_out=10, amount_in=1, fee_bps=0)
