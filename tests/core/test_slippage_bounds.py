from __future__ import annotations

import pytest

from zamm_pricing.core.slippage import (
    DEFAULT_SLIPPAGE_BPS,
    MAX_TOLERANCE_BPS,
    SLIPPAGE_PRESETS,
    max_in,
    min_out,
    resolve_tolerance,
)
from zamm_pricing.errors import ToleranceOutOfRange
from zamm_pricing.state.tokens import UINT256_MAX


def test_min_out_rounds_down() -> None:
    assert min_out(10_000, 50) == 9_950
    assert min_out(1, 1) == 0
    assert min_out(999, 200) == (999 * 9_800) // 10_000


def test_max_in_rounds_up() -> None:
    assert max_in(10_000, 50) == 10_050
    assert max_in(1, 1) == 2
    assert max_in(10_000, 0) == 10_000


def test_zero_tolerance_is_identity() -> None:
    assert min_out(123_456, 0) == 123_456
    assert max_in(123_456, 0) == 123_456


def test_bounds_bracket_amount() -> None:
    for amount in (0, 1, 17, 10**18 + 3):
        for tol in (0, 50, 200, 500, MAX_TOLERANCE_BPS):
            assert min_out(amount, tol) <= amount <= max_in(amount, tol)


def test_tolerance_out_of_range() -> None:
    with pytest.raises(ToleranceOutOfRange):
        min_out(100, MAX_TOLERANCE_BPS + 1)
    with pytest.raises(ToleranceOutOfRange):
        max_in(100, -1)
    with pytest.raises(ToleranceOutOfRange):
        min_out(100, 300, max_tolerance_bps=200)
    with pytest.raises(TypeError):
        min_out(100, True)


def test_resolve_tolerance_presets_and_custom_values() -> None:
    assert resolve_tolerance(None) == DEFAULT_SLIPPAGE_BPS
    assert resolve_tolerance("0.5%") == 50
    assert resolve_tolerance(" 5% ") == 500
    assert resolve_tolerance("75") == 75
    assert resolve_tolerance(120) == 120
    assert set(SLIPPAGE_PRESETS.values()) == {50, 100, 200, 300, 500}


def test_resolve_tolerance_rejects_garbage() -> None:
    with pytest.raises(ValueError, match="unknown slippage preset"):
        resolve_tolerance("lots")
    with pytest.raises(ToleranceOutOfRange):
        resolve_tolerance(9_000)


def test_tolerance_ceiling_is_validated() -> None:
    with pytest.raises(ValueError, match="max_tolerance_bps"):
        min_out(100, 15_000, max_tolerance_bps=20_000)
    with pytest.raises(ValueError, match="max_tolerance_bps"):
        max_in(100, 0, max_tolerance_bps=-1)
    with pytest.raises(TypeError):
        min_out(100, 0, max_tolerance_bps=True)
    assert min_out(100, 10_000, max_tolerance_bps=10_000) == 0


def test_max_in_overflow_is_rejected() -> None:
    with pytest.raises(ValueError, match="overflows"):
        max_in(UINT256_MAX, 5_000)
    assert max_in(UINT256_MAX, 0) == UINT256_MAX
