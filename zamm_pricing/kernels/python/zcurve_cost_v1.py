"""
zCurve sale cost kernel (v1 semantics).

Cumulative cost, in wei, of the first `m` ticks sold on a quadratic-then-linear
curve. One tick is UNIT_SCALE token base-units; ticks 0 and 1 are free.

Quadratic phase (m <= K):
    sum_{i=0..m-1} i^2 = m*(m-1)*(2m-1)/6
    cost(m) = floor(floor(m*(m-1)*(2m-1)/6) * 1 ETH / (6*divisor))

Linear phase (m > K):
    cost(m) = cost(K) + (m - K) * floor(K^2 * 1 ETH / (6*divisor))

At m == K both branches agree (zero linear ticks), so the cost is continuous
and non-decreasing for every divisor > 0.
"""

from __future__ import annotations

from typing import Optional

from ...errors import InvalidCurveParameters


UNIT_SCALE = 10**12  # token base-units per tick
ONE_ETH = 10**18
FREE_TICKS = 2


def _require_nonneg_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")


def _require_divisor(divisor: int) -> None:
    if not isinstance(divisor, int) or isinstance(divisor, bool):
        raise TypeError("divisor must be an int")
    if divisor <= 0:
        raise InvalidCurveParameters(f"divisor must be positive: {divisor}")


def _require_quad_ticks(quad_ticks: int) -> None:
    _require_nonneg_int("quad_ticks", quad_ticks)
    # The kink must lie past the free ticks.
    if quad_ticks < FREE_TICKS:
        raise InvalidCurveParameters(f"quad_ticks must be at least {FREE_TICKS}: {quad_ticks}")


def sum_of_squares_below(m: int) -> int:
    """sum_{i=0..m-1} i^2."""
    if m <= 0:
        return 0
    return (m * (m - 1) * (2 * m - 1)) // 6


def quadratic_cost(m: int, divisor: int) -> int:
    return (sum_of_squares_below(m) * ONE_ETH) // (6 * divisor)


def tick_price(k: int, divisor: int) -> int:
    """Marginal price of one tick at tick index `k`, used for the linear tail."""
    return (k * k * ONE_ETH) // (6 * divisor)


def tick_cost(m: int, divisor: int, quad_ticks: Optional[int] = None) -> int:
    """
    Cumulative cost of `m` ticks.

    Args:
        m: Ticks sold
        divisor: Curve steepness (> 0)
        quad_ticks: Tick index K where pricing turns linear; None keeps the
            whole curve quadratic

    Raises:
        InvalidCurveParameters: If divisor <= 0 or quad_ticks < 2
    """
    _require_nonneg_int("m", m)
    _require_divisor(divisor)
    if quad_ticks is not None:
        _require_quad_ticks(quad_ticks)

    if m < FREE_TICKS:
        return 0

    if quad_ticks is None or m <= quad_ticks:
        return quadratic_cost(m, divisor)

    quad_cost = quadratic_cost(quad_ticks, divisor)
    tail_ticks = m - quad_ticks
    return quad_cost + tick_price(quad_ticks, divisor) * tail_ticks


def cost_for_units(n: int, divisor: int, quad_cap: Optional[int] = None) -> int:
    """Cumulative cost of `n` token base-units (quantized down to whole ticks)."""
    _require_nonneg_int("n", n)
    quad_ticks = None if quad_cap is None else quad_cap // UNIT_SCALE
    return tick_cost(n // UNIT_SCALE, divisor, quad_ticks)
