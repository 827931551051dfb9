"""
zCurve bonding-curve pricing (sale phase).

A sale curve prices coins on a quadratic-then-linear cumulative cost (see
`kernels/python/zcurve_cost_v1.py`). The curve is a pure function of
(sale_cap, divisor, quad_cap); "coins sold" is always supplied per call.

Searches over the curve are index-based interval narrowing with an iteration
bound derived from the interval width, so they terminate for any input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import structlog

from ..errors import InvalidCurveParameters
from ..kernels.python.zcurve_cost_v1 import (
    FREE_TICKS,
    ONE_ETH,
    UNIT_SCALE,
    cost_for_units,
    sum_of_squares_below,
    tick_cost,
)
from ..state.tokens import Amount, require_uint256


logger = structlog.get_logger()

BPS_DENOM = 10_000


def _require_quad_cap_ticks(quad_cap: Amount) -> None:
    if quad_cap // UNIT_SCALE < FREE_TICKS:
        raise InvalidCurveParameters(
            f"quad_cap must cover at least {FREE_TICKS} ticks of {UNIT_SCALE} units: {quad_cap}"
        )


@dataclass(frozen=True)
class SaleCurve:
    """
    Bonding-curve parameters of one coin sale.

    Attributes:
        sale_cap: Coins sellable on the curve (base units)
        divisor: Curve steepness; larger is flatter
        eth_target: Wei the sale aims to raise
        quad_cap: Base units after which pricing turns linear (None: never)
    """

    sale_cap: Amount
    divisor: int
    eth_target: Amount
    quad_cap: Optional[Amount] = None

    def __post_init__(self) -> None:
        for name, v in (
            ("sale_cap", self.sale_cap),
            ("divisor", self.divisor),
            ("eth_target", self.eth_target),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
        if self.divisor <= 0:
            raise InvalidCurveParameters(f"divisor must be positive: {self.divisor}")
        if self.sale_cap <= 0:
            raise InvalidCurveParameters(f"sale_cap must be positive: {self.sale_cap}")
        if self.eth_target < 0:
            raise InvalidCurveParameters(f"eth_target must be non-negative: {self.eth_target}")
        if self.quad_cap is not None:
            if not isinstance(self.quad_cap, int) or isinstance(self.quad_cap, bool):
                raise TypeError("quad_cap must be an int")
            if not (0 < self.quad_cap <= self.sale_cap):
                raise InvalidCurveParameters(
                    f"quad_cap must be in (0, sale_cap]: {self.quad_cap} (sale_cap={self.sale_cap})"
                )
            _require_quad_cap_ticks(self.quad_cap)

    @classmethod
    def for_target(cls, sale_cap: Amount, eth_target: Amount, quad_cap: Optional[Amount] = None) -> "SaleCurve":
        """Curve whose full sale raises (approximately, rounded down) `eth_target`."""
        divisor = divisor_for_target(sale_cap, quad_cap, eth_target)
        return cls(sale_cap=sale_cap, divisor=divisor, eth_target=eth_target, quad_cap=quad_cap)

    @property
    def quad_ticks(self) -> Optional[int]:
        return None if self.quad_cap is None else self.quad_cap // UNIT_SCALE

    @property
    def max_ticks(self) -> int:
        return self.sale_cap // UNIT_SCALE


def curve_cost_for(n: Amount, divisor: int, quad_cap: Optional[Amount] = None) -> Amount:
    """Cumulative cost of `n` base units for raw curve parameters."""
    return cost_for_units(n, divisor, quad_cap)


def curve_cost(n: Amount, curve: SaleCurve) -> Amount:
    """Cumulative cost of having sold `n` base units on `curve`."""
    return cost_for_units(n, curve.divisor, curve.quad_cap)


def curve_cost_ticks(m: int, curve: SaleCurve) -> Amount:
    """Cumulative cost of having sold `m` whole ticks on `curve`."""
    return tick_cost(m, curve.divisor, curve.quad_ticks)


def marginal_price(n: Amount, curve: SaleCurve) -> Amount:
    """Cost of the next tick after `n` base units: cost(ticks + 1) - cost(ticks)."""
    require_uint256("n", n)
    m = n // UNIT_SCALE
    return curve_cost_ticks(m + 1, curve) - curve_cost_ticks(m, curve)


@dataclass(frozen=True)
class CurveInversion:
    """
    Result of inverting the cost function for a target.

    `ticks` is the largest tick count whose cost does not exceed `target`.
    `high_ticks` is the next tick (equal to `ticks` when the whole sale costs
    no more than the target).
    """

    target: Amount
    ticks: int
    cost: Amount
    high_ticks: int
    high_cost: Amount

    @property
    def tokens(self) -> Amount:
        return self.ticks * UNIT_SCALE

    @property
    def exact(self) -> bool:
        return self.cost == self.target

    @property
    def closest_ticks(self) -> int:
        # Ties go to the cheaper candidate.
        if self.high_cost - self.target < self.target - self.cost:
            return self.high_ticks
        return self.ticks

    @property
    def closest_tokens(self) -> Amount:
        return self.closest_ticks * UNIT_SCALE


def find_tokens_for_target(eth_target: Amount, curve: SaleCurve) -> CurveInversion:
    """
    Largest tick count `m` in [0, sale_cap / UNIT_SCALE] with cost(m) <= eth_target.

    When eth_target is below the cost of the whole sale the result satisfies
    cost(m) <= eth_target < cost(m + 1).
    """
    require_uint256("eth_target", eth_target)
    top = curve.max_ticks
    top_cost = curve_cost_ticks(top, curve)
    if top_cost <= eth_target:
        return CurveInversion(eth_target, top, top_cost, top, top_cost)

    # Invariant: cost(lo) <= eth_target < cost(hi).
    lo, hi = 0, top
    for _ in range(top.bit_length() + 1):
        if hi - lo <= 1:
            break
        mid = (lo + hi) // 2
        if curve_cost_ticks(mid, curve) <= eth_target:
            lo = mid
        else:
            hi = mid

    result = CurveInversion(
        target=eth_target,
        ticks=lo,
        cost=curve_cost_ticks(lo, curve),
        high_ticks=hi,
        high_cost=curve_cost_ticks(hi, curve),
    )
    logger.debug("curve_inverted", target=eth_target, ticks=result.ticks, high_ticks=result.high_ticks)
    return result


def target_tokens(curve: SaleCurve) -> CurveInversion:
    """Inversion of the curve's own `eth_target`."""
    return find_tokens_for_target(curve.eth_target, curve)


def buy_cost(coins_out: Amount, net_sold: Amount, curve: SaleCurve) -> Amount:
    """
    Wei needed to buy exactly `coins_out` after `net_sold`.

    Raises:
        ValueError: If the purchase would exceed the sale cap
    """
    require_uint256("coins_out", coins_out)
    require_uint256("net_sold", net_sold)
    if coins_out == 0:
        return 0
    if net_sold + coins_out > curve.sale_cap:
        raise ValueError(f"purchase exceeds sale cap: {net_sold} + {coins_out} > {curve.sale_cap}")
    return curve_cost(net_sold + coins_out, curve) - curve_cost(net_sold, curve)


def sell_refund(coins_in: Amount, net_sold: Amount, curve: SaleCurve) -> Amount:
    """Wei refunded for selling `coins_in` back; sales above `net_sold` are clamped."""
    require_uint256("coins_in", coins_in)
    require_uint256("net_sold", net_sold)
    if coins_in == 0:
        return 0
    coins_in = min(coins_in, net_sold)
    return curve_cost(net_sold, curve) - curve_cost(net_sold - coins_in, curve)


def coins_for_eth(eth_in: Amount, net_sold: Amount, curve: SaleCurve) -> Amount:
    """
    Coins bought for `eth_in` wei after `net_sold`, rounded down to a whole tick.

    Searches base units with a tick-wide stopping width, like the sale contract.
    """
    require_uint256("eth_in", eth_in)
    require_uint256("net_sold", net_sold)
    if eth_in == 0:
        return 0
    high = curve.sale_cap - net_sold
    if high <= 0:
        return 0

    base = curve_cost(net_sold, curve)
    low = 0
    for _ in range(high.bit_length() + 1):
        if high - low <= UNIT_SCALE:
            break
        mid = (low + high) // 2
        if curve_cost(net_sold + mid, curve) - base <= eth_in:
            low = mid
        else:
            high = mid

    return (low // UNIT_SCALE) * UNIT_SCALE


def coins_to_burn_for_eth(eth_out: Amount, net_sold: Amount, curve: SaleCurve) -> Amount:
    """Coins to sell back for at least `eth_out` wei, rounded up to a whole tick."""
    require_uint256("eth_out", eth_out)
    require_uint256("net_sold", net_sold)
    if eth_out == 0:
        return 0

    low, high = 0, net_sold
    for _ in range(high.bit_length() + 1):
        if high - low <= UNIT_SCALE:
            break
        mid = (low + high) // 2
        if sell_refund(mid, net_sold, curve) < eth_out:
            low = mid
        else:
            high = mid

    return ((high + UNIT_SCALE - 1) // UNIT_SCALE) * UNIT_SCALE


def divisor_for_target(sale_cap: Amount, quad_cap: Optional[Amount], target_raised: Amount) -> int:
    """
    Divisor that makes selling the whole `sale_cap` raise `target_raised`.

    Closed-form inverse of the cost formula, with the tick-sum weights factored
    out of the (6 * divisor) denominator.

    Raises:
        InvalidCurveParameters: If the target is zero, quad_cap spans fewer than
            two ticks, or no positive divisor fits
    """
    require_uint256("sale_cap", sale_cap)
    require_uint256("target_raised", target_raised)
    if target_raised == 0:
        raise InvalidCurveParameters("target_raised must be positive")
    if quad_cap is not None:
        require_uint256("quad_cap", quad_cap)
        _require_quad_cap_ticks(quad_cap)

    m = sale_cap // UNIT_SCALE
    if quad_cap is None or m <= quad_cap // UNIT_SCALE:
        weighted_ticks = sum_of_squares_below(m)
    else:
        k = quad_cap // UNIT_SCALE
        weighted_ticks = sum_of_squares_below(k) + k * k * (m - k)

    divisor = (weighted_ticks * ONE_ETH) // (6 * target_raised)
    if divisor <= 0:
        raise InvalidCurveParameters(
            f"target_raised {target_raised} is too large for sale_cap {sale_cap}: divisor would be 0"
        )
    return divisor


@dataclass(frozen=True)
class CurvePoint:
    tokens: Amount
    total_cost: Amount
    marginal_price: Amount
    sold_bps: int


def price_points(curve: SaleCurve, num_points: int = 100) -> List[CurvePoint]:
    """Evenly spaced (cost, marginal price) samples across the sale, for charts."""
    if not isinstance(num_points, int) or isinstance(num_points, bool) or num_points <= 0:
        raise ValueError(f"num_points must be a positive int: {num_points}")

    points: List[CurvePoint] = []
    for i in range(num_points + 1):
        tokens = (curve.sale_cap * i) // num_points
        price = 0
        if tokens < curve.sale_cap:
            price = curve_cost(tokens + UNIT_SCALE, curve) - curve_cost(tokens, curve)
        points.append(
            CurvePoint(
                tokens=tokens,
                total_cost=curve_cost(tokens, curve),
                marginal_price=price,
                sold_bps=(i * BPS_DENOM) // num_points,
            )
        )
    return points
