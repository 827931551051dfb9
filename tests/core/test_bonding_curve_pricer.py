from __future__ import annotations

import pytest

from zamm_pricing.core.bonding_curve import (
    CurveInversion,
    SaleCurve,
    buy_cost,
    coins_for_eth,
    coins_to_burn_for_eth,
    curve_cost,
    curve_cost_for,
    curve_cost_ticks,
    divisor_for_target,
    find_tokens_for_target,
    marginal_price,
    price_points,
    sell_refund,
    target_tokens,
)
from zamm_pricing.errors import InvalidCurveParameters
from zamm_pricing.kernels.python.zcurve_cost_v1 import UNIT_SCALE


E18 = 10**18
SALE_CAP = 800_000_000 * E18
QUAD_CAP = 552_000_000 * E18
TEN_ETH = 10 * E18


def _curve(quad_cap: int | None = None) -> SaleCurve:
    return SaleCurve.for_target(SALE_CAP, TEN_ETH, quad_cap)


def test_full_sale_raises_at_least_the_target() -> None:
    for quad_cap in (None, QUAD_CAP):
        curve = _curve(quad_cap)
        assert curve.divisor == divisor_for_target(SALE_CAP, quad_cap, TEN_ETH)
        full = curve_cost(SALE_CAP, curve)
        # Per-tick floors in the linear tail can land a few wei per tick short.
        assert abs(full - TEN_ETH) < TEN_ETH // 10_000
    assert curve_cost(SALE_CAP, _curve()) >= TEN_ETH


def test_inversion_brackets_target() -> None:
    curve = _curve()
    for target in (0, 1, 3 * E18, 7 * E18 + 12345):
        inv = find_tokens_for_target(target, curve)
        assert curve_cost_ticks(inv.ticks, curve) <= target < curve_cost_ticks(inv.ticks + 1, curve)
        assert inv.high_ticks == inv.ticks + 1
        assert inv.tokens == inv.ticks * UNIT_SCALE


def test_inversion_saturates_at_sale_cap() -> None:
    curve = _curve(QUAD_CAP)
    inv = find_tokens_for_target(100 * TEN_ETH, curve)
    assert inv.ticks == curve.max_ticks
    assert inv.high_ticks == curve.max_ticks
    assert inv.tokens == SALE_CAP

    own = target_tokens(curve)
    assert own.cost <= TEN_ETH


def test_closest_ticks_prefers_cheaper_on_tie() -> None:
    tie = CurveInversion(target=10, ticks=3, cost=8, high_ticks=4, high_cost=12)
    assert tie.closest_ticks == 3
    above = CurveInversion(target=10, ticks=3, cost=8, high_ticks=4, high_cost=11)
    assert above.closest_ticks == 4
    assert above.closest_tokens == 4 * UNIT_SCALE
    assert CurveInversion(target=8, ticks=3, cost=8, high_ticks=4, high_cost=11).exact is True


def test_cost_continuous_and_monotone_at_quad_cap() -> None:
    curve = _curve(QUAD_CAP)
    k = QUAD_CAP // UNIT_SCALE
    costs = [curve_cost_ticks(m, curve) for m in range(k - 3, k + 4)]
    assert costs == sorted(costs)
    # Past the kink every tick costs the price of tick K.
    step = curve_cost_ticks(k + 1, curve) - curve_cost_ticks(k, curve)
    assert curve_cost_ticks(k + 3, curve) - curve_cost_ticks(k + 2, curve) == step
    assert marginal_price(QUAD_CAP + 5 * UNIT_SCALE, curve) == step


def test_marginal_price_non_decreasing() -> None:
    curve = _curve(QUAD_CAP)
    prices = [marginal_price(SALE_CAP * i // 50, curve) for i in range(50)]
    assert prices == sorted(prices)


def test_invalid_curve_parameters() -> None:
    with pytest.raises(InvalidCurveParameters):
        SaleCurve(sale_cap=SALE_CAP, divisor=0, eth_target=TEN_ETH)
    with pytest.raises(InvalidCurveParameters):
        SaleCurve(sale_cap=SALE_CAP, divisor=1, eth_target=TEN_ETH, quad_cap=SALE_CAP + 1)
    with pytest.raises(InvalidCurveParameters):
        SaleCurve(sale_cap=0, divisor=1, eth_target=TEN_ETH)
    with pytest.raises(InvalidCurveParameters):
        divisor_for_target(SALE_CAP, None, 0)
    with pytest.raises(InvalidCurveParameters):
        # Three ticks cannot raise this much with a positive divisor.
        divisor_for_target(3 * UNIT_SCALE, None, 10**30)


def test_buy_cost_matches_sell_refund() -> None:
    curve = _curve(QUAD_CAP)
    net_sold = 100_000_000 * E18
    coins = 12_345_678 * E18
    assert buy_cost(coins, net_sold, curve) == sell_refund(coins, net_sold + coins, curve)
    assert buy_cost(0, net_sold, curve) == 0
    assert sell_refund(0, net_sold, curve) == 0
    # Selling more than was sold refunds everything sold.
    assert sell_refund(net_sold * 2, net_sold, curve) == curve_cost(net_sold, curve)


def test_buy_cost_over_cap_raises() -> None:
    curve = _curve()
    with pytest.raises(ValueError):
        buy_cost(UNIT_SCALE, SALE_CAP, curve)


def test_coins_for_eth_never_overspends() -> None:
    curve = _curve(QUAD_CAP)
    net_sold = 100_000_000 * E18
    eth_in = E18 // 10
    coins = coins_for_eth(eth_in, net_sold, curve)
    assert coins > 0
    assert coins % UNIT_SCALE == 0
    assert buy_cost(coins, net_sold, curve) <= eth_in
    assert coins_for_eth(0, net_sold, curve) == 0
    assert coins_for_eth(eth_in, SALE_CAP, curve) == 0


def test_coins_to_burn_for_eth_covers_request() -> None:
    curve = _curve(QUAD_CAP)
    net_sold = 100_000_000 * E18
    eth_out = sell_refund(net_sold, net_sold, curve) // 2
    assert eth_out > 0
    coins = coins_to_burn_for_eth(eth_out, net_sold, curve)
    assert coins % UNIT_SCALE == 0
    assert sell_refund(coins, net_sold, curve) >= eth_out
    assert coins_to_burn_for_eth(0, net_sold, curve) == 0


def test_price_points_for_chart() -> None:
    curve = _curve(QUAD_CAP)
    points = price_points(curve, num_points=20)
    assert len(points) == 21
    assert points[0].tokens == 0 and points[0].total_cost == 0
    assert points[-1].tokens == SALE_CAP
    assert points[-1].marginal_price == 0
    assert points[-1].sold_bps == 10_000
    costs = [p.total_cost for p in points]
    assert costs == sorted(costs)
    with pytest.raises(ValueError):
        price_points(curve, num_points=0)


def test_raw_parameter_cost_matches_curve() -> None:
    curve = _curve(QUAD_CAP)
    for n in (0, UNIT_SCALE, QUAD_CAP, QUAD_CAP + 7 * UNIT_SCALE + 1, SALE_CAP):
        assert curve_cost_for(n, curve.divisor, QUAD_CAP) == curve_cost(n, curve)
    with pytest.raises(InvalidCurveParameters):
        curve_cost_for(UNIT_SCALE, 0)


def test_quad_cap_below_two_ticks_is_rejected() -> None:
    for quad_cap in (1, UNIT_SCALE, 2 * UNIT_SCALE - 1):
        with pytest.raises(InvalidCurveParameters):
            SaleCurve(sale_cap=SALE_CAP, divisor=1, eth_target=TEN_ETH, quad_cap=quad_cap)
    with pytest.raises(InvalidCurveParameters):
        divisor_for_target(SALE_CAP, 1, TEN_ETH)
    assert SaleCurve(sale_cap=SALE_CAP, divisor=1, eth_target=TEN_ETH, quad_cap=2 * UNIT_SCALE).quad_ticks == 2


def test_ten_eth_inversion_on_uncapped_sale() -> None:
    curve = _curve()
    inv = find_tokens_for_target(TEN_ETH, curve)
    assert curve_cost_ticks(inv.ticks, curve) <= TEN_ETH
    if inv.ticks < curve.max_ticks:
        assert TEN_ETH < curve_cost_ticks(inv.ticks + 1, curve)
    else:
        assert curve_cost_ticks(curve.max_ticks, curve) == TEN_ETH

    # Same curve priced for 20 ETH: 10 ETH lands strictly inside the sale.
    wide = SaleCurve(sale_cap=SALE_CAP, divisor=divisor_for_target(SALE_CAP, None, 20 * E18), eth_target=20 * E18)
    inv = find_tokens_for_target(TEN_ETH, wide)
    assert 0 < inv.ticks < wide.max_ticks
    assert curve_cost_ticks(inv.ticks, wide) <= TEN_ETH < curve_cost_ticks(inv.ticks + 1, wide)
