"""
Swap routing through the hub asset.

Every coin is paired against the hub (ETH), so a swap is either:
- direct: one pool, when one leg is the hub or the pair is a custom pool,
- two-hop ("coin-to-coin"): sell coin -> hub in pool A, then hub -> buy coin
  in pool B, each pool charging its own fee.

The two-hop estimate is two sequential exact-in quotes; the intermediate hub
amount is used exactly as hop 1 returns it, with no extra rounding or safety
margin between hops.

Exact-out is not offered for two-hop routes. Hop 1's required input depends on
the hub amount hop 2 needs, and inverting that chain needs a second search the
settlement contract does not perform. `quote_route_exact_out` returns None for
such routes and callers re-drive exact-in estimation instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Tuple, Union

import structlog

from .cpmm import compute_input, compute_output
from ..errors import InvalidAssetPair
from ..state.pools import DEFAULT_FEE_BPS, Pool, resolve_pool_id
from ..state.tokens import HUB_TOKEN, Amount, AssetId, Token


logger = structlog.get_logger()


def estimate_two_hop(
    amount_in: Amount,
    pool_a_reserves: Tuple[Amount, Amount],
    pool_a_fee_bps: int,
    pool_b_reserves: Tuple[Amount, Amount],
    pool_b_fee_bps: int,
) -> Amount:
    """
    Output of selling `amount_in` through two pools.

    Args:
        amount_in: Sell-asset amount
        pool_a_reserves: (reserve_in, reserve_out) of pool A, sell asset -> hub
        pool_a_fee_bps: Fee of pool A
        pool_b_reserves: (reserve_in, reserve_out) of pool B, hub -> buy asset
        pool_b_fee_bps: Fee of pool B

    Returns:
        Buy-asset amount, 0 if either hop quotes 0
    """
    hub_amount = compute_output(amount_in, pool_a_reserves[0], pool_a_reserves[1], pool_a_fee_bps)
    if hub_amount == 0:
        logger.debug("two_hop_zero_intermediate", amount_in=amount_in)
        return 0
    return compute_output(hub_amount, pool_b_reserves[0], pool_b_reserves[1], pool_b_fee_bps)


@dataclass(frozen=True)
class DirectRoute:
    """Single pool; `sell_hub` is True when selling the pool key's first leg."""

    pool: Pool
    sell_hub: bool

    @property
    def supports_exact_out(self) -> bool:
        return True


@dataclass(frozen=True)
class TwoHopRoute:
    """Sell asset -> hub through `pool_a`, then hub -> buy asset through `pool_b`."""

    pool_a: Pool
    pool_b: Pool

    @property
    def supports_exact_out(self) -> bool:
        return False


Route = Union[DirectRoute, TwoHopRoute]


@dataclass(frozen=True)
class RouteHop:
    pool_id: int
    amount_in: Amount
    amount_out: Amount


@dataclass(frozen=True)
class RouteQuote:
    amount_in: Amount
    amount_out: Amount
    hops: Tuple[RouteHop, ...]

    @property
    def hub_amount(self) -> Optional[Amount]:
        """Intermediate hub amount of a two-hop quote."""
        if len(self.hops) != 2:
            return None
        return self.hops[0].amount_out


def quote_route_exact_in(route: Route, amount_in: Amount) -> RouteQuote:
    if isinstance(route, DirectRoute):
        rin, rout = route.pool.reserves_for(sell_hub=route.sell_hub)
        out = compute_output(amount_in, rin, rout, route.pool.fee_bps)
        return RouteQuote(amount_in, out, (RouteHop(route.pool.pool_id, amount_in, out),))

    a_in, a_out = route.pool_a.reserves_for(sell_hub=False)
    b_in, b_out = route.pool_b.reserves_for(sell_hub=True)
    hub_amount = compute_output(amount_in, a_in, a_out, route.pool_a.fee_bps)
    out = compute_output(hub_amount, b_in, b_out, route.pool_b.fee_bps) if hub_amount else 0
    hops = (
        RouteHop(route.pool_a.pool_id, amount_in, hub_amount),
        RouteHop(route.pool_b.pool_id, hub_amount, out),
    )
    return RouteQuote(amount_in, out, hops)


def quote_route_exact_out(route: Route, amount_out: Amount) -> Optional[RouteQuote]:
    """
    Exact-out quote for a direct route.

    Returns None for two-hop routes (not provided).

    Raises:
        OutputExceedsReserves: If the pool cannot produce `amount_out`
    """
    if isinstance(route, TwoHopRoute):
        logger.debug("two_hop_exact_out_unsupported", amount_out=amount_out)
        return None
    rin, rout = route.pool.reserves_for(sell_hub=route.sell_hub)
    amount_in = compute_input(amount_out, rin, rout, route.pool.fee_bps)
    return RouteQuote(amount_in, amount_out, (RouteHop(route.pool.pool_id, amount_in, amount_out),))


@dataclass(frozen=True)
class PairAnalysis:
    is_sell_hub: bool
    is_buy_hub: bool
    is_custom: bool
    is_coin_to_coin: bool
    can_swap: bool
    coin_id: AssetId


def analyze_pair(sell: Token, buy: Optional[Token]) -> PairAnalysis:
    """
    Classify a (sell, buy) selection.

    `coin_id` is the non-hub coin of a direct swap (the custom token's id for
    custom pools, the sell coin for coin-to-coin swaps).
    """
    is_sell_hub = sell.is_hub
    is_buy_hub = buy is not None and buy.is_hub
    is_custom = sell.is_custom_pool or (buy is not None and buy.is_custom_pool)
    is_coin_to_coin = (
        buy is not None
        and not is_sell_hub
        and not is_buy_hub
        and not sell.same_asset(buy)
    )

    if is_custom and not is_coin_to_coin:
        coin_id = sell.id if sell.is_custom_pool else (buy.id if buy is not None else 0)
    elif is_sell_hub:
        coin_id = buy.id if buy is not None else 0
    else:
        coin_id = sell.id

    can_swap = buy is not None and not sell.same_asset(buy) and (is_sell_hub or is_buy_hub or is_coin_to_coin or is_custom)

    return PairAnalysis(
        is_sell_hub=is_sell_hub,
        is_buy_hub=is_buy_hub,
        is_custom=is_custom,
        is_coin_to_coin=is_coin_to_coin,
        can_swap=can_swap,
        coin_id=coin_id,
    )


@dataclass(frozen=True)
class RoutePoolIds:
    main_pool_id: Optional[int]
    target_pool_id: Optional[int] = None


def _hub_pool_id(token: Token, default_fee_bps: int) -> int:
    fee = token.fee_bps if token.fee_bps is not None else default_fee_bps
    return resolve_pool_id(token, HUB_TOKEN, fee)


def resolve_route_pool_ids(
    sell: Token, buy: Optional[Token], *, default_fee_bps: int = DEFAULT_FEE_BPS
) -> RoutePoolIds:
    """
    Pool ids a swap touches.

    Direct swaps fill `main_pool_id` only. Coin-to-coin swaps use the sell
    coin's hub pool as main and the buy coin's hub pool as target. Custom
    tokens always contribute their override id.
    """
    if buy is None:
        return RoutePoolIds(None if sell.is_hub else _hub_pool_id(sell, default_fee_bps))
    if sell.same_asset(buy):
        raise InvalidAssetPair(f"cannot swap an asset for itself: ({sell.address}, {sell.id})")

    analysis = analyze_pair(sell, buy)
    if analysis.is_coin_to_coin:
        return RoutePoolIds(_hub_pool_id(sell, default_fee_bps), _hub_pool_id(buy, default_fee_bps))
    coin = buy if sell.is_hub else sell
    return RoutePoolIds(_hub_pool_id(coin, default_fee_bps))


def build_route(
    sell: Token,
    buy: Token,
    pools_by_id: Mapping[int, Pool],
    *,
    default_fee_bps: int = DEFAULT_FEE_BPS,
) -> Optional[Route]:
    """
    Assemble a route from caller-supplied pool snapshots.

    Returns None when a required pool snapshot is missing.
    """
    ids = resolve_route_pool_ids(sell, buy, default_fee_bps=default_fee_bps)
    main = pools_by_id.get(ids.main_pool_id) if ids.main_pool_id is not None else None
    if main is None:
        logger.debug("route_missing_pool", pool_id=ids.main_pool_id)
        return None

    if ids.target_pool_id is None:
        sell_first = (main.pool_key.id0, main.pool_key.token0) == (sell.id, sell.address)
        return DirectRoute(pool=main, sell_hub=sell_first)

    target = pools_by_id.get(ids.target_pool_id)
    if target is None:
        logger.debug("route_missing_pool", pool_id=ids.target_pool_id)
        return None
    return TwoHopRoute(pool_a=main, pool_b=target)
