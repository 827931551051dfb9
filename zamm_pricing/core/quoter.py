"""
Swap previews: route + nominal amount + slippage bound.

This wires the pieces together the way the swap form uses them:
- resolve the pools for a (sell, buy) selection,
- quote exact-in or exact-out along the route,
- turn the nominal amount into the bound submitted on-chain.

Pool snapshots are supplied by the caller for every call; nothing is fetched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Optional, Tuple, Union

import structlog

from .cache import QuoteCache
from .routing import (
    DirectRoute,
    Route,
    RouteQuote,
    build_route,
    quote_route_exact_in,
    quote_route_exact_out,
)
from .slippage import max_in, min_out
from ..state.pools import Pool
from ..state.tokens import Amount, Token

if TYPE_CHECKING:
    from ..config import PricingConfig


logger = structlog.get_logger()


@dataclass(frozen=True)
class SwapPreview:
    """
    What the swap form shows and submits.

    `limit` is min_out for exact-in previews and max_in for exact-out previews.
    Unsupported previews (exact-out through two pools) carry no amounts.
    """

    exact_out: bool
    supported: bool
    two_hop: bool
    tolerance_bps: int
    amount_in: Optional[Amount] = None
    amount_out: Optional[Amount] = None
    limit: Optional[Amount] = None
    hub_amount: Optional[Amount] = None
    pool_ids: Tuple[int, ...] = ()

    @property
    def has_quote(self) -> bool:
        return self.supported and bool(self.amount_in) and bool(self.amount_out)


class SwapQuoter:
    """
    Preview swaps against caller-supplied pool snapshots.

    Args:
        config: Protocol defaults
        pools_by_id: Current pool snapshots keyed by pool id
        cache: Optional caller-owned cache for route quotes
    """

    def __init__(
        self,
        config: PricingConfig,
        pools_by_id: Mapping[int, Pool],
        *,
        cache: Optional[QuoteCache] = None,
    ) -> None:
        self.config = config
        self.pools_by_id = pools_by_id
        self.cache = cache

    def route(self, sell: Token, buy: Token) -> Optional[Route]:
        return build_route(sell, buy, self.pools_by_id, default_fee_bps=self.config.default_fee_bps)

    def _exact_in(self, route: Route, amount: Amount) -> RouteQuote:
        if self.cache is None:
            return quote_route_exact_in(route, amount)
        return self.cache.call(quote_route_exact_in, route, amount)

    def _exact_out(self, route: Route, amount: Amount) -> Optional[RouteQuote]:
        if self.cache is None:
            return quote_route_exact_out(route, amount)
        return self.cache.call(quote_route_exact_out, route, amount)

    def preview(
        self,
        sell: Token,
        buy: Token,
        amount: Amount,
        *,
        exact_out: bool = False,
        tolerance: Union[str, int, None] = None,
    ) -> Optional[SwapPreview]:
        """
        Preview selling `sell` for `buy`.

        `amount` is the sell amount for exact-in and the buy amount for
        exact-out. Returns None when a required pool snapshot is missing.

        Raises:
            InvalidAssetPair: If sell and buy are the same asset
            OutputExceedsReserves: If an exact-out amount exceeds the pool
            ToleranceOutOfRange: If the tolerance is outside the configured range
        """
        tolerance_bps = self.config.tolerance(tolerance)
        route = self.route(sell, buy)
        if route is None:
            return None
        two_hop = not isinstance(route, DirectRoute)

        if exact_out:
            quote = self._exact_out(route, amount)
            if quote is None:
                logger.debug("preview_exact_out_unsupported", sell=sell.symbol, buy=buy.symbol)
                return SwapPreview(exact_out=True, supported=False, two_hop=two_hop, tolerance_bps=tolerance_bps)
            limit = max_in(quote.amount_in, tolerance_bps, max_tolerance_bps=self.config.max_tolerance_bps)
        else:
            quote = self._exact_in(route, amount)
            limit = min_out(quote.amount_out, tolerance_bps, max_tolerance_bps=self.config.max_tolerance_bps)

        return SwapPreview(
            exact_out=exact_out,
            supported=True,
            two_hop=two_hop,
            tolerance_bps=tolerance_bps,
            amount_in=quote.amount_in,
            amount_out=quote.amount_out,
            limit=limit,
            hub_amount=quote.hub_amount,
            pool_ids=tuple(hop.pool_id for hop in quote.hops),
        )
