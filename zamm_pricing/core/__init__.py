"""
Core pricing algorithms
"""

from .cache import QuoteCache
from .slippage import DEFAULT_SLIPPAGE_BPS, MAX_TOLERANCE_BPS, SLIPPAGE_PRESETS, max_in, min_out, resolve_tolerance
from .cpmm import SwapQuote, compute_input, compute_output, quote_exact_in, quote_exact_out
from .routing import (
    DirectRoute,
    PairAnalysis,
    RouteQuote,
    TwoHopRoute,
    analyze_pair,
    build_route,
    estimate_two_hop,
    quote_route_exact_in,
    quote_route_exact_out,
    resolve_route_pool_ids,
)
from .bonding_curve import (
    CurveInversion,
    SaleCurve,
    buy_cost,
    coins_for_eth,
    coins_to_burn_for_eth,
    curve_cost,
    divisor_for_target,
    find_tokens_for_target,
    marginal_price,
    sell_refund,
)
from .quoter import SwapPreview, SwapQuoter

__all__ = [
    "QuoteCache",
    "DEFAULT_SLIPPAGE_BPS",
    "MAX_TOLERANCE_BPS",
    "SLIPPAGE_PRESETS",
    "max_in",
    "min_out",
    "resolve_tolerance",
    "SwapQuote",
    "compute_input",
    "compute_output",
    "quote_exact_in",
    "quote_exact_out",
    "DirectRoute",
    "PairAnalysis",
    "RouteQuote",
    "TwoHopRoute",
    "analyze_pair",
    "build_route",
    "estimate_two_hop",
    "quote_route_exact_in",
    "quote_route_exact_out",
    "resolve_route_pool_ids",
    "CurveInversion",
    "SaleCurve",
    "buy_cost",
    "coins_for_eth",
    "coins_to_burn_for_eth",
    "curve_cost",
    "divisor_for_target",
    "find_tokens_for_target",
    "marginal_price",
    "sell_refund",
    "SwapPreview",
    "SwapQuoter",
]
