#!/usr/bin/env python3

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from zamm_pricing.config import PricingConfig
from zamm_pricing.core.bonding_curve import SaleCurve, find_tokens_for_target, marginal_price
from zamm_pricing.core.quoter import SwapQuoter
from zamm_pricing.state.pools import Pool
from zamm_pricing.state.tokens import HUB_TOKEN

E18 = 10**18


def _swap_demo(cfg: PricingConfig, amount_in: int, tolerance: Optional[str]) -> int:
    coin_a = cfg.coin(1, symbol="AAA")
    coin_b = cfg.coin(2, symbol="BBB")
    fee = cfg.default_fee_bps
    pools = [
        Pool.for_pair(coin_a, HUB_TOKEN, 1_000 * E18, 5 * E18, fee_bps=fee),
        Pool.for_pair(HUB_TOKEN, coin_b, 5 * E18, 2_000 * E18, fee_bps=fee),
    ]
    for pool in pools:
        print(f"[offline-quote] {pool!r}")

    quoter = SwapQuoter(cfg, {p.pool_id: p for p in pools})
    for sell, buy in ((HUB_TOKEN, coin_a), (coin_a, HUB_TOKEN), (coin_a, coin_b)):
        preview = quoter.preview(sell, buy, amount_in, tolerance=tolerance)
        if preview is None:
            print(f"[offline-quote] FAIL: no route {sell.symbol} -> {buy.symbol}")
            return 1
        print(
            f"[offline-quote] {sell.symbol} -> {buy.symbol}: in={preview.amount_in} out={preview.amount_out} "
            f"min_out={preview.limit} tolerance_bps={preview.tolerance_bps} two_hop={preview.two_hop}"
        )

    exact_out = quoter.preview(coin_a, coin_b, amount_in, exact_out=True)
    if exact_out is not None and not exact_out.supported:
        print("[offline-quote] AAA -> BBB exact-out: not provided for two-hop routes")
    return 0


def _curve_demo(target_eth: int) -> int:
    curve = SaleCurve.for_target(800_000_000 * E18, target_eth * E18, quad_cap=552_000_000 * E18)
    print(f"[offline-quote] curve divisor={curve.divisor}")
    for eth in (1, target_eth // 2, target_eth):
        inv = find_tokens_for_target(eth * E18, curve)
        print(
            f"[offline-quote] {eth} ETH buys {inv.tokens} units (cost={inv.cost}, "
            f"next price={marginal_price(inv.tokens, curve)})"
        )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Print sample swap and sale-curve quotes without touching a chain")
    p.add_argument("--amount-in", type=int, default=E18 // 10, help="Sell amount in base units")
    p.add_argument("--tolerance", default=None, help="Slippage preset label or bps (default from config)")
    p.add_argument("--target-eth", type=int, default=10, help="Sale target in whole ETH")
    p.add_argument("--config", default="", help="Optional YAML pricing config")
    args = p.parse_args(argv)

    cfg = PricingConfig.from_yaml(args.config) if args.config else PricingConfig.from_env()
    rc = _swap_demo(cfg, int(args.amount_in), args.tolerance)
    if rc != 0:
        return rc
    rc = _curve_demo(int(args.target_eth))
    if rc == 0:
        print("[offline-quote] OK")
    return rc


if __name__ == "__main__":
    raise SystemExit(main())
