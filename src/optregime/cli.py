from __future__ import annotations

import argparse
import logging
from pathlib import Path

import polars as pl

from optregime import __version__
from optregime.options.arbitrage import find_arbitrage_opportunity, scan_chain_for_arbitrage
from optregime.options.models.black_scholes import bs_greeks, bs_price
from optregime.options.models.implied_vol import solve_implied_vol
from optregime.runner.run import run_from_config
from optregime.strategies.catalog import default_catalog


# ============================================================
# Shared option arguments
# ============================================================


def _add_contract_args(p: argparse.ArgumentParser, with_vol: bool = True) -> None:
    p.add_argument("--spot", type=float, required=True, help="Underlying price S")
    p.add_argument("--strike", type=float, required=True, help="Strike K")
    p.add_argument("--rate", type=float, default=0.05, help="Risk-free rate r")
    p.add_argument(
        "--expiry-years", type=float, required=True, help="Time to expiry T (years)"
    )
    if with_vol:
        p.add_argument("--vol", type=float, required=True, help="Volatility sigma")
    p.add_argument("--type", choices=["call", "put"], default="call")


# ============================================================
# Command: price / greeks
# ============================================================


def cmd_price(args):
    value = bs_price(args.spot, args.strike, args.rate, args.vol, args.expiry_years, args.type)
    print(f"{args.type} price: {value:.4f}")


def cmd_greeks(args):
    g = bs_greeks(args.spot, args.strike, args.rate, args.vol, args.expiry_years, args.type)
    print(f"delta: {g.delta:.4f}")
    print(f"gamma: {g.gamma:.4f}")
    print(f"theta: {g.theta:.4f} (per day)")
    print(f"vega:  {g.vega:.4f} (per vol point)")


# ============================================================
# Command: iv
# ============================================================


def cmd_iv(args):
    result = solve_implied_vol(
        args.market_price,
        args.spot,
        args.strike,
        args.rate,
        args.expiry_years,
        is_call=args.type == "call",
        tolerance=args.tolerance,
        max_iterations=args.max_iterations,
    )
    status = "converged" if result.converged else "NOT converged"
    print(
        f"implied vol: {result.implied_volatility:.6f} "
        f"({status} after {result.iterations} iterations)"
    )


# ============================================================
# Command: arbitrage / scan
# ============================================================


def cmd_arbitrage(args):
    result = find_arbitrage_opportunity(
        args.call_price,
        args.put_price,
        args.spot,
        args.strike,
        args.rate,
        args.expiry_years,
    )
    print(f"PV(K): {result.put_call_parity:.4f}")
    print(f"Parity difference: {result.difference:+.4f}")
    print(f"Arbitrage: {'yes' if result.has_arbitrage else 'no'}")
    print(f"Strategy: {result.strategy}")


def cmd_scan(args):
    chain_path = Path(args.chain)
    if not chain_path.exists():
        raise FileNotFoundError(f"Options chain not found: {chain_path}")

    chain = pl.read_csv(chain_path, try_parse_dates=True)
    print(f"[optregime] Scanning {chain.height} quotes from {chain_path}")

    opportunities = scan_chain_for_arbitrage(
        chain,
        stock_price=args.spot,
        risk_free_rate=args.rate,
        min_volume=args.min_volume,
    )
    if opportunities.is_empty():
        print("[optregime] No arbitrage opportunities found.")
        return

    for row in opportunities.iter_rows(named=True):
        print(
            f"  K={row['strike']:.2f} {row['expiry']} "
            f"diff={row['difference']:+.4f} vol={row['volume']} :: {row['strategy']}"
        )


# ============================================================
# Command: analyze
# ============================================================


def cmd_analyze(args):
    print(f"[optregime] Running regime analysis: {args.config}")
    analysis = run_from_config(args.config, save_dir=args.save_dir)
    regime = analysis.current_regime

    print("\n========== Regime Analysis ==========")
    print(
        f"Regime: {regime.type.value} {regime.trend.value} "
        f"({regime.timeframe}), {regime.volatility.value} volatility"
    )
    print(f"Momentum: {regime.momentum:.2f}%  Confidence: {regime.confidence:.1f}")

    print("\nRecommendations:")
    if not analysis.recommendations:
        print("  (none above confidence threshold)")
    for rec in analysis.recommendations:
        print(
            f"  - {rec.strategy.name}: confidence {rec.confidence:.1f}, "
            f"PoP {rec.risk_reward.probability_of_profit:.0f}%, "
            f"edge {rec.black_scholes_analysis.edge:+.2f}"
        )
        for line in rec.reasoning:
            print(f"      * {line}")

    print("\nInsights:")
    for line in analysis.market_insights:
        print(f"  - {line}")
    print("\nRisk factors:")
    for line in analysis.risk_factors:
        print(f"  - {line}")
    print("=====================================\n")


# ============================================================
# Command: catalog list
# ============================================================


def cmd_catalog_list(args):
    print("[optregime] Built-in strategies:")
    for s in default_catalog():
        print(
            f"  - {s.id} : {s.name} "
            f"[{s.regime.value}, {s.market_condition.value}, {len(s.legs)} legs]"
        )


# ============================================================
# Command: version
# ============================================================


def cmd_version(args):
    print(__version__)


# ============================================================
# Main CLI
# ============================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="optregime")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # ------------------------------------------------------------------
    # price / greeks
    # ------------------------------------------------------------------
    p_price = sub.add_parser("price", help="Black-Scholes price")
    _add_contract_args(p_price)
    p_price.set_defaults(func=cmd_price)

    p_greeks = sub.add_parser("greeks", help="Black-Scholes Greeks")
    _add_contract_args(p_greeks)
    p_greeks.set_defaults(func=cmd_greeks)

    # ------------------------------------------------------------------
    # iv
    # ------------------------------------------------------------------
    p_iv = sub.add_parser("iv", help="Implied volatility from a market price")
    _add_contract_args(p_iv, with_vol=False)
    p_iv.add_argument("--market-price", type=float, required=True)
    p_iv.add_argument("--tolerance", type=float, default=1e-4)
    p_iv.add_argument("--max-iterations", type=int, default=100)
    p_iv.set_defaults(func=cmd_iv)

    # ------------------------------------------------------------------
    # arbitrage / scan
    # ------------------------------------------------------------------
    p_arb = sub.add_parser("arbitrage", help="Put-call parity check for one pair")
    p_arb.add_argument("--call-price", type=float, required=True)
    p_arb.add_argument("--put-price", type=float, required=True)
    p_arb.add_argument("--spot", type=float, required=True)
    p_arb.add_argument("--strike", type=float, required=True)
    p_arb.add_argument("--rate", type=float, default=0.05)
    p_arb.add_argument("--expiry-years", type=float, required=True)
    p_arb.set_defaults(func=cmd_arbitrage)

    p_scan = sub.add_parser("scan", help="Scan an options chain CSV for arbitrage")
    p_scan.add_argument("--chain", required=True, help="CSV with strike, expiry, ...")
    p_scan.add_argument("--spot", type=float, required=True)
    p_scan.add_argument("--rate", type=float, default=0.05)
    p_scan.add_argument("--min-volume", type=int, default=1000)
    p_scan.set_defaults(func=cmd_scan)

    # ------------------------------------------------------------------
    # analyze
    # ------------------------------------------------------------------
    p_an = sub.add_parser("analyze", help="Run regime analysis from a config file")
    p_an.add_argument("--config", required=True, help="Path to config JSON/YAML")
    p_an.add_argument(
        "--save-dir", required=False, default=None, help="Directory to save results"
    )
    p_an.set_defaults(func=cmd_analyze)

    # ------------------------------------------------------------------
    # catalog
    # ------------------------------------------------------------------
    p_cat = sub.add_parser("catalog", help="Inspect the strategy catalog")
    cat_sub = p_cat.add_subparsers(dest="catalog_cmd", required=True)
    p_list = cat_sub.add_parser("list", help="List built-in strategies")
    p_list.set_defaults(func=cmd_catalog_list)

    # ------------------------------------------------------------------
    # version
    # ------------------------------------------------------------------
    p_ver = sub.add_parser("version", help="Show version")
    p_ver.set_defaults(func=cmd_version)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args.func(args)


if __name__ == "__main__":
    main()
