"""Command-line entry point for :mod:`lotto_sim`.

Example
-------
python -m lotto_sim.cli --config data/run_config.json --out-dir output
python -m lotto_sim.cli --years 10 --seed 42 --addon power_play
"""

from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path
from typing import Sequence

from .constants import MIN_JACKPOT_CASH
from .data import RunConfig
from .export import format_money
from .io import build_run_config, load_fixed_tickets_file, load_run_config_from_json
from .main import run_lottery_simulation, write_outputs


def _print_summary(*, config: RunConfig, result) -> None:
    summary = result.summary
    print("Simulation complete")
    print(f"- Years: {config.years} ({result.meta.total_periods} draws)")
    print(f"- Seed: {config.seed}")
    print(f"- Add-on: {config.addon_mode.value}")
    print(f"- Draws with a market jackpot hit: {summary.periods_with_market_jackpot_hit}")
    print(f"- Player jackpot hits: {summary.player_jackpot_hits}")
    print(f"- Longest no-jackpot streak: {summary.longest_no_jackpot_streak} draws")
    print(f"- Events: {len(result.events)}")

    print("\nFinal ranking:")
    for rank, p in enumerate(summary.final_ranking, start=1):
        status = "Active" if p.active else "Eliminated"
        print(
            f"- #{rank} {p.player_id} ({p.strategy.label}) balance={format_money(p.balance)} "
            f"spent={format_money(p.spent)} return={format_money(p.won)} "
            f"jackpot_hits={p.jackpot_hits} {status}"
        )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lotto_sim")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON run config (optional; flags below override individual fields)",
    )
    parser.add_argument("--years", type=int, default=None, help="Years to simulate, 1..100 (default: 100)")
    parser.add_argument("--seed", type=int, default=None, help="32-bit seed (default: 0)")
    parser.add_argument(
        "--addon",
        choices=["none", "power_play", "double_play"],
        default=None,
        help="Add-on bought with every ticket (default: none)",
    )
    parser.add_argument(
        "--start-jackpot",
        type=float,
        default=None,
        help=f"Starting jackpot cash (default: {MIN_JACKPOT_CASH:,.0f})",
    )
    parser.add_argument(
        "--start-date",
        type=date.fromisoformat,
        default=None,
        help="First draw date, YYYY-MM-DD; moved forward to the next Mon/Wed/Sat",
    )
    parser.add_argument(
        "--fixed-tickets",
        type=Path,
        default=None,
        help="Text file with exactly 5 lines of 'w w w w w | pb' for the fixed-ticket player",
    )
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=None,
        help="Write result.json, narration.txt and summary.md to this directory (optional)",
    )
    parser.add_argument(
        "--no-snapshots",
        action="store_true",
        help="Leave per-draw snapshots out of result.json",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    return parser


def _resolve_config(args: argparse.Namespace) -> RunConfig:
    base = load_run_config_from_json(args.config) if args.config is not None else build_run_config()

    fixed = base.fixed_tickets
    if args.fixed_tickets is not None:
        fixed = load_fixed_tickets_file(args.fixed_tickets)

    return build_run_config(
        years=args.years if args.years is not None else base.years,
        addon_mode=args.addon if args.addon is not None else base.addon_mode,
        seed=args.seed if args.seed is not None else base.seed,
        start_jackpot_cash=args.start_jackpot if args.start_jackpot is not None else base.start_jackpot_cash,
        players=base.players,
        filter_config=base.filter_config,
        fixed_tickets=fixed,
        start_date=args.start_date if args.start_date is not None else base.start_date,
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        config = _resolve_config(args)
    except ValueError as e:
        parser.error(str(e))

    result = run_lottery_simulation(config, log_level=getattr(logging, args.log_level))

    _print_summary(config=config, result=result)

    out_dir: Path | None = args.out_dir
    if out_dir is not None:
        paths = write_outputs(result, out_dir, include_snapshots=not args.no_snapshots)
        print(f"\nWrote {paths.result_json}, {paths.narration_txt}, {paths.summary_md}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
