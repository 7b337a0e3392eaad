from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from lotto_sim.data import RunConfig, RunResult
from lotto_sim.export import dumps_run_result_pretty, narration_text, run_result_to_json_dict
from lotto_sim.io import format_fixed_tickets
from lotto_sim.report import run_result_to_markdown
from lotto_sim.simulate import run_simulation


def configure_logging(*, level: int = logging.INFO) -> None:
    """Configure a simple root logger that writes to stdout.

    This is safe to call multiple times.
    """

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        )
    else:
        root.setLevel(level)


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OutputPaths:
    result_json: Path
    narration_txt: Path
    summary_md: Path


def run_lottery_simulation(
    config: RunConfig,
    *,
    should_cancel: Optional[Callable[[], bool]] = None,
    log_level: int | None = logging.INFO,
) -> RunResult:
    """Top-level entrypoint: log the configuration, run, and log the outcome.

    The caller supplies the full configuration; nothing is read from disk here.
    """

    if log_level is not None:
        configure_logging(level=log_level)

    logger.info(
        "Config: years=%d addon=%s seed=%d start_jackpot=%s start_date=%s",
        config.years,
        config.addon_mode.value,
        config.seed,
        config.start_jackpot_cash,
        config.start_date.isoformat(),
    )
    f = config.filter_config
    logger.info(
        "Filters: sum=%d..%d odd/even=%s small<=%d small/big=%s consec<=%d sectors=%d..%d tails<=%d pool=%d..%d",
        f.sum_min,
        f.sum_max,
        f.exclude_all_odd_even,
        f.small_max,
        f.exclude_all_small_big,
        f.max_consecutive_pairs,
        f.min_sectors,
        f.max_sectors,
        f.max_tail_pairs,
        f.pool_init,
        f.pool_max,
    )
    if config.fixed_tickets is not None:
        logger.info("Fixed tickets:\n%s", format_fixed_tickets(config.fixed_tickets))

    result = run_simulation(config, should_cancel=should_cancel)

    for rank, p in enumerate(result.summary.final_ranking, start=1):
        logger.info(
            "#%d %s (%s): balance=%.2f spent=%.2f won=%.2f jackpot_hits=%d active=%s",
            rank,
            p.player_id,
            p.strategy.value,
            p.balance,
            p.spent,
            p.won,
            p.jackpot_hits,
            p.active,
        )

    return result


def write_outputs(result: RunResult, output_dir: str | Path, *, include_snapshots: bool = True) -> OutputPaths:
    """Write ``result.json``, ``narration.txt`` and ``summary.md``."""

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = OutputPaths(
        result_json=output_dir / "result.json",
        narration_txt=output_dir / "narration.txt",
        summary_md=output_dir / "summary.md",
    )

    paths.result_json.write_text(dumps_run_result_pretty(result, include_snapshots=include_snapshots), encoding="utf-8")
    paths.narration_txt.write_text(narration_text(result) + "\n", encoding="utf-8")
    payload = run_result_to_json_dict(result, include_snapshots=False)
    paths.summary_md.write_text(run_result_to_markdown(payload), encoding="utf-8")

    logger.info("Wrote %s, %s, %s", paths.result_json, paths.narration_txt, paths.summary_md)
    return paths
