"""Export helpers for run outputs.

Everything here is a pure function of a finished run (or of its pieces):
nothing feeds back into the simulation.

The JSON payload produced by :func:`run_result_to_json_dict` is the input to
:func:`lotto_sim.report.run_result_to_markdown`. Its shape:

- ``meta``: years, total_periods, seed, market_efficiency, addon_mode
- ``summary``: final_ranking (list of player dicts), player_jackpot_hits,
  periods_with_market_jackpot_hit, longest_no_jackpot_streak
- ``events``: list of {period_index, category, headline, rationale, caveat}
- ``chart_points``: list of {index, jackpot_cash, balances, leader}
- ``narration``: list of strings
- ``snapshots``: optional, one dict per period
"""

from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from .data import Event, PeriodSnapshot, RunResult


def format_money(value: float) -> str:
    """Compact currency: $1.23B, $45.6M, $7.8K, $950."""

    magnitude = abs(value)
    if magnitude >= 1e9:
        return f"${value / 1e9:.2f}B"
    if magnitude >= 1e6:
        return f"${value / 1e6:.1f}M"
    if magnitude >= 1e3:
        return f"${value / 1e3:.1f}K"
    return f"${int(round(value)):,}"


def format_pct(value: float) -> str:
    return f"{value * 100:.2f}%"


def narration_lines(events: Iterable[Event], snapshots: Sequence[PeriodSnapshot]) -> List[str]:
    """One line per event: ``[Y1-W1-D1 2026-01-03] headline``."""

    lines: List[str] = []
    for e in events:
        snap = snapshots[e.period_index]
        lines.append(f"[{snap.draw_id} {snap.draw_date.isoformat()}] {e.headline}")
    return lines


def narration_text(result: RunResult) -> str:
    return "\n".join(result.narration)


def _jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def to_json_dict(obj: Any) -> Any:
    """Dataclass (or container of dataclasses) -> plain JSON-ready structure.

    Read-only mapping fields (``MappingProxyType``) become plain dicts.
    """

    return _jsonable(obj)


def snapshot_to_json_dict(snapshot: PeriodSnapshot) -> Dict[str, Any]:
    out = to_json_dict(snapshot)
    out["total_winners"] = snapshot.total_winners
    out["jackpot_hit"] = snapshot.jackpot_hit
    return out


def run_result_to_json_dict(result: RunResult, *, include_snapshots: bool = True) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "meta": to_json_dict(result.meta),
        "summary": to_json_dict(result.summary),
        "events": to_json_dict(list(result.events)),
        "chart_points": to_json_dict(list(result.chart_points)),
        "narration": list(result.narration),
    }
    if include_snapshots:
        payload["snapshots"] = [snapshot_to_json_dict(s) for s in result.snapshots]
    return payload


def dumps_run_result_pretty(result: RunResult, *, include_snapshots: bool = True) -> str:
    return json.dumps(run_result_to_json_dict(result, include_snapshots=include_snapshots), indent=2, sort_keys=False)


def dumps_snapshots(snapshots: Sequence[PeriodSnapshot]) -> str:
    """Canonical compact serialisation of a snapshot sequence."""

    return json.dumps([snapshot_to_json_dict(s) for s in snapshots], sort_keys=True, separators=(",", ":"))
