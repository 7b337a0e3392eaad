"""Markdown run-summary report.

Works from the JSON payload written by
:func:`lotto_sim.export.run_result_to_json_dict` so that a saved
``result.json`` can be turned into a report without re-running anything.
"""

from __future__ import annotations

from typing import Any, List, Mapping

from .constants import ADDON_PRICE, COMBINATIONS, SUMMARY_EVENT_LIMIT, TICKET_PRICE
from .data import Strategy
from .export import format_money
from .simulate import draw_id_from_index

_ADDON_LABELS: Mapping[str, str] = {
    "none": "None",
    "power_play": "Power Play",
    "double_play": "Double Play",
}


def _strategy_label(value: Any) -> str:
    try:
        return Strategy(str(value)).label
    except ValueError:
        return str(value)


def _overview_section(meta: Mapping[str, Any]) -> List[str]:
    addon = str(meta.get("addon_mode", "none"))
    lines = ["## Experiment overview", ""]
    lines.append(f"- Years simulated: {meta.get('years', '')}")
    lines.append(f"- Total draws: {meta.get('total_periods', '')}")
    lines.append(f"- Seed: {meta.get('seed', '')}")
    lines.append(f"- Add-on: {_ADDON_LABELS.get(addon, addon)}")
    eff = meta.get("market_efficiency")
    if eff is not None:
        lines.append(f"- Market efficiency: {float(eff):.4f} (used for the market only)")
    lines.append(f"- Ticket price: ${TICKET_PRICE} (add-ons +${ADDON_PRICE})")
    lines.append("")
    return lines


def _player_line(rank: int, p: Mapping[str, Any]) -> str:
    status = "Active" if p.get("active", True) else "Eliminated"
    return (
        f"  - #{rank} {p.get('player_id', '?')} ({_strategy_label(p.get('strategy'))}): "
        f"balance={format_money(float(p.get('balance') or 0.0))}, "
        f"spent={format_money(float(p.get('spent') or 0.0))}, "
        f"return={format_money(float(p.get('won') or 0.0))}, "
        f"jackpotHits={int(p.get('jackpot_hits') or 0)}, status={status}"
    )


def _key_results_section(summary: Mapping[str, Any]) -> List[str]:
    lines = ["## Key results", ""]
    lines.append(
        "- Draws with a market jackpot hit (at least one market winner): "
        f"{summary.get('periods_with_market_jackpot_hit', 0)}"
    )
    lines.append(
        "- Player jackpot hits (winning tickets across players): "
        f"{summary.get('player_jackpot_hits', 0)}"
    )
    lines.append(f"- Longest no-jackpot streak (draws): {summary.get('longest_no_jackpot_streak', 0)}")
    lines.append("- Final ranking:")
    for i, p in enumerate(summary.get("final_ranking") or [], start=1):
        lines.append(_player_line(i, p))
    lines.append("")
    return lines


def _notes_section() -> List[str]:
    combos = f"{COMBINATIONS:,}"
    return [
        "## Why it looks like this",
        "",
        f"- The jackpot combination space is {combos}. A ticket does not get closer by strategy.",
        f"- Market jackpot hits follow a Poisson process with λ = effective tickets / {combos}.",
        "- Long stretches where nothing happens are expected under long odds.",
        "- The filtered strategy filters patterns. That changes the path and the variance, "
        "not the jackpot probability per ticket.",
        "",
        "## Closing",
        "",
        "> If you are wondering why nobody hit the jackpot: it is not bad luck.",
        "> It is exactly what probability predicts.",
        "",
    ]


def _event_index_section(events: List[Mapping[str, Any]], *, limit: int) -> List[str]:
    lines = [f"## Appendix: event index (first {limit})", ""]
    if not events:
        lines.append("- _No events_")
    for e in events[:limit]:
        idx = int(e.get("period_index", 0))
        lines.append(f"- {draw_id_from_index(idx)}: {e.get('category', '')} - {e.get('headline', '')}")
    if len(events) > limit:
        lines.append(f"- ... ({len(events) - limit} more)")
    lines.append("")
    return lines


def run_result_to_markdown(payload: Mapping[str, Any], *, event_limit: int = SUMMARY_EVENT_LIMIT) -> str:
    meta: Mapping[str, Any] = payload.get("meta") or {}
    summary: Mapping[str, Any] = payload.get("summary") or {}
    events: List[Mapping[str, Any]] = list(payload.get("events") or [])

    lines: List[str] = ["# Lottery simulation summary", ""]
    lines.extend(_overview_section(meta))
    lines.extend(_key_results_section(summary))
    lines.extend(_notes_section())
    lines.extend(_event_index_section(events, limit=event_limit))

    return "\n".join(lines)
