"""I/O utilities for building a :class:`~lotto_sim.data.RunConfig`.

This module owns:
- file format knowledge (JSON run configs, fixed-ticket text)
- parsing and validation of user input
- clamping of numeric "slider" fields into their legal ranges

Structural problems (bad fixed tickets, two fixed-ticket players) raise
``ValueError``. Numeric fields outside their range are clamped silently.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from .constants import (
    CONSECUTIVE_PAIR_BOUNDS,
    DEFAULT_MAX_CONSECUTIVE_PAIRS,
    DEFAULT_MAX_SECTORS,
    DEFAULT_MAX_TAIL_PAIRS,
    DEFAULT_MIN_SECTORS,
    DEFAULT_POOL_INIT,
    DEFAULT_POOL_MAX,
    DEFAULT_SMALL_MAX,
    DEFAULT_START_DATE,
    DEFAULT_SUM_MAX,
    DEFAULT_SUM_MIN,
    FIXED_TICKET_SEED_SALT,
    MAX_JACKPOT_CASH,
    MAX_PLAYERS,
    MAX_TICKETS_PER_PERIOD,
    MAX_YEARS,
    MIN_JACKPOT_CASH,
    MIN_YEARS,
    POOL_INIT_BOUNDS,
    POOL_MAX_BOUNDS,
    POWERBALL_MAX,
    SECTOR_BOUNDS,
    SMALL_MAX_BOUNDS,
    SUM_BOUNDS,
    TAIL_PAIR_BOUNDS,
    UINT32_MASK,
    WHITE_MAX,
    WHITE_PICK,
)
from .data import AddonMode, FilterConfig, PlayerConfig, RunConfig, Strategy, Ticket
from .matching import make_draw
from .rng import Mulberry32, derive_seed

logger = logging.getLogger(__name__)

PLAYER_IDS: tuple[str, ...] = ("A", "B", "C", "D", "E")


def _clamp(value: int, bounds: tuple[int, int]) -> int:
    lo, hi = bounds
    return max(lo, min(hi, int(value)))


# --- Enum parsing ---


def parse_strategy_str(value: str) -> Optional[Strategy]:
    """Parse a strategy name. Returns None for ``off``.

    Accepts a couple of common variants:
    - quick_pick / qp -> quick
    - logic -> filtered
    - case-insensitive
    """

    v = value.strip().lower().replace("-", "_")
    if v in ("off", "none", ""):
        return None
    v = {"quick_pick": "quick", "qp": "quick", "logic": "filtered", "filter": "filtered"}.get(v, v)

    try:
        return Strategy(v)
    except ValueError as e:
        raise ValueError(f"Unknown strategy string: {value!r}") from e


def parse_addon_mode_str(value: str) -> AddonMode:
    v = value.strip().lower().replace("-", "_")
    v = {"pp": "power_play", "dp": "double_play", "off": "none", "": "none"}.get(v, v)

    try:
        return AddonMode(v)
    except ValueError as e:
        raise ValueError(f"Unknown add-on mode: {value!r}") from e


# --- Fixed tickets ---


def parse_ticket_line(line: str) -> Ticket:
    """Parse ``"3 11 19 42 65 | 7"`` into a :class:`Ticket`."""

    parts = [p.strip() for p in line.split("|")]
    if len(parts) != 2:
        raise ValueError("expected '<5 white numbers> | <powerball>'")

    try:
        whites = [int(tok) for tok in parts[0].split()]
        powerball = int(parts[1])
    except ValueError as e:
        raise ValueError("numbers must be integers") from e

    if len(whites) != WHITE_PICK:
        raise ValueError(f"expected {WHITE_PICK} white numbers, got {len(whites)}")
    if len(set(whites)) != WHITE_PICK:
        raise ValueError("white numbers must be distinct")
    if any(n < 1 or n > WHITE_MAX for n in whites):
        raise ValueError(f"white numbers must be in 1..{WHITE_MAX}")
    if powerball < 1 or powerball > POWERBALL_MAX:
        raise ValueError(f"powerball must be in 1..{POWERBALL_MAX}")

    return Ticket(white=tuple(sorted(whites)), powerball=powerball)


def parse_fixed_tickets(text: str) -> tuple[Ticket, ...]:
    """Parse exactly five fixed tickets, one per line.

    Blank lines are ignored and only the first five non-blank lines are read.
    Any invalid line, or fewer than five lines, rejects the whole set.
    """

    lines = [ln.strip() for ln in text.splitlines() if ln.strip()]

    tickets: List[Ticket] = []
    problems: List[str] = []
    for i, line in enumerate(lines[:MAX_TICKETS_PER_PERIOD], start=1):
        try:
            tickets.append(parse_ticket_line(line))
        except ValueError as e:
            problems.append(f"- line {i} {line!r}: {e}")

    if len(tickets) != MAX_TICKETS_PER_PERIOD:
        raise ValueError(
            f"Fixed tickets need exactly {MAX_TICKETS_PER_PERIOD} valid lines "
            f"('w w w w w | pb'); got {len(tickets)} valid of {len(lines)} supplied.\n"
            + "\n".join(problems)
        )

    return tuple(tickets)


def format_fixed_tickets(tickets: Iterable[Ticket]) -> str:
    return "\n".join(str(t) for t in tickets)


def default_fixed_tickets(seed: int) -> tuple[Ticket, ...]:
    """Five tickets from a stream derived from ``seed``.

    The derived stream is separate from the run's stream, so these tickets
    don't shift when the main run consumes randomness differently.
    """

    rng = Mulberry32(derive_seed(seed, FIXED_TICKET_SEED_SALT))
    return tuple(make_draw(rng) for _ in range(MAX_TICKETS_PER_PERIOD))


def load_fixed_tickets_file(path: str | Path) -> tuple[Ticket, ...]:
    path = Path(path)
    return parse_fixed_tickets(path.read_text(encoding="utf-8-sig"))


# --- Players ---


def default_players() -> tuple[PlayerConfig, ...]:
    """A: quick pick, B: filtered, C: fixed tickets; D and E switched off."""

    strategies = (Strategy.QUICK, Strategy.FILTERED, Strategy.FIXED, Strategy.QUICK, Strategy.QUICK)
    return tuple(
        PlayerConfig(player_id=pid, name=f"Player {pid}", strategy=strat, enabled=i < 3)
        for i, (pid, strat) in enumerate(zip(PLAYER_IDS, strategies))
    )


def parse_players(raw: Sequence[Mapping[str, Any]]) -> tuple[PlayerConfig, ...]:
    players: List[PlayerConfig] = []
    for i, rec in enumerate(raw):
        pid = str(rec.get("id") or (PLAYER_IDS[i] if i < len(PLAYER_IDS) else f"P{i + 1}"))
        strategy = parse_strategy_str(str(rec.get("strategy", "quick")))
        enabled = bool(rec.get("enabled", True)) and strategy is not None
        players.append(
            PlayerConfig(
                player_id=pid,
                name=str(rec.get("name") or f"Player {pid}"),
                strategy=strategy or Strategy.QUICK,
                enabled=enabled,
            )
        )
    return tuple(players)


def _ensure_enabled_player(players: tuple[PlayerConfig, ...]) -> tuple[PlayerConfig, ...]:
    if any(p.enabled for p in players):
        return players

    logger.warning("No enabled players configured; falling back to a single quick-pick player A")
    return (PlayerConfig(player_id="A", name="Player A", strategy=Strategy.QUICK),)


def _limit_enabled_players(players: tuple[PlayerConfig, ...]) -> tuple[PlayerConfig, ...]:
    enabled = [p for p in players if p.enabled]
    if len(enabled) <= MAX_PLAYERS:
        return players

    logger.warning("More than %d enabled players; keeping the first %d", MAX_PLAYERS, MAX_PLAYERS)
    return tuple(enabled[:MAX_PLAYERS])


# --- Config construction ---


def build_filter_config(raw: Mapping[str, Any] | None = None) -> FilterConfig:
    """Build a clamped :class:`FilterConfig` from loosely-typed input."""

    raw = raw or {}

    sum_min = _clamp(raw.get("sum_min", DEFAULT_SUM_MIN), SUM_BOUNDS)
    sum_max = _clamp(raw.get("sum_max", DEFAULT_SUM_MAX), SUM_BOUNDS)
    min_sectors = _clamp(raw.get("min_sectors", DEFAULT_MIN_SECTORS), SECTOR_BOUNDS)
    max_sectors = _clamp(raw.get("max_sectors", DEFAULT_MAX_SECTORS), SECTOR_BOUNDS)

    return FilterConfig(
        sum_min=min(sum_min, sum_max),
        sum_max=max(sum_min, sum_max),
        exclude_all_odd_even=bool(raw.get("exclude_all_odd_even", True)),
        small_max=_clamp(raw.get("small_max", DEFAULT_SMALL_MAX), SMALL_MAX_BOUNDS),
        exclude_all_small_big=bool(raw.get("exclude_all_small_big", True)),
        max_consecutive_pairs=_clamp(raw.get("max_consecutive_pairs", DEFAULT_MAX_CONSECUTIVE_PAIRS), CONSECUTIVE_PAIR_BOUNDS),
        min_sectors=min(min_sectors, max_sectors),
        max_sectors=max(min_sectors, max_sectors),
        max_tail_pairs=_clamp(raw.get("max_tail_pairs", DEFAULT_MAX_TAIL_PAIRS), TAIL_PAIR_BOUNDS),
        pool_init=_clamp(raw.get("pool_init", DEFAULT_POOL_INIT), POOL_INIT_BOUNDS),
        pool_max=_clamp(raw.get("pool_max", DEFAULT_POOL_MAX), POOL_MAX_BOUNDS),
    )


def build_run_config(
    *,
    years: int = MAX_YEARS,
    addon_mode: AddonMode | str = AddonMode.NONE,
    seed: int = 0,
    start_jackpot_cash: float = MIN_JACKPOT_CASH,
    players: Sequence[PlayerConfig] | None = None,
    filter_config: FilterConfig | Mapping[str, Any] | None = None,
    fixed_tickets: Sequence[Ticket] | str | None = None,
    start_date: date | str | None = None,
) -> RunConfig:
    """Create a :class:`RunConfig`, clamping numeric inputs.

    If an enabled player uses fixed tickets and none are supplied, the five
    default tickets derived from ``seed`` are used.
    """

    mode = addon_mode if isinstance(addon_mode, AddonMode) else parse_addon_mode_str(addon_mode)
    masked_seed = int(seed) & UINT32_MASK

    roster = _limit_enabled_players(_ensure_enabled_player(tuple(players) if players is not None else default_players()))

    if isinstance(filter_config, FilterConfig):
        filters = filter_config
    else:
        filters = build_filter_config(filter_config)

    tickets: Optional[tuple[Ticket, ...]]
    if isinstance(fixed_tickets, str):
        tickets = parse_fixed_tickets(fixed_tickets)
    elif fixed_tickets is not None:
        tickets = tuple(fixed_tickets)
    else:
        tickets = None

    if tickets is None and any(p.enabled and p.strategy == Strategy.FIXED for p in roster):
        tickets = default_fixed_tickets(masked_seed)

    if isinstance(start_date, str):
        first_date = date.fromisoformat(start_date)
    else:
        first_date = start_date or DEFAULT_START_DATE

    return RunConfig(
        years=_clamp(years, (MIN_YEARS, MAX_YEARS)),
        addon_mode=mode,
        seed=masked_seed,
        start_jackpot_cash=max(MIN_JACKPOT_CASH, min(MAX_JACKPOT_CASH, float(start_jackpot_cash))),
        players=roster,
        filter_config=filters,
        fixed_tickets=tickets,
        start_date=first_date,
    )


def load_run_config_from_json(path: str | Path) -> RunConfig:
    """Load a :class:`RunConfig` from JSON.

    Expected format (every key optional)::

        {
          "years": 100,
          "addon_mode": "power_play",
          "seed": 12345,
          "start_jackpot_cash": 20000000,
          "start_date": "2026-01-03",
          "players": [{"id": "A", "name": "Player A", "strategy": "quick", "enabled": true}],
          "filter": {"sum_min": 130, "sum_max": 220},
          "fixed_tickets": ["3 11 19 42 65 | 7", "..."]
        }

    ``fixed_tickets`` may also be a single newline-separated string, or
    ``fixed_tickets_file`` may name a text file relative to the JSON file.
    """

    path = Path(path)
    raw = json.loads(path.read_text(encoding="utf-8-sig"))
    if not isinstance(raw, dict):
        raise ValueError("run config must be a JSON object")

    fixed: Sequence[Ticket] | str | None = None
    raw_fixed = raw.get("fixed_tickets")
    if isinstance(raw_fixed, list):
        fixed = "\n".join(str(x) for x in raw_fixed)
    elif isinstance(raw_fixed, str):
        fixed = raw_fixed
    elif raw.get("fixed_tickets_file"):
        fixed = load_fixed_tickets_file(path.parent / str(raw["fixed_tickets_file"]))

    players_raw = raw.get("players")
    if players_raw is not None and not isinstance(players_raw, list):
        raise ValueError("players must be a JSON list")

    return build_run_config(
        years=int(raw.get("years", MAX_YEARS)),
        addon_mode=str(raw.get("addon_mode", "none")),
        seed=int(raw.get("seed", 0)),
        start_jackpot_cash=float(raw.get("start_jackpot_cash", MIN_JACKPOT_CASH)),
        players=parse_players(players_raw) if players_raw is not None else None,
        filter_config=raw.get("filter") or {},
        fixed_tickets=fixed,
        start_date=raw.get("start_date"),
    )
