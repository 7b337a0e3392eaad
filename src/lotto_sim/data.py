"""Domain data model for the lottery simulator.

This module is intentionally *pure*: it defines the enums and dataclasses used
throughout the project, with no dependency on input file formats and no
simulation logic.

- parsing and clamping of user input lives in :mod:`lotto_sim.io`
- the run loop lives in :mod:`lotto_sim.simulate`
- output formatting lives in :mod:`lotto_sim.export` and :mod:`lotto_sim.report`
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Mapping, Optional, Sequence

from .constants import (
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
    MAX_JACKPOT_CASH,
    MAX_PLAYERS,
    MAX_TICKETS_PER_PERIOD,
    MAX_YEARS,
    MIN_JACKPOT_CASH,
    MIN_YEARS,
    POWERBALL_MAX,
    STARTING_BALANCE,
    UINT32_MASK,
    WHITE_MAX,
    WHITE_PICK,
)


class AddonMode(str, Enum):
    """Optional per-ticket add-on purchased by every player."""

    NONE = "none"
    POWER_PLAY = "power_play"
    DOUBLE_PLAY = "double_play"


class Strategy(str, Enum):
    """How a player chooses tickets."""

    QUICK = "quick"
    FILTERED = "filtered"
    FIXED = "fixed"

    @property
    def label(self) -> str:
        return _STRATEGY_LABELS[self]


_STRATEGY_LABELS: Mapping[Strategy, str] = {
    Strategy.QUICK: "Quick Pick",
    Strategy.FILTERED: "Filtered (pattern filters only)",
    Strategy.FIXED: "Fixed tickets",
}


class PrizeTier(str, Enum):
    """Match outcomes that pay something, named ``<white matches>+<PB|0>``."""

    JACKPOT = "5+PB"
    FIVE = "5+0"
    FOUR_PB = "4+PB"
    FOUR = "4+0"
    THREE_PB = "3+PB"
    THREE = "3+0"
    TWO_PB = "2+PB"
    ONE_PB = "1+PB"
    ZERO_PB = "0+PB"


class EventCategory(str, Enum):
    ELIMINATED = "ELIMINATED"
    JACKPOT_HIT = "JACKPOT_HIT"
    PHIT_THRESHOLD = "PHIT_THRESHOLD"
    DRY_SPELL_ALL = "DRY_SPELL_ALL"
    LONG_ROLL = "LONG_ROLL"
    RANK_FLIP = "RANK_FLIP"


@dataclass(frozen=True, slots=True)
class Ticket:
    """Five distinct ascending white balls plus one powerball.

    Also used for drawn results.
    """

    white: tuple[int, ...]
    powerball: int

    def __post_init__(self) -> None:
        if len(self.white) != WHITE_PICK:
            raise ValueError(f"Ticket.white must contain exactly {WHITE_PICK} numbers")
        if len(set(self.white)) != WHITE_PICK:
            raise ValueError("Ticket.white numbers must be distinct")
        if any(n < 1 or n > WHITE_MAX for n in self.white):
            raise ValueError(f"Ticket.white numbers must be in [1, {WHITE_MAX}]")
        if tuple(sorted(self.white)) != tuple(self.white):
            raise ValueError("Ticket.white must be sorted ascending")
        if self.powerball < 1 or self.powerball > POWERBALL_MAX:
            raise ValueError(f"Ticket.powerball must be in [1, {POWERBALL_MAX}]")

    def __str__(self) -> str:
        return f"{' '.join(str(n) for n in self.white)} | {self.powerball}"


Draw = Ticket


@dataclass(frozen=True, slots=True)
class FilterConfig:
    """Pattern filters for the filtered strategy.

    None of these change the jackpot probability of a ticket; they only change
    which combinations a player ends up holding.
    """

    sum_min: int = DEFAULT_SUM_MIN
    sum_max: int = DEFAULT_SUM_MAX
    exclude_all_odd_even: bool = True
    small_max: int = DEFAULT_SMALL_MAX
    exclude_all_small_big: bool = True
    max_consecutive_pairs: int = DEFAULT_MAX_CONSECUTIVE_PAIRS
    min_sectors: int = DEFAULT_MIN_SECTORS
    max_sectors: int = DEFAULT_MAX_SECTORS
    max_tail_pairs: int = DEFAULT_MAX_TAIL_PAIRS
    pool_init: int = DEFAULT_POOL_INIT
    pool_max: int = DEFAULT_POOL_MAX

    def __post_init__(self) -> None:
        if self.sum_min > self.sum_max:
            raise ValueError("FilterConfig.sum_min must be <= sum_max")
        if self.min_sectors > self.max_sectors:
            raise ValueError("FilterConfig.min_sectors must be <= max_sectors")
        if self.max_consecutive_pairs < 0 or self.max_tail_pairs < 0:
            raise ValueError("FilterConfig pair limits must be >= 0")
        if self.pool_init < 1:
            raise ValueError("FilterConfig.pool_init must be >= 1")


@dataclass(frozen=True, slots=True)
class PlayerConfig:
    player_id: str
    name: str
    strategy: Strategy
    enabled: bool = True

    def __post_init__(self) -> None:
        if not self.player_id:
            raise ValueError("PlayerConfig.player_id must be non-empty")


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Everything a run needs, fixed at run start."""

    years: int
    addon_mode: AddonMode
    seed: int
    start_jackpot_cash: float
    players: tuple[PlayerConfig, ...]
    filter_config: FilterConfig = field(default_factory=FilterConfig)
    fixed_tickets: Optional[tuple[Ticket, ...]] = None
    start_date: date = DEFAULT_START_DATE

    def __post_init__(self) -> None:
        if self.years < MIN_YEARS or self.years > MAX_YEARS:
            raise ValueError(f"RunConfig.years must be in [{MIN_YEARS}, {MAX_YEARS}]")
        if self.seed < 0 or self.seed > UINT32_MASK:
            raise ValueError("RunConfig.seed must be a 32-bit unsigned integer")
        if self.start_jackpot_cash < MIN_JACKPOT_CASH or self.start_jackpot_cash > MAX_JACKPOT_CASH:
            raise ValueError("RunConfig.start_jackpot_cash is outside the legal jackpot range")

        enabled = self.enabled_players
        if not enabled:
            raise ValueError("RunConfig needs at least one enabled player")
        if len(enabled) > MAX_PLAYERS:
            raise ValueError(f"RunConfig supports at most {MAX_PLAYERS} enabled players")

        ids = [p.player_id for p in enabled]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate player ids: {sorted(ids)}")

        fixed_players = [p.player_id for p in enabled if p.strategy == Strategy.FIXED]
        if len(fixed_players) > 1:
            raise ValueError(
                "Only one player can use fixed tickets; "
                f"found {len(fixed_players)}: {', '.join(fixed_players)}"
            )
        if fixed_players:
            if self.fixed_tickets is None or len(self.fixed_tickets) != MAX_TICKETS_PER_PERIOD:
                raise ValueError("The fixed strategy requires exactly 5 fixed tickets")

    @property
    def enabled_players(self) -> tuple[PlayerConfig, ...]:
        return tuple(p for p in self.players if p.enabled)


@dataclass(frozen=True, slots=True)
class PlayerState:
    """A player's ledger after some number of periods."""

    player_id: str
    name: str
    strategy: Strategy
    balance: float = STARTING_BALANCE
    spent: float = 0.0
    won: float = 0.0
    jackpot_hits: int = 0
    active: bool = True


@dataclass(frozen=True, slots=True)
class JackpotState:
    cash: float

    def __post_init__(self) -> None:
        if self.cash < MIN_JACKPOT_CASH or self.cash > MAX_JACKPOT_CASH:
            raise ValueError(f"JackpotState.cash out of range: {self.cash}")


@dataclass(frozen=True, slots=True)
class PeriodSnapshot:
    """Everything that happened in one draw period.

    The ordered snapshot sequence is the ground truth of a run; consumers read
    from it and never recompute it.
    """

    index: int
    draw_id: str
    draw_date: date
    weekday: int
    addon_mode: AddonMode

    # Pool value in play for this draw, and the value carried to the next draw.
    jackpot_cash: float
    next_jackpot_cash: float

    tickets_sold: int
    effective_tickets: float
    lam: float
    hit_probability: float
    coverage: float
    market_winners: int
    multiplier: int

    main_draw: Draw
    double_play_draw: Optional[Draw]

    tickets_by_player: Mapping[str, tuple[Ticket, ...]]
    jackpot_hits_by_player: Mapping[str, int]
    winnings_by_player: Mapping[str, float]

    players: tuple[PlayerState, ...]
    ranking: tuple[str, ...]
    last_jackpot_index: int

    any_prize: bool
    eliminated: tuple[str, ...] = ()

    @property
    def total_winners(self) -> int:
        return self.market_winners + sum(self.jackpot_hits_by_player.values())

    @property
    def jackpot_hit(self) -> bool:
        return self.total_winners >= 1

    @property
    def leader(self) -> str:
        return self.ranking[0]


@dataclass(frozen=True, slots=True)
class Event:
    period_index: int
    category: EventCategory
    headline: str
    rationale: str = ""
    caveat: str = ""


@dataclass(frozen=True, slots=True)
class ChartPoint:
    """Decimated series point: jackpot, balances and leader."""

    index: int
    jackpot_cash: float
    balances: Mapping[str, float]
    leader: str


@dataclass(frozen=True, slots=True)
class RunSummary:
    final_ranking: tuple[PlayerState, ...]
    player_jackpot_hits: int
    periods_with_market_jackpot_hit: int
    longest_no_jackpot_streak: int


@dataclass(frozen=True, slots=True)
class RunMeta:
    years: int
    total_periods: int
    seed: int
    market_efficiency: float
    addon_mode: AddonMode


@dataclass(frozen=True, slots=True)
class RunResult:
    """Top-level container for everything a run produces."""

    meta: RunMeta
    snapshots: Sequence[PeriodSnapshot]
    events: Sequence[Event]
    chart_points: Sequence[ChartPoint]
    narration: Sequence[str]
    summary: RunSummary
