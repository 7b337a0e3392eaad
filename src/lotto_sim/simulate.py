"""Player ledger and draw-by-draw run loop.

One period is resolved completely before the next begins:

1. market sales for the current pool (sales noise)
2. market jackpot winners ~ Poisson(λ)
3. main draw, then the Double Play draw and the Power Play multiplier if active
4. each active player, in configured order: buy, generate, match, collect
   fixed prizes
5. jackpot resolution across market and player winners
6. snapshot

All randomness comes from one :class:`~lotto_sim.rng.Mulberry32` stream whose
state is carried on :class:`RunState`. :func:`advance_period` takes a state and
returns the next one; nothing is stored globally.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import date, timedelta
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from .constants import (
    ADDON_PRICE,
    CHART_POINT_EVERY,
    COMBINATIONS,
    DRAW_WEEKDAYS,
    MARKET_EFFICIENCY_BASE,
    MARKET_EFFICIENCY_SPREAD,
    MAX_TICKETS_PER_PERIOD,
    MIN_JACKPOT_CASH,
    MONDAY,
    PERIODS_PER_WEEK,
    PERIODS_PER_YEAR,
    SATURDAY,
    TICKET_PRICE,
)
from .data import (
    AddonMode,
    ChartPoint,
    Event,
    JackpotState,
    PeriodSnapshot,
    PlayerState,
    RunConfig,
    RunMeta,
    RunResult,
    RunSummary,
    Ticket,
)
from .economics import clamp_jackpot, grow_jackpot, tickets_sold
from .events import EventDetector
from .export import narration_lines
from .matching import draw_multiplier, make_draw, resolve_ticket
from .rng import Mulberry32, poisson
from .strategies import TicketStrategy, build_strategy

logger = logging.getLogger(__name__)


class SimulationCancelled(RuntimeError):
    """Raised when a caller cancels a run between periods."""


@dataclass(frozen=True, slots=True)
class RunContext:
    """Per-run values that never change once the run has started."""

    config: RunConfig
    ticket_cost: int
    market_efficiency: float
    strategies: Mapping[str, TicketStrategy]


@dataclass(frozen=True, slots=True)
class RunState:
    """Everything that evolves from one period to the next."""

    index: int
    rng_state: int
    players: tuple[PlayerState, ...]
    jackpot: JackpotState
    draw_date: date
    last_jackpot_index: int = -1

    @property
    def weekday(self) -> int:
        return self.draw_date.weekday()


# --- Calendar ---


def draw_id_from_index(index: int) -> str:
    """``Y<year>-W<week>-D<draw>``, all 1-based."""

    year = index // PERIODS_PER_YEAR + 1
    within = index % PERIODS_PER_YEAR
    week = within // PERIODS_PER_WEEK + 1
    day = within % PERIODS_PER_WEEK + 1
    return f"Y{year}-W{week}-D{day}"


def align_to_draw_day(start: date) -> date:
    """First Monday, Wednesday or Saturday on or after ``start``."""

    d = start
    while d.weekday() not in DRAW_WEEKDAYS:
        d += timedelta(days=1)
    return d


def next_draw_date(current: date) -> date:
    """Mon -> Wed -> Sat -> Mon."""

    if current.weekday() in (SATURDAY, MONDAY):
        return current + timedelta(days=2)
    return current + timedelta(days=3)


# --- Ledger helpers ---


def ticket_cost(addon_mode: AddonMode) -> int:
    if addon_mode == AddonMode.NONE:
        return TICKET_PRICE
    return TICKET_PRICE + ADDON_PRICE


def affordable_tickets(balance: float, cost: int) -> int:
    return min(MAX_TICKETS_PER_PERIOD, max(0, math.floor(balance / cost)))


def rank_players(players: Sequence[PlayerState]) -> tuple[str, ...]:
    """Player ids by balance, highest first. Ties keep configured order."""

    return tuple(p.player_id for p in sorted(players, key=lambda p: -p.balance))


def split_jackpot(
    jackpot_cash: float,
    total_winners: int,
    hits_by_player: Mapping[str, int],
) -> Dict[str, float]:
    """Cash credited to each player holding jackpot-tier tickets.

    The pool is divided evenly per winning ticket across market and player
    winners; a player is credited one share per winning ticket they hold.
    """

    if total_winners < 1:
        return {}
    if sum(hits_by_player.values()) > total_winners:
        raise ValueError("Player jackpot hits exceed total winners")

    share = jackpot_cash / total_winners
    return {pid: share * hits for pid, hits in hits_by_player.items() if hits > 0}


# --- Run lifecycle ---


def start_run(config: RunConfig) -> tuple[RunContext, RunState]:
    """Build the run context and the state before the first period."""

    rng = Mulberry32(config.seed)
    # Market-only efficiency, drawn once per run before any period.
    efficiency = MARKET_EFFICIENCY_BASE + rng.random() * MARKET_EFFICIENCY_SPREAD

    enabled = config.enabled_players
    context = RunContext(
        config=config,
        ticket_cost=ticket_cost(config.addon_mode),
        market_efficiency=efficiency,
        strategies={p.player_id: build_strategy(p, config) for p in enabled},
    )
    state = RunState(
        index=0,
        rng_state=rng.state,
        players=tuple(PlayerState(player_id=p.player_id, name=p.name, strategy=p.strategy) for p in enabled),
        jackpot=JackpotState(cash=clamp_jackpot(config.start_jackpot_cash)),
        draw_date=align_to_draw_day(config.start_date),
    )
    return context, state


def advance_period(state: RunState, context: RunContext) -> tuple[RunState, PeriodSnapshot]:
    """Resolve one draw period and return the next state with its snapshot."""

    rng = Mulberry32(state.rng_state)
    addon_mode = context.config.addon_mode
    idx = state.index
    jackpot_cash = state.jackpot.cash

    sold = tickets_sold(jackpot_cash, state.weekday, rng)
    effective = sold * context.market_efficiency
    lam = effective / COMBINATIONS
    hit_probability = 1 - math.exp(-lam)
    coverage = 1 - math.exp(-effective / COMBINATIONS)
    market_winners = poisson(lam, rng)

    main_draw = make_draw(rng)
    double_play_draw = make_draw(rng) if addon_mode == AddonMode.DOUBLE_PLAY else None
    multiplier = draw_multiplier(rng) if addon_mode == AddonMode.POWER_PLAY else 1

    tickets_by_player: Dict[str, tuple[Ticket, ...]] = {}
    hits_by_player: Dict[str, int] = {}
    winnings_by_player: Dict[str, float] = {}
    eliminated: List[str] = []
    players: List[PlayerState] = []

    for p in state.players:
        tickets_by_player[p.player_id] = ()
        hits_by_player[p.player_id] = 0
        winnings_by_player[p.player_id] = 0.0

        if not p.active:
            players.append(p)
            continue

        n = affordable_tickets(p.balance, context.ticket_cost)
        if n == 0:
            eliminated.append(p.player_id)
            players.append(replace(p, active=False))
            continue

        cost = n * context.ticket_cost
        tickets = context.strategies[p.player_id].generate(n, rng)
        tickets_by_player[p.player_id] = tickets

        won = 0.0
        hits = 0
        for ticket in tickets:
            outcome = resolve_ticket(
                ticket,
                main_draw=main_draw,
                double_play_draw=double_play_draw,
                addon_mode=addon_mode,
                multiplier=multiplier,
            )
            if outcome.jackpot_hit:
                hits += 1
            won += outcome.fixed_winnings

        hits_by_player[p.player_id] = hits
        winnings_by_player[p.player_id] = won
        players.append(replace(p, balance=p.balance - cost + won, spent=p.spent + cost, won=p.won + won))

    player_hits = sum(hits_by_player.values())
    total_winners = market_winners + player_hits
    any_prize = total_winners > 0 or any(w > 0 for w in winnings_by_player.values())

    last_jackpot_index = state.last_jackpot_index
    if total_winners >= 1:
        credits = split_jackpot(jackpot_cash, total_winners, hits_by_player)
        players = [
            replace(
                p,
                balance=p.balance + credits[p.player_id],
                won=p.won + credits[p.player_id],
                jackpot_hits=p.jackpot_hits + hits_by_player[p.player_id],
            )
            if p.player_id in credits
            else p
            for p in players
        ]
        next_cash = MIN_JACKPOT_CASH
        last_jackpot_index = idx
    else:
        next_cash = grow_jackpot(jackpot_cash, sold)

    final_players = tuple(players)
    snapshot = PeriodSnapshot(
        index=idx,
        draw_id=draw_id_from_index(idx),
        draw_date=state.draw_date,
        weekday=state.weekday,
        addon_mode=addon_mode,
        jackpot_cash=jackpot_cash,
        next_jackpot_cash=next_cash,
        tickets_sold=sold,
        effective_tickets=effective,
        lam=lam,
        hit_probability=hit_probability,
        coverage=coverage,
        market_winners=market_winners,
        multiplier=multiplier,
        main_draw=main_draw,
        double_play_draw=double_play_draw,
        tickets_by_player=MappingProxyType(tickets_by_player),
        jackpot_hits_by_player=MappingProxyType(hits_by_player),
        winnings_by_player=MappingProxyType(winnings_by_player),
        players=final_players,
        ranking=rank_players(final_players),
        last_jackpot_index=last_jackpot_index,
        any_prize=any_prize,
        eliminated=tuple(eliminated),
    )

    next_state = RunState(
        index=idx + 1,
        rng_state=rng.state,
        players=final_players,
        jackpot=JackpotState(cash=next_cash),
        draw_date=next_draw_date(state.draw_date),
        last_jackpot_index=last_jackpot_index,
    )
    return next_state, snapshot


def chart_point(snapshot: PeriodSnapshot) -> ChartPoint:
    return ChartPoint(
        index=snapshot.index,
        jackpot_cash=snapshot.next_jackpot_cash,
        balances=MappingProxyType({p.player_id: p.balance for p in snapshot.players}),
        leader=snapshot.leader,
    )


def build_summary(snapshots: Sequence[PeriodSnapshot]) -> RunSummary:
    if not snapshots:
        raise ValueError("Cannot summarise an empty run")

    final_ranking = tuple(sorted(snapshots[-1].players, key=lambda p: -p.balance))

    longest = current = 0
    for snap in snapshots:
        current = 0 if snap.jackpot_hit else current + 1
        longest = max(longest, current)

    return RunSummary(
        final_ranking=final_ranking,
        player_jackpot_hits=sum(p.jackpot_hits for p in final_ranking),
        periods_with_market_jackpot_hit=sum(1 for s in snapshots if s.market_winners >= 1),
        longest_no_jackpot_streak=longest,
    )


def run_simulation(
    config: RunConfig,
    *,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> RunResult:
    """Run the whole simulation as one blocking call.

    ``should_cancel`` is polled before each period; when it returns True the
    run stops with :class:`SimulationCancelled` and no partial result.
    """

    context, state = start_run(config)
    total_periods = config.years * PERIODS_PER_YEAR
    detector = EventDetector()

    snapshots: List[PeriodSnapshot] = []
    events: List[Event] = []
    chart_points: List[ChartPoint] = []

    logger.info(
        "Starting run: years=%d periods=%d seed=%d addon=%s players=%s",
        config.years,
        total_periods,
        config.seed,
        config.addon_mode.value,
        [f"{p.player_id}:{p.strategy.value}" for p in state.players],
    )

    previous: Optional[PeriodSnapshot] = None
    for idx in range(total_periods):
        if should_cancel is not None and should_cancel():
            raise SimulationCancelled(f"Run cancelled after {idx} of {total_periods} periods")

        state, snapshot = advance_period(state, context)
        snapshots.append(snapshot)
        events.extend(detector.observe(snapshot, previous))

        if idx % CHART_POINT_EVERY == 0:
            chart_points.append(chart_point(snapshot))

        if (idx + 1) % PERIODS_PER_YEAR == 0:
            logger.debug(
                "Year %d done: jackpot=%.0f leader=%s events=%d",
                (idx + 1) // PERIODS_PER_YEAR,
                snapshot.next_jackpot_cash,
                snapshot.leader,
                len(events),
            )
        previous = snapshot

    summary = build_summary(snapshots)
    logger.info(
        "Run complete: market jackpot periods=%d player jackpot hits=%d longest dry streak=%d events=%d",
        summary.periods_with_market_jackpot_hit,
        summary.player_jackpot_hits,
        summary.longest_no_jackpot_streak,
        len(events),
    )

    meta = RunMeta(
        years=config.years,
        total_periods=total_periods,
        seed=config.seed,
        market_efficiency=context.market_efficiency,
        addon_mode=config.addon_mode,
    )
    return RunResult(
        meta=meta,
        snapshots=tuple(snapshots),
        events=tuple(events),
        chart_points=tuple(chart_points),
        narration=tuple(narration_lines(events, snapshots)),
        summary=summary,
    )
