from __future__ import annotations

from datetime import date
from typing import Optional

from lotto_sim.data import AddonMode, EventCategory, PeriodSnapshot, PlayerState, Strategy, Ticket
from lotto_sim.events import EventDetector

_DRAW = Ticket(white=(1, 2, 3, 4, 5), powerball=1)


def _snap(
    index: int,
    *,
    hit_probability: float = 0.01,
    market_winners: int = 0,
    any_prize: bool = False,
    ranking: tuple[str, ...] = ("A", "B"),
    eliminated: tuple[str, ...] = (),
    player_hits: Optional[dict[str, int]] = None,
) -> PeriodSnapshot:
    hits = player_hits or {"A": 0, "B": 0}
    return PeriodSnapshot(
        index=index,
        draw_id=f"D{index}",
        draw_date=date(2026, 1, 3),
        weekday=5,
        addon_mode=AddonMode.NONE,
        jackpot_cash=20_000_000,
        next_jackpot_cash=20_000_000,
        tickets_sold=0,
        effective_tickets=0.0,
        lam=0.0,
        hit_probability=hit_probability,
        coverage=hit_probability,
        market_winners=market_winners,
        multiplier=1,
        main_draw=_DRAW,
        double_play_draw=None,
        tickets_by_player={"A": (), "B": ()},
        jackpot_hits_by_player=hits,
        winnings_by_player={"A": 0.0, "B": 0.0},
        players=tuple(PlayerState(player_id=pid, name=pid, strategy=Strategy.QUICK) for pid in ("A", "B")),
        ranking=ranking,
        last_jackpot_index=-1,
        any_prize=any_prize,
        eliminated=eliminated,
    )


def _run(detector: EventDetector, snaps: list[PeriodSnapshot]) -> list:
    events = []
    previous = None
    for s in snaps:
        events.extend(detector.observe(s, previous))
        previous = s
    return events


def test_threshold_fires_once_per_run() -> None:
    probs = [0.01, 0.11, 0.02, 0.12, 0.09]
    events = _run(EventDetector(), [_snap(i, hit_probability=p) for i, p in enumerate(probs)])

    thresholds = [e for e in events if e.category == EventCategory.PHIT_THRESHOLD]
    assert [(e.period_index, e.headline) for e in thresholds] == [
        (1, "P(Hit) crossed 5%."),
        (1, "P(Hit) crossed 10%."),
    ]


def test_jackpot_hit_event_counts_market_and_player_winners() -> None:
    events = _run(EventDetector(), [_snap(0, market_winners=1, any_prize=True, player_hits={"A": 1, "B": 0})])
    hits = [e for e in events if e.category == EventCategory.JACKPOT_HIT]
    assert len(hits) == 1
    assert hits[0].headline == "Jackpot hit (2 winning tickets). Reset to $20.0M next draw."


def test_dry_spell_fires_exactly_when_streak_reaches_limit() -> None:
    detector = EventDetector(dry_spell_periods=3)
    snaps = [_snap(i, any_prize=(i == 4)) for i in range(10)]
    events = [e for e in _run(detector, snaps) if e.category == EventCategory.DRY_SPELL_ALL]
    # Streak reaches 3 at index 2, resets at 4, reaches 3 again at 7.
    assert [e.period_index for e in events] == [2, 7]


def test_long_roll_fires_once_per_streak() -> None:
    detector = EventDetector(long_roll_periods=4)
    snaps = [_snap(i, market_winners=1 if i == 5 else 0, any_prize=(i == 5)) for i in range(12)]
    events = [e for e in _run(detector, snaps) if e.category == EventCategory.LONG_ROLL]
    assert [e.period_index for e in events] == [3, 9]


def test_rank_flip_on_leader_change_only() -> None:
    snaps = [
        _snap(0, ranking=("A", "B")),
        _snap(1, ranking=("A", "B")),
        _snap(2, ranking=("B", "A")),
        _snap(3, ranking=("B", "A")),
    ]
    events = [e for e in _run(EventDetector(), snaps) if e.category == EventCategory.RANK_FLIP]
    assert [(e.period_index, e.headline) for e in events] == [(2, "Lead changed: B is now #1.")]


def test_eliminations_come_first_in_period_order() -> None:
    snaps = [_snap(0, eliminated=("B",), hit_probability=0.2, market_winners=1, any_prize=True)]
    events = _run(EventDetector(), snaps)
    assert events[0].category == EventCategory.ELIMINATED
    assert [e.category for e in events[1:]] == [
        EventCategory.JACKPOT_HIT,
        EventCategory.PHIT_THRESHOLD,
        EventCategory.PHIT_THRESHOLD,
        EventCategory.PHIT_THRESHOLD,
    ]
