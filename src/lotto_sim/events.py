"""Narrative events derived from the snapshot stream.

:class:`EventDetector` only reads snapshots. Its counters (streaks, fired
thresholds) are its own and never flow back into the simulation.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from .constants import (
    DRY_SPELL_PERIODS,
    HIT_PROBABILITY_THRESHOLDS,
    LONG_ROLL_PERIODS,
    MIN_JACKPOT_CASH,
)
from .data import Event, EventCategory, PeriodSnapshot
from .export import format_money


class EventDetector:
    """Turns snapshots into chronological :class:`~lotto_sim.data.Event` records.

    Call :meth:`observe` once per period, in order.
    """

    def __init__(
        self,
        *,
        hit_thresholds: Sequence[float] = HIT_PROBABILITY_THRESHOLDS,
        dry_spell_periods: int = DRY_SPELL_PERIODS,
        long_roll_periods: int = LONG_ROLL_PERIODS,
    ) -> None:
        self.hit_thresholds = tuple(sorted(hit_thresholds))
        self.dry_spell_periods = dry_spell_periods
        self.long_roll_periods = long_roll_periods

        self._fired_thresholds: set[float] = set()
        self._no_prize_streak = 0
        self._roll_streak = 0

    def observe(self, snapshot: PeriodSnapshot, previous: Optional[PeriodSnapshot]) -> list[Event]:
        events: list[Event] = []
        idx = snapshot.index

        for player_id in snapshot.eliminated:
            events.append(
                Event(
                    period_index=idx,
                    category=EventCategory.ELIMINATED,
                    headline=f"{player_id} ran out of funds. Eliminated.",
                    rationale="Ticket cost exceeded remaining cash.",
                    caveat="Bankruptcy is a normal outcome under long odds.",
                )
            )

        self._no_prize_streak = 0 if snapshot.any_prize else self._no_prize_streak + 1

        if snapshot.jackpot_hit:
            self._roll_streak = 0
            events.append(
                Event(
                    period_index=idx,
                    category=EventCategory.JACKPOT_HIT,
                    headline=(
                        f"Jackpot hit ({snapshot.total_winners} winning ticket"
                        f"{'s' if snapshot.total_winners != 1 else ''}). "
                        f"Reset to {format_money(MIN_JACKPOT_CASH)} next draw."
                    ),
                    rationale=(
                        f"Market expected winners λ={snapshot.lam:.4f}; winners are Poisson(λ), "
                        "then the pool is split across all winners (market + players)."
                    ),
                    caveat=(
                        f"Coverage ({snapshot.coverage * 100:.2f}%) is narration-only and never "
                        "used to shortcut player hit checks."
                    ),
                )
            )
        else:
            self._roll_streak += 1

        for threshold in self.hit_thresholds:
            if snapshot.hit_probability >= threshold and threshold not in self._fired_thresholds:
                self._fired_thresholds.add(threshold)
                events.append(
                    Event(
                        period_index=idx,
                        category=EventCategory.PHIT_THRESHOLD,
                        headline=f"P(Hit) crossed {math.floor(threshold * 100 + 0.5)}%.",
                        rationale=(
                            "P(Hit)=1-exp(-λ). It is the probability that at least one market "
                            "ticket hits the jackpot this draw."
                        ),
                        caveat="Higher sales raise λ, but that still does not imply frequent winners.",
                    )
                )

        if self._no_prize_streak == self.dry_spell_periods:
            events.append(
                Event(
                    period_index=idx,
                    category=EventCategory.DRY_SPELL_ALL,
                    headline=f"No one hit anything for {self.dry_spell_periods} draws.",
                    rationale="Long quiet stretches are expected under long odds.",
                    caveat="Nothing happened again, and that is the point.",
                )
            )

        if self._roll_streak == self.long_roll_periods:
            events.append(
                Event(
                    period_index=idx,
                    category=EventCategory.LONG_ROLL,
                    headline=f"Jackpot rolled {self.long_roll_periods} draws in a row.",
                    rationale="Rollover streaks are normal when the market's λ stays small most draws.",
                    caveat="The pot grows, and human intuition starts to overreact.",
                )
            )

        if previous is not None and snapshot.leader != previous.leader:
            events.append(
                Event(
                    period_index=idx,
                    category=EventCategory.RANK_FLIP,
                    headline=f"Lead changed: {snapshot.leader} is now #1.",
                    rationale=(
                        "Short-term leads are dominated by variance. Strategy does not change "
                        "jackpot odds per ticket."
                    ),
                    caveat="A lead is a path property, not proof of skill.",
                )
            )

        return events
