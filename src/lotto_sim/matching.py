"""Drawing winning numbers and resolving tickets against them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from .constants import (
    DOUBLE_PLAY_PRIZES,
    MAIN_PRIZES,
    POWER_PLAY_FIVE_PRIZE,
    POWER_PLAY_WHEEL,
    POWERBALL_MAX,
    WHITE_MAX,
    WHITE_PICK,
)
from .data import AddonMode, Draw, PrizeTier, Ticket
from .rng import Mulberry32, pick_k_distinct, pick_weighted


_TIER_BY_MATCH: Mapping[tuple[int, bool], PrizeTier] = {
    (5, True): PrizeTier.JACKPOT,
    (5, False): PrizeTier.FIVE,
    (4, True): PrizeTier.FOUR_PB,
    (4, False): PrizeTier.FOUR,
    (3, True): PrizeTier.THREE_PB,
    (3, False): PrizeTier.THREE,
    (2, True): PrizeTier.TWO_PB,
    (1, True): PrizeTier.ONE_PB,
    (0, True): PrizeTier.ZERO_PB,
}


@dataclass(frozen=True, slots=True)
class TicketOutcome:
    """Result of one ticket in one period.

    ``fixed_winnings`` never includes the shared jackpot; jackpot-tier hits are
    only counted here and paid out by the run loop once all winners are known.
    """

    main_tier: Optional[PrizeTier]
    double_play_tier: Optional[PrizeTier]
    fixed_winnings: float

    @property
    def jackpot_hit(self) -> bool:
        return self.main_tier == PrizeTier.JACKPOT


def make_draw(rng: Mulberry32) -> Draw:
    white = pick_k_distinct(WHITE_MAX, WHITE_PICK, rng)
    return Draw(white=white, powerball=rng.randint(POWERBALL_MAX))


def draw_multiplier(rng: Mulberry32) -> int:
    """Spin the Power Play wheel once (2x/3x/4x/5x weighted 24:13:3:2)."""

    return pick_weighted(rng, POWER_PLAY_WHEEL)


def count_matches_sorted(a: Sequence[int], b: Sequence[int]) -> int:
    """Size of the intersection of two ascending sequences (two-pointer merge)."""

    i = j = count = 0
    while i < len(a) and j < len(b):
        if a[i] == b[j]:
            count += 1
            i += 1
            j += 1
        elif a[i] < b[j]:
            i += 1
        else:
            j += 1
    return count


def match_tier(white_matches: int, powerball_match: bool) -> Optional[PrizeTier]:
    """Map a match pair to its prize tier, or ``None`` for no prize."""

    return _TIER_BY_MATCH.get((white_matches, bool(powerball_match)))


def classify(ticket: Ticket, draw: Draw) -> Optional[PrizeTier]:
    return match_tier(count_matches_sorted(ticket.white, draw.white), ticket.powerball == draw.powerball)


def fixed_prize(tier: Optional[PrizeTier], addon_mode: AddonMode, multiplier: int = 1) -> float:
    """Cash paid by the main game for a non-jackpot tier.

    The jackpot tier pays nothing here. Under Power Play every other tier is
    multiplied, except match-5 which pays a flat $2,000,000.
    """

    if tier is None or tier == PrizeTier.JACKPOT:
        return 0.0

    if addon_mode != AddonMode.POWER_PLAY:
        return float(MAIN_PRIZES[tier.value])
    if tier == PrizeTier.FIVE:
        return float(POWER_PLAY_FIVE_PRIZE)
    return float(MAIN_PRIZES[tier.value] * multiplier)


def double_play_prize(tier: Optional[PrizeTier]) -> float:
    """Double Play pays a fixed table for every tier, including match-5+PB."""

    if tier is None:
        return 0.0
    return float(DOUBLE_PLAY_PRIZES[tier.value])


def resolve_ticket(
    ticket: Ticket,
    *,
    main_draw: Draw,
    double_play_draw: Optional[Draw],
    addon_mode: AddonMode,
    multiplier: int,
) -> TicketOutcome:
    main_tier = classify(ticket, main_draw)
    winnings = fixed_prize(main_tier, addon_mode, multiplier)

    dp_tier: Optional[PrizeTier] = None
    if addon_mode == AddonMode.DOUBLE_PLAY and double_play_draw is not None:
        dp_tier = classify(ticket, double_play_draw)
        winnings += double_play_prize(dp_tier)

    return TicketOutcome(main_tier=main_tier, double_play_tier=dp_tier, fixed_winnings=winnings)
