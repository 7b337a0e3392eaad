"""Per-player ticket generators.

All strategies produce tickets from the same combination space, so every
ticket has the same jackpot probability. The filtered strategy only changes
*which* combinations are held.

Filtered strategy retry policy
------------------------------
Candidates are drawn in passes whose sizes follow :func:`pool_schedule`:
``pool_init, 2 * pool_init, 4 * pool_init, ...`` while the size stays at or
below ``pool_max``. A pass stops early once enough tickets have been accepted.
When the schedule is exhausted the remaining tickets are plain quick picks.
The total number of candidates examined is therefore bounded by
``sum(pool_schedule(pool_init, pool_max))``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Protocol, Sequence

from .constants import POWERBALL_MAX, SECTOR_COUNT, WHITE_MAX, WHITE_PICK
from .data import FilterConfig, PlayerConfig, RunConfig, Strategy, Ticket
from .matching import make_draw
from .rng import Mulberry32, pick_k_distinct, shuffle_in_place

logger = logging.getLogger(__name__)


class TicketStrategy(Protocol):
    def generate(self, n: int, rng: Mulberry32) -> tuple[Ticket, ...]:
        ...


class QuickPickStrategy:
    """Independent uniform tickets."""

    def generate(self, n: int, rng: Mulberry32) -> tuple[Ticket, ...]:
        return tuple(make_draw(rng) for _ in range(n))


# --- Filters ---


def sector_of(number: int) -> int:
    """Decade sector index 0..6 (1-10, 11-20, ..., 61-69)."""

    return min(SECTOR_COUNT - 1, (number - 1) // 10)


def count_consecutive_pairs(white: Sequence[int]) -> int:
    return sum(1 for a, b in zip(white, white[1:]) if b - a == 1)


def count_tail_pairs(white: Sequence[int]) -> int:
    """Number of last digits shared by two or more numbers."""

    tails: dict[int, int] = {}
    for n in white:
        tails[n % 10] = tails.get(n % 10, 0) + 1
    return sum(1 for c in tails.values() if c >= 2)


def filter_report(white: Sequence[int], cfg: FilterConfig) -> Mapping[str, bool]:
    """Evaluate every configured filter independently.

    Filters that are switched off always pass.
    """

    total = sum(white)
    odd = sum(1 for n in white if n % 2)
    small = sum(1 for n in white if n <= cfg.small_max)
    sectors = len({sector_of(n) for n in white})

    return {
        "sum": cfg.sum_min <= total <= cfg.sum_max,
        "odd_even": (not cfg.exclude_all_odd_even) or 0 < odd < len(white),
        "small_big": (not cfg.exclude_all_small_big) or 0 < small < len(white),
        "consecutive": count_consecutive_pairs(white) <= cfg.max_consecutive_pairs,
        "sectors": cfg.min_sectors <= sectors <= cfg.max_sectors,
        "tail_pairs": count_tail_pairs(white) <= cfg.max_tail_pairs,
    }


def passes_filters(white: Sequence[int], cfg: FilterConfig) -> bool:
    return all(filter_report(white, cfg).values())


def pool_schedule(pool_init: int, pool_max: int) -> tuple[int, ...]:
    """Candidate pass sizes, doubling from ``pool_init`` while ``<= pool_max``."""

    if pool_init < 1:
        raise ValueError("pool_init must be >= 1")

    sizes: list[int] = []
    pool = pool_init
    while pool <= pool_max:
        sizes.append(pool)
        pool *= 2
    return tuple(sizes)


@dataclass(frozen=True, slots=True)
class FilteredStrategy:
    """Pattern-filtered tickets with a bounded candidate search."""

    filter_config: FilterConfig

    def generate(self, n: int, rng: Mulberry32) -> tuple[Ticket, ...]:
        cfg = self.filter_config
        accepted: list[Ticket] = []
        seen: set[tuple[int, ...]] = set()

        for pool in pool_schedule(cfg.pool_init, cfg.pool_max):
            if len(accepted) >= n:
                break
            for _ in range(pool):
                white = pick_k_distinct(WHITE_MAX, WHITE_PICK, rng)
                if not passes_filters(white, cfg):
                    continue
                if white in seen:
                    continue
                seen.add(white)
                accepted.append(Ticket(white=white, powerball=rng.randint(POWERBALL_MAX)))
                if len(accepted) >= n:
                    break

        if len(accepted) < n:
            logger.debug(
                "Filtered pool exhausted with %d/%d tickets; filling with quick picks",
                len(accepted),
                n,
            )
        while len(accepted) < n:
            accepted.append(make_draw(rng))

        shuffle_in_place(accepted, rng)
        return tuple(accepted[:n])


@dataclass(frozen=True, slots=True)
class FixedStrategy:
    """Replays the same supplied tickets every period. Consumes no randomness."""

    tickets: tuple[Ticket, ...]

    def generate(self, n: int, rng: Mulberry32) -> tuple[Ticket, ...]:
        return self.tickets[:n]


def build_strategy(player: PlayerConfig, config: RunConfig) -> TicketStrategy:
    if player.strategy == Strategy.QUICK:
        return QuickPickStrategy()
    if player.strategy == Strategy.FILTERED:
        return FilteredStrategy(config.filter_config)
    if player.strategy == Strategy.FIXED:
        if config.fixed_tickets is None:
            raise ValueError(f"Player {player.player_id} uses fixed tickets but none were supplied")
        return FixedStrategy(tuple(config.fixed_tickets))
    raise ValueError(f"Unknown strategy: {player.strategy!r}")
