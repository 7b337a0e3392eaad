"""Seeded random-number and probability primitives.

Every stochastic decision in a run is drawn from a single :class:`Mulberry32`
stream. The helpers below consume one or more ``random()`` calls each, always
in the same order, so identical seeds give identical runs.

The generator's state is a plain 32-bit integer exposed as ``.state``; the run
loop stores it on its threaded state object and rebuilds the generator for
each period.
"""

from __future__ import annotations

import math
from typing import Sequence, TypeVar

from .constants import UINT32_MASK

T = TypeVar("T")

_GOLDEN_GAMMA = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0
_POISSON_CHUNK = 500.0


def _imul(a: int, b: int) -> int:
    """32-bit integer multiply (low 32 bits, unsigned)."""

    return (a * b) & UINT32_MASK


class Mulberry32:
    """Mulberry32 generator producing floats in ``[0, 1)``."""

    __slots__ = ("state",)

    def __init__(self, seed: int) -> None:
        self.state = int(seed) & UINT32_MASK

    def random(self) -> float:
        self.state = (self.state + _GOLDEN_GAMMA) & UINT32_MASK
        t = self.state
        r = _imul(t ^ (t >> 15), 1 | t)
        r = (r ^ ((r + _imul(r ^ (r >> 7), 61 | r)) & UINT32_MASK)) & UINT32_MASK
        return ((r ^ (r >> 14)) & UINT32_MASK) / _TWO_POW_32

    def randint(self, n: int) -> int:
        """Uniform integer in ``[1, n]`` using one draw."""

        return 1 + math.floor(self.random() * n)


def derive_seed(seed: int, salt: int) -> int:
    """Derive an independent 32-bit seed from ``seed``."""

    return (int(seed) ^ int(salt)) & UINT32_MASK


def randn(rng: Mulberry32) -> float:
    """Standard normal deviate via Box-Muller (two draws)."""

    u1 = max(rng.random(), 1e-12)
    u2 = rng.random()
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def _knuth_poisson(lam: float, rng: Mulberry32) -> int:
    threshold = math.exp(-lam)
    k = 0
    p = 1.0
    while True:
        k += 1
        p *= rng.random()
        if p <= threshold:
            return k - 1


def poisson(lam: float, rng: Mulberry32) -> int:
    """Poisson count by Knuth's multiplication method.

    ``exp(-lam)`` underflows past roughly 745, so larger means are split into
    chunks of at most ``_POISSON_CHUNK`` whose independent counts are summed,
    always in the same order.
    """

    if lam < 0:
        raise ValueError("lam must be >= 0")

    k = 0
    while lam > _POISSON_CHUNK:
        k += _knuth_poisson(_POISSON_CHUNK, rng)
        lam -= _POISSON_CHUNK
    return k + _knuth_poisson(lam, rng)


def pick_weighted(rng: Mulberry32, items: Sequence[tuple[T, int]]) -> T:
    """Categorical choice over ``(value, integer_weight)`` pairs (one draw)."""

    if not items:
        raise ValueError("items must be non-empty")

    total = sum(w for _, w in items)
    r = math.floor(rng.random() * total) + 1
    for value, weight in items:
        r -= weight
        if r <= 0:
            return value
    return items[0][0]


def pick_k_distinct(n: int, k: int, rng: Mulberry32) -> tuple[int, ...]:
    """Sample ``k`` distinct integers from ``[1, n]``, returned ascending.

    Rejection sampling: duplicates are redrawn, so the number of draws consumed
    varies but is fully determined by the stream.
    """

    if k > n:
        raise ValueError(f"Cannot pick {k} distinct values from {n}")

    picked: set[int] = set()
    while len(picked) < k:
        picked.add(rng.randint(n))
    return tuple(sorted(picked))


def shuffle_in_place(items: list[T], rng: Mulberry32) -> None:
    """Fisher-Yates shuffle walking from the end of the list."""

    for i in range(len(items) - 1, 0, -1):
        j = math.floor(rng.random() * (i + 1))
        items[i], items[j] = items[j], items[i]
