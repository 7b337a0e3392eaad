"""Market economics: ticket sales and jackpot growth.

Sales for a draw follow

    tickets = alpha * jackpot_millions ** beta(jackpot) * weekday_factor * noise

where ``beta`` steepens for very large jackpots (jackpot fever) and ``noise``
is a mean-one lognormal multiplier. After a draw with no jackpot winner the
pool grows by the jackpot share of sales revenue, less a reserve deduction
that only applies to small pools.
"""

from __future__ import annotations

import math

from .constants import (
    BETA_HIGH,
    BETA_HIGH_FROM_MILLIONS,
    BETA_LOW,
    BETA_LOW_UNTIL_MILLIONS,
    JACKPOT_CONTRIBUTION_RATE,
    MAX_JACKPOT_CASH,
    MIN_JACKPOT_CASH,
    RESERVE_DEDUCTION_MAX,
    RESERVE_FULL_BELOW_MILLIONS,
    RESERVE_NONE_FROM_MILLIONS,
    SALES_ALPHA,
    SALES_NOISE_SIGMA,
    TICKET_PRICE,
    WEEKDAY_SALES_FACTOR,
)
from .rng import Mulberry32, randn


def clamp_jackpot(cash: float) -> float:
    return max(MIN_JACKPOT_CASH, min(MAX_JACKPOT_CASH, float(cash)))


def beta_from_jackpot(cash: float) -> float:
    """Sales elasticity: 1.1 up to $500M, 1.5 from $900M, linear in between."""

    m = cash / 1_000_000
    if m <= BETA_LOW_UNTIL_MILLIONS:
        return BETA_LOW
    if m >= BETA_HIGH_FROM_MILLIONS:
        return BETA_HIGH
    span = BETA_HIGH_FROM_MILLIONS - BETA_LOW_UNTIL_MILLIONS
    return BETA_LOW + ((m - BETA_LOW_UNTIL_MILLIONS) / span) * (BETA_HIGH - BETA_LOW)


def weekday_factor(weekday: int) -> float:
    try:
        return WEEKDAY_SALES_FACTOR[weekday]
    except KeyError as e:
        raise ValueError(f"Weekday {weekday} is not a draw day") from e


def lognormal_noise(rng: Mulberry32, *, sigma: float = SALES_NOISE_SIGMA) -> float:
    """Mean-one lognormal multiplier (consumes two draws)."""

    z = randn(rng)
    return math.exp(z * sigma - 0.5 * sigma * sigma)


def tickets_sold(cash: float, weekday: int, rng: Mulberry32) -> int:
    """Market ticket volume for one draw."""

    jackpot_millions = cash / 1_000_000
    beta = beta_from_jackpot(cash)
    noise = lognormal_noise(rng)
    volume = SALES_ALPHA * math.pow(jackpot_millions, beta) * weekday_factor(weekday) * noise
    # Round half up.
    return max(0, math.floor(volume + 0.5))


def reserve_deduction_rate(cash: float) -> float:
    """Share of the jackpot contribution withheld for prize reserves.

    5% below $50M, nothing from $200M, linear in between.
    """

    m = cash / 1_000_000
    if m < RESERVE_FULL_BELOW_MILLIONS:
        return RESERVE_DEDUCTION_MAX
    if m >= RESERVE_NONE_FROM_MILLIONS:
        return 0.0
    span = RESERVE_NONE_FROM_MILLIONS - RESERVE_FULL_BELOW_MILLIONS
    return RESERVE_DEDUCTION_MAX * (1 - (m - RESERVE_FULL_BELOW_MILLIONS) / span)


def grow_jackpot(cash: float, tickets: int) -> float:
    """Pool value for the next draw after a draw with no jackpot winner."""

    sales_revenue = tickets * TICKET_PRICE
    contribution = sales_revenue * JACKPOT_CONTRIBUTION_RATE
    increment = contribution * (1 - reserve_deduction_rate(cash))
    return clamp_jackpot(cash + increment)
