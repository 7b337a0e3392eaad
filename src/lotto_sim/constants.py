"""Project-wide constants for :mod:`lotto_sim`.

This module keeps the game rules, prize schedules and the default economic /
narrative assumptions in one place. Values follow the current Powerball
matrix (5 of 69 white balls, 1 of 26 powerballs).
"""

from __future__ import annotations

from datetime import date
from typing import Mapping

# --- Game matrix ---

WHITE_MAX: int = 69
WHITE_PICK: int = 5
POWERBALL_MAX: int = 26

# comb(69, 5) * 26
COMBINATIONS: int = 292_201_338

# --- Ticket pricing ---

TICKET_PRICE: int = 2
ADDON_PRICE: int = 1
MAX_TICKETS_PER_PERIOD: int = 5
MAX_PLAYERS: int = 5
STARTING_BALANCE: float = 100_000.0

# --- Jackpot pool ---

MIN_JACKPOT_CASH: float = 20_000_000.0
MAX_JACKPOT_CASH: float = 2_000_000_000.0
JACKPOT_CONTRIBUTION_RATE: float = 0.340066

# --- Sales model ---

SALES_ALPHA: float = 10_000_000.0
SALES_NOISE_SIGMA: float = 0.182

BETA_LOW: float = 1.1
BETA_HIGH: float = 1.5
BETA_LOW_UNTIL_MILLIONS: float = 500.0
BETA_HIGH_FROM_MILLIONS: float = 900.0

RESERVE_DEDUCTION_MAX: float = 0.05
RESERVE_FULL_BELOW_MILLIONS: float = 50.0
RESERVE_NONE_FROM_MILLIONS: float = 200.0

# Market-only ticket efficiency is drawn once per run in [BASE, BASE + SPREAD).
MARKET_EFFICIENCY_BASE: float = 0.95
MARKET_EFFICIENCY_SPREAD: float = 0.02

# --- Calendar ---

# Python weekday numbers (Monday == 0) for the three weekly draws.
MONDAY: int = 0
WEDNESDAY: int = 2
SATURDAY: int = 5
DRAW_WEEKDAYS: tuple[int, ...] = (MONDAY, WEDNESDAY, SATURDAY)

WEEKDAY_SALES_FACTOR: Mapping[int, float] = {
    MONDAY: 0.85,
    WEDNESDAY: 1.0,
    SATURDAY: 1.3,
}

PERIODS_PER_WEEK: int = 3
PERIODS_PER_YEAR: int = 156
MIN_YEARS: int = 1
MAX_YEARS: int = 100

DEFAULT_START_DATE: date = date(2026, 1, 3)

# --- Prize tables (cash; the main-game jackpot is paid from the shared pool) ---

MAIN_PRIZES: Mapping[str, int] = {
    "5+PB": 0,
    "5+0": 1_000_000,
    "4+PB": 50_000,
    "4+0": 100,
    "3+PB": 100,
    "3+0": 7,
    "2+PB": 7,
    "1+PB": 4,
    "0+PB": 4,
}

DOUBLE_PLAY_PRIZES: Mapping[str, int] = {
    "5+PB": 10_000_000,
    "5+0": 500_000,
    "4+PB": 50_000,
    "4+0": 500,
    "3+PB": 500,
    "3+0": 20,
    "2+PB": 20,
    "1+PB": 10,
    "0+PB": 7,
}

POWER_PLAY_FIVE_PRIZE: int = 2_000_000

# (multiplier, weight); no 10x ball.
POWER_PLAY_WHEEL: tuple[tuple[int, int], ...] = (
    (2, 24),
    (3, 13),
    (4, 3),
    (5, 2),
)

# --- Seeds ---

FIXED_TICKET_SEED_SALT: int = 0xA5A5F00D
UINT32_MASK: int = 0xFFFFFFFF

# --- Narrative thresholds ---

HIT_PROBABILITY_THRESHOLDS: tuple[float, ...] = (0.05, 0.10, 0.15)
DRY_SPELL_PERIODS: int = 60
LONG_ROLL_PERIODS: int = 80

CHART_POINT_EVERY: int = 10
SUMMARY_EVENT_LIMIT: int = 200

# --- Filtered strategy defaults and slider bounds ---

DEFAULT_SUM_MIN: int = 130
DEFAULT_SUM_MAX: int = 220
DEFAULT_SMALL_MAX: int = 34
DEFAULT_MAX_CONSECUTIVE_PAIRS: int = 1
DEFAULT_MIN_SECTORS: int = 2
DEFAULT_MAX_SECTORS: int = 4
DEFAULT_MAX_TAIL_PAIRS: int = 1
DEFAULT_POOL_INIT: int = 500
DEFAULT_POOL_MAX: int = 20_000

SUM_BOUNDS: tuple[int, int] = (5, 345)
SMALL_MAX_BOUNDS: tuple[int, int] = (10, 59)
CONSECUTIVE_PAIR_BOUNDS: tuple[int, int] = (0, 4)
SECTOR_BOUNDS: tuple[int, int] = (1, 7)
TAIL_PAIR_BOUNDS: tuple[int, int] = (0, 4)
POOL_INIT_BOUNDS: tuple[int, int] = (100, 5_000)
POOL_MAX_BOUNDS: tuple[int, int] = (1_000, 50_000)

SECTOR_COUNT: int = 7
