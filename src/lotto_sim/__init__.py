"""Draw-by-draw Powerball simulation.

A shared jackpot pool is grown by market ticket sales; a handful of players
buy tickets under different strategies and track a cash balance. Runs are
exactly reproducible from their seed, and every ticket carries the same
jackpot probability regardless of strategy.

The engine produces three artifacts consumed by reporting code: the per-draw
snapshot sequence, the event list and the run summary (plus a decimated chart
series). See :func:`run_simulation`.
"""

from .data import (
    AddonMode,
    ChartPoint,
    Draw,
    Event,
    EventCategory,
    FilterConfig,
    PeriodSnapshot,
    PlayerConfig,
    PlayerState,
    PrizeTier,
    RunConfig,
    RunResult,
    RunSummary,
    Strategy,
    Ticket,
)
from .io import build_run_config, load_run_config_from_json, parse_fixed_tickets
from .simulate import SimulationCancelled, advance_period, run_simulation, start_run

__all__ = [
    "AddonMode",
    "ChartPoint",
    "Draw",
    "Event",
    "EventCategory",
    "FilterConfig",
    "PeriodSnapshot",
    "PlayerConfig",
    "PlayerState",
    "PrizeTier",
    "RunConfig",
    "RunResult",
    "RunSummary",
    "SimulationCancelled",
    "Strategy",
    "Ticket",
    "advance_period",
    "build_run_config",
    "load_run_config_from_json",
    "parse_fixed_tickets",
    "run_simulation",
    "start_run",
]
