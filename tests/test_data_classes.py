from __future__ import annotations

import pytest

from lotto_sim.constants import MAX_PLAYERS
from lotto_sim.data import AddonMode, FilterConfig, JackpotState, PlayerConfig, RunConfig, Strategy, Ticket


def _tickets() -> tuple[Ticket, ...]:
    return tuple(Ticket(white=(i, i + 10, i + 20, i + 30, i + 40), powerball=i) for i in range(1, 6))


def test_ticket_str() -> None:
    assert str(Ticket(white=(3, 11, 19, 42, 65), powerball=7)) == "3 11 19 42 65 | 7"


@pytest.mark.parametrize(
    "white, powerball",
    [
        ((1, 2, 3, 4), 1),
        ((1, 2, 3, 4, 4), 1),
        ((1, 2, 3, 4, 70), 1),
        ((0, 2, 3, 4, 5), 1),
        ((5, 4, 3, 2, 1), 1),
        ((1, 2, 3, 4, 5), 0),
        ((1, 2, 3, 4, 5), 27),
    ],
)
def test_ticket_rejects_invalid_numbers(white: tuple[int, ...], powerball: int) -> None:
    with pytest.raises(ValueError):
        Ticket(white=white, powerball=powerball)


def test_filter_config_rejects_inverted_ranges() -> None:
    with pytest.raises(ValueError):
        FilterConfig(sum_min=200, sum_max=100)
    with pytest.raises(ValueError):
        FilterConfig(min_sectors=5, max_sectors=3)


def test_jackpot_state_enforces_range() -> None:
    JackpotState(cash=20_000_000)
    with pytest.raises(ValueError):
        JackpotState(cash=19_999_999)
    with pytest.raises(ValueError):
        JackpotState(cash=2_000_000_001)


def test_run_config_rejects_two_fixed_players() -> None:
    players = (
        PlayerConfig(player_id="A", name="A", strategy=Strategy.FIXED),
        PlayerConfig(player_id="B", name="B", strategy=Strategy.FIXED),
    )
    with pytest.raises(ValueError, match="Only one player can use fixed tickets"):
        RunConfig(
            years=1,
            addon_mode=AddonMode.NONE,
            seed=1,
            start_jackpot_cash=20_000_000,
            players=players,
            fixed_tickets=_tickets(),
        )


def test_run_config_allows_two_fixed_players_if_one_is_disabled() -> None:
    players = (
        PlayerConfig(player_id="A", name="A", strategy=Strategy.FIXED),
        PlayerConfig(player_id="B", name="B", strategy=Strategy.FIXED, enabled=False),
    )
    config = RunConfig(
        years=1,
        addon_mode=AddonMode.NONE,
        seed=1,
        start_jackpot_cash=20_000_000,
        players=players,
        fixed_tickets=_tickets(),
    )
    assert [p.player_id for p in config.enabled_players] == ["A"]


def test_run_config_fixed_player_requires_five_tickets() -> None:
    with pytest.raises(ValueError, match="exactly 5"):
        RunConfig(
            years=1,
            addon_mode=AddonMode.NONE,
            seed=1,
            start_jackpot_cash=20_000_000,
            players=(PlayerConfig(player_id="A", name="A", strategy=Strategy.FIXED),),
            fixed_tickets=_tickets()[:4],
        )


def test_run_config_rejects_duplicate_ids_and_empty_roster() -> None:
    with pytest.raises(ValueError, match="Duplicate"):
        RunConfig(
            years=1,
            addon_mode=AddonMode.NONE,
            seed=1,
            start_jackpot_cash=20_000_000,
            players=(
                PlayerConfig(player_id="A", name="A", strategy=Strategy.QUICK),
                PlayerConfig(player_id="A", name="A2", strategy=Strategy.QUICK),
            ),
        )
    with pytest.raises(ValueError, match="at least one enabled"):
        RunConfig(
            years=1,
            addon_mode=AddonMode.NONE,
            seed=1,
            start_jackpot_cash=20_000_000,
            players=(PlayerConfig(player_id="A", name="A", strategy=Strategy.QUICK, enabled=False),),
        )


def test_run_config_rejects_out_of_range_years() -> None:
    with pytest.raises(ValueError):
        RunConfig(
            years=101,
            addon_mode=AddonMode.NONE,
            seed=1,
            start_jackpot_cash=20_000_000,
            players=(PlayerConfig(player_id="A", name="A", strategy=Strategy.QUICK),),
        )


def test_run_config_caps_enabled_players_independently_of_ticket_limit() -> None:
    players = tuple(PlayerConfig(player_id=f"P{i}", name=f"P{i}", strategy=Strategy.QUICK) for i in range(MAX_PLAYERS + 1))
    with pytest.raises(ValueError, match=f"at most {MAX_PLAYERS} enabled players"):
        RunConfig(
            years=1,
            addon_mode=AddonMode.NONE,
            seed=1,
            start_jackpot_cash=20_000_000,
            players=players,
        )
