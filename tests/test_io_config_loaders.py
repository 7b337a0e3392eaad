from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path

import pytest

from lotto_sim.constants import MAX_PLAYERS
from lotto_sim.data import AddonMode, PlayerConfig, Strategy, Ticket
from lotto_sim.io import (
    build_filter_config,
    build_run_config,
    default_fixed_tickets,
    load_run_config_from_json,
    parse_addon_mode_str,
    parse_fixed_tickets,
    parse_players,
    parse_strategy_str,
)

VALID_LINE = "3 11 19 42 65 | 7"


def test_parse_fixed_tickets_accepts_five_valid_lines() -> None:
    tickets = parse_fixed_tickets("\n".join([VALID_LINE] * 5))
    assert len(tickets) == 5
    assert tickets[0] == Ticket(white=(3, 11, 19, 42, 65), powerball=7)


def test_parse_fixed_tickets_sorts_white_numbers_and_skips_blank_lines() -> None:
    text = "\n\n65 42 19 11 3 | 7\n\n" + "\n".join([VALID_LINE] * 4) + "\n"
    tickets = parse_fixed_tickets(text)
    assert tickets[0].white == (3, 11, 19, 42, 65)


def test_parse_fixed_tickets_rejects_four_lines() -> None:
    with pytest.raises(ValueError, match="exactly 5"):
        parse_fixed_tickets("\n".join([VALID_LINE] * 4))


def test_parse_fixed_tickets_rejects_duplicate_white_numbers() -> None:
    lines = [VALID_LINE] * 4 + ["3 3 19 42 65 | 7"]
    with pytest.raises(ValueError, match="line 5"):
        parse_fixed_tickets("\n".join(lines))


@pytest.mark.parametrize(
    "bad_line",
    [
        "3 11 19 42 70 | 7",
        "3 11 19 42 65 | 27",
        "3 11 19 42 | 7",
        "3 11 19 42 65 7",
        "3 11 x 42 65 | 7",
    ],
)
def test_parse_fixed_tickets_rejects_malformed_line(bad_line: str) -> None:
    with pytest.raises(ValueError):
        parse_fixed_tickets("\n".join([bad_line] + [VALID_LINE] * 4))


def test_parse_fixed_tickets_only_reads_first_five_lines() -> None:
    text = "\n".join([VALID_LINE] * 5 + ["garbage"])
    assert len(parse_fixed_tickets(text)) == 5


def test_parse_strategy_str_aliases() -> None:
    assert parse_strategy_str("Quick_Pick") == Strategy.QUICK
    assert parse_strategy_str("qp") == Strategy.QUICK
    assert parse_strategy_str("logic") == Strategy.FILTERED
    assert parse_strategy_str("fixed") == Strategy.FIXED
    assert parse_strategy_str("off") is None
    with pytest.raises(ValueError):
        parse_strategy_str("martingale")


def test_parse_addon_mode_str_aliases() -> None:
    assert parse_addon_mode_str("PP") == AddonMode.POWER_PLAY
    assert parse_addon_mode_str("double-play") == AddonMode.DOUBLE_PLAY
    assert parse_addon_mode_str("") == AddonMode.NONE
    with pytest.raises(ValueError):
        parse_addon_mode_str("megaplier")


def test_parse_players_off_strategy_disables_player() -> None:
    players = parse_players([{"id": "A", "strategy": "quick"}, {"id": "B", "strategy": "off"}])
    assert players[0].enabled
    assert not players[1].enabled
    assert players[1].name == "Player B"


def test_build_filter_config_clamps_and_swaps() -> None:
    cfg = build_filter_config({"sum_min": 400, "min_sectors": 9, "pool_init": 1, "pool_max": 10**6})
    assert (cfg.sum_min, cfg.sum_max) == (220, 345)
    assert (cfg.min_sectors, cfg.max_sectors) == (4, 7)
    assert cfg.pool_init == 100
    assert cfg.pool_max == 50_000


def test_build_run_config_clamps_numeric_inputs() -> None:
    config = build_run_config(years=500, seed=-1, start_jackpot_cash=1.0)
    assert config.years == 100
    assert config.seed == 0xFFFFFFFF
    assert config.start_jackpot_cash == 20_000_000

    config = build_run_config(years=0, start_jackpot_cash=1e12)
    assert config.years == 1
    assert config.start_jackpot_cash == 2_000_000_000


def test_build_run_config_defaults() -> None:
    config = build_run_config()
    assert config.addon_mode == AddonMode.NONE
    assert config.start_date == date(2026, 1, 3)
    assert [(p.player_id, p.strategy, p.enabled) for p in config.players] == [
        ("A", Strategy.QUICK, True),
        ("B", Strategy.FILTERED, True),
        ("C", Strategy.FIXED, True),
        ("D", Strategy.QUICK, False),
        ("E", Strategy.QUICK, False),
    ]
    assert config.fixed_tickets == default_fixed_tickets(0)


def test_default_fixed_tickets_depend_only_on_seed() -> None:
    assert default_fixed_tickets(123) == default_fixed_tickets(123)
    assert default_fixed_tickets(123) != default_fixed_tickets(124)
    assert len(default_fixed_tickets(123)) == 5


def test_build_run_config_two_fixed_players_is_an_error() -> None:
    players = [
        PlayerConfig(player_id="A", name="A", strategy=Strategy.FIXED),
        PlayerConfig(player_id="B", name="B", strategy=Strategy.FIXED),
    ]
    with pytest.raises(ValueError, match="Only one player"):
        build_run_config(players=players)


def test_build_run_config_without_enabled_players_falls_back_to_quick_player(
    caplog: pytest.LogCaptureFixture,
) -> None:
    players = [PlayerConfig(player_id="B", name="B", strategy=Strategy.FILTERED, enabled=False)]
    with caplog.at_level(logging.WARNING, logger="lotto_sim.io"):
        config = build_run_config(players=players)

    assert [(p.player_id, p.strategy) for p in config.enabled_players] == [("A", Strategy.QUICK)]
    assert "No enabled players" in caplog.text


def test_build_run_config_keeps_first_five_enabled_players() -> None:
    players = [PlayerConfig(player_id=f"P{i}", name=f"P{i}", strategy=Strategy.QUICK) for i in range(MAX_PLAYERS + 2)]
    config = build_run_config(players=players)
    assert [p.player_id for p in config.enabled_players] == ["P0", "P1", "P2", "P3", "P4"]


def test_load_run_config_from_json(tmp_path: Path) -> None:
    p = tmp_path / "config.json"
    p.write_text(
        json.dumps(
            {
                "years": 3,
                "addon_mode": "power_play",
                "seed": 42,
                "start_jackpot_cash": 150_000_000,
                "start_date": "2026-02-02",
                "players": [
                    {"id": "A", "strategy": "quick"},
                    {"id": "B", "name": "Filter fan", "strategy": "filtered"},
                    {"id": "C", "strategy": "fixed"},
                ],
                "filter": {"sum_min": 100, "sum_max": 250},
                "fixed_tickets": [VALID_LINE] * 5,
            }
        ),
        encoding="utf-8",
    )

    config = load_run_config_from_json(p)

    assert config.years == 3
    assert config.addon_mode == AddonMode.POWER_PLAY
    assert config.seed == 42
    assert config.start_jackpot_cash == 150_000_000
    assert config.start_date == date(2026, 2, 2)
    assert [p.name for p in config.players] == ["Player A", "Filter fan", "Player C"]
    assert (config.filter_config.sum_min, config.filter_config.sum_max) == (100, 250)
    assert config.fixed_tickets is not None
    assert config.fixed_tickets[0] == Ticket(white=(3, 11, 19, 42, 65), powerball=7)


def test_load_run_config_reads_fixed_tickets_file_relative_to_config(tmp_path: Path) -> None:
    (tmp_path / "tickets.txt").write_text("\n".join([VALID_LINE] * 5), encoding="utf-8")
    p = tmp_path / "config.json"
    p.write_text(json.dumps({"years": 1, "fixed_tickets_file": "tickets.txt"}), encoding="utf-8")

    config = load_run_config_from_json(p)
    assert config.fixed_tickets == parse_fixed_tickets("\n".join([VALID_LINE] * 5))


def test_load_run_config_rejects_non_object(tmp_path: Path) -> None:
    p = tmp_path / "config.json"
    p.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(ValueError, match="JSON object"):
        load_run_config_from_json(p)


def test_repo_sample_config_loads() -> None:
    path = Path(__file__).resolve().parents[1] / "data" / "run_config.json"
    config = load_run_config_from_json(path)
    assert config.fixed_tickets is not None
    assert str(config.fixed_tickets[0]) == VALID_LINE
