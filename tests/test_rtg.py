import json
import random

import pytest

from riichipairing.models.tournament import RoundData
from riichipairing.pairing import assign_seats
from riichipairing.testing import (
    RandomTournamentGenerator,
    RTGConfig,
    ScorePattern,
    rematch_metrics,
)
from riichipairing.testing.__main__ import COMMANDS, create_completer, main
from riichipairing.testing.rtg import (
    ResultSimulator,
    create_large_tournament,
    create_small_tournament,
)


def _pairings(round_data):
    return [[seat["player_id"] for seat in p["players"]] for p in round_data["pairings"]]


@pytest.mark.parametrize("pattern", list(ScorePattern))
def test_simulated_games_are_consistent(pattern):
    config = RTGConfig(num_players=4, score_pattern=pattern)
    simulator = ResultSimulator(config, random.Random(3))
    skills = {"a": 1.5, "b": 0.0, "c": -0.5, "d": -1.0}

    for _ in range(50):
        game = simulator.simulate_game(["a", "b", "c", "d"], skills)
        scores = [p.score for p in game.players]

        assert sum(scores) == 4 * config.starting_point_value
        assert all(score % 100 == 0 for score in scores)
        assert sorted(p.rank for p in game.players) == [1, 2, 3, 4]
        by_rank = sorted(game.players, key=lambda p: p.rank)
        assert [p.score for p in by_rank] == sorted(scores, reverse=True)


def test_small_tournament_completes():
    config = create_small_tournament(seed=7)
    config.pairing_iterations = 300

    data = RandomTournamentGenerator(config).generate_complete_tournament()

    assert data["tournament"]["state"] == "Completed"
    assert len(data["final_standings"]) == 4
    assert len(data["tournament"]["rounds"]) == 3
    assert data["warnings"] == []
    assert all(report["valid"] for report in data["round_reports"])
    json.loads(RandomTournamentGenerator.export_json_format(data))


def test_generator_is_reproducible():
    config = RTGConfig(num_players=12, max_rounds=3, seed=21, pairing_iterations=300)

    first = RandomTournamentGenerator(config).generate_complete_tournament()
    second = RandomTournamentGenerator(config).generate_complete_tournament()

    assert first["final_standings"] == second["final_standings"]
    assert [_pairings(r) for r in first["tournament"]["rounds"]] == [
        _pairings(r) for r in second["tournament"]["rounds"]
    ]


def test_drops_and_late_signups():
    config = RTGConfig(
        num_players=24,
        max_rounds=3,
        drop_rate=0.1,
        late_signups=4,
        seed=11,
        pairing_iterations=300,
    )

    data = RandomTournamentGenerator(config).generate_complete_tournament()

    assert data["tournament"]["state"] == "Completed"
    assert all(report["valid"] for report in data["round_reports"])
    assert len(data["final_standings"]) == 4


def test_large_tournament_uses_wheel_without_rematches():
    config = create_large_tournament(seed=5)

    data = RandomTournamentGenerator(config).generate_complete_tournament()

    assert data["tournament"]["state"] == "Completed"
    assert data["metrics"]["repeat_pairs"] == 0
    assert data["metrics"]["max_meetings"] == 1
    assert data["metrics"]["pairs_met"] == 64 * 3 * 4 // 2


def test_rematch_metrics_ignore_fillers_and_finals():
    rng = random.Random(0)
    rounds = [
        RoundData(
            round_number=1,
            pairings=assign_seats([["a", "b", "c", "filler:pad-0"]], rng),
        ),
        RoundData(
            round_number=2,
            pairings=assign_seats([["a", "b", "d", "filler:pad-0"]], rng),
        ),
        RoundData(
            round_number=3,
            stage="finals",
            pairings=assign_seats([["a", "b", "c", "d"]], rng),
        ),
    ]

    metrics = rematch_metrics(rounds)

    assert metrics == {
        "pairs_met": 5,
        "meetings": 6,
        "repeat_pairs": 1,
        "max_meetings": 2,
    }


# ========== CLI ==========


def test_cli_generate_then_validate(tmp_path, capsys):
    output = tmp_path / "tournament.json"

    code = main(
        [
            "generate",
            "--players",
            "8",
            "--rounds",
            "1",
            "--seed",
            "3",
            "--iterations",
            "200",
            "--output",
            str(output),
        ]
    )

    assert code == 0
    assert output.exists()
    assert "Tournament Simulated" in capsys.readouterr().out

    code = main(["validate", "--file", str(output), "--detailed"])

    assert code == 0
    assert "2 rounds checked, 0 with structural errors" in capsys.readouterr().out


def test_cli_validate_missing_file(tmp_path, capsys):
    code = main(["validate", "--file", str(tmp_path / "missing.json")])

    assert code == 1
    assert "File not found" in capsys.readouterr().out


def test_completer_offers_commands_with_and_without_slash():
    options = create_completer().options

    for command in COMMANDS:
        assert command in options
        assert f"/{command}" in options
    assert "/help" in options
