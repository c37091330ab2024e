import logging
from datetime import datetime, timezone

import pytest

from riichipairing.constants import SEATS
from riichipairing.exceptions import (
    GameAlreadyRecordedException,
    InvalidConfigurationException,
    InvalidGameResultException,
    InvalidPlayerDataException,
    ValidationException,
)
from riichipairing.models.player import FillerFactory, PlayerEntry
from riichipairing.models.tournament import (
    GameResult,
    Pairing,
    SeatAssignment,
    Tournament,
    TournamentConfig,
    default_max_rounds,
)
from riichipairing.utils.adapters import (
    format_datetime,
    game_record_to_dict,
    parse_datetime,
    resolve_player_id,
)
from riichipairing.utils.validation import (
    validate_game_players,
    validate_game_players_strict,
    validate_round_number,
    validate_round_number_strict,
)

from conftest import make_game


class _User:
    def __init__(self, id):
        self.id = id


# ========== Player references ==========


@pytest.mark.parametrize(
    "ref, expected",
    [
        ("abc", "abc"),
        (" abc ", "abc"),
        (42, "42"),
        ({"_id": "64af", "displayName": "Ren"}, "64af"),
        ({"player": {"_id": "64af"}}, "64af"),
        ({"player_id": "p1"}, "p1"),
        (_User("u-9"), "u-9"),
    ],
)
def test_resolve_player_id(ref, expected):
    assert resolve_player_id(ref) == expected


@pytest.mark.parametrize("ref", [None, "", "   ", True, {"name": "x"}, object()])
def test_resolve_player_id_rejects_unusable_refs(ref):
    with pytest.raises(InvalidPlayerDataException):
        resolve_player_id(ref)


# ========== Dates ==========


def test_parse_datetime():
    parsed = parse_datetime("2025-05-01T10:00:00Z")

    assert parsed == datetime(2025, 5, 1, 10, 0, tzinfo=timezone.utc)
    assert parse_datetime(parsed) is parsed
    assert parse_datetime(None) is None
    assert parse_datetime("") is None


def test_unparseable_date_is_logged(caplog):
    with caplog.at_level(logging.WARNING):
        assert parse_datetime("next tuesday") is None
    assert "Could not parse date" in caplog.text


def test_format_datetime():
    assert format_datetime(datetime(2025, 5, 1, tzinfo=timezone.utc)) == "2025-05-01T00:00:00+00:00"
    assert format_datetime(None) is None


# ========== Stored game records ==========


def test_game_record_with_positions_and_populated_players():
    record = {
        "_id": "g-17",
        "verified": True,
        "players": [
            {"player": {"_id": "a"}, "score": 41000, "position": 1},
            {"player": {"_id": "b"}, "score": 31000, "position": 2},
            {"player": "c", "score": 27000, "position": 3},
            {"player_id": "d", "score": 21000, "position": 4},
        ],
    }

    game = GameResult.from_dict(game_record_to_dict(record))

    assert game.game_id == "g-17"
    assert game.verified
    assert game.player_ids == ["a", "b", "c", "d"]
    assert [p.rank for p in game.players] == [1, 2, 3, 4]


# ========== Validation ==========


@pytest.mark.parametrize("value, expected", [(1, 1), ("3", 3), (12, 12)])
def test_valid_round_numbers(value, expected):
    assert validate_round_number_strict(value) == expected


@pytest.mark.parametrize("value", [0, -1, "x", None, True, 2.5j])
def test_invalid_round_numbers(value):
    assert not validate_round_number(value)
    with pytest.raises(ValidationException):
        validate_round_number_strict(value)


def test_game_validation():
    table = ["a", "b", "c", "d"]

    assert validate_game_players(table, make_game(["d", "b", "a", "c"]))
    assert not validate_game_players(table, make_game(["a", "b", "c"]))
    assert not validate_game_players(table, make_game(["a", "a", "b", "c"]))
    assert not validate_game_players(table, make_game(["a", "b", "c", "e"]))

    bad_ranks = make_game(table)
    bad_ranks.players[0].rank = 2
    with pytest.raises(InvalidGameResultException):
        validate_game_players_strict(table, bad_ranks)


# ========== Fillers ==========


def test_filler_factory_reuses_filler_per_player():
    factory = FillerFactory()

    first = factory.filler_for("p1")
    second = factory.filler_for("p2")

    assert first == "filler:drop-0"
    assert second == "filler:drop-1"
    assert factory.filler_for("p1") == first
    assert factory.replaced_player(second) == "p2"
    assert factory.replaced_player("filler:pad-0") is None
    assert FillerFactory.is_filler(first)
    assert not FillerFactory.is_filler("p1")


def test_filler_factory_restores_assignments():
    factory = FillerFactory()
    factory.filler_for("p1")

    restored = FillerFactory.from_dict(factory.to_dict())

    assert restored.filler_for("p1") == "filler:drop-0"
    assert restored.filler_for("p2") == "filler:drop-1"


def test_player_entry_round_trip():
    entry = PlayerEntry(player_id="p1", uma=12.5, qualifying_uma=30.0)

    restored = PlayerEntry.from_dict(entry.to_dict())

    assert restored == entry
    assert restored.is_finalist


# ========== Configuration ==========


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_rounds": 0},
        {"number_of_finals_matches": 0},
        {"max_players": 3},
        {"round_duration_minutes": 0},
        {"pairing_iterations": 0},
    ],
)
def test_invalid_configuration_is_rejected(kwargs):
    with pytest.raises(InvalidConfigurationException):
        Tournament(config=TournamentConfig(**kwargs))


def test_config_round_numbers():
    config = TournamentConfig(max_rounds=4, number_of_finals_matches=2)

    assert config.last_round_number == 6
    assert not config.is_finals_round(4)
    assert config.is_finals_round(5)
    assert TournamentConfig.from_dict(config.to_dict()) == config
    assert TournamentConfig().last_round_number is None


@pytest.mark.parametrize(
    "active_players, expected", [(4, 1), (8, 2), (16, 2), (28, 3), (29, 4), (100, 9)]
)
def test_default_max_rounds(active_players, expected):
    assert default_max_rounds(active_players) == expected


def test_round_expected_end(make_tournament):
    tournament = make_tournament(num_players=8, round_duration_minutes=75)
    round_one = tournament.start()

    assert round_one.expected_end(tournament.config.round_duration_minutes) == datetime(
        2025, 5, 1, 11, 15, tzinfo=timezone.utc
    )


def test_pairing_game_is_write_once():
    pairing = Pairing(
        table_number=1,
        players=[SeatAssignment(player_id=pid, seat=seat) for pid, seat in zip("abcd", SEATS)],
    )
    first = make_game(list("abcd"), "g-1")
    pairing.attach_game(first)

    with pytest.raises(GameAlreadyRecordedException):
        pairing.attach_game(make_game(list("abcd"), "g-2"))
    assert pairing.game is first
