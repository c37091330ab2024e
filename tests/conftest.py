from datetime import datetime, timezone

import pytest

from riichipairing.models.tournament import (
    GamePlayerResult,
    GameResult,
    Tournament,
    TournamentConfig,
)

FIXED_NOW = datetime(2025, 5, 1, 10, 0, tzinfo=timezone.utc)

# Scores by slot; slot 0 wins. Sums to four 30,000 stacks.
SLOT_SCORES = (40000, 32000, 28000, 20000)


def fixed_clock():
    return FIXED_NOW


def make_game(player_ids, game_id=None, verified=False):
    return GameResult(
        game_id=game_id,
        players=[
            GamePlayerResult(player_id=pid, score=score, rank=slot + 1)
            for slot, (pid, score) in enumerate(zip(player_ids, SLOT_SCORES))
        ],
        verified=verified,
    )


@pytest.fixture
def make_tournament():
    """Factory for a seeded tournament with ``num_players`` signups p1..pN."""

    def _make(num_players=8, seed=1, notifier=None, **config_kwargs):
        config_kwargs.setdefault("pairing_iterations", 500)
        tournament = Tournament(
            config=TournamentConfig(**config_kwargs),
            tournament_id="t-1",
            rng=seed,
            clock=fixed_clock,
            notifier=notifier,
        )
        for i in range(num_players):
            tournament.signup(f"p{i + 1}")
        return tournament

    return _make


@pytest.fixture
def play_round():
    """Record and verify a game at every table of a round that needs one."""

    def _play(tournament, round_number):
        round_data = tournament.get_round(round_number)
        for pairing in round_data.pairings:
            if pairing.is_all_filler or pairing.has_game:
                continue
            tournament.record_game(
                round_number,
                pairing.table_number,
                make_game(pairing.player_ids, f"g-{round_number}-{pairing.table_number}"),
            )
            tournament.verify_game(round_number, pairing.table_number)
        return round_data

    return _play


class RecordingNotifier:
    """Collects notifications synchronously."""

    def __init__(self):
        self.sent = []

    def notify(self, notification):
        self.sent.append(notification)

    def shutdown(self, wait=True):
        pass


@pytest.fixture
def recording_notifier():
    return RecordingNotifier()


@pytest.fixture
def game_factory():
    return make_game
