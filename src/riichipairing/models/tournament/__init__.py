from riichipairing.models.tournament.game_result import GamePlayerResult, GameResult
from riichipairing.models.tournament.pairing_history import (
    PairingHistory,
    build_opponent_history,
)
from riichipairing.models.tournament.round_data import (
    Pairing,
    RoundData,
    SeatAssignment,
)
from riichipairing.models.tournament.tournament_config import (
    TournamentConfig,
    default_max_rounds,
)
from riichipairing.models.tournament.tournament import EndRoundResult, Tournament

__all__ = [
    "GamePlayerResult",
    "GameResult",
    "PairingHistory",
    "build_opponent_history",
    "Pairing",
    "RoundData",
    "SeatAssignment",
    "TournamentConfig",
    "default_max_rounds",
    "EndRoundResult",
    "Tournament",
]
