from riichipairing.models.player.filler import FillerFactory
from riichipairing.models.player.player_entry import (
    PlayerEntry,
    UmaPenalty,
    WaitlistEntry,
)

__all__ = [
    "PlayerEntry",
    "WaitlistEntry",
    "UmaPenalty",
    "FillerFactory",
]
