"""Tournament scoring, ranking and progression engine."""

from .models import AppState, Player, WheelEffect, WheelMode
from .services import TournamentService
from .store import TournamentStore

__all__ = [
    "AppState",
    "Player",
    "TournamentService",
    "TournamentStore",
    "WheelEffect",
    "WheelMode",
]
