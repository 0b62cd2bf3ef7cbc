"""Data models for the tournament engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypedDict

from xfive.core.types import FirestoreDocument


class WheelEffect(TypedDict):
    """A scoring modifier handed out by the wheel."""

    type: str  # REVERSE/DOUBLE/BOOM
    value: float
    desc: str


class Player(FirestoreDocument, total=False):
    """A player document in Firestore."""

    name: str
    nick: str | None
    room: str
    scores: list[int]
    totalScore: int
    status: str  # active/qualified/eliminated
    wheelEffect: WheelEffect | None


class WheelMode(FirestoreDocument, total=False):
    """A gameplay variant that can be assigned to a room."""

    name: str
    description: str


class AppState(TypedDict, total=False):
    """The singleton tournament settings document."""

    stage: str
    activeRoomViewer: str
    activeRoomModes: dict[str, str]


@dataclass
class WheelResult:
    """Outcome of a single wheel spin in a room."""

    room: str
    lucky_player_id: str
    effect: WheelEffect
    reverse_player_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "room": self.room,
            "luckyPlayerId": self.lucky_player_id,
            "effect": self.effect,
            "reversePlayerId": self.reverse_player_id,
        }


@dataclass
class ProgressionResult:
    """Players moved by a bulk progression action."""

    qualified: list[str] = field(default_factory=list)
    eliminated: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"qualified": self.qualified, "eliminated": self.eliminated}


@dataclass
class TournamentSnapshot:
    """A full point-in-time view of the tournament."""

    players: list[Player]
    app_state: AppState

    def to_dict(self) -> dict[str, Any]:
        return {"players": self.players, "appState": self.app_state}
