"""Scoring and ranking helpers for the tournament engine."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from xfive.core.constants import (
    CHAMPION_COUNT,
    EFFECT_BOOM,
    EFFECT_DOUBLE,
    FINAL_ROOM,
    QUALIFIER_ADVANCE_COUNT,
    SEMIFINAL_ADVANCE_COUNT,
    SEMIFINAL_ROOMS,
)


def calculate_total(
    scores: Sequence[float | None], wheel_effect: Mapping[str, Any] | None = None
) -> int:
    """Compute a player's effective total from raw game scores and a wheel effect.

    BOOM multiplies the raw sum and floors the result. DOUBLE counts the best
    game twice. REVERSE and NONE leave the raw sum untouched.
    """
    values = [s or 0 for s in scores]
    raw = sum(values)
    effect_type = wheel_effect.get("type") if wheel_effect else None

    if effect_type == EFFECT_BOOM:
        value = wheel_effect.get("value", 1)  # type: ignore[union-attr]
        if value != 1:
            return math.floor(raw * value)
    elif effect_type == EFFECT_DOUBLE and values:
        return math.floor(raw + max(values))
    return math.floor(raw)


def player_total(player: Mapping[str, Any]) -> int:
    """Compute the effective total for a player document."""
    return calculate_total(player.get("scores") or [], player.get("wheelEffect"))


def rank_room(players: Iterable[Mapping[str, Any]], room: str) -> list[Any]:
    """Return the players of a room, best effective total first.

    Ties keep their order from the input snapshot.
    """
    room_players = [p for p in players if p.get("room") == room]
    return sorted(room_players, key=player_total, reverse=True)


def qualify_count(room: str) -> int:
    """Number of top-ranked players shown above the cut line for a room.

    The final crowns a single champion.
    """
    if room == FINAL_ROOM:
        return CHAMPION_COUNT
    if room in SEMIFINAL_ROOMS:
        return SEMIFINAL_ADVANCE_COUNT
    return QUALIFIER_ADVANCE_COUNT


def build_leaderboard(
    players: Iterable[Mapping[str, Any]], room: str
) -> list[dict[str, Any]]:
    """Convert a room ranking into leaderboard rows for display."""
    cut = qualify_count(room)
    rows = []
    for index, player in enumerate(rank_room(players, room)):
        rows.append({
            "rank": index + 1,
            "id": player.get("id"),
            "name": player.get("name"),
            "nick": player.get("nick"),
            "scores": list(player.get("scores") or []),
            "total": player_total(player),
            "status": player.get("status"),
            "wheelEffect": player.get("wheelEffect"),
            "qualifying": index < cut,
        })
    return rows


def set_game_score(scores: Sequence[int], game_index: int, score: int) -> list[int]:
    """Return a copy of ``scores`` with ``game_index`` set, padding gaps with 0."""
    new_scores = [s or 0 for s in scores]
    if game_index >= len(new_scores):
        new_scores.extend([0] * (game_index + 1 - len(new_scores)))
    new_scores[game_index] = score
    return new_scores
