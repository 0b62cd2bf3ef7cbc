"""Service layer for tournament business logic."""

from __future__ import annotations

import logging
import random
import uuid
from typing import TYPE_CHECKING, Any

from faker import Faker

from xfive.core.constants import (
    DEMO_PLAYERS_PER_ROOM,
    FINAL_ROOM,
    MAX_GAMES,
    QUALIFIER_ADVANCE_COUNT,
    QUALIFIER_ROOMS,
    ROOM_A_FEEDERS,
    ROOMS,
    SEMIFINAL_ADVANCE_COUNT,
    SEMIFINAL_ROOMS,
    STAGE_FINALS,
    STAGES,
    STATUS_ACTIVE,
    STATUS_ELIMINATED,
    STATUS_QUALIFIED,
    STATUSES,
)
from xfive.errors import NotFoundError, ValidationError

from .models import Player, ProgressionResult, WheelMode, WheelResult
from .utils import calculate_total, player_total, rank_room, set_game_score
from .wheel import WheelSpinner

if TYPE_CHECKING:
    from .store import TournamentStore

logger = logging.getLogger(__name__)

EDITABLE_PLAYER_FIELDS = ("name", "nick", "room", "status")


def _validate_room(room: str) -> None:
    if room not in ROOMS:
        raise ValidationError(f"Unknown room: {room}")


def _reset_fields(room: str) -> dict[str, Any]:
    """Fields written to a player promoted into a new room."""
    return {
        "status": STATUS_QUALIFIED,
        "room": room,
        "scores": [],
        "totalScore": 0,
        "wheelEffect": None,
    }


class TournamentService:
    """Handles business logic and data access for the tournament."""

    # Players

    @staticmethod
    def add_player(
        store: TournamentStore, name: str, room: str, nick: str | None = None
    ) -> str:
        """Create an active player with no scores and return its ID."""
        _validate_room(room)
        name = (name or "").strip()
        if not name:
            raise ValidationError("Player name is required.")

        player: Player = {
            "id": uuid.uuid4().hex,
            "name": name,
            "nick": nick or None,
            "room": room,
            "scores": [],
            "totalScore": 0,
            "status": STATUS_ACTIVE,
            "wheelEffect": None,
        }
        store.create_player(player)
        logger.info("Added player %s to room %s", player["id"], room)
        return player["id"]

    @staticmethod
    def update_player(
        store: TournamentStore, player_id: str, fields: dict[str, Any]
    ) -> bool:
        """Edit display fields, room or status. Unknown players are skipped."""
        updates = {k: v for k, v in fields.items() if k in EDITABLE_PLAYER_FIELDS}
        if "room" in updates:
            _validate_room(updates["room"])
        if "status" in updates and updates["status"] not in STATUSES:
            raise ValidationError(f"Unknown status: {updates['status']}")
        name = updates.get("name", "")
        if "name" in updates and not (isinstance(name, str) and name.strip()):
            raise ValidationError("Player name is required.")
        if not updates:
            return False

        if store.get_player(player_id) is None:
            logger.warning("Skipping update for unknown player %s", player_id)
            return False
        store.update_player(player_id, updates)
        return True

    @staticmethod
    def delete_player(store: TournamentStore, player_id: str) -> None:
        """Remove a player permanently."""
        if store.get_player(player_id) is None:
            raise NotFoundError("Player not found.")
        store.delete_player(player_id)
        logger.info("Deleted player %s", player_id)

    @staticmethod
    def update_score(
        store: TournamentStore, player_id: str, game_index: int, score: int
    ) -> int | None:
        """Record one game score and persist the recomputed total.

        Returns the new total, or None when the player is unknown or has
        already been eliminated.
        """
        if not 0 <= game_index < MAX_GAMES:
            raise ValidationError(
                f"Game number must be between 0 and {MAX_GAMES - 1}."
            )
        if score < 0:
            raise ValidationError("Score must not be negative.")

        player = store.get_player(player_id)
        if player is None:
            logger.warning("Skipping score for unknown player %s", player_id)
            return None
        if player.get("status") == STATUS_ELIMINATED:
            logger.warning("Skipping score for eliminated player %s", player_id)
            return None

        scores = set_game_score(player.get("scores") or [], game_index, score)
        total = calculate_total(scores, player.get("wheelEffect"))
        store.update_player(player_id, {"scores": scores, "totalScore": total})
        return total

    @staticmethod
    def reconcile_totals(store: TournamentStore) -> list[str]:
        """Rewrite cached totals that disagree with the scores they derive from.

        Returns the IDs of the players that were corrected.
        """
        updates = []
        for player in store.list_players():
            total = player_total(player)
            if player.get("totalScore") != total:
                updates.append((player["id"], {"totalScore": total}))
        if updates:
            store.commit_player_updates(updates)
            logger.warning("Reconciled totals for %d players", len(updates))
        return [player_id for player_id, _ in updates]

    @staticmethod
    def get_players_in_room(store: TournamentStore, room: str) -> list[Player]:
        return rank_room(store.list_players(), room)

    # App state

    @staticmethod
    def set_stage(store: TournamentStore, stage: str) -> None:
        """Set the tournament stage directly. Any stage may follow any other."""
        if stage not in STAGES:
            raise ValidationError(f"Unknown stage: {stage}")
        store.update_app_state({"stage": stage})
        logger.info("Stage set to %s", stage)

    @staticmethod
    def set_viewer_room(store: TournamentStore, room: str) -> None:
        _validate_room(room)
        store.update_app_state({"activeRoomViewer": room})

    @staticmethod
    def set_room_mode(store: TournamentStore, room: str, mode_name: str) -> None:
        """Label a room with a game mode from the catalog."""
        _validate_room(room)
        if not mode_name:
            raise ValidationError("Mode name is required.")
        modes = dict(store.get_app_state().get("activeRoomModes") or {})
        modes[room] = mode_name
        store.update_app_state({"activeRoomModes": modes})

    @staticmethod
    def clear_room_mode(store: TournamentStore, room: str) -> None:
        _validate_room(room)
        modes = dict(store.get_app_state().get("activeRoomModes") or {})
        if modes.pop(room, None) is not None:
            store.update_app_state({"activeRoomModes": modes})

    # Wheel modes

    @staticmethod
    def add_wheel_mode(
        store: TournamentStore, name: str, description: str | None = None
    ) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Mode name is required.")
        mode: WheelMode = {
            "id": uuid.uuid4().hex,
            "name": name,
            "description": description or "",
        }
        store.create_wheel_mode(mode)
        return mode["id"]

    @staticmethod
    def delete_wheel_mode(store: TournamentStore, mode_id: str) -> None:
        if store.get_wheel_mode(mode_id) is None:
            raise NotFoundError("Wheel mode not found.")
        store.delete_wheel_mode(mode_id)

    @staticmethod
    def spin_room_mode(
        store: TournamentStore, room: str, rng: random.Random | None = None
    ) -> WheelMode | None:
        """Assign a random catalog mode to a room. No-op on an empty catalog."""
        _validate_room(room)
        mode = WheelSpinner(rng).pick_mode(store.list_wheel_modes())
        if mode is None:
            return None
        TournamentService.set_room_mode(store, room, mode["name"])
        logger.info("Room %s drew mode %s", room, mode["name"])
        return mode

    # Modifier wheel

    @staticmethod
    def run_wheel(
        store: TournamentStore, room: str, rng: random.Random | None = None
    ) -> WheelResult | None:
        """Spin the modifier wheel once for a room.

        Every player in the room loses their current effect, then one random
        player gets DOUBLE or BOOM and the last-placed player (if someone
        else) gets REVERSE. Resets and assignments go out in one batch with
        the resets first, each carrying the recomputed total.
        """
        _validate_room(room)
        ranked = rank_room(store.list_players(), room)
        if not ranked:
            return None

        assignments, lucky_id, reverse_id = WheelSpinner(rng).spin(ranked)

        updates: list[tuple[str, dict[str, Any]]] = []
        for player in ranked:
            updates.append((player["id"], {"wheelEffect": None}))
        for player in ranked:
            effect = assignments.get(player["id"])
            total = calculate_total(player.get("scores") or [], effect)
            fields: dict[str, Any] = {"totalScore": total}
            if effect is not None:
                fields["wheelEffect"] = effect
            updates.append((player["id"], fields))
        store.commit_player_updates(updates)

        result = WheelResult(room, lucky_id, assignments[lucky_id], reverse_id)
        logger.info(
            "Wheel in room %s: %s for %s", room, result.effect["desc"], lucky_id
        )
        return result

    # Progression

    @staticmethod
    def _advance_room(
        ranked: list[Player], advance_count: int, target_room: str
    ) -> tuple[list[tuple[str, dict[str, Any]]], ProgressionResult]:
        """Split a ranked room into promotions and eliminations.

        Players already eliminated are never promoted; they keep their
        eliminated status.
        """
        contenders = [p for p in ranked if p.get("status") != STATUS_ELIMINATED]
        promoted_ids = {p["id"] for p in contenders[:advance_count]}

        updates = []
        result = ProgressionResult()
        for player in ranked:
            if player["id"] in promoted_ids:
                updates.append((player["id"], _reset_fields(target_room)))
                result.qualified.append(player["id"])
            else:
                updates.append((player["id"], {"status": STATUS_ELIMINATED}))
                result.eliminated.append(player["id"])
        return updates, result

    @staticmethod
    def advance_qualifiers(
        store: TournamentStore, day_rooms: list[str]
    ) -> ProgressionResult:
        """Send the top two of each qualifier room to semifinal room A or B.

        Rooms 1-3 feed room A and rooms 4-6 feed room B. Everyone else in
        those rooms is eliminated. The stage is not changed.
        """
        for room in day_rooms:
            if room not in QUALIFIER_ROOMS:
                raise ValidationError(f"Not a qualifier room: {room}")

        players = store.list_players()
        updates: list[tuple[str, dict[str, Any]]] = []
        result = ProgressionResult()
        for room in day_rooms:
            target = "A" if room in ROOM_A_FEEDERS else "B"
            room_updates, room_result = TournamentService._advance_room(
                rank_room(players, room), QUALIFIER_ADVANCE_COUNT, target
            )
            updates.extend(room_updates)
            result.qualified.extend(room_result.qualified)
            result.eliminated.extend(room_result.eliminated)

        store.commit_player_updates(updates)
        logger.info(
            "Qualifiers %s: %d qualified, %d eliminated",
            ",".join(day_rooms),
            len(result.qualified),
            len(result.eliminated),
        )
        return result

    @staticmethod
    def advance_semis(store: TournamentStore) -> ProgressionResult:
        """Send the top three of rooms A and B to the final and set FINALS."""
        players = store.list_players()
        updates: list[tuple[str, dict[str, Any]]] = []
        result = ProgressionResult()
        for room in SEMIFINAL_ROOMS:
            room_updates, room_result = TournamentService._advance_room(
                rank_room(players, room), SEMIFINAL_ADVANCE_COUNT, FINAL_ROOM
            )
            updates.extend(room_updates)
            result.qualified.extend(room_result.qualified)
            result.eliminated.extend(room_result.eliminated)

        store.commit_player_updates(updates)
        TournamentService.set_stage(store, STAGE_FINALS)
        return result

    # Demo data

    @staticmethod
    def seed_demo_players(
        store: TournamentStore,
        per_room: int = DEMO_PLAYERS_PER_ROOM,
        rooms: list[str] | None = None,
    ) -> list[str]:
        """Fill rooms with fake players for rehearsals."""
        fake = Faker()
        created = []
        for room in rooms or QUALIFIER_ROOMS:
            for _ in range(per_room):
                created.append(
                    TournamentService.add_player(
                        store, fake.name(), room, nick=fake.user_name()
                    )
                )
        return created
