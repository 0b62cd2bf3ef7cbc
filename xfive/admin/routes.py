"""Admin routes for the application."""

from flask import current_app, jsonify

from xfive.auth.decorators import admin_required
from xfive.core.constants import DEMO_PLAYERS_PER_ROOM, ROOMS
from xfive.core.types import APIResponse
from xfive.errors import ValidationError
from xfive.extensions import get_store
from xfive.tournament import TournamentService
from xfive.tournament.utils import build_leaderboard

from . import bp
from .forms import (
    AddPlayerForm,
    AdvanceQualifiersForm,
    EditPlayerForm,
    RoomModeForm,
    ScoreForm,
    SeedForm,
    StageForm,
    ViewerRoomForm,
    WheelModeForm,
)


def _ok(message, data=None, status_code=200):
    payload: APIResponse = {"success": True, "message": message, "data": data}
    return jsonify(payload), status_code


def _validated(form):
    """Raise the first form error as a ValidationError."""
    if not form.validate_on_submit():
        errors = [f"{name}: {msgs[0]}" for name, msgs in form.errors.items()]
        raise ValidationError("; ".join(errors) or "Invalid input.")
    return form


@bp.before_request
@admin_required
def require_admin():
    """Every admin endpoint needs an admin session."""


@bp.route("/state")
def state():
    """Return players, settings, wheel modes and every room's ranking."""
    store = get_store()
    snapshot = store.snapshot()
    rooms = {room: build_leaderboard(snapshot.players, room) for room in ROOMS}
    return _ok(
        "State loaded.",
        {
            **snapshot.to_dict(),
            "wheelModes": store.list_wheel_modes(),
            "rooms": rooms,
        },
    )


@bp.route("/rooms/<room>")
def room_players(room):
    """Return the ranked players of one room."""
    if room not in ROOMS:
        raise ValidationError(f"Unknown room: {room}")
    players = TournamentService.get_players_in_room(get_store(), room)
    return _ok(f"Room {room}.", players)


@bp.route("/players", methods=["POST"])
def add_player():
    form = _validated(AddPlayerForm())
    player_id = TournamentService.add_player(
        get_store(), form.name.data, form.room.data, nick=form.nick.data
    )
    return _ok("Player added.", {"id": player_id}, 201)


@bp.route("/players/<string:player_id>", methods=["PATCH"])
def edit_player(player_id):
    """Edit a player's name, nickname, room or status."""
    form = _validated(EditPlayerForm())
    updated = TournamentService.update_player(get_store(), player_id, form.changes())
    if not updated:
        return _ok("Nothing to update.", {"updated": False})
    return _ok("Player updated.", {"updated": True})


@bp.route("/players/<string:player_id>", methods=["DELETE"])
def delete_player(player_id):
    TournamentService.delete_player(get_store(), player_id)
    return _ok("Player deleted.")


@bp.route("/players/<string:player_id>/scores", methods=["POST"])
def update_score(player_id):
    """Record a single game score for a player."""
    form = _validated(ScoreForm())
    total = TournamentService.update_score(
        get_store(), player_id, form.game.data, form.score.data
    )
    if total is None:
        return _ok("Score skipped.", {"totalScore": None})
    return _ok("Score saved.", {"totalScore": total})


@bp.route("/stage", methods=["POST"])
def set_stage():
    form = _validated(StageForm())
    TournamentService.set_stage(get_store(), form.stage.data)
    return _ok(f"Stage set to {form.stage.data}.")


@bp.route("/viewer-room", methods=["POST"])
def set_viewer_room():
    form = _validated(ViewerRoomForm())
    TournamentService.set_viewer_room(get_store(), form.room.data)
    return _ok(f"Viewer now shows room {form.room.data}.")


@bp.route("/rooms/<room>/wheel", methods=["POST"])
def spin_wheel(room):
    """Spin the modifier wheel for a room."""
    result = TournamentService.run_wheel(get_store(), room)
    if result is None:
        return _ok(f"Room {room} has no players.", None)
    current_app.logger.info(f"Wheel spun in room {room}")
    return _ok(result.effect["desc"], result.to_dict())


@bp.route("/rooms/<room>/mode", methods=["POST"])
def set_room_mode(room):
    form = _validated(RoomModeForm())
    TournamentService.set_room_mode(get_store(), room, form.mode.data)
    return _ok(f"Room {room} mode set.")


@bp.route("/rooms/<room>/mode", methods=["DELETE"])
def clear_room_mode(room):
    TournamentService.clear_room_mode(get_store(), room)
    return _ok(f"Room {room} mode cleared.")


@bp.route("/rooms/<room>/mode/spin", methods=["POST"])
def spin_room_mode(room):
    """Draw a random game mode for a room."""
    mode = TournamentService.spin_room_mode(get_store(), room)
    if mode is None:
        return _ok("No wheel modes configured.", None)
    return _ok(f"Room {room} plays {mode['name']}.", mode)


@bp.route("/wheel-modes")
def list_wheel_modes():
    return _ok("Wheel modes.", get_store().list_wheel_modes())


@bp.route("/wheel-modes", methods=["POST"])
def add_wheel_mode():
    form = _validated(WheelModeForm())
    mode_id = TournamentService.add_wheel_mode(
        get_store(), form.name.data, form.description.data
    )
    return _ok("Wheel mode added.", {"id": mode_id}, 201)


@bp.route("/wheel-modes/<string:mode_id>", methods=["DELETE"])
def delete_wheel_mode(mode_id):
    TournamentService.delete_wheel_mode(get_store(), mode_id)
    return _ok("Wheel mode deleted.")


@bp.route("/advance/qualifiers", methods=["POST"])
def advance_qualifiers():
    """Close qualifier rooms: top two go to the semifinals."""
    form = _validated(AdvanceQualifiersForm())
    rooms = form.selected_rooms()
    if not rooms:
        raise ValidationError("Choose a qualifier day or a list of rooms.")
    result = TournamentService.advance_qualifiers(get_store(), rooms)
    current_app.logger.info(f"Advanced qualifier rooms {rooms}")
    return _ok("Qualifiers advanced.", result.to_dict())


@bp.route("/advance/semis", methods=["POST"])
def advance_semis():
    """Close the semifinals: top three go to the final."""
    result = TournamentService.advance_semis(get_store())
    current_app.logger.info("Advanced semifinals to the final")
    return _ok("Semifinals advanced.", result.to_dict())


@bp.route("/reconcile", methods=["POST"])
def reconcile():
    """Repair cached totals after a partially applied bulk write."""
    fixed = TournamentService.reconcile_totals(get_store())
    return _ok(f"Reconciled {len(fixed)} players.", {"players": fixed})


@bp.route("/seed", methods=["POST"])
def seed():
    """Generate fake players for a rehearsal."""
    form = _validated(SeedForm())
    created = TournamentService.seed_demo_players(
        get_store(), per_room=form.per_room.data or DEMO_PLAYERS_PER_ROOM
    )
    return _ok(f"Created {len(created)} players.", {"ids": created}, 201)
