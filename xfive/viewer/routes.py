"""Read-only routes for the big screen and spectators."""

import json

from flask import Response, current_app, jsonify, stream_with_context

from xfive.core.constants import ROOMS
from xfive.errors import ValidationError
from xfive.extensions import get_store
from xfive.tournament.utils import build_leaderboard

from . import bp


def _viewer_payload(snapshot):
    """Shape a snapshot for viewers: settings plus each room's ranking."""
    app_state = snapshot.app_state
    return {
        "stage": app_state.get("stage"),
        "activeRoomViewer": app_state.get("activeRoomViewer"),
        "activeRoomModes": app_state.get("activeRoomModes") or {},
        "rooms": {
            room: build_leaderboard(snapshot.players, room) for room in ROOMS
        },
    }


def _room_payload(snapshot, room):
    return {
        "room": room,
        "stage": snapshot.app_state.get("stage"),
        "mode": (snapshot.app_state.get("activeRoomModes") or {}).get(room),
        "players": build_leaderboard(snapshot.players, room),
    }


@bp.route("/state")
def state():
    """Return the current stage and every room's leaderboard."""
    return jsonify(_viewer_payload(get_store().snapshot()))


@bp.route("/rooms/<room>")
def room_leaderboard(room):
    """Return one room's leaderboard and its active game mode."""
    if room not in ROOMS:
        raise ValidationError(f"Unknown room: {room}")
    return jsonify(_room_payload(get_store().snapshot(), room))


@bp.route("/leaderboard")
def leaderboard():
    """Return the leaderboard of the room the admin put on the big screen."""
    snapshot = get_store().snapshot()
    room = snapshot.app_state.get("activeRoomViewer") or ROOMS[0]
    return jsonify(_room_payload(snapshot, room))


@bp.route("/stream")
def stream():
    """Server-Sent Events stream of full snapshots on every change."""
    store = get_store()
    heartbeat = current_app.config["SSE_HEARTBEAT_SECONDS"]

    def generate():
        """Yield one event per snapshot, with heartbeats while idle."""
        # Send immediate connected event so client shows "Live" status right away
        yield "event: connected\ndata: ok\n\n"

        snapshots = store.watch(timeout=heartbeat)
        try:
            for snapshot in snapshots:
                if snapshot is None:
                    yield ": heartbeat\n\n"
                    continue
                data = json.dumps(_viewer_payload(snapshot))
                yield f"event: snapshot\ndata: {data}\n\n"
        finally:
            snapshots.close()

    return Response(
        stream_with_context(generate()),
        mimetype="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )
