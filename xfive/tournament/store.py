"""Firestore access for the single tournament instance."""

from __future__ import annotations

import logging
import queue
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from xfive.core.constants import (
    ARTIFACTS_COLLECTION,
    CONFIG_DOCUMENT,
    DATA_DOCUMENT,
    DEFAULT_APP_ID,
    FIRESTORE_BATCH_LIMIT,
    PLAYERS_COLLECTION,
    PUBLIC_COLLECTION,
    SETTINGS_COLLECTION,
    STAGE_QUALIFIERS_D1,
    WHEEL_MODES_COLLECTION,
)

from .models import AppState, Player, TournamentSnapshot, WheelMode

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.collection import CollectionReference
    from google.cloud.firestore_v1.document import DocumentReference

logger = logging.getLogger(__name__)

DEFAULT_APP_STATE: AppState = {
    "stage": STAGE_QUALIFIERS_D1,
    "activeRoomViewer": "1",
    "activeRoomModes": {},
}


class TournamentStore:
    """Reads snapshots of the tournament and applies field-level writes.

    Every document lives under ``artifacts/{app_id}/public/data``. Writes are
    not guarded by transactions; a snapshot may be stale by the time a write
    built from it lands.
    """

    def __init__(self, db: Client | None = None, app_id: str = DEFAULT_APP_ID):
        if db is None:
            db = firestore.client()
        self.db = db
        self.app_id = app_id

    def _data_ref(self) -> DocumentReference:
        return (
            self.db.collection(ARTIFACTS_COLLECTION)
            .document(self.app_id)
            .collection(PUBLIC_COLLECTION)
            .document(DATA_DOCUMENT)
        )

    def players_ref(self) -> CollectionReference:
        return self._data_ref().collection(PLAYERS_COLLECTION)

    def player_ref(self, player_id: str) -> DocumentReference:
        return self.players_ref().document(player_id)

    def wheel_modes_ref(self) -> CollectionReference:
        return self._data_ref().collection(WHEEL_MODES_COLLECTION)

    def config_ref(self) -> DocumentReference:
        return self._data_ref().collection(SETTINGS_COLLECTION).document(CONFIG_DOCUMENT)

    # Players

    def list_players(self) -> list[Player]:
        """Fetch every player document (unordered)."""
        return [
            _player_from_doc(doc) for doc in self.players_ref().stream() if doc.exists
        ]

    def get_player(self, player_id: str) -> Player | None:
        doc = cast(Any, self.player_ref(player_id).get())
        if not doc.exists:
            return None
        return _player_from_doc(doc)

    def create_player(self, player: Player) -> None:
        self.player_ref(player["id"]).set(dict(player))

    def update_player(self, player_id: str, fields: dict[str, Any]) -> None:
        self.player_ref(player_id).update(fields)

    def delete_player(self, player_id: str) -> None:
        self.player_ref(player_id).delete()

    def commit_player_updates(self, updates: list[tuple[str, dict[str, Any]]]) -> None:
        """Write player field updates in batches, in the given order.

        Each batch is atomic on its own. A failure while committing a later
        batch leaves the earlier ones applied.
        """
        for start in range(0, len(updates), FIRESTORE_BATCH_LIMIT):
            chunk = updates[start : start + FIRESTORE_BATCH_LIMIT]
            batch = self.db.batch()
            for player_id, fields in chunk:
                batch.update(self.player_ref(player_id), fields)
            batch.commit()
            logger.debug("Committed %d player updates", len(chunk))

    # App state

    def get_app_state(self) -> AppState:
        """Fetch the singleton settings, filling in defaults for missing fields."""
        doc = cast(Any, self.config_ref().get())
        state = _default_app_state()
        if doc.exists:
            state.update(doc.to_dict() or {})
        return state

    def ensure_app_state(self) -> None:
        """Create the singleton settings with defaults if it does not exist yet."""
        ref = self.config_ref()
        if not cast(Any, ref.get()).exists:
            logger.info("Initialising tournament settings for %s", self.app_id)
            ref.set(dict(_default_app_state()))

    def update_app_state(self, fields: dict[str, Any]) -> None:
        self.ensure_app_state()
        self.config_ref().update(fields)

    # Wheel modes

    def list_wheel_modes(self) -> list[WheelMode]:
        modes = []
        for doc in self.wheel_modes_ref().stream():
            if not doc.exists:
                continue
            data = doc.to_dict() or {}
            data["id"] = doc.id
            modes.append(cast(WheelMode, data))
        modes.sort(key=lambda m: str(m.get("name", "")).lower())
        return modes

    def get_wheel_mode(self, mode_id: str) -> WheelMode | None:
        doc = cast(Any, self.wheel_modes_ref().document(mode_id).get())
        if not doc.exists:
            return None
        data = doc.to_dict() or {}
        data["id"] = doc.id
        return cast(WheelMode, data)

    def create_wheel_mode(self, mode: WheelMode) -> None:
        self.wheel_modes_ref().document(mode["id"]).set(dict(mode))

    def delete_wheel_mode(self, mode_id: str) -> None:
        self.wheel_modes_ref().document(mode_id).delete()

    # Snapshots

    def snapshot(self) -> TournamentSnapshot:
        return TournamentSnapshot(self.list_players(), self.get_app_state())

    def watch(self, timeout: float | None = None) -> Iterator[TournamentSnapshot | None]:
        """Yield a full snapshot every time players or settings change.

        The sequence is lazy and never ends on its own. With a ``timeout``,
        ``None`` is yielded whenever no change arrived in that many seconds.
        Listeners are removed when the generator is closed, and calling
        ``watch`` again starts a fresh subscription. Nothing but ``None`` is
        yielded until both listeners have delivered their first snapshot.
        """
        events: queue.Queue[str] = queue.Queue()
        seen: set[str] = set()
        latest: dict[str, Any] = {"players": [], "state": _default_app_state()}

        def on_players(docs: list[Any], changes: Any, read_time: Any) -> None:
            latest["players"] = [_player_from_doc(doc) for doc in docs]
            events.put(PLAYERS_COLLECTION)

        def on_config(docs: list[Any], changes: Any, read_time: Any) -> None:
            merged = _default_app_state()
            for doc in docs:
                if doc.exists:
                    merged.update(doc.to_dict() or {})
            latest["state"] = merged
            events.put(CONFIG_DOCUMENT)

        players_watch = self.players_ref().on_snapshot(on_players)
        config_watch = self.config_ref().on_snapshot(on_config)
        try:
            while True:
                try:
                    seen.add(events.get(timeout=timeout))
                except queue.Empty:
                    yield None
                    continue
                if len(seen) < 2:
                    continue
                yield TournamentSnapshot(list(latest["players"]), dict(latest["state"]))  # type: ignore[arg-type]
        finally:
            players_watch.unsubscribe()
            config_watch.unsubscribe()


def _default_app_state() -> AppState:
    state = dict(DEFAULT_APP_STATE)
    state["activeRoomModes"] = {}
    return cast(AppState, state)


def _player_from_doc(doc: Any) -> Player:
    data = doc.to_dict() or {}
    data.setdefault("id", doc.id)
    data.setdefault("scores", [])
    data.setdefault("totalScore", 0)
    data.setdefault("wheelEffect", None)
    return cast(Player, data)
