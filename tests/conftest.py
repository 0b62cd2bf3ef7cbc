"""Common utilities for tests."""

import unittest.mock
from typing import Any

from mockfirestore import MockFirestore

from xfive.tournament.store import TournamentStore

TEST_APP_ID = "test-battle"


class MockBatch:
    """Stands in for a Firestore WriteBatch: queues updates, applies them on commit."""

    def __init__(self) -> None:
        self.updates: list[tuple[Any, dict[str, Any]]] = []
        self.commit = unittest.mock.MagicMock(side_effect=self._apply)

    def update(self, ref: Any, data: dict[str, Any]) -> None:
        self.updates.append((ref, data))

    def _apply(self) -> None:
        # Writes land in queue order, like a committed batch
        for ref, data in self.updates:
            ref.update(data)


def make_mock_db() -> MockFirestore:
    """Create a MockFirestore whose batch() hands out recording MockBatch objects."""
    db = MockFirestore()
    db.batches = []

    def new_batch() -> MockBatch:
        batch = MockBatch()
        db.batches.append(batch)
        return batch

    db.batch = unittest.mock.MagicMock(side_effect=new_batch)
    return db


def make_store(db: Any = None) -> TournamentStore:
    """Create a TournamentStore backed by MockFirestore."""
    return TournamentStore(db or make_mock_db(), app_id=TEST_APP_ID)


def add_player(
    store: TournamentStore,
    player_id: str,
    room: str,
    scores: list[int] | None = None,
    status: str = "active",
    wheel_effect: dict[str, Any] | None = None,
    name: str | None = None,
) -> None:
    """Write a player document straight into the store."""
    scores = list(scores or [])
    store.create_player({
        "id": player_id,
        "name": name or player_id.upper(),
        "nick": None,
        "room": room,
        "scores": scores,
        "totalScore": sum(scores),
        "status": status,
        "wheelEffect": wheel_effect,
    })
