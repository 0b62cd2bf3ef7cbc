"""Tests for the public viewer API."""

import json
import unittest
from unittest.mock import MagicMock, patch

from xfive import create_app
from xfive.tournament.models import TournamentSnapshot
from xfive.tournament.wheel import DOUBLE_EFFECT
from tests.conftest import TEST_APP_ID, add_player, make_mock_db, make_store


class ViewerRoutesTestCase(unittest.TestCase):
    """Test case for the viewer blueprint."""

    def setUp(self) -> None:
        self.mock_db = make_mock_db()
        self.store = make_store(self.mock_db)
        add_player(self.store, "p1", "1", [10, 20])
        add_player(self.store, "p2", "1", [25], wheel_effect=dict(DOUBLE_EFFECT))
        add_player(self.store, "p3", "1", [5])
        add_player(self.store, "p4", "A", [40])

        self.mock_firestore_module = MagicMock()
        self.mock_firestore_module.client.return_value = self.mock_db
        patcher = patch("xfive.extensions.firestore", new=self.mock_firestore_module)
        patcher.start()
        self.addCleanup(patcher.stop)

        self.app = create_app(
            {"TESTING": True, "WTF_CSRF_ENABLED": False, "APP_ID": TEST_APP_ID}
        )
        self.client = self.app.test_client()

    def test_state(self) -> None:
        response = self.client.get("/api/state")

        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data["stage"], "QUALIFIERS_D1")
        self.assertEqual(data["activeRoomViewer"], "1")
        self.assertEqual(data["activeRoomModes"], {})
        room_1 = data["rooms"]["1"]
        self.assertEqual([row["id"] for row in room_1], ["p2", "p1", "p3"])
        self.assertEqual(room_1[0]["total"], 50)
        self.assertEqual([row["qualifying"] for row in room_1], [True, True, False])
        self.assertEqual(data["rooms"]["B"], [])

    def test_room_leaderboard(self) -> None:
        self.store.update_app_state({"activeRoomModes": {"A": "Sniper Only"}})

        data = self.client.get("/api/rooms/A").get_json()

        self.assertEqual(data["room"], "A")
        self.assertEqual(data["mode"], "Sniper Only")
        self.assertEqual([row["id"] for row in data["players"]], ["p4"])

    def test_unknown_room(self) -> None:
        response = self.client.get("/api/rooms/7")
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.get_json()["success"])

    def test_leaderboard_follows_viewer_room(self) -> None:
        self.assertEqual(self.client.get("/api/leaderboard").get_json()["room"], "1")

        self.store.update_app_state({"activeRoomViewer": "A"})

        data = self.client.get("/api/leaderboard").get_json()
        self.assertEqual(data["room"], "A")
        self.assertEqual(data["players"][0]["id"], "p4")

    def test_reads_do_not_write(self) -> None:
        self.client.get("/api/state")
        self.client.get("/api/leaderboard")

        self.assertFalse(self.store.config_ref().get().exists)
        self.mock_db.batch.assert_not_called()

    def test_admin_routes_are_not_public(self) -> None:
        self.assertEqual(self.client.get("/admin/state").status_code, 401)

    def test_stream(self) -> None:
        snapshot = TournamentSnapshot(
            self.store.list_players(), self.store.get_app_state()
        )
        closed = []

        def fake_watch(timeout=None):
            try:
                yield snapshot
                yield None
            finally:
                closed.append(True)

        with patch("xfive.tournament.store.TournamentStore.watch", side_effect=fake_watch):
            response = self.client.get("/api/stream")
            body = response.get_data(as_text=True)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.mimetype, "text/event-stream")
        self.assertEqual(response.headers["Cache-Control"], "no-cache")

        events = body.split("\n\n")
        self.assertEqual(events[0], "event: connected\ndata: ok")
        self.assertTrue(events[1].startswith("event: snapshot\ndata: "))
        payload = json.loads(events[1].split("data: ", 1)[1])
        self.assertEqual([row["id"] for row in payload["rooms"]["1"]], ["p2", "p1", "p3"])
        self.assertEqual(events[2], ": heartbeat")
        self.assertEqual(closed, [True])


if __name__ == "__main__":
    unittest.main()
