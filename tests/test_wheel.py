"""Tests for the modifier wheel."""

from __future__ import annotations

import random
import unittest
from unittest.mock import MagicMock

from xfive.errors import ValidationError
from xfive.tournament.services import TournamentService
from xfive.tournament.utils import player_total
from xfive.tournament.wheel import (
    BOOM_DOWN_EFFECT,
    BOOM_UP_EFFECT,
    DOUBLE_EFFECT,
    REVERSE_EFFECT,
    WheelSpinner,
)
from tests.conftest import add_player, make_store


def _fixed_rng(category: str, lucky_index: int, roll: float = 0.0) -> MagicMock:
    """A random source whose draws are fixed in advance."""
    rng = MagicMock()
    rng.choice.return_value = category
    rng.randrange.return_value = lucky_index
    rng.random.return_value = roll
    return rng


class WheelSpinnerTestCase(unittest.TestCase):
    """Test case for the wheel draws."""

    def setUp(self) -> None:
        self.ranked = [
            {"id": "first", "scores": [30]},
            {"id": "middle", "scores": [20]},
            {"id": "last", "scores": [10]},
        ]

    def test_double_goes_to_lucky_player(self) -> None:
        spinner = WheelSpinner(_fixed_rng("DOUBLE", 1))

        assignments, lucky_id, reverse_id = spinner.spin(self.ranked)

        self.assertEqual(lucky_id, "middle")
        self.assertEqual(assignments["middle"], DOUBLE_EFFECT)
        self.assertEqual(reverse_id, "last")
        self.assertEqual(assignments["last"], REVERSE_EFFECT)

    def test_boom_positive_below_threshold(self) -> None:
        spinner = WheelSpinner(_fixed_rng("BOOM", 0, roll=0.59))
        assignments, _, _ = spinner.spin(self.ranked)
        self.assertEqual(assignments["first"], BOOM_UP_EFFECT)

    def test_boom_negative_at_threshold(self) -> None:
        spinner = WheelSpinner(_fixed_rng("BOOM", 0, roll=0.6))
        assignments, _, _ = spinner.spin(self.ranked)
        self.assertEqual(assignments["first"], BOOM_DOWN_EFFECT)

    def test_no_reverse_when_last_player_is_lucky(self) -> None:
        spinner = WheelSpinner(_fixed_rng("DOUBLE", 2))

        assignments, lucky_id, reverse_id = spinner.spin(self.ranked)

        self.assertEqual(lucky_id, "last")
        self.assertIsNone(reverse_id)
        self.assertEqual(list(assignments), ["last"])

    def test_single_player_gets_only_the_lucky_effect(self) -> None:
        spinner = WheelSpinner(_fixed_rng("DOUBLE", 0))
        assignments, lucky_id, reverse_id = spinner.spin([{"id": "solo"}])
        self.assertEqual(lucky_id, "solo")
        self.assertIsNone(reverse_id)
        self.assertEqual(assignments, {"solo": DOUBLE_EFFECT})

    def test_lucky_index_spans_whole_room(self) -> None:
        spinner = WheelSpinner(random.Random(7))
        seen = {spinner.draw_lucky_index(3) for _ in range(200)}
        self.assertEqual(seen, {0, 1, 2})

    def test_effects_are_copies(self) -> None:
        spinner = WheelSpinner(_fixed_rng("DOUBLE", 0))
        assignments, _, _ = spinner.spin(self.ranked)
        assignments["first"]["value"] = 99
        self.assertEqual(DOUBLE_EFFECT["value"], 2)

    def test_pick_mode(self) -> None:
        spinner = WheelSpinner(random.Random(1))
        modes = [{"name": "Sniper Only"}, {"name": "No HUD"}]
        self.assertIn(spinner.pick_mode(modes), modes)
        self.assertIsNone(spinner.pick_mode([]))


class RunWheelTestCase(unittest.TestCase):
    """Test case for spinning the wheel against the store."""

    def setUp(self) -> None:
        self.store = make_store()
        add_player(self.store, "p1", "A", [40])
        add_player(self.store, "p2", "A", [30], wheel_effect=dict(BOOM_UP_EFFECT))
        add_player(self.store, "p3", "A", [20])
        add_player(self.store, "p4", "A", [10], wheel_effect=dict(REVERSE_EFFECT))
        add_player(self.store, "other", "B", [5], wheel_effect=dict(DOUBLE_EFFECT))

    def _effects(self) -> dict[str, object]:
        return {p["id"]: p["wheelEffect"] for p in self.store.list_players()}

    def test_run_wheel_resets_and_assigns(self) -> None:
        result = TournamentService.run_wheel(
            self.store, "A", rng=_fixed_rng("DOUBLE", 0)
        )

        assert result is not None
        self.assertEqual(result.lucky_player_id, "p1")
        self.assertEqual(result.reverse_player_id, "p4")
        effects = self._effects()
        self.assertEqual(effects["p1"], DOUBLE_EFFECT)
        self.assertIsNone(effects["p2"])
        self.assertIsNone(effects["p3"])
        self.assertEqual(effects["p4"], REVERSE_EFFECT)
        # Other rooms are untouched
        self.assertEqual(effects["other"], DOUBLE_EFFECT)

    def test_run_wheel_recomputes_cached_totals(self) -> None:
        TournamentService.run_wheel(self.store, "A", rng=_fixed_rng("DOUBLE", 0))

        for player in self.store.list_players():
            if player["room"] == "A":
                self.assertEqual(player["totalScore"], player_total(player))
        self.assertEqual(self.store.get_player("p1")["totalScore"], 80)
        self.assertEqual(self.store.get_player("p2")["totalScore"], 30)

    def test_resets_are_written_before_assignments(self) -> None:
        TournamentService.run_wheel(self.store, "A", rng=_fixed_rng("BOOM", 1, 0.1))

        batch = self.store.db.batches[-1]
        written = [data for _, data in batch.updates]
        resets = written[:4]
        self.assertTrue(all(data == {"wheelEffect": None} for data in resets))
        self.assertTrue(any("wheelEffect" in data for data in written[4:]))
        self.assertEqual(self._effects()["p2"], BOOM_UP_EFFECT)

    def test_exactly_one_primary_effect_per_spin(self) -> None:
        for seed in range(25):
            TournamentService.run_wheel(self.store, "A", rng=random.Random(seed))
            room = [p for p in self.store.list_players() if p["room"] == "A"]
            primary = [
                p for p in room
                if p["wheelEffect"] and p["wheelEffect"]["type"] in ("DOUBLE", "BOOM")
            ]
            reverse = [
                p for p in room
                if p["wheelEffect"] and p["wheelEffect"]["type"] == "REVERSE"
            ]
            self.assertEqual(len(primary), 1)
            self.assertLessEqual(len(reverse), 1)

    def test_empty_room_is_a_noop(self) -> None:
        result = TournamentService.run_wheel(self.store, "FINAL")
        self.assertIsNone(result)
        self.store.db.batch.assert_not_called()

    def test_unknown_room_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            TournamentService.run_wheel(self.store, "Z")


if __name__ == "__main__":
    unittest.main()
