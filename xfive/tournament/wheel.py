"""Random draws for the modifier wheel and room game modes."""

from __future__ import annotations

import random
from typing import Any

from xfive.core.constants import (
    BOOM_POSITIVE_CHANCE,
    EFFECT_BOOM,
    EFFECT_DOUBLE,
    EFFECT_REVERSE,
    WHEEL_CATEGORIES,
)

from .models import WheelEffect

DOUBLE_EFFECT: WheelEffect = {
    "type": EFFECT_DOUBLE,
    "value": 2,
    "desc": "DOUBLE CHANCE (Best x2)",
}
BOOM_UP_EFFECT: WheelEffect = {"type": EFFECT_BOOM, "value": 1.15, "desc": "BOOM (+15%)"}
BOOM_DOWN_EFFECT: WheelEffect = {"type": EFFECT_BOOM, "value": 0.90, "desc": "BOOM (-10%)"}
REVERSE_EFFECT: WheelEffect = {
    "type": EFFECT_REVERSE,
    "value": 1.1,
    "desc": "REVERSE (+10%)",
}


class WheelSpinner:
    """Draws wheel outcomes from a seedable random source."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()  # nosec B311

    def draw_category(self) -> str:
        return self.rng.choice(WHEEL_CATEGORIES)

    def draw_effect(self, category: str) -> WheelEffect:
        """Resolve a category into a concrete effect."""
        if category == EFFECT_DOUBLE:
            return dict(DOUBLE_EFFECT)  # type: ignore[return-value]
        if self.rng.random() < BOOM_POSITIVE_CHANCE:
            return dict(BOOM_UP_EFFECT)  # type: ignore[return-value]
        return dict(BOOM_DOWN_EFFECT)  # type: ignore[return-value]

    def draw_lucky_index(self, count: int) -> int:
        """Pick the lucky player independently of rank."""
        return self.rng.randrange(count)

    def spin(self, ranked: list[Any]) -> tuple[dict[str, WheelEffect], str, str | None]:
        """Plan effect assignments for an already ranked room.

        Returns the per-player assignments, the lucky player id and the id of
        the last-placed player who receives the catch-up effect, if any.
        """
        category = self.draw_category()
        lucky = ranked[self.draw_lucky_index(len(ranked))]
        assignments = {lucky["id"]: self.draw_effect(category)}

        reverse_id = None
        last = ranked[-1]
        if len(ranked) > 1 and last["id"] != lucky["id"]:
            reverse_id = last["id"]
            assignments[reverse_id] = dict(REVERSE_EFFECT)  # type: ignore[assignment]
        return assignments, lucky["id"], reverse_id

    def pick_mode(self, modes: list[Any]) -> Any | None:
        """Pick a game mode from the catalog, or None when it is empty."""
        if not modes:
            return None
        return self.rng.choice(modes)
