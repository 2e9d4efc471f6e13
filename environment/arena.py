"""Bounded 2D arena holding the target collection."""

from __future__ import annotations

import math
import random

from core.vector2d import Vector2D


class Arena:
    """Rectangle ``[0, width] x [0, height]`` with randomly placed targets.

    Targets are relocated when captured and never removed during a tick, so
    indices held by sweepers stay valid for the whole tick.
    """

    def __init__(self, width: float, height: float, target_count: int, rng: random.Random) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Arena width and height must be > 0")
        self.width = float(width)
        self.height = float(height)
        self.rng = rng
        self.targets: list[Vector2D] = []
        self.resize_targets(target_count)

    def bounds(self) -> tuple[float, float, float, float]:
        """Return ``(min_x, min_y, max_x, max_y)``."""
        return (0.0, 0.0, self.width, self.height)

    def random_position(self) -> Vector2D:
        return Vector2D(self.rng.random() * self.width, self.rng.random() * self.height)

    def relocate(self, index: int) -> Vector2D:
        """Move target ``index`` to a fresh random position and return it."""
        position = self.random_position()
        self.targets[index] = position
        return position

    def resize_targets(self, count: int) -> None:
        """Grow or shrink the target collection to ``count`` entries.

        New targets are placed at random; every target is then wrapped back
        inside the current arena bounds.
        """
        count = max(0, int(count))
        missing = count - len(self.targets)
        if missing > 0:
            for _ in range(missing):
                self.targets.append(self.random_position())
        elif missing < 0:
            del self.targets[count:]
        self._wrap_targets()

    def set_bounds(self, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Arena width and height must be > 0")
        self.width = float(width)
        self.height = float(height)
        self._wrap_targets()

    def _wrap_targets(self) -> None:
        self.targets = [
            Vector2D(math.fmod(target.x, self.width), math.fmod(target.y, self.height))
            for target in self.targets
        ]

    def __len__(self) -> int:
        return len(self.targets)
