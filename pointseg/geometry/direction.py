"""Walk directions for the boundary tracer, in image coordinates (y grows down)."""
from __future__ import annotations

from enum import IntEnum
from typing import Tuple


class Direction(IntEnum):
    RIGHT = 0
    DOWN = 1
    LEFT = 2
    UP = 3

    def turn_right(self) -> "Direction":
        return Direction((self + 1) % 4)

    def turn_left(self) -> "Direction":
        return Direction((self + 3) % 4)

    @property
    def delta(self) -> Tuple[int, int]:
        return _DELTAS[self]

    def step(self, x: int, y: int) -> Tuple[int, int]:
        dx, dy = _DELTAS[self]
        return x + dx, y + dy


_DELTAS = {
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.UP: (0, -1),
}
