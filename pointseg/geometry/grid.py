"""Occupancy grid: a width x height boolean mask over a flat row-major buffer.

All pixel access goes through (x, y) accessors so the index arithmetic
(y * width + x) lives in exactly one place.
"""
from __future__ import annotations

from typing import Optional, Tuple

import numpy as np


class FrozenGridError(RuntimeError):
    """Raised when writing to a grid that has been frozen."""


class OccupancyGrid:
    def __init__(self, width: int, height: int, data: Optional[np.ndarray] = None):
        width, height = int(width), int(height)
        if width <= 0 or height <= 0:
            raise ValueError(f"grid dimensions must be positive, got {width}x{height}")

        if data is None:
            buf = np.zeros(width * height, dtype=bool)
        else:
            buf = np.asarray(data).astype(bool, copy=True).reshape(-1)
            if buf.size != width * height:
                raise ValueError(f"expected {width * height} cells, got {buf.size}")

        self.width = width
        self.height = height
        self._data = buf
        self._frozen = False

    @classmethod
    def from_array(cls, mask: np.ndarray) -> "OccupancyGrid":
        """Build from a (H, W) array; any non-zero value counts as occupied."""
        mask = np.asarray(mask)
        if mask.ndim != 2:
            raise ValueError("mask must be a 2D array")
        h, w = mask.shape
        return cls(w, h, mask != 0)

    @property
    def shape_hw(self) -> Tuple[int, int]:
        return self.height, self.width

    def freeze(self) -> "OccupancyGrid":
        self._frozen = True
        self._data.flags.writeable = False
        return self

    def copy(self) -> "OccupancyGrid":
        """Mutable copy (never frozen)."""
        return OccupancyGrid(self.width, self.height, self._data)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _index(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) outside {self.width}x{self.height} grid")
        return y * self.width + x

    def get(self, x: int, y: int) -> bool:
        return bool(self._data[self._index(x, y)])

    def set(self, x: int, y: int, value: bool = True) -> None:
        if self._frozen:
            raise FrozenGridError("grid is frozen; use copy() to get a mutable grid")
        self._data[self._index(x, y)] = bool(value)

    def occupied(self, x: int, y: int) -> bool:
        """Like get(), but anything outside the grid reads as empty."""
        return self.in_bounds(x, y) and bool(self._data[y * self.width + x])

    def to_array(self) -> np.ndarray:
        """(H, W) bool array (a copy)."""
        return self._data.reshape(self.height, self.width).copy()

    def to_u8(self) -> np.ndarray:
        """(H, W) uint8 mask with 255 for occupied, 0 elsewhere (OpenCV style)."""
        return self.to_array().astype(np.uint8) * 255

    def count(self) -> int:
        return int(np.count_nonzero(self._data))

    def is_empty(self) -> bool:
        return not self._data.any()

    def first_occupied(self) -> Optional[Tuple[int, int]]:
        """Row-major scan (top-to-bottom, left-to-right) for the first occupied cell."""
        idx = np.flatnonzero(self._data)
        if idx.size == 0:
            return None
        i = int(idx[0])
        return i % self.width, i // self.width

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OccupancyGrid):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and bool(np.array_equal(self._data, other._data))
        )

    def __repr__(self) -> str:
        return f"OccupancyGrid({self.width}x{self.height}, occupied={self.count()})"
