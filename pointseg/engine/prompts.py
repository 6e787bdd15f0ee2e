"""
Prompt points for the engine.

Labels follow the SAM convention:
    1 -> foreground (include)
    0 -> background (exclude)
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, List, Tuple

import numpy as np


class PointLabel(IntEnum):
    BACKGROUND = 0
    FOREGROUND = 1


@dataclass(frozen=True)
class PromptPoint:
    x: int
    y: int
    label: PointLabel = PointLabel.FOREGROUND

    @property
    def is_foreground(self) -> bool:
        return int(self.label) == PointLabel.FOREGROUND


class PromptSet:
    """Ordered click history; undo removes the most recent point."""

    def __init__(self) -> None:
        self._points: List[PromptPoint] = []

    def add(self, x: int, y: int, label: PointLabel = PointLabel.FOREGROUND) -> PromptPoint:
        p = PromptPoint(int(x), int(y), PointLabel(label))
        self._points.append(p)
        return p

    def undo(self) -> bool:
        if not self._points:
            return False
        self._points.pop()
        return True

    def clear(self) -> None:
        self._points.clear()

    def counts(self) -> Tuple[int, int]:
        """(foreground, background)"""
        fg = sum(1 for p in self._points if p.is_foreground)
        return fg, len(self._points) - fg

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[PromptPoint]:
        return iter(list(self._points))

    def __bool__(self) -> bool:
        return bool(self._points)


def points_to_arrays(
    points: List[PromptPoint],
    image_wh: Tuple[int, int],
    normalize: bool = False,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build (point_coords [1,P,2], point_labels [1,P]) float32 arrays.

    P = max(len(points), 1): with no clicks a single (0, 0) background point is sent,
    since most exported decoders reject an empty prompt dimension.
    """
    w, h = image_wh
    n = max(len(points), 1)
    coords = np.zeros((1, n, 2), dtype=np.float32)
    labels = np.zeros((1, n), dtype=np.float32)
    for i, p in enumerate(points):
        if normalize:
            coords[0, i] = (p.x / float(w), p.y / float(h))
        else:
            coords[0, i] = (p.x, p.y)
        labels[0, i] = float(int(p.label))
    return coords, labels
