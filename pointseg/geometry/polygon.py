"""Integer pixel polygon produced by the boundary tracer."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np


Point = Tuple[int, int]


@dataclass(frozen=True)
class Polygon:
    points: Tuple[Point, ...]

    @classmethod
    def from_points(cls, pts: Sequence[Sequence[int]]) -> "Polygon":
        return cls(tuple((int(p[0]), int(p[1])) for p in pts))

    def __len__(self) -> int:
        return len(self.points)

    @property
    def closed(self) -> bool:
        return len(self.points) > 0 and self.points[0] == self.points[-1]

    def closed_ring(self) -> "Polygon":
        """Same polygon with the first point appended if it is not already closed."""
        if self.closed or not self.points:
            return self
        return Polygon(self.points + (self.points[0],))

    def bbox(self) -> Tuple[int, int, int, int]:
        """(x_min, y_min, x_max, y_max), inclusive pixel bounds."""
        if not self.points:
            raise ValueError("empty polygon has no bounding box")
        xs = [p[0] for p in self.points]
        ys = [p[1] for p in self.points]
        return min(xs), min(ys), max(xs), max(ys)

    def signed_area(self) -> float:
        """Shoelace area on raw (x, y) values. Traced rings (clockwise on screen) come out positive."""
        if len(self.points) < 3:
            return 0.0
        pts = np.asarray(self.closed_ring().points, dtype=np.float64)
        x, y = pts[:, 0], pts[:, 1]
        return float(np.sum(x[:-1] * y[1:] - x[1:] * y[:-1]) / 2.0)

    def simplified(self) -> "Polygon":
        """Drop points lying in the middle of a straight run.

        Keeps closure: a closed ring stays closed, the start point is kept even
        when it sits mid-edge.
        """
        pts = list(self.points)
        if len(pts) < 3:
            return self

        was_closed = self.closed
        body = pts[:-1] if was_closed else pts
        n = len(body)

        out: List[Point] = []
        for i, p in enumerate(body):
            if i == 0 or (i == n - 1 and not was_closed):
                out.append(p)
                continue
            prev = body[i - 1]
            nxt = body[(i + 1) % n]
            ax, ay = p[0] - prev[0], p[1] - prev[1]
            bx, by = nxt[0] - p[0], nxt[1] - p[1]
            # keep corners and reversals (tips of 1px filaments)
            if ax * by - ay * bx != 0 or ax * bx + ay * by <= 0:
                out.append(p)

        if was_closed:
            out.append(out[0])
        return Polygon(tuple(out))

    def to_list(self) -> List[List[int]]:
        return [[x, y] for x, y in self.points]

    def to_array(self) -> np.ndarray:
        """(N, 2) int32, the layout cv2 polygon functions expect."""
        return np.asarray(self.points, dtype=np.int32).reshape(-1, 2)
