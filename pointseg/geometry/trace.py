"""Boundary tracer: occupancy grid -> ordered pixel polygon.

Hand-on-wall follower over the 4-connected grid. Occupied cells are walkable,
empty cells (and everything outside the grid) are walls. Starting from the
seed facing RIGHT, the walker always prefers the occupied side:

- cell on the left occupied -> turn left and step
- cell ahead occupied       -> step
- otherwise                 -> turn right in place

With y pointing down this walks the top edge first and goes round the region
clockwise on screen, so rings have a positive shoelace area on raw (x, y).

Only the region holding the first occupied pixel (row-major scan) is traced.
Other regions are ignored unless trace_all() is used.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

import numpy as np

from pointseg.geometry.direction import Direction
from pointseg.geometry.grid import OccupancyGrid
from pointseg.geometry.polygon import Point, Polygon
from pointseg.utils.masks import label_regions

logger = logging.getLogger(__name__)


class NoRegionFound(LookupError):
    """The grid has no occupied pixel, so there is nothing to trace."""


class TraceState(Enum):
    CLOSED = "closed"
    BUDGET_EXHAUSTED = "budget_exhausted"


@dataclass(frozen=True)
class TraceResult:
    state: TraceState
    seed: Point
    raw_points: Tuple[Point, ...]
    steps: int
    visited: np.ndarray
    polygon: Polygon

    @property
    def closed(self) -> bool:
        return self.state is TraceState.CLOSED


class BoundaryTracer:
    def __init__(self, min_closed_points: int = 11, budget_factor: int = 4):
        self.min_closed_points = max(1, int(min_closed_points))
        self.budget_factor = max(1, int(budget_factor))

    def walk(self, grid: OccupancyGrid) -> TraceResult:
        seed = grid.first_occupied()
        if seed is None:
            raise NoRegionFound("No mask to export")

        sx, sy = seed
        budget = self.budget_factor * grid.width * grid.height
        visited = np.zeros(grid.shape_hw, dtype=bool)
        raw: List[Point] = []

        x, y = sx, sy
        heading = Direction.RIGHT
        steps = 0

        while steps < budget:
            steps += 1
            raw.append((x, y))
            visited[y, x] = True

            left = heading.turn_left()
            if grid.occupied(*left.step(x, y)):
                heading = left
                x, y = heading.step(x, y)
            elif grid.occupied(*heading.step(x, y)):
                x, y = heading.step(x, y)
            else:
                heading = heading.turn_right()

            if x == sx and y == sy and len(raw) >= self.min_closed_points:
                state = TraceState.CLOSED
                break
        else:
            state = TraceState.BUDGET_EXHAUSTED
            logger.warning(
                "Boundary trace from (%d, %d) hit the step budget (%d) without closing; "
                "returning %d raw points as an open ring",
                sx, sy, budget, len(raw),
            )

        pts = _normalise(raw, seed, state is TraceState.CLOSED)
        return TraceResult(
            state=state,
            seed=seed,
            raw_points=tuple(raw),
            steps=steps,
            visited=visited,
            polygon=Polygon(tuple(pts)),
        )

    def trace(self, grid: OccupancyGrid) -> Polygon:
        """Outer boundary of the first-scanned region. Raises NoRegionFound if empty."""
        return self.walk(grid).polygon

    def trace_all(self, grid: OccupancyGrid) -> List[Polygon]:
        """One polygon per 4-connected region, ordered by each region's seed."""
        labels, order = label_regions(grid.to_u8())
        if not order:
            raise NoRegionFound("No mask to export")

        polys = []
        for lab in order:
            region = OccupancyGrid.from_array(labels == lab).freeze()
            polys.append(self.trace(region))
        return polys


def _normalise(raw: List[Point], seed: Point, closed: bool) -> List[Point]:
    # collapse repeats from in-place turns
    pts: List[Point] = []
    for p in raw:
        if not pts or pts[-1] != p:
            pts.append(p)

    if not closed:
        return pts

    if pts[-1] != seed:
        pts.append(seed)

    # tiny regions go round more than once before the length guard lets the
    # walk stop; leaving the seed towards pts[1] again means a full cycle is done
    for k in range(1, len(pts) - 1):
        if pts[k] == seed and pts[k + 1] == pts[1]:
            return pts[: k + 1]
    return pts


_DEFAULT_TRACER = BoundaryTracer()


def trace(grid: OccupancyGrid) -> Polygon:
    return _DEFAULT_TRACER.trace(grid)


def trace_all(grid: OccupancyGrid) -> List[Polygon]:
    return _DEFAULT_TRACER.trace_all(grid)
