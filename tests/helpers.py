"""Small builders for occupancy grids used across the test modules."""

from __future__ import annotations

from typing import List

import numpy as np

from pointseg.geometry.grid import OccupancyGrid


def grid_from_rows(rows: List[str]) -> OccupancyGrid:
    arr = np.array([[c == "#" for c in row] for row in rows], dtype=bool)
    return OccupancyGrid.from_array(arr)


def rect_grid(width: int, height: int, x0: int, y0: int, w: int, h: int) -> OccupancyGrid:
    arr = np.zeros((height, width), dtype=bool)
    arr[y0 : y0 + h, x0 : x0 + w] = True
    return OccupancyGrid.from_array(arr)
