"""Polygon -> occupancy grid (interior plus boundary pixels)."""
from __future__ import annotations

from pointseg.geometry.grid import OccupancyGrid
from pointseg.geometry.polygon import Polygon
from pointseg.utils.masks import polygon_to_mask


def rasterize(polygon: Polygon, width: int, height: int) -> OccupancyGrid:
    mask = polygon_to_mask((int(height), int(width)), polygon.to_array())
    return OccupancyGrid.from_array(mask).freeze()
