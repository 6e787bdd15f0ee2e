"""Tests for the wall-following boundary tracer."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from helpers import grid_from_rows, rect_grid
from pointseg.geometry.direction import Direction
from pointseg.geometry.grid import OccupancyGrid
from pointseg.geometry.raster import rasterize
from pointseg.geometry.trace import (
    BoundaryTracer,
    NoRegionFound,
    TraceState,
    trace,
    trace_all,
)


def test_direction_turns_cycle() -> None:
    assert Direction.RIGHT.turn_right() is Direction.DOWN
    assert Direction.UP.turn_right() is Direction.RIGHT
    assert Direction.RIGHT.turn_left() is Direction.UP
    assert Direction.DOWN.delta == (0, 1)
    assert Direction.LEFT.step(3, 3) == (2, 3)
    for d in Direction:
        assert d.turn_left().turn_right() is d


def test_empty_grid_has_no_region() -> None:
    with pytest.raises(NoRegionFound):
        trace(OccupancyGrid(5, 4))
    with pytest.raises(LookupError):
        trace_all(OccupancyGrid(1, 1))


@pytest.mark.parametrize("x,y", [(0, 0), (2, 2), (4, 0), (0, 3), (4, 3)])
def test_single_pixel_terminates_within_budget(x: int, y: int) -> None:
    grid = OccupancyGrid(5, 4)
    grid.set(x, y)

    result = BoundaryTracer().walk(grid)

    assert result.steps <= 4 * 5 * 4
    assert result.polygon.points == ((x, y),)
    assert result.visited[y, x]


def test_single_pixel_in_one_by_one_grid() -> None:
    grid = OccupancyGrid(1, 1, np.ones(1))

    poly = trace(grid)

    assert (0, 0) in poly.points


def test_center_block_scenario(center_block: OccupancyGrid) -> None:
    result = BoundaryTracer().walk(center_block)

    assert result.state is TraceState.CLOSED
    assert result.polygon.points == ((1, 1), (2, 1), (2, 2), (1, 2), (1, 1))
    assert len(result.polygon) <= 8
    assert rasterize(result.polygon, 4, 4) == center_block


@pytest.mark.parametrize("w,h", [(3, 3), (5, 3), (3, 6), (7, 4)])
def test_rectangle_bbox_and_closure(w: int, h: int) -> None:
    x0, y0 = 2, 1
    grid = rect_grid(12, 10, x0, y0, w, h)

    result = BoundaryTracer().walk(grid)
    poly = result.polygon

    assert result.state is TraceState.CLOSED
    assert poly.closed
    assert poly.points[0] == (x0, y0)
    assert poly.bbox() == (x0, y0, x0 + w - 1, y0 + h - 1)
    # one lap round the perimeter pixels, plus the closing point
    assert len(poly) == 2 * (w + h) - 4 + 1
    perimeter = {
        (x, y)
        for x in range(x0, x0 + w)
        for y in range(y0, y0 + h)
        if x in (x0, x0 + w - 1) or y in (y0, y0 + h - 1)
    }
    assert set(poly.points) == perimeter


def test_rectangle_is_walked_clockwise_top_edge_first() -> None:
    poly = trace(rect_grid(6, 6, 1, 1, 3, 3))

    assert poly.points[:4] == ((1, 1), (2, 1), (3, 1), (3, 2))
    assert poly.signed_area() == pytest.approx(4.0)


def test_center_block_is_clockwise(center_block: OccupancyGrid) -> None:
    assert trace(center_block).signed_area() > 0


def test_l_shape_is_clockwise() -> None:
    grid = grid_from_rows(
        [
            ".......",
            ".##....",
            ".##....",
            ".#####.",
            ".#####.",
            ".......",
        ]
    )

    poly = trace(grid)

    assert poly.points[:3] == ((1, 1), (2, 1), (2, 2))
    assert poly.signed_area() == pytest.approx(6.0)


def test_two_pixel_region_cut_to_one_cycle() -> None:
    grid = grid_from_rows(["##..", "....", "...."])

    poly = trace(grid)

    assert poly.points == ((0, 0), (1, 0), (0, 0))


def test_l_shape_round_trip() -> None:
    grid = grid_from_rows(
        [
            ".......",
            ".##....",
            ".##....",
            ".#####.",
            ".#####.",
            ".......",
        ]
    )

    poly = trace(grid)

    assert poly.closed
    assert poly.bbox() == (1, 1, 5, 4)
    assert rasterize(poly, 7, 6) == grid
    assert trace(rasterize(poly, 7, 6)) == poly


@pytest.mark.parametrize("w,h", [(3, 3), (4, 7), (9, 5)])
def test_rectangle_round_trip(w: int, h: int) -> None:
    grid = rect_grid(11, 9, 1, 1, w, h)

    poly = trace(grid)

    assert rasterize(poly, 11, 9) == grid


def test_one_pixel_filament_terminates_and_stays_on_region() -> None:
    grid = grid_from_rows(
        [
            "#.......",
            "#.......",
            "#.......",
            "######..",
            "........",
        ]
    )

    result = BoundaryTracer().walk(grid)

    assert result.steps <= 4 * 8 * 5
    assert all(grid.occupied(x, y) for x, y in result.polygon.points)
    assert (5, 3) in result.polygon.points


def test_only_first_scanned_region_is_traced() -> None:
    grid = grid_from_rows(
        [
            "........",
            ".##.....",
            ".##..###",
            ".....###",
            "........",
        ]
    )

    poly = trace(grid)

    assert poly.bbox() == (1, 1, 2, 2)


def test_trace_all_returns_regions_in_seed_order() -> None:
    grid = grid_from_rows(
        [
            ".....###",
            ".##..###",
            ".##.....",
            "........",
            "#.......",
        ]
    )

    polys = trace_all(grid)

    assert [p.bbox() for p in polys] == [(5, 0, 7, 1), (1, 1, 2, 2), (0, 4, 0, 4)]


def test_diagonal_neighbours_are_separate_regions() -> None:
    grid = grid_from_rows(["#..", ".#.", "..."])

    assert len(trace_all(grid)) == 2


def test_budget_exhaustion_returns_open_ring_and_warns(caplog) -> None:
    grid = rect_grid(5, 5, 1, 1, 3, 3)
    tracer = BoundaryTracer(min_closed_points=10_000)

    with caplog.at_level(logging.WARNING, logger="pointseg.geometry.trace"):
        result = tracer.walk(grid)

    assert result.state is TraceState.BUDGET_EXHAUSTED
    assert result.steps == 4 * 5 * 5
    assert not result.polygon.closed
    assert result.polygon.closed_ring().closed
    assert "step budget" in caplog.text


def test_random_grids_trace_stays_on_four_connected_region() -> None:
    rng = np.random.default_rng(42)
    tracer = BoundaryTracer()
    for _ in range(50):
        h, w = rng.integers(1, 12, size=2)
        grid = OccupancyGrid.from_array(rng.random((h, w)) > 0.55)
        if grid.is_empty():
            continue

        result = tracer.walk(grid)
        pts = result.polygon.points

        assert result.steps <= 4 * grid.width * grid.height
        assert pts[0] == grid.first_occupied()
        assert all(grid.occupied(x, y) for x, y in pts)
        for (ax, ay), (bx, by) in zip(pts, pts[1:]):
            assert abs(ax - bx) + abs(ay - by) == 1
