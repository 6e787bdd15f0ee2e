from __future__ import annotations

import pytest

from helpers import grid_from_rows
from pointseg.geometry.grid import OccupancyGrid


@pytest.fixture
def center_block() -> OccupancyGrid:
    return grid_from_rows(
        [
            "....",
            ".##.",
            ".##.",
            "....",
        ]
    )
