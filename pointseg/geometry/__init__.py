"""Mask geometry: occupancy grids, resampling and boundary tracing."""

from .grid import OccupancyGrid, FrozenGridError
from .direction import Direction
from .polygon import Polygon
from .resample import (
    RawMaskGrid,
    MaskError,
    InvalidDimensions,
    MissingData,
    UnexpectedMaskShape,
    resample,
)
from .trace import (
    BoundaryTracer,
    NoRegionFound,
    TraceResult,
    TraceState,
    trace,
    trace_all,
)
from .raster import rasterize

__all__ = [
    "OccupancyGrid",
    "FrozenGridError",
    "Direction",
    "Polygon",
    "RawMaskGrid",
    "MaskError",
    "InvalidDimensions",
    "MissingData",
    "UnexpectedMaskShape",
    "resample",
    "BoundaryTracer",
    "NoRegionFound",
    "TraceResult",
    "TraceState",
    "trace",
    "trace_all",
    "rasterize",
]
