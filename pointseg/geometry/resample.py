"""Engine score grid -> image-resolution occupancy grid.

Nearest-neighbour only: every destination pixel comes from exactly one source
score, so small source grids give blocky masks. That is expected.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from pointseg.geometry.grid import OccupancyGrid


class MaskError(ValueError):
    """Engine output does not fit the configured model (integration error)."""


class InvalidDimensions(MaskError):
    pass


class MissingData(MaskError):
    pass


class UnexpectedMaskShape(MaskError):
    pass


@dataclass(frozen=True)
class RawMaskGrid:
    """Raw engine scores at model resolution, flat row-major float32."""
    width: int
    height: int
    data: np.ndarray

    @classmethod
    def from_array(cls, scores: np.ndarray, mask_index: int = 0) -> "RawMaskGrid":
        """Accepts [H,W], [N,H,W], [1,1,H,W] or [1,N,H,W].

        A single-mask stack always yields that mask; with N > 1 masks the one at
        mask_index is picked.
        """
        a = np.asarray(scores, dtype=np.float32)
        if a.ndim == 4:
            a = _pick_mask(a[0], mask_index, a.shape)
        elif a.ndim == 3:
            a = _pick_mask(a, mask_index, a.shape)
        elif a.ndim != 2:
            raise UnexpectedMaskShape(f"Unexpected mask shape {list(a.shape)}")
        h, w = a.shape
        return cls(width=int(w), height=int(h), data=a.reshape(-1).copy())

    def as_2d(self) -> np.ndarray:
        return np.asarray(self.data, dtype=np.float32).reshape(self.height, self.width)


def _pick_mask(stack: np.ndarray, mask_index: int, shape) -> np.ndarray:
    if stack.shape[0] == 1:
        return stack[0]
    if not 0 <= mask_index < stack.shape[0]:
        raise UnexpectedMaskShape(f"mask_index {mask_index} out of range for shape {list(shape)}")
    return stack[mask_index]


def nearest_indices(target: int, source: int) -> np.ndarray:
    """floor(i / target * source) for i in [0, target), clamped to [0, source - 1]."""
    idx = np.floor(np.arange(target, dtype=np.float64) / target * source).astype(np.int64)
    return np.clip(idx, 0, source - 1)


def resample(
    raw: RawMaskGrid,
    target_width: int,
    target_height: int,
    threshold: float = 0.0,
) -> OccupancyGrid:
    """Map each destination pixel to one source score and threshold it (strict >)."""
    src_w, src_h = int(raw.width), int(raw.height)
    if src_w <= 0 or src_h <= 0:
        raise InvalidDimensions(f"source grid must be positive, got {src_w}x{src_h}")
    if int(target_width) <= 0 or int(target_height) <= 0:
        raise InvalidDimensions(
            f"target size must be positive, got {target_width}x{target_height}"
        )

    flat = np.asarray(raw.data, dtype=np.float32).reshape(-1)
    if flat.size != src_w * src_h:
        raise MissingData(
            f"raw grid has {flat.size} values, expected {src_w}x{src_h}={src_w * src_h}"
        )

    src_x = nearest_indices(int(target_width), src_w)
    src_y = nearest_indices(int(target_height), src_h)

    scores = flat.reshape(src_h, src_w)[np.ix_(src_y, src_x)]
    occ = scores > float(threshold)
    return OccupancyGrid(int(target_width), int(target_height), occ).freeze()
