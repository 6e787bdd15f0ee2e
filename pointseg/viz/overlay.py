"""
Mask overlay rendering.

Draws, on a copy of the image:
- the current mask as a semi-transparent colour layer
- prompt points (filled circle + "+"/"-" label)
- an optional status line
"""
from __future__ import annotations

from typing import Iterable, Optional

import cv2
import numpy as np

from pointseg.config.types import OverlayConfig
from pointseg.engine.prompts import PromptPoint
from pointseg.geometry.grid import OccupancyGrid


def blend_mask(image_bgr: np.ndarray, grid: OccupancyGrid, color, alpha: int) -> np.ndarray:
    if grid.shape_hw != image_bgr.shape[:2]:
        raise ValueError(
            f"mask {grid.width}x{grid.height} does not match image "
            f"{image_bgr.shape[1]}x{image_bgr.shape[0]}; resample first"
        )
    out = image_bgr.copy()
    occ = grid.to_array()
    if not occ.any():
        return out

    a = float(np.clip(alpha, 0, 255)) / 255.0
    layer = np.empty_like(out)
    layer[:] = color
    mixed = cv2.addWeighted(out, 1.0 - a, layer, a, 0.0)
    out[occ] = mixed[occ]
    return out


def draw_points(img: np.ndarray, points: Iterable[PromptPoint], cfg: OverlayConfig) -> None:
    for p in points:
        c = (int(p.x), int(p.y))
        cv2.circle(img, c, cfg.point_radius, cfg.point_fill, -1, cv2.LINE_AA)
        cv2.circle(img, c, cfg.point_radius, cfg.point_outline, 2, cv2.LINE_AA)
        cv2.putText(
            img,
            "+" if p.is_foreground else "-",
            (c[0] + 8, c[1] + 4),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.5,
            cfg.fg_label_color if p.is_foreground else cfg.bg_label_color,
            2,
            cv2.LINE_AA,
        )


def draw_status(img: np.ndarray, text: str, org=(10, 25)) -> None:
    # dark outline first so the text stays readable on bright images
    cv2.putText(img, text, org, cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 0, 0), 4, cv2.LINE_AA)
    cv2.putText(img, text, org, cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 2, cv2.LINE_AA)


def render_overlay(
    image_bgr: np.ndarray,
    grid: Optional[OccupancyGrid],
    points: Iterable[PromptPoint],
    cfg: OverlayConfig,
    status: Optional[str] = None,
) -> np.ndarray:
    out = image_bgr.copy() if grid is None else blend_mask(image_bgr, grid, cfg.mask_color, cfg.mask_alpha)
    draw_points(out, points, cfg)
    if status:
        draw_status(out, status)
    return out
