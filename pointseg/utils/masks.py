# pointseg/utils/masks.py
"""Mask utilities for polygon-to-mask conversion and region labelling."""
from __future__ import annotations

from typing import List, Tuple

import cv2
import numpy as np


def polygon_to_mask(shape_hw: Tuple[int, int], poly: np.ndarray) -> np.ndarray:
    """Convert polygon to binary mask.

    Args:
        shape_hw: (height, width) tuple for output mask shape
        poly: Numpy array of polygon points (N, 2), pixel centres

    Returns:
        Binary mask (uint8) with 255 inside and on the polygon, 0 outside
    """
    m = np.zeros(shape_hw, dtype=np.uint8)
    pts = poly.astype(np.int32).reshape(-1, 2)
    if len(pts) == 0:
        return m
    cv2.fillPoly(m, [pts], 255)
    # fillPoly leaves degenerate (zero-area) rings half drawn
    cv2.polylines(m, [pts], True, 255, 1)
    return m


def label_regions(mask_u8: np.ndarray) -> Tuple[np.ndarray, List[int]]:
    """Label 4-connected foreground regions.

    Args:
        mask_u8: Binary mask (uint8), non-zero is foreground

    Returns:
        (labels, order): label image (int32, 0 = background) and the region labels
        sorted by their first pixel in row-major scan order
    """
    n, labels = cv2.connectedComponents((mask_u8 > 0).astype(np.uint8), connectivity=4)
    if n <= 1:
        return labels, []

    flat = labels.reshape(-1)
    uniq, first = np.unique(flat, return_index=True)
    order = [int(lab) for _, lab in sorted(zip(first, uniq)) if lab != 0]
    return labels, order
