"""Image -> engine input tensor (float32 NCHW, per-channel normalized)."""
from __future__ import annotations

from typing import Sequence

import cv2
import numpy as np


def bgr_to_tensor(
    image_bgr: np.ndarray,
    mean: Sequence[float],
    std: Sequence[float],
) -> np.ndarray:
    """
    image_bgr: uint8 (H,W,3) as read by cv2.imread
    returns float32 (1,3,H,W), RGB channel order, (v - mean) / std per channel
    """
    if image_bgr.ndim != 3 or image_bgr.shape[2] < 3:
        raise ValueError(f"expected (H,W,3) image, got shape {image_bgr.shape}")

    rgb = cv2.cvtColor(image_bgr[:, :, :3], cv2.COLOR_BGR2RGB).astype(np.float32)
    m = np.asarray(mean, dtype=np.float32).reshape(1, 1, 3)
    s = np.asarray(std, dtype=np.float32).reshape(1, 1, 3)
    norm = (rgb - m) / s
    return np.ascontiguousarray(norm.transpose(2, 0, 1)[None, ...])
