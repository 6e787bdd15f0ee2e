"""Inference engine contract used by the session."""
from __future__ import annotations

from typing import List, Protocol

import numpy as np

from pointseg.engine.prompts import PromptPoint
from pointseg.geometry.resample import RawMaskGrid


class SegmentationFailed(RuntimeError):
    """Any engine-side failure (model load, graph run, output lookup)."""


class InferenceEngine(Protocol):
    def infer(self, image_tensor: np.ndarray, points: List[PromptPoint]) -> RawMaskGrid:
        """image_tensor: float32 (1,3,H,W). Returned grid may be at model resolution."""
        ...
