"""
Torch inference engine.

Runs an exported SAM-style graph (TorchScript) that takes
    image        float32 [1,3,H,W]
    point_coords float32 [1,P,2]
    point_labels float32 [1,P]
and returns a mask score map [H',W'], [1,H',W'], [1,1,H',W'] or [1,N,H',W'],
either directly, as the first element of a tuple, or under cfg.output_name in a dict.
Keep IO layout consistent with how the graph was exported.
"""
from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np
import torch
import torch.nn as nn

from pointseg.config.types import ModelConfig
from pointseg.engine.base import SegmentationFailed
from pointseg.engine.prompts import PromptPoint, points_to_arrays
from pointseg.geometry.resample import MaskError, RawMaskGrid

logger = logging.getLogger(__name__)


class TorchSegmentationEngine:
    def __init__(self, cfg: ModelConfig, device: Optional[str] = None, module: Optional[nn.Module] = None):
        self.cfg = cfg
        self.device = device or cfg.device or ("cuda" if torch.cuda.is_available() else "cpu")

        if module is None:
            try:
                module = torch.jit.load(cfg.model_path, map_location=self.device)
            except (RuntimeError, ValueError, OSError) as e:
                raise SegmentationFailed(
                    f"Failed to load model from {cfg.model_path!r}. Check path / export format."
                ) from e
            logger.info("Loaded model %s on %s", cfg.model_path, self.device)

        self.model = module.to(self.device)
        self.model.eval()

        # speed knobs
        if self.device.startswith("cuda"):
            torch.backends.cudnn.benchmark = True

    @torch.inference_mode()
    def infer(self, image_tensor: np.ndarray, points: List[PromptPoint]) -> RawMaskGrid:
        _, _, h, w = image_tensor.shape
        coords, labels = points_to_arrays(points, (w, h), normalize=self.cfg.normalize_points)

        x = torch.from_numpy(np.ascontiguousarray(image_tensor, dtype=np.float32)).to(self.device)
        c = torch.from_numpy(coords).to(self.device)
        lab = torch.from_numpy(labels).to(self.device)

        try:
            if self.device.startswith("cuda") and self.cfg.use_amp:
                with torch.amp.autocast("cuda", enabled=True):
                    out = self.model(x, c, lab)
            else:
                out = self.model(x, c, lab)
        except RuntimeError as e:
            raise SegmentationFailed(f"Model run failed: {e}") from e

        masks = self._select_output(out)
        scores = masks.detach().float().cpu().numpy()
        try:
            return RawMaskGrid.from_array(scores, mask_index=self.cfg.mask_index)
        except MaskError as e:
            raise SegmentationFailed(str(e)) from e

    def _select_output(self, out) -> torch.Tensor:
        if isinstance(out, torch.Tensor):
            return out
        if isinstance(out, dict):
            m = out.get(self.cfg.output_name)
        elif isinstance(out, (tuple, list)) and out:
            m = out[0]
        else:
            m = None
        if not isinstance(m, torch.Tensor):
            raise SegmentationFailed(
                f"Output mask not found. Check output_name={self.cfg.output_name!r}"
            )
        return m
