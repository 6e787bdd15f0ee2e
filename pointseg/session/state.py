"""
Interactive segmentation session.

Holds the current image, the prompt points and the latest mask, and wires
engine output -> resample -> (overlay | trace -> export).

Loading a new image replaces everything (points, mask, session log).
"""
from __future__ import annotations

import logging
import time
from typing import List, Optional, Tuple, Union

import cv2
import numpy as np

from pointseg.config.types import RunConfig
from pointseg.engine.base import InferenceEngine, SegmentationFailed
from pointseg.engine.prompts import PointLabel, PromptPoint, PromptSet
from pointseg.engine.tensors import bgr_to_tensor
from pointseg.geometry.grid import OccupancyGrid
from pointseg.geometry.polygon import Polygon
from pointseg.geometry.resample import resample
from pointseg.geometry.trace import BoundaryTracer, NoRegionFound
from pointseg.io.logger import SessionLogger
from pointseg.io.mask_exporter import MaskExporter
from pointseg.utils.time import elapsed_ms

logger = logging.getLogger(__name__)


class SegmentationSession:
    def __init__(self, cfg: RunConfig, engine: Optional[InferenceEngine] = None):
        self.cfg = cfg
        self.engine = engine
        self.tracer = BoundaryTracer(
            min_closed_points=cfg.trace.min_closed_points,
            budget_factor=cfg.trace.budget_factor,
        )

        self.image: Optional[np.ndarray] = None
        self.image_path: Optional[str] = None
        self.points = PromptSet()
        self.grid: Optional[OccupancyGrid] = None

        self._log: Optional[SessionLogger] = None
        self._exporter: Optional[MaskExporter] = None
        self._t0 = time.monotonic()

    # ----------------------------
    # Image / points
    # ----------------------------
    def load_image(self, source: Union[str, np.ndarray], name: Optional[str] = None) -> None:
        if isinstance(source, str):
            img = cv2.imread(source, cv2.IMREAD_COLOR)
            if img is None:
                raise RuntimeError(f"Failed to read image: {source}")
            path: Optional[str] = source
        else:
            img = np.asarray(source)
            if img.ndim == 2:
                img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
            elif img.ndim == 3 and img.shape[2] == 4:
                img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
            path = name

        self.close()
        self.image = img
        self.image_path = path
        self.points.clear()
        self.grid = None
        self._t0 = time.monotonic()
        self._log = SessionLogger(path, self.cfg.export.log_dir)
        self._exporter = MaskExporter(path, self.cfg.export)
        logger.info("Loaded image %s (%dx%d)", path or "<array>", img.shape[1], img.shape[0])

    @property
    def image_wh(self) -> Optional[Tuple[int, int]]:
        if self.image is None:
            return None
        return int(self.image.shape[1]), int(self.image.shape[0])

    def add_point(self, x: int, y: int, label: PointLabel = PointLabel.FOREGROUND) -> PromptPoint:
        if self.image is None:
            raise RuntimeError("Load an image before placing points")
        w, h = self.image_wh
        x = min(max(int(x), 0), w - 1)
        y = min(max(int(y), 0), h - 1)
        return self.points.add(x, y, label)

    def undo_point(self) -> bool:
        return self.points.undo()

    def clear_points(self) -> None:
        self.points.clear()

    # ----------------------------
    # Inference
    # ----------------------------
    def run(self, engine: Optional[InferenceEngine] = None) -> OccupancyGrid:
        engine = engine or self.engine
        if engine is None:
            raise SegmentationFailed("No inference engine loaded")
        if self.image is None:
            raise RuntimeError("Load an image before running segmentation")

        mc = self.cfg.model
        w, h = self.image_wh
        tensor = bgr_to_tensor(self.image, mc.mean, mc.std)

        try:
            raw = engine.infer(tensor, list(self.points))
        except SegmentationFailed as e:
            self._log_failure(str(e))
            raise
        except Exception as e:
            self._log_failure(str(e))
            raise SegmentationFailed(f"segmentation failed: {e}") from e

        self.grid = resample(raw, w, h, threshold=mc.threshold)

        fg, bg = self.points.counts()
        if self._log is not None:
            self._log.log_run(elapsed_ms(self._t0), fg, bg, self.grid.count())
        logger.info(
            "Mask %dx%d -> %dx%d, %d px occupied", raw.width, raw.height, w, h, self.grid.count()
        )
        return self.grid

    def _log_failure(self, reason: str) -> None:
        logger.error("Segmentation failed: %s", reason)
        if self._log is not None:
            self._log.log_failure(elapsed_ms(self._t0), reason)

    # ----------------------------
    # Export
    # ----------------------------
    def polygons(self) -> List[Polygon]:
        if self.grid is None:
            raise NoRegionFound("No mask to export")
        tc = self.cfg.trace
        if tc.all_regions:
            polys = self.tracer.trace_all(self.grid)
        else:
            polys = [self.tracer.trace(self.grid)]
        if tc.simplify:
            polys = [p.simplified() for p in polys]
        return polys

    def export_png(self) -> str:
        if self.grid is None:
            raise NoRegionFound("No mask to export")
        assert self._exporter is not None
        path = self._exporter.save_png(self.grid)
        self._log_export("png", path)
        return path

    def export_polygon(self) -> str:
        polys = self.polygons()
        assert self._exporter is not None
        path = self._exporter.save_geojson(polys, self.image_wh)
        self._log_export("geojson", path)
        return path

    def _log_export(self, kind: str, path: str) -> None:
        if self._log is not None:
            self._log.log_export(elapsed_ms(self._t0), kind, path)

    def close(self) -> None:
        if self._log is not None:
            self._log.close()
            self._log = None
