# pointseg/session/run_session.py
"""
Main interactive segmentation loop.

Responsibilities:
- Load the inference engine (failure is shown in the window, not fatal)
- Open the first image, let the user place prompt points
- Run engine -> resample -> overlay on demand
- Export mask PNG / polygon GeoJSON
- Step through the remaining images
"""
from __future__ import annotations

import logging
from typing import Optional

import cv2

from pointseg.config.types import RunConfig
from pointseg.engine.base import InferenceEngine, SegmentationFailed
from pointseg.engine.torch_engine import TorchSegmentationEngine
from pointseg.geometry.resample import MaskError
from pointseg.geometry.trace import NoRegionFound
from pointseg.session.state import SegmentationSession
from pointseg.session.ui import HELP_TEXT, attach_point_callback, detach_callback
from pointseg.viz.overlay import draw_status, render_overlay

logger = logging.getLogger(__name__)


def build_engine(cfg: RunConfig) -> Optional[TorchSegmentationEngine]:
    try:
        return TorchSegmentationEngine(cfg.model)
    except SegmentationFailed as e:
        logger.error("%s", e)
        return None


def handle_key(session: SegmentationSession, key: int) -> Optional[str]:
    """Apply one key press. Returns a status message, or None if the key is not bound."""
    if key == ord("r"):
        try:
            grid = session.run()
        except (SegmentationFailed, MaskError):
            return "Segmentation failed"
        return f"Mask ready ({grid.count()} px)"

    if key == ord("z"):
        return "Point removed" if session.undo_point() else "No points to undo"

    if key == ord("c"):
        session.clear_points()
        return "Points cleared"

    if key == ord("p"):
        try:
            return f"Saved {session.export_png()}"
        except NoRegionFound:
            return "No mask to export"

    if key == ord("g"):
        try:
            return f"Saved {session.export_polygon()}"
        except NoRegionFound:
            return "No mask to export"

    return None


def run_session(cfg: RunConfig, engine: Optional[InferenceEngine] = None) -> None:
    if not cfg.image_paths:
        raise ValueError("cfg.image_paths must name at least one image")

    if engine is None:
        engine = build_engine(cfg)

    session = SegmentationSession(cfg, engine)
    image_idx = 0
    session.load_image(cfg.image_paths[image_idx])
    status = "Model ready" if engine is not None else "Failed to load model. Check path."

    win = cfg.window_name
    cv2.namedWindow(win, cv2.WINDOW_NORMAL)
    attach_point_callback(win, session)

    try:
        while True:
            vis = render_overlay(session.image, session.grid, session.points, cfg.overlay, status)
            draw_status(vis, HELP_TEXT, org=(10, vis.shape[0] - 15))
            cv2.imshow(win, vis)

            key = cv2.waitKey(20) & 0xFF
            if key == ord("q"):
                break

            if key == ord("n"):
                if image_idx + 1 < len(cfg.image_paths):
                    image_idx += 1
                    session.load_image(cfg.image_paths[image_idx])
                    status = f"Image {image_idx + 1}/{len(cfg.image_paths)}"
                else:
                    status = "Last image"
                continue

            if key == ord("r"):
                busy = vis.copy()
                draw_status(busy, "Running...", org=(10, 55))
                cv2.imshow(win, busy)
                cv2.waitKey(1)

            msg = handle_key(session, key)
            if msg is not None:
                status = msg
    finally:
        detach_callback(win)
        session.close()
        cv2.destroyAllWindows()
