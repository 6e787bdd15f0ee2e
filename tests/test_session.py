"""Session tests with a fake engine (no model, no window)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

import cv2
import numpy as np
import pytest

from pointseg.config.types import ExportConfig, ModelConfig, RunConfig, TraceConfig
from pointseg.engine.base import SegmentationFailed
from pointseg.engine.prompts import PointLabel, PromptPoint
from pointseg.geometry.resample import RawMaskGrid
from pointseg.geometry.trace import NoRegionFound
from pointseg.session.run_session import handle_key
from pointseg.session.state import SegmentationSession


class FakeEngine:
    """Returns a fixed half-resolution score grid and records what it was given."""

    def __init__(self, scores: np.ndarray):
        self.scores = scores
        self.calls: List[tuple] = []

    def infer(self, image_tensor, points):
        self.calls.append((image_tensor.shape, list(points)))
        return RawMaskGrid.from_array(self.scores)


class BrokenEngine:
    def infer(self, image_tensor, points):
        raise ValueError("graph exploded")


def center_scores() -> np.ndarray:
    s = np.full((4, 4), -2.0, dtype=np.float32)
    s[1:3, 1:3] = 3.0
    return s


def make_cfg(tmp_path: Path, **trace_kw) -> RunConfig:
    return RunConfig(
        image_paths=("unused.png",),
        model=ModelConfig(model_path=""),
        trace=TraceConfig(**trace_kw),
        export=ExportConfig(out_dir=str(tmp_path / "exports"), log_dir=str(tmp_path / "logs")),
    )


@pytest.fixture
def session(tmp_path: Path):
    s = SegmentationSession(make_cfg(tmp_path), FakeEngine(center_scores()))
    s.load_image(np.zeros((8, 8, 3), dtype=np.uint8), name="sample.png")
    yield s
    s.close()


def test_run_resamples_to_image_size(session: SegmentationSession) -> None:
    session.add_point(3, 3)
    session.add_point(0, 0, PointLabel.BACKGROUND)

    grid = session.run()

    assert (grid.width, grid.height) == (8, 8)
    assert grid.count() == 16
    assert grid.first_occupied() == (2, 2)
    shape, points = session.engine.calls[0]
    assert shape == (1, 3, 8, 8)
    assert points == [PromptPoint(3, 3), PromptPoint(0, 0, PointLabel.BACKGROUND)]


def test_points_are_clamped_to_image(session: SegmentationSession) -> None:
    p = session.add_point(50, -4)

    assert (p.x, p.y) == (7, 0)


def test_undo_and_clear(session: SegmentationSession) -> None:
    session.add_point(1, 1)
    session.add_point(2, 2)

    assert session.undo_point()
    assert len(session.points) == 1
    session.clear_points()
    assert not session.undo_point()


def test_export_polygon_writes_pixel_geojson(session: SegmentationSession, tmp_path: Path) -> None:
    session.add_point(3, 3)
    session.run()

    path = session.export_polygon()

    data = json.loads(Path(path).read_text(encoding="utf-8"))
    ring = data["features"][0]["geometry"]["coordinates"][0]
    assert ring[0] == ring[-1] == [2, 2]
    xs = [p[0] for p in ring]
    ys = [p[1] for p in ring]
    assert (min(xs), min(ys), max(xs), max(ys)) == (2, 2, 5, 5)
    assert Path(path).parent == tmp_path / "exports" / "sample"


def test_export_png(session: SegmentationSession) -> None:
    session.run()

    path = session.export_png()

    img = cv2.imread(path, cv2.IMREAD_UNCHANGED)
    assert img.shape == (8, 8, 4)
    assert int(np.count_nonzero(img[..., 3])) == 16


def test_empty_mask_is_nothing_to_export(tmp_path: Path) -> None:
    s = SegmentationSession(make_cfg(tmp_path), FakeEngine(np.full((2, 2), -1.0)))
    s.load_image(np.zeros((6, 6, 3), dtype=np.uint8), name="blank.png")
    s.run()

    with pytest.raises(NoRegionFound):
        s.export_polygon()
    s.close()

    assert not list((tmp_path / "exports" / "blank").glob("*.geojson"))


def test_export_before_run_is_nothing_to_export(session: SegmentationSession) -> None:
    with pytest.raises(NoRegionFound):
        session.export_png()


def test_engine_failure_is_wrapped(tmp_path: Path) -> None:
    s = SegmentationSession(make_cfg(tmp_path), BrokenEngine())
    s.load_image(np.zeros((4, 4, 3), dtype=np.uint8), name="x.png")

    with pytest.raises(SegmentationFailed):
        s.run()
    s.close()

    log = (tmp_path / "logs" / "x" / "x_session.txt").read_text(encoding="utf-8")
    assert "failed (graph exploded)" in log


def test_no_engine_fails(tmp_path: Path) -> None:
    s = SegmentationSession(make_cfg(tmp_path))
    s.load_image(np.zeros((4, 4, 3), dtype=np.uint8), name="x.png")

    with pytest.raises(SegmentationFailed):
        s.run()
    s.close()


def test_all_regions_and_simplify(tmp_path: Path) -> None:
    scores = np.full((4, 8), -1.0, dtype=np.float32)
    scores[0:2, 0:2] = 1.0
    scores[2:4, 5:8] = 1.0
    s = SegmentationSession(make_cfg(tmp_path, all_regions=True, simplify=True), FakeEngine(scores))
    s.load_image(np.zeros((4, 8, 3), dtype=np.uint8), name="two.png")
    s.run()

    polys = s.polygons()
    s.close()

    assert len(polys) == 2
    assert polys[0].points == ((0, 0), (1, 0), (1, 1), (0, 1), (0, 0))
    assert polys[1].bbox() == (5, 2, 7, 3)


def test_load_image_from_disk_resets_state(tmp_path: Path, session: SegmentationSession) -> None:
    img_path = tmp_path / "photo.png"
    cv2.imwrite(str(img_path), np.full((5, 7, 3), 128, dtype=np.uint8))
    session.add_point(1, 1)
    session.run()

    session.load_image(str(img_path))

    assert session.image_wh == (7, 5)
    assert len(session.points) == 0
    assert session.grid is None
    assert (tmp_path / "logs" / "photo" / "photo_session.txt").exists()


def test_bgra_array_is_loaded_as_bgr(session: SegmentationSession) -> None:
    rgba = np.zeros((6, 5, 4), dtype=np.uint8)
    rgba[..., 0] = 200
    rgba[..., 3] = 255

    session.load_image(rgba, name="alpha.png")

    assert session.image.shape == (6, 5, 3)
    assert int(session.image[0, 0, 0]) == 200
    assert session.image_wh == (5, 6)


def test_load_missing_image(session: SegmentationSession, tmp_path: Path) -> None:
    with pytest.raises(RuntimeError):
        session.load_image(str(tmp_path / "nope.png"))


def test_handle_key_reports_status(session: SegmentationSession) -> None:
    assert handle_key(session, ord("g")) == "No mask to export"
    assert handle_key(session, ord("z")) == "No points to undo"

    session.add_point(3, 3)
    assert handle_key(session, ord("r")) == "Mask ready (16 px)"
    assert handle_key(session, ord("g")).startswith("Saved ")
    assert handle_key(session, ord("c")) == "Points cleared"
    assert handle_key(session, ord("x")) is None


def test_handle_key_run_failure(tmp_path: Path) -> None:
    s = SegmentationSession(make_cfg(tmp_path), BrokenEngine())
    s.load_image(np.zeros((4, 4, 3), dtype=np.uint8), name="x.png")

    assert handle_key(s, ord("r")) == "Segmentation failed"
    s.close()
