from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import cv2
import numpy as np

from pointseg.config.types import ExportConfig
from pointseg.geometry.grid import OccupancyGrid
from pointseg.geometry.polygon import Polygon
from pointseg.utils.paths import safe_image_stem

logger = logging.getLogger(__name__)


def mask_to_rgba(grid: OccupancyGrid) -> np.ndarray:
    """(H,W,4) uint8: opaque white where occupied, fully transparent elsewhere."""
    occ = grid.to_array()
    out = np.zeros((grid.height, grid.width, 4), dtype=np.uint8)
    out[occ] = (255, 255, 255, 255)
    return out


def feature_collection(
    polygons: Sequence[Polygon],
    image_wh: Optional[Sequence[int]] = None,
    close_open_rings: bool = True,
) -> Dict[str, Any]:
    """GeoJSON-style FeatureCollection, one Polygon feature per ring.

    Coordinates are [x, y] **pixels**, not lon/lat.
    """
    features = []
    for poly in polygons:
        props: Dict[str, Any] = {"units": "pixels", "traced_closed": poly.closed}
        if image_wh is not None:
            props["image_width"] = int(image_wh[0])
            props["image_height"] = int(image_wh[1])
        ring = poly.closed_ring() if close_open_rings else poly
        features.append(
            {
                "type": "Feature",
                "properties": props,
                "geometry": {"type": "Polygon", "coordinates": [ring.to_list()]},
            }
        )
    return {"type": "FeatureCollection", "features": features}


class MaskExporter:
    """Write mask PNGs and polygon GeoJSON for one image.

    Output folder:
      <out_dir>/<image_stem>/

    Filename contract:
      <image_stem>_<png_name>
      <image_stem>_<geojson_name>

    Existing files are never overwritten, a suffix is added instead:
      <image_stem>_mask_01.png
    """

    def __init__(self, image_path: Optional[str], cfg: ExportConfig):
        self.cfg = cfg
        self.image_stem = safe_image_stem(image_path)

        self.out_dir = Path(cfg.out_dir) / self.image_stem
        self.out_dir.mkdir(parents=True, exist_ok=True)

    def _pick_unique_path(self, name: str) -> Path:
        base = Path(name)
        for n in range(0, 10_000):
            suffix = "" if n == 0 else f"_{n:02d}"
            p = self.out_dir / f"{self.image_stem}_{base.stem}{suffix}{base.suffix}"
            if not p.exists():
                return p
        raise RuntimeError("Could not allocate a unique export filename (too many collisions).")

    def save_png(self, grid: OccupancyGrid) -> str:
        path = self._pick_unique_path(self.cfg.png_name)
        # white is the same in BGRA and RGBA
        if not cv2.imwrite(str(path), mask_to_rgba(grid)):
            raise RuntimeError(f"Failed to write mask image: {path}")
        logger.info("Wrote mask PNG %s (%d occupied px)", path, grid.count())
        return str(path)

    def save_geojson(self, polygons: List[Polygon], image_wh: Sequence[int]) -> str:
        path = self._pick_unique_path(self.cfg.geojson_name)
        gj = feature_collection(polygons, image_wh, close_open_rings=self.cfg.close_open_rings)
        with path.open("w", encoding="utf-8") as fh:
            json.dump(gj, fh)
        logger.info("Wrote %d polygon(s) to %s", len(polygons), path)
        return str(path)
