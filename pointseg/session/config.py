"""Default runtime configuration.

This module provides a *committed* DEFAULT_CONFIG that uses **relative paths** so it
works for other machines when the repo is cloned.

Local override pattern (recommended for your own machine):
- Create: pointseg/session/config_local.py
- Define: DEFAULT_CONFIG = RunConfig(...)
- That file is ignored by .gitignore and will override this DEFAULT_CONFIG at import time.
"""
from __future__ import annotations

from pointseg.config.types import (
    RunConfig,
    ModelConfig,
    TraceConfig,
    OverlayConfig,
    ExportConfig,
)


DEFAULT_CONFIG = RunConfig(
    # Use repo-relative paths (run from repo root)
    image_paths=("images/sample.jpg",),
    window_name="Segmenter",

    model=ModelConfig(
        model_path="models/sam2_hiera_tiny_decoder.pt",
        device=None,  # None -> cuda if available
        use_amp=True,
        output_name="masks",
        mask_index=0,
        threshold=0.0,  # logits; use 0.5 for probability outputs
        normalize_points=False,
    ),

    trace=TraceConfig(
        min_closed_points=11,
        budget_factor=4,
        all_regions=False,
        simplify=False,
    ),

    overlay=OverlayConfig(
        mask_alpha=110,
        point_radius=5,
    ),

    export=ExportConfig(
        out_dir="exports",
        log_dir="logs",
        png_name="mask.png",
        geojson_name="mask.geojson",
        close_open_rings=True,
    ),
)


# ----------------------------
# Local override (optional)
# ----------------------------
try:
    from .config_local import DEFAULT_CONFIG as _LOCAL_DEFAULT_CONFIG  # type: ignore
except ModuleNotFoundError:
    _LOCAL_DEFAULT_CONFIG = None

if _LOCAL_DEFAULT_CONFIG is not None:
    DEFAULT_CONFIG = _LOCAL_DEFAULT_CONFIG
