"""Shared configuration dataclasses.

Why this module exists:
- Geometry, engine and export code should NOT import from session-specific modules
  (like session/config.py).
- The session runner, CLI, engine and exporters can all depend on these lightweight types.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


BGR = Tuple[int, int, int]


@dataclass(frozen=True)
class ModelConfig:
    """Inference engine configuration (TorchScript SAM-style graph)."""
    model_path: str
    device: Optional[str] = None
    use_amp: bool = True

    # Output selection: dict key (or tuple position 0) and mask index for [1,N,H,W]
    output_name: str = "masks"
    mask_index: int = 0

    # Logits -> 0.0, probabilities -> 0.5
    threshold: float = 0.0

    # Per-channel RGB normalization used by most SAM variants
    mean: Tuple[float, float, float] = (123.675, 116.28, 103.53)
    std: Tuple[float, float, float] = (58.395, 57.12, 57.375)

    # Send point coords as 0..1 instead of pixels
    normalize_points: bool = False


@dataclass(frozen=True)
class TraceConfig:
    """Boundary tracer parameters."""
    min_closed_points: int = 11
    budget_factor: int = 4
    all_regions: bool = False
    simplify: bool = False


@dataclass(frozen=True)
class OverlayConfig:
    """Mask overlay + prompt point drawing."""
    mask_color: BGR = (0, 255, 0)
    mask_alpha: int = 110
    point_radius: int = 5
    point_fill: BGR = (255, 209, 0)
    point_outline: BGR = (114, 58, 0)
    fg_label_color: BGR = (136, 255, 0)
    bg_label_color: BGR = (119, 51, 255)


@dataclass(frozen=True)
class ExportConfig:
    """Where and how masks are exported."""
    out_dir: str = "exports"
    log_dir: str = "logs"
    png_name: str = "mask.png"
    geojson_name: str = "mask.geojson"
    close_open_rings: bool = True


@dataclass(frozen=True)
class RunConfig:
    """Top-level runtime configuration for one interactive session."""
    image_paths: Tuple[str, ...]
    window_name: str = "Segmenter"

    model: ModelConfig = field(default_factory=lambda: ModelConfig(model_path=""))
    trace: TraceConfig = field(default_factory=TraceConfig)
    overlay: OverlayConfig = field(default_factory=OverlayConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
