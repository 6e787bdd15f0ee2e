"""Configuration dataclasses and shared config types."""

from .types import (
    ModelConfig,
    TraceConfig,
    OverlayConfig,
    ExportConfig,
    RunConfig,
)

__all__ = [
    "ModelConfig",
    "TraceConfig",
    "OverlayConfig",
    "ExportConfig",
    "RunConfig",
]
