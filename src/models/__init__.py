"""
Typed models for the face filter.

Frames, detections and configuration. Use the ``from_dict`` adapters to
convert from raw YAML dicts.
"""

from .frame import Frame, Geometry
from .detection import Detection, DetectionSet, apply_score_threshold
from .config import (
    Config,
    StreamConfig,
    DetectionConfig,
    PipelineConfig,
    MODE_SPAWN,
    MODE_FILTER,
    VALID_MODES,
)

__all__ = [
    # Frame
    "Frame",
    "Geometry",
    # Detection
    "Detection",
    "DetectionSet",
    "apply_score_threshold",
    # Config
    "Config",
    "StreamConfig",
    "DetectionConfig",
    "PipelineConfig",
    "MODE_SPAWN",
    "MODE_FILTER",
    "VALID_MODES",
]
