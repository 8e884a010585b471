"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .frame import Geometry

MODE_SPAWN = "spawn"
MODE_FILTER = "filter"
VALID_MODES = (MODE_SPAWN, MODE_FILTER)


@dataclass
class StreamConfig:
    """Frame stream geometry (GRAY8, one byte per pixel)."""
    width: int = 640
    height: int = 480

    @property
    def geometry(self) -> Geometry:
        return Geometry(width=self.width, height=self.height)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "StreamConfig":
        return cls(
            width=d.get("width", 640),
            height=d.get("height", 480),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"width": self.width, "height": self.height}


@dataclass
class DetectionConfig:
    """
    Cascade detector configuration.
    
    min_score is applied after clustering; the remaining fields are passed to
    the classifier unchanged.
    """
    cascade: str = "cascade/haarcascade_frontalface_default.xml"
    min_score: float = 5.0
    min_size: int = 100
    max_size: int = 600
    shift_factor: float = 0.15
    scale_factor: float = 1.1
    iou_threshold: float = 0.2

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DetectionConfig":
        return cls(
            cascade=d.get("cascade", "cascade/haarcascade_frontalface_default.xml"),
            min_score=d.get("min_score", 5.0),
            min_size=d.get("min_size", 100),
            max_size=d.get("max_size", 600),
            shift_factor=d.get("shift_factor", 0.15),
            scale_factor=d.get("scale_factor", 1.1),
            iou_threshold=d.get("iou_threshold", 0.2),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cascade": self.cascade,
            "min_score": self.min_score,
            "min_size": self.min_size,
            "max_size": self.max_size,
            "shift_factor": self.shift_factor,
            "scale_factor": self.scale_factor,
            "iou_threshold": self.iou_threshold,
        }


@dataclass
class PipelineConfig:
    """External media pipeline (spawn mode only)."""
    executable: str = "gst-launch-1.0"
    command: str = ""
    eos_on_shutdown: bool = True

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PipelineConfig":
        return cls(
            executable=d.get("executable", "gst-launch-1.0"),
            command=d.get("command") or "",
            eos_on_shutdown=d.get("eos_on_shutdown", True),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "executable": self.executable,
            "command": self.command,
            "eos_on_shutdown": self.eos_on_shutdown,
        }


@dataclass
class Config:
    """
    Complete application configuration.
    
    This is a typed representation of the YAML config structure.
    """
    mode: str = MODE_FILTER
    stream: StreamConfig = field(default_factory=StreamConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    log_path: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            mode=d.get("mode", MODE_FILTER),
            stream=StreamConfig.from_dict(d.get("stream") or {}),
            detection=DetectionConfig.from_dict(d.get("detection") or {}),
            pipeline=PipelineConfig.from_dict(d.get("pipeline") or {}),
            log_path=d.get("log_path"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary (for saving or passing to existing code)."""
        d: Dict[str, Any] = {
            "mode": self.mode,
            "stream": self.stream.to_dict(),
            "detection": self.detection.to_dict(),
            "pipeline": self.pipeline.to_dict(),
            "log_level": self.log_level,
        }
        if self.log_path:
            d["log_path"] = self.log_path
        return d
