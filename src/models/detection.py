"""
Detection models for cascade classifier results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class Detection:
    """
    A single detection, in the geometry of the frame it came from.
    
    Attributes:
        row: Vertical center in pixels.
        col: Horizontal center in pixels.
        scale: Side of the detection square in pixels.
        score: Classifier confidence. Unbounded, may be negative.
    """
    row: int
    col: int
    scale: int
    score: float

    @property
    def radius(self) -> int:
        """Half-extent of the outline drawn for this detection."""
        return self.scale // 2

    @property
    def bbox(self) -> Tuple[float, float, float, float]:
        """Square region as (x1, y1, x2, y2)."""
        half = self.scale / 2.0
        return (self.col - half, self.row - half, self.col + half, self.row + half)

    @classmethod
    def from_rect(cls, x: int, y: int, w: int, h: int, score: float) -> "Detection":
        """Create from an (x, y, w, h) rectangle as returned by OpenCV."""
        return cls(
            row=int(y + h // 2),
            col=int(x + w // 2),
            scale=int(max(w, h)),
            score=float(score),
        )


# Ordered output of one detection pass; clustering order, not sorted.
DetectionSet = List[Detection]


def apply_score_threshold(detections: DetectionSet, min_score: float) -> DetectionSet:
    """Keep detections with ``score >= min_score``, preserving order."""
    return [d for d in detections if d.score >= min_score]
