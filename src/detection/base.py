"""
Detection interfaces.

The classifier is an external collaborator: it scores a GRAY8 pixel buffer
and returns raw, possibly overlapping candidates. The detector wraps it
with a clustering pass so callers see one detection per object.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np

from models.detection import Detection, DetectionSet


@dataclass(frozen=True)
class CascadeParams:
    """
    Fixed parameters for one cascade pass.
    
    Attributes:
        min_size: Smallest candidate square, in pixels.
        max_size: Largest candidate square, in pixels.
        shift_factor: Window step as a fraction of the window size.
        scale_factor: Growth factor between successive window sizes.
    """
    min_size: int = 100
    max_size: int = 600
    shift_factor: float = 0.15
    scale_factor: float = 1.1


class Classifier:
    """Cascade classifier interface returning raw candidates in pixel space."""

    def run_cascade(self, pixels: np.ndarray, params: CascadeParams) -> List[Detection]:
        raise NotImplementedError


class Detector:
    """Detector interface returning clustered detections in pixel space."""

    def detect(self, pixels: np.ndarray) -> DetectionSet:
        raise NotImplementedError
