"""
Outline annotation for GRAY8 frames.

Outlines are drawn by brightening perimeter pixels in place rather than by
painting a color, so the annotated frame keeps its GRAY8 format and size.
"""

from __future__ import annotations

import numpy as np

from models.detection import DetectionSet
from models.frame import Frame

DEFAULT_BOOST = 80


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def draw_outline(
    pixels: np.ndarray,
    width: int,
    height: int,
    center_col: int,
    center_row: int,
    radius: int,
    boost: int = DEFAULT_BOOST,
) -> None:
    """
    Brighten the perimeter of a square centered at (center_col, center_row).
    
    Each edge is clamped independently to the frame, so out-of-bounds
    centers never raise. Every perimeter pixel is boosted exactly once
    (corners included) and the result saturates to [0, 255].
    
    Args:
        pixels: (height, width) uint8 array, or a flat buffer of width*height.
        width: Frame width.
        height: Frame height.
        center_col: Square center x.
        center_row: Square center y.
        radius: Half-extent of the square.
        boost: Intensity added to each perimeter pixel.
    """
    if isinstance(pixels, (bytearray, memoryview)):
        view = np.frombuffer(pixels, dtype=np.uint8).reshape(height, width)
    else:
        view = pixels.reshape(height, width)

    if radius < 0:
        return

    x0 = _clamp(center_col - radius, 0, width - 1)
    x1 = _clamp(center_col + radius, 0, width - 1)
    y0 = _clamp(center_row - radius, 0, height - 1)
    y1 = _clamp(center_row + radius, 0, height - 1)

    mask = np.zeros((y1 - y0 + 1, x1 - x0 + 1), dtype=bool)
    mask[0, :] = True
    mask[-1, :] = True
    mask[:, 0] = True
    mask[:, -1] = True

    region = view[y0:y1 + 1, x0:x1 + 1]
    boosted = np.clip(region.astype(np.int16) + boost, 0, 255).astype(np.uint8)
    region[mask] = boosted[mask]


def annotate_detections(frame: Frame, detections: DetectionSet, boost: int = DEFAULT_BOOST) -> None:
    """Draw one outline per detection, radius = scale // 2."""
    for det in detections:
        draw_outline(
            frame.pixels,
            frame.width,
            frame.height,
            det.col,
            det.row,
            det.radius,
            boost=boost,
        )
