"""
Frame and geometry models for raw grayscale frame streams.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class Geometry:
    """
    Fixed frame geometry for one run.
    
    Attributes:
        width: Pixel columns.
        height: Pixel rows.
    """
    width: int
    height: int

    @property
    def frame_size(self) -> int:
        """Bytes per frame (one byte per pixel, GRAY8)."""
        return self.width * self.height

    def validate(self) -> None:
        if not isinstance(self.width, int) or self.width <= 0:
            raise ValueError(f"width must be a positive integer, got {self.width!r}")
        if not isinstance(self.height, int) or self.height <= 0:
            raise ValueError(f"height must be a positive integer, got {self.height!r}")


@dataclass(eq=False)
class Frame:
    """
    A reusable GRAY8 frame buffer.
    
    The buffer is allocated once and overwritten by every read; ``pixels`` is
    a writable (height, width) view sharing the same memory, so annotating
    the view mutates the bytes that get written downstream.
    
    Attributes:
        geometry: Frame geometry.
        buffer: Raw row-major bytes, exactly ``geometry.frame_size`` long.
        pixels: uint8 numpy view over ``buffer``.
    """
    geometry: Geometry
    buffer: bytearray = field(init=False)
    pixels: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.geometry.validate()
        self.buffer = bytearray(self.geometry.frame_size)
        self.pixels = np.frombuffer(self.buffer, dtype=np.uint8).reshape(
            self.geometry.height, self.geometry.width
        )

    @classmethod
    def allocate(cls, width: int, height: int) -> "Frame":
        return cls(Geometry(width=width, height=height))

    @property
    def width(self) -> int:
        return self.geometry.width

    @property
    def height(self) -> int:
        return self.geometry.height

    def __len__(self) -> int:
        return len(self.buffer)
