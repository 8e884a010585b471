"""
FrameSource interface for pluggable raw frame inputs.

This defines the contract that all frame sources must implement, so the
filter loop works the same whether frames come from a spawned media
pipeline or from this process's own standard input.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Optional

from models.frame import Frame, Geometry
from .framing import read_frame


@dataclass
class SourceConfig:
    """
    Base configuration for frame sources.
    
    Attributes:
        source_id: Identifier used in log messages.
        geometry: Declared frame geometry. Never inferred from the stream.
    """
    source_id: str = "default"
    geometry: Geometry = Geometry(width=640, height=480)


class FrameSource(ABC):
    """
    Abstract base class for frame sources.
    
    Lifecycle:
        1. Create instance with config
        2. Call open() to acquire the byte stream
        3. Call read(frame) repeatedly; False means end-of-stream
        4. Call close() to release resources
    
    Can also be used as a context manager:
        with StreamSource(config, sys.stdin.buffer) as source:
            while source.read(frame):
                process(frame)
    """

    def __init__(self, config: SourceConfig):
        self._config = config
        self._is_open = False
        self._frame_index = 0

    @property
    def source_id(self) -> str:
        return self._config.source_id

    @property
    def geometry(self) -> Geometry:
        return self._config.geometry

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def frame_index(self) -> int:
        """Number of full frames read since open."""
        return self._frame_index

    @property
    @abstractmethod
    def stream(self) -> Optional[BinaryIO]:
        """The underlying byte stream, or None before open()."""

    @abstractmethod
    def open(self) -> None:
        """
        Acquire the byte stream.
        
        Raises:
            RuntimeError: If the source cannot be opened.
        """

    @abstractmethod
    def close(self) -> None:
        """Release the byte stream. Safe to call multiple times."""

    def read(self, frame: Frame) -> bool:
        """
        Read the next frame into ``frame``.
        
        Returns:
            True for a full frame, False on clean end-of-stream.
        
        Raises:
            ShortReadError: The stream ended mid-frame.
        """
        if not self._is_open or self.stream is None:
            raise RuntimeError(f"Source {self.source_id} must be open before reading")
        if not read_frame(self.stream, frame):
            return False
        self._frame_index += 1
        return True

    def __enter__(self) -> "FrameSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def frames(self, frame: Frame) -> Iterator[Frame]:
        """
        Yield ``frame`` once per successful read until end-of-stream.
        
        The same buffer is yielded every time; its contents are only valid
        until the next iteration.
        """
        if not self._is_open:
            raise RuntimeError("Source must be open before iterating")
        while self.read(frame):
            yield frame
