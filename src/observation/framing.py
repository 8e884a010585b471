"""
Exact-length framing for raw GRAY8 frame streams.

Frames are concatenated with no header or delimiter; a frame is exactly
``width * height`` bytes. A partial frame at end-of-stream cannot be skipped
or completed without shifting every later frame, so it is always fatal.
"""

from __future__ import annotations

from typing import BinaryIO

from models.frame import Frame


class FramingError(IOError):
    """Base class for frame stream errors. Carries byte counts."""

    def __init__(self, message: str, expected: int, actual: int):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class ShortReadError(FramingError):
    """Stream ended part-way through a frame."""

    def __init__(self, expected: int, received: int):
        super().__init__(
            f"short read: got {received} of {expected} frame bytes before end of stream",
            expected,
            received,
        )

    @property
    def received(self) -> int:
        return self.actual


class ShortWriteError(FramingError):
    """Stream accepted fewer bytes than one full frame."""

    def __init__(self, expected: int, written: int):
        super().__init__(
            f"short write: wrote {written} of {expected} frame bytes",
            expected,
            written,
        )

    @property
    def written(self) -> int:
        return self.actual


def read_frame(stream: BinaryIO, frame: Frame) -> bool:
    """
    Fill ``frame`` with exactly one frame from ``stream``.
    
    Blocks until the full frame is available or the stream ends.
    
    Returns:
        True when a full frame was read, False on a clean end-of-stream
        (zero bytes consumed).
    
    Raises:
        ShortReadError: The stream ended after a partial frame.
    """
    expected = len(frame.buffer)
    view = memoryview(frame.buffer)
    received = 0
    while received < expected:
        n = stream.readinto(view[received:])
        if not n:
            break
        received += n

    if received == expected:
        return True
    if received == 0:
        return False
    raise ShortReadError(expected, received)


def write_frame(stream: BinaryIO, frame: Frame) -> None:
    """
    Write exactly one frame to ``stream`` and flush it.
    
    Raises:
        ShortWriteError: The stream accepted fewer than ``frame_size`` bytes.
    """
    expected = len(frame.buffer)
    written = stream.write(frame.buffer)
    # raw non-blocking streams return None when nothing could be written
    if written is None or written != expected:
        raise ShortWriteError(expected, written or 0)
    stream.flush()
