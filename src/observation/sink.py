"""
Frame sink for forwarding frames downstream (filter mode).
"""

from __future__ import annotations

from typing import BinaryIO

from models.frame import Frame
from .framing import write_frame


class FrameSink:
    """
    Writes whole frames to a binary stream, flushing after each one.
    
    The sink does not own the stream: close() flushes but leaves it open,
    since the stream is normally this process's standard output.
    """

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self._frames_written = 0

    @property
    def frames_written(self) -> int:
        return self._frames_written

    def write(self, frame: Frame) -> None:
        write_frame(self._stream, frame)
        self._frames_written += 1

    def close(self) -> None:
        if not self._stream.closed:
            self._stream.flush()
