"""
Frame source over an existing binary stream (e.g., standard input).
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Optional

from .base import FrameSource, SourceConfig

logger = logging.getLogger(__name__)


class StreamSource(FrameSource):
    """
    Reads frames from a stream handed in by the caller.
    
    Used in filter mode, where an external orchestrator connects this
    process's standard input to an upstream stage.
    """

    def __init__(self, config: SourceConfig, stream: BinaryIO):
        super().__init__(config)
        self._stream: Optional[BinaryIO] = stream

    @property
    def stream(self) -> Optional[BinaryIO]:
        return self._stream

    def open(self) -> None:
        if self._stream is None:
            raise RuntimeError(f"Source {self.source_id} was already closed")
        self._is_open = True
        self._frame_index = 0

    def close(self) -> None:
        if self._stream is None:
            return
        try:
            self._stream.close()
        except OSError as e:
            logger.warning(f"Error closing input stream: {e}")
        finally:
            self._stream = None
            self._is_open = False
