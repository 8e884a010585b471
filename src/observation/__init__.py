"""
Frame stream layer.

Raw GRAY8 frames arrive on a byte stream (a spawned pipeline's stdout or
standard input) and, in filter mode, leave on standard output. Framing is
purely positional: exactly ``width * height`` bytes per frame.
"""

from .framing import FramingError, ShortReadError, ShortWriteError, read_frame, write_frame
from .base import FrameSource, SourceConfig
from .stream_source import StreamSource
from .pipeline_source import PipelineSource, PipelineSourceConfig
from .sink import FrameSink

__all__ = [
    "FramingError",
    "ShortReadError",
    "ShortWriteError",
    "read_frame",
    "write_frame",
    "FrameSource",
    "SourceConfig",
    "StreamSource",
    "PipelineSource",
    "PipelineSourceConfig",
    "FrameSink",
]
