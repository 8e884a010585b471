"""
Frame source backed by a spawned external media pipeline.

The pipeline tool (gst-launch-1.0 by default) must end in a GRAY8
``video/x-raw`` caps filter and write raw frames to its stdout, e.g.:

    v4l2src ! videoconvert ! videoscale !
    video/x-raw,format=GRAY8,width=640,height=480 ! fdsink fd=1 sync=false
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Optional

from ops.process import PipelineSupervisor
from ops.signals import CancellationToken
from .base import FrameSource, SourceConfig


@dataclass
class PipelineSourceConfig(SourceConfig):
    """
    Attributes:
        command: Pipeline description, tokenized by ``split_args``.
    """
    command: str = ""


class PipelineSource(FrameSource):
    """Reads frames from the stdout of a supervised child process."""

    def __init__(
        self,
        config: PipelineSourceConfig,
        supervisor: PipelineSupervisor,
        token: CancellationToken,
    ):
        super().__init__(config)
        self._pipeline_config = config
        self._supervisor = supervisor
        self._token = token

    @property
    def stream(self) -> Optional[BinaryIO]:
        return self._supervisor.stdout

    def open(self) -> None:
        """
        Spawn the pipeline.
        
        Raises:
            PipelineSpawnError: The command is empty or the process could not start.
        """
        self._supervisor.start(self._pipeline_config.command, self._token)
        self._is_open = True
        self._frame_index = 0

    def close(self) -> None:
        self._supervisor.shutdown()
        self._is_open = False
