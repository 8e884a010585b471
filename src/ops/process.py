"""
External media pipeline supervision.

This module provides:
- A minimal command-line tokenizer for pipeline descriptions
- PipelineSupervisor: spawn, expose stdout, terminate on cancel/shutdown
"""

from __future__ import annotations

import logging
import subprocess
from typing import BinaryIO, List, Optional, Sequence, Tuple

from .signals import CancellationToken

logger = logging.getLogger(__name__)

DEFAULT_EXECUTABLE = "gst-launch-1.0"
# gst-launch: forward EOS through the pipeline when interrupted
DEFAULT_BASE_ARGS = ("-e",)


class PipelineSpawnError(RuntimeError):
    """The external pipeline could not be started."""


def split_args(command: str) -> List[str]:
    """
    Split a pipeline description on spaces, keeping double-quoted runs together.
    
    Quote characters are dropped. There is no escaping, no nesting and no
    shell metacharacter handling; this is not a shell parser.
    
    Example:
        >>> split_args('udpsrc caps="application/x-rtp, media=video" ! fakesink')
        ['udpsrc', 'caps=application/x-rtp, media=video', '!', 'fakesink']
    """
    args: List[str] = []
    current = ""
    in_quotes = False

    for ch in command:
        if ch == " ":
            if in_quotes:
                current += ch
            elif current:
                args.append(current)
                current = ""
        elif ch == '"':
            in_quotes = not in_quotes
        else:
            current += ch

    if current:
        args.append(current)
    return args


class PipelineSupervisor:
    """
    Owns one external pipeline process.
    
    The child's stdout is the frame stream; its stderr is inherited so
    pipeline diagnostics pass straight through to ours. shutdown() closes
    the stream and kills the child if it is still running, on every exit
    path, and is safe to call more than once.
    
    Example:
        supervisor = PipelineSupervisor()
        with supervisor:
            process, stdout = supervisor.start(pipeline, token)
            ...
    """

    def __init__(
        self,
        executable: str = DEFAULT_EXECUTABLE,
        base_args: Sequence[str] = DEFAULT_BASE_ARGS,
    ):
        self.executable = executable
        self.base_args = tuple(base_args)
        self._process: Optional[subprocess.Popen] = None
        self._stdout: Optional[BinaryIO] = None
        self._token: Optional[CancellationToken] = None

    @property
    def process(self) -> Optional[subprocess.Popen]:
        return self._process

    @property
    def stdout(self) -> Optional[BinaryIO]:
        return self._stdout

    @property
    def is_running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def build_argv(self, command: str) -> List[str]:
        return [self.executable, *self.base_args, *split_args(command)]

    def start(self, command: str, token: CancellationToken) -> Tuple[subprocess.Popen, BinaryIO]:
        """
        Spawn the pipeline bound to ``token``.
        
        Cancelling the token kills the child, which ends its stdout and
        unblocks the reader.
        
        Raises:
            PipelineSpawnError: Empty command, already started, or spawn failure.
        """
        if self._process is not None:
            raise PipelineSpawnError("pipeline already started")
        if not split_args(command or ""):
            raise PipelineSpawnError("pipeline command is empty")

        argv = self.build_argv(command)
        try:
            process = subprocess.Popen(argv, stdout=subprocess.PIPE, stderr=None)
        except (OSError, ValueError) as e:
            raise PipelineSpawnError(f"failed to start {self.executable}: {e}") from e

        self._process = process
        self._stdout = process.stdout
        self._token = token
        token.add_callback(self.terminate)
        logger.info(f"Started {self.executable} (pid {process.pid}) with args: {argv}")
        return process, process.stdout

    def terminate(self) -> None:
        """Kill the child if it is still running. Does not close stdout."""
        process = self._process
        if process is None or process.poll() is not None:
            return
        process.kill()

    def shutdown(self) -> None:
        """Close the output stream and kill and reap the child."""
        if self._token is not None:
            self._token.remove_callback(self.terminate)
            self._token = None

        if self._stdout is not None:
            try:
                self._stdout.close()
            except OSError as e:
                logger.warning(f"Error closing pipeline stdout: {e}")
            self._stdout = None

        process = self._process
        if process is None:
            return
        self.terminate()
        returncode = process.wait()
        logger.info(f"{self.executable} exited with status {returncode}")

    def __enter__(self) -> "PipelineSupervisor":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()
