"""
Throughput accounting for the filter loop.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

REPORT_EVERY_FRAMES = 60


@dataclass(frozen=True)
class ThroughputReport:
    """Cumulative frames and running-average FPS since loop start."""
    frames: int
    elapsed: float
    fps: float


class ThroughputMonitor:
    """
    Counts frames and reports average FPS every 60 frames.
    
    FPS is cumulative frames over seconds since start(), a running average
    rather than an instantaneous rate.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._start_time: Optional[float] = None
        self._frame_count = 0
        self.last_report: Optional[ThroughputReport] = None

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def start(self) -> None:
        self._start_time = self._clock()
        self._frame_count = 0
        self.last_report = None

    def elapsed(self) -> float:
        if self._start_time is None:
            return 0.0
        return max(0.0, self._clock() - self._start_time)

    def record_frame(self) -> Optional[ThroughputReport]:
        """
        Count one processed frame.
        
        Returns:
            A report on every 60th frame, otherwise None.
        """
        if self._start_time is None:
            self.start()
        self._frame_count += 1
        if self._frame_count % REPORT_EVERY_FRAMES != 0:
            return None

        elapsed = self.elapsed()
        fps = self._frame_count / elapsed if elapsed > 0 else 0.0
        report = ThroughputReport(frames=self._frame_count, elapsed=elapsed, fps=fps)
        self.last_report = report
        logger.info(f"Processed {report.frames} frames ({report.fps:.1f} FPS)")
        return report
