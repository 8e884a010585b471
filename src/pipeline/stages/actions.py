"""
Post-detection actions.

The filter loop is identical in both modes up to detection; what happens to
the thresholded detections and the frame afterwards is delegated here:

- LogDetectionsAction: spawn mode, report only; frames are discarded.
- AnnotateAndForwardAction: filter mode, report, outline, write every frame.
"""

from __future__ import annotations

import logging

from models.detection import DetectionSet
from models.frame import Frame
from observation.sink import FrameSink
from .annotate import DEFAULT_BOOST, annotate_detections

logger = logging.getLogger(__name__)


def log_detections(frame_index: int, detections: DetectionSet) -> None:
    for det in detections:
        logger.info(
            f"frame={frame_index} detection row={det.row} col={det.col} "
            f"scale={det.scale} score={det.score:.2f}"
        )


class FrameAction:
    """Handles one frame's thresholded detections."""

    def handle(self, frame_index: int, frame: Frame, detections: DetectionSet) -> None:
        raise NotImplementedError

    def close(self) -> None:
        """Flush any output. Safe to call multiple times."""


class LogDetectionsAction(FrameAction):
    def handle(self, frame_index: int, frame: Frame, detections: DetectionSet) -> None:
        log_detections(frame_index, detections)


class AnnotateAndForwardAction(FrameAction):
    """Logs, outlines detections in place, then forwards the frame."""

    def __init__(self, sink: FrameSink, boost: int = DEFAULT_BOOST):
        self.sink = sink
        self.boost = boost

    def handle(self, frame_index: int, frame: Frame, detections: DetectionSet) -> None:
        log_detections(frame_index, detections)
        if detections:
            annotate_detections(frame, detections, boost=self.boost)
        self.sink.write(frame)

    def close(self) -> None:
        self.sink.close()
