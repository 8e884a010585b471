"""
Pipeline stages for the face filter.

Each stage handles a specific part of the per-frame work:
- annotate: Outline drawing
- throughput: Frame counting and FPS reports
- actions: What to do with a frame after detection
"""

from .annotate import draw_outline, annotate_detections
from .throughput import ThroughputMonitor, ThroughputReport, REPORT_EVERY_FRAMES
from .actions import FrameAction, LogDetectionsAction, AnnotateAndForwardAction

__all__ = [
    "draw_outline",
    "annotate_detections",
    "ThroughputMonitor",
    "ThroughputReport",
    "REPORT_EVERY_FRAMES",
    "FrameAction",
    "LogDetectionsAction",
    "AnnotateAndForwardAction",
]
