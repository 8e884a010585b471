"""
Pipeline module for the face filter.

The pipeline orchestrates the per-frame flow:
- Frame acquisition from a FrameSource
- Detection, clustering and score threshold
- Mode-specific action (log, or annotate and forward)
- Throughput accounting
"""

from .engine import (
    FilterLoop,
    LoopConfig,
    LoopState,
    EXIT_OK,
    EXIT_FAILURE,
    create_loop_from_config,
)
from .stages.throughput import ThroughputMonitor

__all__ = [
    "FilterLoop",
    "LoopConfig",
    "LoopState",
    "EXIT_OK",
    "EXIT_FAILURE",
    "create_loop_from_config",
    "ThroughputMonitor",
]
