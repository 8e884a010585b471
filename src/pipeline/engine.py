"""
Filter loop for the face filter.

One state machine serves both operating modes. The frame source decides
where bytes come from (a spawned pipeline or standard input) and the frame
action decides what happens after detection (log only, or log, annotate
and forward). Frames are processed strictly one at a time, in order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Optional

from detection.base import CascadeParams, Detector
from detection.cascade import CascadeDetector, ClassifierLoadError
from detection.cluster import DEFAULT_IOU_THRESHOLD
from models.config import Config, MODE_SPAWN
from models.detection import apply_score_threshold
from models.frame import Frame, Geometry
from observation import (
    FrameSink,
    FrameSource,
    FramingError,
    PipelineSource,
    PipelineSourceConfig,
    ShortReadError,
    SourceConfig,
    StreamSource,
)
from ops.process import DEFAULT_BASE_ARGS, PipelineSpawnError, PipelineSupervisor
from pipeline.stages.actions import AnnotateAndForwardAction, FrameAction, LogDetectionsAction
from pipeline.stages.throughput import ThroughputMonitor
from runtime.context import RunState

EXIT_OK = 0
EXIT_FAILURE = 1


class LoopState(Enum):
    LOADING = "loading"
    RUNNING = "running"
    DRAINING = "draining"
    TERMINATED = "terminated"


@dataclass
class LoopConfig:
    """
    Configuration for the filter loop.
    
    Attributes:
        geometry: Declared frame geometry.
        cascade_path: Classifier file to load.
        min_score: Detections scoring below this are dropped after clustering.
        cascade_params: Fixed classifier parameters.
        iou_threshold: Overlap above which candidates are merged.
    """
    geometry: Geometry
    cascade_path: str
    min_score: float = 5.0
    cascade_params: CascadeParams = field(default_factory=CascadeParams)
    iou_threshold: float = DEFAULT_IOU_THRESHOLD


class FilterLoop:
    """
    Loading -> Running -> Draining -> Terminated.
    
    - Loading: load the classifier once, then open the source. Either
      failing is fatal and skips Running.
    - Running: per iteration, check cancellation, read one frame, detect,
      threshold, hand off to the action, count throughput.
    - Draining: close the source (terminating any owned pipeline) and flush
      the action's output. Runs on every exit path.
    
    Example:
        loop = FilterLoop(source, LogDetectionsAction(), state, loop_config)
        status = loop.run()
    """

    def __init__(
        self,
        source: FrameSource,
        action: FrameAction,
        state: RunState,
        config: LoopConfig,
        monitor: Optional[ThroughputMonitor] = None,
    ):
        self.source = source
        self.action = action
        self.run_state = state
        self.config = config
        self.monitor = monitor or ThroughputMonitor()
        self.state = LoopState.LOADING
        self.error: Optional[BaseException] = None
        self._detector: Optional[Detector] = None

    @property
    def frame_count(self) -> int:
        return self.run_state.frame_count

    def run(self) -> int:
        """
        Run until end-of-stream, cancellation or a fatal error.
        
        Returns:
            Process exit status: 0 for clean end or cancellation, 1 otherwise.
        """
        status = EXIT_FAILURE
        try:
            self._load()
            self.state = LoopState.RUNNING
            status = self._run_frames()
        except ClassifierLoadError as e:
            self._fail(e, "Failed to load classifier")
        except PipelineSpawnError as e:
            self._fail(e, "Failed to start pipeline")
        except ShortReadError as e:
            self._fail(
                e,
                f"Fatal short read after {self.frame_count} frames "
                f"({e.received} of {e.expected} bytes)",
            )
        except FramingError as e:
            self._fail(
                e,
                f"Fatal frame write error after {self.frame_count} frames "
                f"({e.actual} of {e.expected} bytes)",
            )
        except OSError as e:
            self._fail(e, f"Stream I/O error after {self.frame_count} frames")
        finally:
            if not self._drain():
                status = EXIT_FAILURE
            self.state = LoopState.TERMINATED

        return status

    def _load(self) -> None:
        self.state = LoopState.LOADING
        classifier = self.run_state.load_classifier(self.config.cascade_path)
        logging.info(f"Loaded cascade from {self.config.cascade_path}")
        self._detector = CascadeDetector(
            classifier,
            self.config.cascade_params,
            iou_threshold=self.config.iou_threshold,
        )

        self.source.open()
        geometry = self.config.geometry
        logging.info(
            f"Expecting GRAY8 frames of {geometry.width}x{geometry.height} "
            f"({geometry.frame_size} bytes) from {self.source.source_id}"
        )

    def _run_frames(self) -> int:
        frame = Frame(self.config.geometry)
        token = self.run_state.token
        self.monitor.start()

        while True:
            if token.is_cancelled:
                logging.info("Cancellation requested, stopping main loop")
                return EXIT_OK

            try:
                got_frame = self.source.read(frame)
            except ShortReadError as e:
                # The pipeline is killed on cancel, which can cut a frame short
                if token.is_cancelled:
                    logging.info(
                        f"Input cut off after cancellation ({e.received} of "
                        f"{e.expected} bytes), stopping main loop"
                    )
                    return EXIT_OK
                raise

            if not got_frame:
                logging.info(f"Frame stream ended after {self.frame_count} frames")
                return EXIT_OK

            self.run_state.frame_count += 1
            frame_index = self.run_state.frame_count

            detections = apply_score_threshold(
                self._detector.detect(frame.pixels),
                self.config.min_score,
            )
            self.run_state.detections_reported += len(detections)
            self.action.handle(frame_index, frame, detections)

            self.monitor.record_frame()

    def _fail(self, error: BaseException, message: str) -> None:
        self.error = error
        logging.error(f"{message}: {error}")

    def _drain(self) -> bool:
        """Release input, stop any pipeline, flush output. Returns False on flush failure."""
        self.state = LoopState.DRAINING
        logging.info("Shutting down")
        ok = True

        try:
            self.source.close()
        except OSError as e:
            logging.warning(f"Error closing source: {e}")

        try:
            self.action.close()
        except OSError as e:
            logging.error(f"Error flushing output: {e}")
            ok = False

        return ok


def create_loop_from_config(
    config: Config,
    state: RunState,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
    supervisor: Optional[PipelineSupervisor] = None,
) -> FilterLoop:
    """
    Factory function to build a FilterLoop for the configured mode.
    
    Args:
        config: Typed application config.
        state: Run state (cancellation token, classifier cache).
        stdin: Input stream for filter mode.
        stdout: Output stream for filter mode.
        supervisor: Pipeline supervisor for spawn mode (built from config if None).
    """
    geometry = config.stream.geometry
    det = config.detection
    loop_config = LoopConfig(
        geometry=geometry,
        cascade_path=det.cascade,
        min_score=float(det.min_score),
        cascade_params=CascadeParams(
            min_size=det.min_size,
            max_size=det.max_size,
            shift_factor=det.shift_factor,
            scale_factor=det.scale_factor,
        ),
        iou_threshold=det.iou_threshold,
    )

    if config.mode == MODE_SPAWN:
        if supervisor is None:
            base_args = DEFAULT_BASE_ARGS if config.pipeline.eos_on_shutdown else ()
            supervisor = PipelineSupervisor(config.pipeline.executable, base_args)
        source: FrameSource = PipelineSource(
            PipelineSourceConfig(
                source_id=config.pipeline.executable,
                geometry=geometry,
                command=config.pipeline.command,
            ),
            supervisor,
            state.token,
        )
        action: FrameAction = LogDetectionsAction()
    else:
        if stdin is None or stdout is None:
            raise ValueError("filter mode needs both stdin and stdout streams")
        source = StreamSource(SourceConfig(source_id="stdin", geometry=geometry), stdin)
        action = AnnotateAndForwardAction(FrameSink(stdout))

    return FilterLoop(source, action, state, loop_config)
