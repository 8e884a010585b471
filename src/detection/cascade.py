"""
OpenCV cascade classifier adapter.

Raw candidates come from ``cv2.CascadeClassifier.detectMultiScale3`` with
neighbour grouping disabled (``minNeighbors=0``) and reject levels enabled,
so each window that passes the cascade is returned with its final stage
weight as a score. Grouping is then done by ``cluster_detections``.
"""

from __future__ import annotations

import logging
import os
from typing import List

import cv2
import numpy as np

from models.detection import Detection, DetectionSet
from .base import CascadeParams, Classifier, Detector
from .cluster import DEFAULT_IOU_THRESHOLD, cluster_detections

logger = logging.getLogger(__name__)


class ClassifierLoadError(RuntimeError):
    """The cascade file could not be read or parsed."""


class OpenCVCascadeClassifier(Classifier):
    """
    Wraps a loaded ``cv2.CascadeClassifier``.
    
    OpenCV steps the search window by a fixed pixel stride, so
    ``CascadeParams.shift_factor`` has no counterpart here and is ignored.
    """

    def __init__(self, cascade: "cv2.CascadeClassifier", path: str):
        self._cascade = cascade
        self.path = path

    def run_cascade(self, pixels: np.ndarray, params: CascadeParams) -> List[Detection]:
        rects, _, weights = self._cascade.detectMultiScale3(
            pixels,
            scaleFactor=params.scale_factor,
            minNeighbors=0,
            minSize=(params.min_size, params.min_size),
            maxSize=(params.max_size, params.max_size),
            outputRejectLevels=True,
        )
        if rects is None or len(rects) == 0:
            return []

        weights = np.asarray(weights, dtype=float).reshape(-1)
        return [
            Detection.from_rect(int(x), int(y), int(w), int(h), float(q))
            for (x, y, w, h), q in zip(rects, weights)
        ]


def load_classifier(path: str) -> OpenCVCascadeClassifier:
    """
    Read and parse a cascade file.
    
    Raises:
        ClassifierLoadError: File missing/unreadable or not a valid cascade.
    """
    if not os.path.isfile(path):
        raise ClassifierLoadError(f"Error reading the cascade file: {path} does not exist")
    if not os.access(path, os.R_OK):
        raise ClassifierLoadError(f"Error reading the cascade file: {path} is not readable")

    try:
        cascade = cv2.CascadeClassifier(path)
    except (cv2.error, AttributeError) as e:
        raise ClassifierLoadError(f"Error unpacking the cascade file {path}: {e}") from e
    if cascade.empty():
        raise ClassifierLoadError(f"Error unpacking the cascade file: {path} is not a valid cascade")

    logger.debug(f"Parsed cascade {path}")
    return OpenCVCascadeClassifier(cascade, path)


class CascadeDetector(Detector):
    """Runs a classifier and clusters its raw candidates."""

    def __init__(
        self,
        classifier: Classifier,
        params: CascadeParams = CascadeParams(),
        iou_threshold: float = DEFAULT_IOU_THRESHOLD,
    ):
        self.classifier = classifier
        self.params = params
        self.iou_threshold = iou_threshold

    def detect(self, pixels: np.ndarray) -> DetectionSet:
        candidates = self.classifier.run_cascade(pixels, self.params)
        if not candidates:
            return []
        return cluster_detections(candidates, self.iou_threshold)
