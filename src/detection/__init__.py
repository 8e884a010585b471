"""
Face Filter - Detection Module

Cascade classification of GRAY8 frames plus candidate clustering.
"""

from .base import CascadeParams, Classifier, Detector
from .cascade import CascadeDetector, ClassifierLoadError, OpenCVCascadeClassifier, load_classifier
from .cluster import calculate_iou, cluster_detections

__all__ = [
    'CascadeParams',
    'Classifier',
    'Detector',
    'CascadeDetector',
    'ClassifierLoadError',
    'OpenCVCascadeClassifier',
    'load_classifier',
    'calculate_iou',
    'cluster_detections',
]
