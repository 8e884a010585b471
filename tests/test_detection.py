"""
Tests for clustering, score threshold and the cascade detector wiring.
"""

import os

import numpy as np
import pytest

from conftest import FakeClassifier
from detection.base import CascadeParams
from detection.cascade import CascadeDetector, ClassifierLoadError, load_classifier
from detection.cluster import calculate_iou, cluster_detections
from models.detection import Detection, apply_score_threshold


class TestDetection:
    def test_radius(self):
        assert Detection(row=1, col=2, scale=4, score=10.0).radius == 2
        assert Detection(row=1, col=2, scale=5, score=10.0).radius == 2

    def test_from_rect(self):
        det = Detection.from_rect(10, 20, 40, 40, 1.5)
        assert (det.row, det.col, det.scale, det.score) == (40, 30, 40, 1.5)


class TestCalculateIou:
    def test_identical(self):
        assert calculate_iou((0, 0, 10, 10), (0, 0, 10, 10)) == 1.0

    def test_disjoint(self):
        assert calculate_iou((0, 0, 10, 10), (20, 20, 30, 30)) == 0.0

    def test_half_overlap(self):
        assert calculate_iou((0, 0, 10, 10), (5, 0, 15, 10)) == pytest.approx(1 / 3)


class TestClusterDetections:
    def test_merges_overlapping(self):
        dets = [
            Detection(row=50, col=50, scale=40, score=1.0),
            Detection(row=52, col=54, scale=44, score=2.0),
            Detection(row=48, col=50, scale=42, score=0.5),
        ]
        clusters = cluster_detections(dets)

        assert len(clusters) == 1
        merged = clusters[0]
        assert merged.row == 50
        assert merged.col == 51
        assert merged.scale == 42
        assert merged.score == pytest.approx(3.5)

    def test_keeps_separate_objects_in_order(self):
        dets = [
            Detection(row=50, col=50, scale=40, score=1.0),
            Detection(row=50, col=300, scale=40, score=4.0),
            Detection(row=51, col=51, scale=40, score=1.0),
        ]
        clusters = cluster_detections(dets)

        assert [(d.col, d.score) for d in clusters] == [(50, 2.0), (300, 4.0)]

    def test_empty(self):
        assert cluster_detections([]) == []


class TestScoreThreshold:
    def test_keeps_at_or_above(self):
        dets = [
            Detection(row=1, col=1, scale=2, score=4.99),
            Detection(row=1, col=1, scale=2, score=5.0),
            Detection(row=1, col=1, scale=2, score=-3.0),
            Detection(row=1, col=1, scale=2, score=12.0),
        ]
        kept = apply_score_threshold(dets, 5.0)
        assert [d.score for d in kept] == [5.0, 12.0]


class TestCascadeDetector:
    def test_passes_params_and_clusters(self):
        classifier = FakeClassifier([
            Detection(row=10, col=10, scale=8, score=3.0),
            Detection(row=10, col=11, scale=8, score=3.0),
        ])
        params = CascadeParams(min_size=4, max_size=16)
        detector = CascadeDetector(classifier, params)

        dets = detector.detect(np.zeros((20, 30), dtype=np.uint8))

        assert classifier.last_shape == (20, 30)
        assert classifier.last_params is params
        assert len(dets) == 1
        assert dets[0].score == pytest.approx(6.0)

    def test_default_params(self):
        params = CascadeParams()
        assert params.min_size == 100
        assert params.max_size == 600
        assert params.shift_factor == 0.15
        assert params.scale_factor == 1.1


class TestLoadClassifier:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ClassifierLoadError):
            load_classifier(str(tmp_path / "nope.xml"))

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "bad.xml"
        path.write_bytes(b"\x00\x01 not a cascade")
        with pytest.raises(ClassifierLoadError):
            load_classifier(str(path))

    def test_missing_cascade_api(self, tmp_path, monkeypatch):
        import detection.cascade as cascade_module

        path = tmp_path / "face.xml"
        path.write_text("<opencv_storage/>")
        monkeypatch.delattr(cascade_module.cv2, "CascadeClassifier", raising=False)
        with pytest.raises(ClassifierLoadError):
            load_classifier(str(path))

    def test_bundled_opencv_cascade(self):
        cv2 = pytest.importorskip("cv2")
        assert hasattr(cv2, "CascadeClassifier"), "installed OpenCV has no cascade classifier"
        data_dir = getattr(getattr(cv2, "data", None), "haarcascades", None)
        if not data_dir:
            pytest.skip("OpenCV build ships no cascade data")
        path = os.path.join(data_dir, "haarcascade_frontalface_default.xml")
        if not os.path.exists(path):
            pytest.skip("frontal face cascade not bundled")

        classifier = load_classifier(path)
        dets = classifier.run_cascade(np.zeros((120, 160), dtype=np.uint8), CascadeParams(min_size=24, max_size=120))
        assert isinstance(dets, list)
        assert all(isinstance(d, Detection) for d in dets)
