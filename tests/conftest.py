"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from detection.base import Classifier  # noqa: E402


class FakeClassifier(Classifier):
    """Classifier returning a fixed candidate list for every frame."""

    def __init__(self, detections=None):
        self.detections = list(detections or [])
        self.calls = 0
        self.last_shape = None
        self.last_params = None

    def run_cascade(self, pixels, params):
        self.calls += 1
        self.last_shape = pixels.shape
        self.last_params = params
        return list(self.detections)


@pytest.fixture
def fake_classifier():
    return FakeClassifier()


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    
    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
mode: filter

stream:
  width: 640
  height: 480

detection:
  cascade: "cascade/facefinder.xml"
  min_score: 5.0

pipeline:
  executable: gst-launch-1.0
  command: ""

log_level: "INFO"
""")
    
    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "mode": "spawn",
        "stream": {
            "width": 640,
            "height": 480,
        },
        "detection": {
            "cascade": "cascade/facefinder.xml",
            "min_score": 5.0,
            "min_size": 100,
            "max_size": 600,
            "scale_factor": 1.1,
        },
        "pipeline": {
            "executable": "gst-launch-1.0",
            "command": "videotestsrc ! video/x-raw,format=GRAY8 ! fdsink fd=1",
        },
        "log_level": "INFO",
    }
