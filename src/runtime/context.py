from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from detection.base import Classifier
from detection.cascade import load_classifier
from ops.signals import CancellationToken


@dataclass
class RunState:
    """Process-wide run state; passed explicitly instead of module globals."""

    token: CancellationToken = field(default_factory=CancellationToken)
    loader: Callable[[str], Classifier] = load_classifier

    # Loaded once, read-only afterwards
    classifier: Optional[Classifier] = None
    cascade_path: Optional[str] = None

    # Counters (written by the filter loop only)
    frame_count: int = 0
    detections_reported: int = 0

    def load_classifier(self, path: str) -> Classifier:
        """
        Load the classifier at ``path``, at most once.
        
        A second call with the same path returns the cached instance.
        
        Raises:
            ClassifierLoadError: The cascade file could not be loaded.
            ValueError: A different cascade was already loaded.
        """
        if self.classifier is not None:
            if path != self.cascade_path:
                raise ValueError(
                    f"classifier already loaded from {self.cascade_path}, refusing {path}"
                )
            return self.classifier

        self.classifier = self.loader(path)
        self.cascade_path = path
        return self.classifier

