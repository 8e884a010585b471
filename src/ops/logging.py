"""
Logging setup.

Diagnostics always go to stderr: in filter mode stdout carries frames.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional


def setup_logging(log_path: Optional[str], log_level: str) -> None:
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_path:
        log_dir = os.path.dirname(log_path)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )
