"""
Face filter: cascade face detection on a raw GRAY8 frame stream.

Two operating modes:

- spawn: start an external media pipeline (gst-launch-1.0) whose stdout
  carries raw GRAY8 frames, and log detections. Frames go nowhere else.
- filter: read frames from stdin, outline detections in place and write
  every frame to stdout, so the process can sit between two pipeline
  stages.

Usage:
    python src/main.py --mode spawn --pipeline "v4l2src ! videoconvert ! videoscale ! \
        video/x-raw,format=GRAY8,width=640,height=480 ! fdsink fd=1 sync=false"

    gst-launch-1.0 -q ... ! fdsink fd=1 | python src/main.py --mode filter | ...

Arguments:
    --config: Path to configuration file (layered over config/default.yaml)
    --mode: spawn or filter
    --width/--height: Frame geometry
    --cascade: Path to the cascade classifier file
    --min-score: Minimum clustered detection score to report
    --pipeline: Pipeline description (spawn mode)
"""

import argparse
import logging
import os
import sys
from typing import Any, Dict, List, Optional, Tuple

import yaml

from models.config import Config, MODE_SPAWN, VALID_MODES
from ops.logging import setup_logging
from ops.signals import CancellationController
from pipeline.engine import EXIT_FAILURE, create_loop_from_config
from runtime.context import RunState


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)
    
    Raises:
        OSError, yaml.YAMLError: A config file exists but cannot be read/parsed.
    """
    config_dir = os.path.dirname(config_path)

    base_path = os.path.join(config_dir, "default.yaml")
    base_cfg: Dict[str, Any] = {}
    if os.path.exists(base_path):
        with open(base_path, "r") as f:
            base_cfg = yaml.safe_load(f) or {}

    local_overrides_path = os.path.join(config_dir, "config.yaml")
    local_cfg: Dict[str, Any] = {}
    if os.path.exists(local_overrides_path):
        with open(local_overrides_path, "r") as f:
            local_cfg = yaml.safe_load(f) or {}

    merged = _deep_merge(base_cfg, local_cfg)

    # Finally apply explicit config_path if it's not one of the layers above
    explicit = os.path.abspath(config_path)
    if (
        os.path.exists(config_path)
        and explicit != os.path.abspath(local_overrides_path)
        and explicit != os.path.abspath(base_path)
    ):
        with open(config_path, "r") as f:
            explicit_cfg = yaml.safe_load(f) or {}
        merged = _deep_merge(merged, explicit_cfg)

    return merged


def apply_cli_overrides(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """Command-line flags win over every config file layer."""
    overrides: Dict[str, Any] = {}
    if args.mode is not None:
        overrides["mode"] = args.mode
    stream = {k: v for k, v in (("width", args.width), ("height", args.height)) if v is not None}
    if stream:
        overrides["stream"] = stream
    detection = {
        k: v for k, v in (("cascade", args.cascade), ("min_score", args.min_score)) if v is not None
    }
    if detection:
        overrides["detection"] = detection
    if args.pipeline is not None:
        overrides["pipeline"] = {"command": args.pipeline}
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if args.log_path is not None:
        overrides["log_path"] = args.log_path
    return _deep_merge(config, overrides)


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.
    
    Args:
        config: Configuration dictionary
        
    Returns:
        Tuple of (is_valid, error_message)
    """
    mode = config.get("mode", "filter")
    if mode not in VALID_MODES:
        return False, f"mode must be one of: {', '.join(VALID_MODES)}"

    stream = config.get("stream") or {}
    for key in ("width", "height"):
        value = stream.get(key)
        if value is None:
            return False, f"Missing stream.{key}"
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            return False, f"stream.{key} must be a positive integer"

    detection = config.get("detection") or {}
    cascade = detection.get("cascade")
    if not isinstance(cascade, str) or not cascade:
        return False, "detection.cascade must be a non-empty path"
    min_score = detection.get("min_score", 5.0)
    if isinstance(min_score, bool) or not isinstance(min_score, (int, float)):
        return False, "detection.min_score must be a number"
    for key in ("min_size", "max_size"):
        if key in detection:
            value = detection[key]
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                return False, f"detection.{key} must be a positive integer"
    if detection.get("min_size", 100) > detection.get("max_size", 600):
        return False, "detection.min_size must not exceed detection.max_size"
    if "scale_factor" in detection:
        sf = detection["scale_factor"]
        if not isinstance(sf, (int, float)) or sf <= 1:
            return False, "detection.scale_factor must be greater than 1"
    if "iou_threshold" in detection:
        iou = detection["iou_threshold"]
        if not isinstance(iou, (int, float)) or not (0 <= iou < 1):
            return False, "detection.iou_threshold must be in [0, 1)"

    if mode == MODE_SPAWN:
        pipeline = config.get("pipeline") or {}
        command = pipeline.get("command")
        if not isinstance(command, str) or not command.strip():
            return False, "pipeline.command is required in spawn mode (use --pipeline)"

    valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if config.get("log_level", "INFO") not in valid_log_levels:
        return False, f"log_level must be one of: {', '.join(valid_log_levels)}"

    return True, None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Face filter for raw GRAY8 frame streams')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--mode', choices=VALID_MODES,
                        help='spawn: run --pipeline and log; filter: stdin -> stdout')
    parser.add_argument('--width', type=int, help='Frame width (pixels)')
    parser.add_argument('--height', type=int, help='Frame height (pixels)')
    parser.add_argument('--cascade', type=str, help='Path to cascade classifier file')
    parser.add_argument('--min-score', type=float, dest='min_score',
                        help='Minimum detection score to report')
    parser.add_argument('--pipeline', type=str,
                        help='Pipeline description ending in GRAY8 video/x-raw to fdsink fd=1')
    parser.add_argument('--log-level', dest='log_level',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument('--log-path', dest='log_path', type=str,
                        help='Also write logs to this file')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main application function. Returns the process exit status."""
    args = build_parser().parse_args(argv)

    try:
        raw_config = load_config(args.config)
    except (OSError, yaml.YAMLError) as e:
        logging.error(f"Failed to load configuration: {e}")
        return EXIT_FAILURE
    raw_config = _deep_merge(Config().to_dict(), raw_config)
    raw_config = apply_cli_overrides(raw_config, args)

    is_valid, error_msg = validate_config(raw_config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        return EXIT_FAILURE

    config = Config.from_dict(raw_config)
    setup_logging(config.log_path, config.log_level)
    logging.info(f"Starting face filter in {config.mode} mode")

    state = RunState()
    loop = create_loop_from_config(
        config,
        state,
        stdin=sys.stdin.buffer,
        stdout=sys.stdout.buffer,
    )
    with CancellationController(state.token):
        status = loop.run()

    logging.info("Exiting.")
    return status


if __name__ == "__main__":
    sys.exit(main())
