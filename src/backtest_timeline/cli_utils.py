"""Shared CLI utilities for the timeline subcommands.

Logging setup, output directory creation, and JSON input loading used by
every command module.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

import structlog

from src.backtest_timeline.config import DEFAULT_OUTPUT_DIR
from src.backtest_timeline.params import SamplingParams


def setup_logging(level: int = logging.INFO) -> None:
    """Configure structlog with console rendering."""
    logging.basicConfig(level=level, format="%(message)s")
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def create_output_dir(prefix: str, base_dir: Path = DEFAULT_OUTPUT_DIR) -> Path:
    """Create a timestamped output directory under *base_dir*."""
    dt = datetime.now().strftime("%Y%m%d_%H%M%S")
    output_dir = Path(base_dir) / f"{prefix}_{dt}"
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def load_json(path: Path) -> Any:
    """Read a JSON document.

    Raises:
        ValueError: when the file is missing or not valid JSON.
    """
    try:
        with open(path) as f:
            return json.load(f)
    except FileNotFoundError as exc:
        raise ValueError(f"File not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc


def add_sampling_arguments(p) -> None:
    """Register the sampling bound flags shared by every command."""
    p.add_argument(
        "--min-points", type=int, default=None,
        help="Timelines at or below this length are not sampled (default: 90)",
    )
    p.add_argument(
        "--max-points", type=int, default=None,
        help="Ceiling for the sampled point budget (default: 150)",
    )
    p.add_argument(
        "--event-padding", type=int, default=None,
        help="Slack added to the critical point count (default: 20)",
    )
    p.add_argument(
        "--strict-ceiling", action="store_true",
        help="Thin critical points when they alone exceed --max-points",
    )
    p.add_argument(
        "--output-dir", type=Path, default=DEFAULT_OUTPUT_DIR,
        help="Base directory for timestamped output (default: output)",
    )
    p.add_argument(
        "--verbose", action="store_true",
        help="Enable debug logging",
    )


def sampling_params_from_args(args) -> SamplingParams:
    """Build SamplingParams from parsed flags, keeping defaults for unset ones."""
    overrides = {
        name: getattr(args, name)
        for name in ("min_points", "max_points", "event_padding")
        if getattr(args, name, None) is not None
    }
    return SamplingParams(
        strict_ceiling=getattr(args, "strict_ceiling", False), **overrides,
    )
