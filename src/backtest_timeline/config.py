"""Typed configuration for the backtest timeline engine.

All constants are non-tunable. Per-call sampling bounds live in
SamplingParams (params.py), which defaults to the values below.
"""

import os
from dataclasses import dataclass
from pathlib import Path

# ---------------------------------------------------------------------------
# Chart sampling bounds
# ---------------------------------------------------------------------------
MIN_CHART_POINTS: int = 90
MAX_CHART_POINTS: int = 150  # Hard-ish ceiling for the rendered chart
EVENT_PADDING: int = 20  # Slack added to the critical count for the ceiling

# ---------------------------------------------------------------------------
# Moving average
# ---------------------------------------------------------------------------
DMA_WINDOW: int = 200  # Contiguous priced days required for dma_200
REFERENCE_TOKEN: str = "btc"

# ---------------------------------------------------------------------------
# Strategy conventions of the analytics engine
# ---------------------------------------------------------------------------
BASELINE_STRATEGY_ID: str = "dca_classic"
BASELINE_SIGNAL: str = "dca"  # metrics.signal emitted by the baseline
BUCKETS: frozenset[str] = frozenset({"spot", "stable", "lp"})

# ---------------------------------------------------------------------------
# Analytics engine API
# ---------------------------------------------------------------------------
API_BASE_ENV: str = "ANALYTICS_ENGINE_URL"
COMPARE_PATH: str = "/api/v3/backtesting/compare"
STRATEGIES_PATH: str = "/api/v3/backtesting/strategies"
BACKTEST_TIMEOUT_SECONDS: int = 600  # Simulations over long windows are slow
BACKTEST_ERROR_MESSAGE: str = (
    "An unexpected error occurred while running the backtest."
)

# Paths
DEFAULT_OUTPUT_DIR: Path = Path("output")


@dataclass(frozen=True)
class ApiSettings:
    base_url: str


class MissingConfigurationError(RuntimeError):
    """Raised when required configuration is missing."""


def get_api_settings(base_url: str | None = None) -> ApiSettings:
    """Resolve analytics engine settings.

    An explicit *base_url* wins over the ``ANALYTICS_ENGINE_URL``
    environment variable. Trailing slashes are stripped.

    Raises:
        MissingConfigurationError: when neither source provides a URL.
    """
    resolved = base_url or os.getenv(API_BASE_ENV)
    if not resolved:
        raise MissingConfigurationError(
            f"Analytics engine URL is required. Set {API_BASE_ENV} or pass --base-url."
        )
    return ApiSettings(base_url=resolved.rstrip("/"))
