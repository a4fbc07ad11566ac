"""Sampling parameter container for chart downsampling."""

from dataclasses import dataclass

from src.backtest_timeline.config import (
    EVENT_PADDING,
    MAX_CHART_POINTS,
    MIN_CHART_POINTS,
)


@dataclass(frozen=True)
class SamplingParams:
    """Immutable bounds for a single sampling call.

    frozen=True makes it hashable and safe to share between requests.
    Default values match the config.py constants.
    """

    # Timelines at or below this length are returned untouched
    min_points: int = MIN_CHART_POINTS

    # Ceiling for the dynamic budget
    max_points: int = MAX_CHART_POINTS

    # Added to the critical count when deriving the dynamic budget
    event_padding: int = EVENT_PADDING

    # Thin critical points when they alone exceed max_points
    strict_ceiling: bool = False

    def effective_max(self, critical_count: int) -> int:
        """Point budget for a timeline with *critical_count* critical points."""
        return min(
            self.max_points,
            max(self.min_points, critical_count + self.event_padding),
        )
