"""Chart downsampling that never drops a trading signal.

A timeline of one point per simulated day is reduced to a bounded number
of points for client-side rendering:
  - The first and last points always survive.
  - Every day on which a non-baseline strategy emitted an event or moved
    funds always survives ("critical" points).
  - The remaining budget is filled with evenly spaced ordinary days.

The budget grows with the number of critical points (plus padding) up to
SamplingParams.max_points, so event-heavy timelines keep some context.
"""

from __future__ import annotations

from dataclasses import replace

import structlog

from src.backtest_timeline.models import IndexedPoint, TimelinePoint
from src.backtest_timeline.params import SamplingParams
from src.backtest_timeline.spacing import space_evenly

log = structlog.get_logger()


def is_critical_point(point: TimelinePoint) -> bool:
    """True when a non-baseline strategy signalled or transferred funds."""
    return point.has_signal


def find_critical_indices(timeline: list[TimelinePoint]) -> list[int]:
    """Ascending indices of boundary points and signal days."""
    last = len(timeline) - 1
    return [
        i for i, point in enumerate(timeline)
        if i == 0 or i == last or is_critical_point(point)
    ]


def _critical_only(
    timeline: list[TimelinePoint],
    critical: list[int],
    params: SamplingParams,
) -> list[TimelinePoint]:
    if len(critical) > params.max_points:
        if params.strict_ceiling:
            interior = space_evenly(critical[1:-1], max(params.max_points - 2, 0))
            thinned = sorted({critical[0], *interior, critical[-1]})
            log.warning(
                "critical_points_thinned",
                n_critical=len(critical),
                n_kept=len(thinned),
                max_points=params.max_points,
            )
            return [timeline[i] for i in thinned]
        log.warning(
            "critical_points_exceed_ceiling",
            n_critical=len(critical),
            max_points=params.max_points,
        )
    return [timeline[i] for i in critical]


def sample_timeline(
    timeline: list[TimelinePoint] | None,
    params: SamplingParams | None = None,
    *,
    min_points: int | None = None,
) -> list[TimelinePoint]:
    """Downsample *timeline* for charting.

    Args:
        timeline: chronologically ordered points, ideally already enriched.
        params: sampling bounds. Falls back to config defaults when *None*.
        min_points: shortcut override for ``params.min_points``.

    Returns:
        A new list holding a subset of the input points (same objects) in
        their original order. Absent or empty input yields an empty list.
    """
    if not timeline:
        return []

    p = params or SamplingParams()
    if min_points is not None:
        p = replace(p, min_points=min_points)

    n = len(timeline)
    if n <= p.min_points:
        return list(timeline)

    critical = find_critical_indices(timeline)
    effective_max = p.effective_max(len(critical))
    if n <= effective_max:
        return list(timeline)

    remaining_slots = effective_max - len(critical)
    if remaining_slots <= 0:
        return _critical_only(timeline, critical, p)

    critical_set = set(critical)
    candidates = [
        IndexedPoint(i, point) for i, point in enumerate(timeline)
        if i not in critical_set
    ]
    filler = space_evenly(candidates, remaining_slots)
    keep = sorted(critical_set.union(f.index for f in filler))

    log.debug(
        "timeline_sampled",
        n_raw=n,
        n_critical=len(critical),
        effective_max=effective_max,
        n_sampled=len(keep),
    )
    return [timeline[i] for i in keep]
