"""Sampling summaries and prepared-timeline export."""

import json
from pathlib import Path

import pandas as pd

from src.backtest_timeline.models import BacktestResponse, TimelinePoint
from src.backtest_timeline.sampling import find_critical_indices


def calculate_actual_days(timeline: list[TimelinePoint]) -> int:
    """Calendar days covered by the timeline, both ends inclusive.

    Returns 0 for fewer than two points or unparseable dates.
    """
    if len(timeline) < 2:
        return 0
    try:
        first = pd.Timestamp(timeline[0].date)
        last = pd.Timestamp(timeline[-1].date)
    except ValueError:
        return 0
    return abs((last - first).days) + 1


def compute_sampling_stats(
    raw: list[TimelinePoint],
    sampled: list[TimelinePoint],
) -> dict:
    """Counts describing one enrich-and-sample run.

    Returns dict with: n_raw, n_sampled, n_critical, n_days, n_with_dma,
    latest_dma.
    """
    with_dma = [p.dma_200 for p in sampled if p.dma_200 is not None]
    latest = sampled[-1].dma_200 if sampled else None
    return {
        "n_raw": len(raw),
        "n_sampled": len(sampled),
        "n_critical": len(find_critical_indices(raw)) if raw else 0,
        "n_days": calculate_actual_days(raw),
        "n_with_dma": len(with_dma),
        "latest_dma": latest,
    }


def format_sampling_report(stats: dict) -> str:
    """Format sampling stats as a readable CLI table."""
    latest = stats["latest_dma"]
    latest_str = f"{latest:>12,.2f}" if latest is not None else f"{'n/a':>12}"
    lines = [
        "Timeline Sampling",
        "-" * 40,
        f"  Raw Points:     {stats['n_raw']:>12d}",
        f"  Sampled Points: {stats['n_sampled']:>12d}",
        f"  Critical Points:{stats['n_critical']:>12d}",
        f"  Days Spanned:   {stats['n_days']:>12d}",
        f"  With DMA-200:   {stats['n_with_dma']:>12d}",
        f"  Latest DMA-200: {latest_str}",
    ]
    return "\n".join(lines)


def save_timeline_json(response: BacktestResponse, output_dir: Path) -> Path:
    """Save the prepared response (strategies + timeline) as JSON. Returns path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / "timeline.json"
    with open(path, "w") as f:
        json.dump(response.to_dict(), f, indent=2, default=str)
    print(f"Timeline JSON saved to {path}")
    return path
