"""DMA-200 enrichment of a full, unsampled backtest timeline."""

from __future__ import annotations

import numpy as np
import structlog

from src.backtest_timeline.config import DMA_WINDOW, REFERENCE_TOKEN
from src.backtest_timeline.indicators import compute_dma, representative_price
from src.backtest_timeline.models import TimelinePoint

log = structlog.get_logger()


def enrich_timeline_with_dma200(
    timeline: list[TimelinePoint] | None,
    *,
    reference_token: str = REFERENCE_TOKEN,
    window: int = DMA_WINDOW,
) -> list[TimelinePoint]:
    """Attach ``dma_200`` to every point of *timeline*.

    Must run before sampling: the window needs every simulated day.
    Returns new points; the input list and its points are left untouched.
    An absent or empty timeline yields an empty list.
    """
    if not timeline:
        return []

    prices = [representative_price(p.token_price, reference_token) for p in timeline]
    dma = compute_dma(prices, window=window)

    log.debug(
        "timeline_enriched",
        n_points=len(timeline),
        n_unpriced=sum(1 for p in prices if p is None),
        n_with_dma=int(np.count_nonzero(~np.isnan(dma))),
    )
    return [
        point.with_dma_200(None if np.isnan(value) else float(value))
        for point, value in zip(timeline, dma)
    ]
