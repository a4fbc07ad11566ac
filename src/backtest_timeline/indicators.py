"""Daily moving average with gap resets, plus representative price lookup.

Standalone implementation (no timeline model dependencies).
"""

import math
from collections.abc import Mapping
from typing import Any

import numpy as np
import pandas as pd

from src.backtest_timeline.config import DMA_WINDOW, REFERENCE_TOKEN


def _is_finite_price(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def representative_price(
    token_price: Mapping[str, Any] | None,
    reference_token: str = REFERENCE_TOKEN,
) -> float | None:
    """Pick the price that stands for the whole day.

    The reference token wins when it carries a finite number; otherwise
    the first finite number in mapping order. None when there is none.
    """
    if not isinstance(token_price, Mapping):
        return None

    reference = token_price.get(reference_token)
    if _is_finite_price(reference):
        return float(reference)

    for value in token_price.values():
        if _is_finite_price(value):
            return float(value)
    return None


def compute_dma(
    prices: np.ndarray | pd.Series | list,
    window: int = DMA_WINDOW,
) -> np.ndarray:
    """Compute a simple moving average that requires contiguous prices.

    A missing price (None/NaN/inf) resets the window, so the average is
    NaN until *window* consecutive priced days follow the gap.

    Returns np.ndarray of the same length (NaN where undefined).
    """
    window = max(1, int(window))
    data = pd.Series(np.asarray(prices, dtype=float))
    if data.empty:
        return np.array([], dtype=float)

    data = data.where(np.isfinite(data))

    # Every gap opens a new segment; rolling never spans two segments.
    segment = data.isna().cumsum()
    dma = data.groupby(segment).transform(
        lambda s: s.rolling(window, min_periods=window).mean()
    )
    return dma.to_numpy(dtype=float)
