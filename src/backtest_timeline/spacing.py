"""Evenly spaced selection of items from an ordered sequence."""

import math
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def space_evenly(items: Sequence[T], k: int) -> list[T]:
    """Pick *k* items spread evenly across *items*, keeping their order.

    The first and last items are always picked when k >= 2. Positions are
    ``round_half_up(i * (n - 1) / (k - 1))``, so ``space_evenly(range(10), 3)``
    returns ``[0, 5, 9]``. With k == 1 the middle item (``n // 2``) is used.
    """
    n = len(items)
    if n <= k:
        return list(items)
    if k <= 0:
        return []
    if k == 1:
        return [items[n // 2]]

    step = (n - 1) / (k - 1)
    return [items[_round_half_up(i * step)] for i in range(k)]
