"""Shared test fixtures for backtest timeline tests."""

from datetime import date, timedelta

import pytest

from src.backtest_timeline.models import TimelinePoint, parse_timeline

START = date(2024, 1, 1)


def raw_point(
    index: int,
    *,
    token_price: dict | None = None,
    signal: bool = False,
    transfer: bool = False,
) -> dict:
    """One day as the analytics engine returns it.

    Every day carries a baseline DCA buy, which must never count as a
    signal. The regime strategy only acts when *signal* or *transfer*.
    """
    regime_metrics: dict = {"signal": "fear"}
    if transfer:
        regime_metrics["metadata"] = {
            "transfers": [{"from_bucket": "spot", "to_bucket": "lp", "amount_usd": 123}],
        }
    return {
        "date": (START + timedelta(days=index)).isoformat(),
        "token_price": (
            token_price if token_price is not None else {"btc": 50000.0 + index * 10}
        ),
        "sentiment": 50,
        "sentiment_label": "neutral",
        "strategies": {
            "dca_classic": {
                "portfolio_value": 10000 + index * 5,
                "portfolio_constituant": {"spot": 5000, "stable": 5000, "lp": 0},
                "event": "buy",
                "metrics": {"signal": "dca"},
            },
            "simple_regime": {
                "portfolio_value": 10000 + index * 8,
                "portfolio_constituant": {"spot": 5000, "stable": 5000, "lp": 0},
                "event": "rebalance" if signal else None,
                "metrics": regime_metrics,
            },
        },
    }


@pytest.fixture
def make_raw_timeline():
    """Factory for raw (JSON-shaped) timelines.

    Usage: make_raw_timeline(500, signal_days={10}, transfer_days={50}).
    """

    def _make(n: int, signal_days=(), transfer_days=(), price=None) -> list[dict]:
        signal_days = set(signal_days)
        transfer_days = set(transfer_days)
        return [
            raw_point(
                i,
                token_price=price(i) if price is not None else None,
                signal=i in signal_days,
                transfer=i in transfer_days,
            )
            for i in range(n)
        ]

    return _make


@pytest.fixture
def make_timeline(make_raw_timeline):
    """Factory for parsed timelines; same arguments as make_raw_timeline."""

    def _make(n: int, **kwargs) -> list[TimelinePoint]:
        return parse_timeline(make_raw_timeline(n, **kwargs))

    return _make


@pytest.fixture
def index_of():
    """Map sampled points back to source positions by date."""

    def _index_of(timeline: list[TimelinePoint], sampled: list[TimelinePoint]) -> list[int]:
        positions = {p.date: i for i, p in enumerate(timeline)}
        return [positions[p.date] for p in sampled]

    return _index_of
