"""Data models for backtest comparison timelines and service payloads."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Literal

import structlog

from src.backtest_timeline.config import (
    BASELINE_SIGNAL,
    BASELINE_STRATEGY_ID,
    BUCKETS,
)

log = structlog.get_logger()

Bucket = Literal["spot", "stable", "lp"]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


@dataclass(frozen=True)
class Transfer:
    """One fund movement between portfolio buckets on a simulated day."""

    from_bucket: Bucket
    to_bucket: Bucket
    amount_usd: float

    @classmethod
    def from_dict(cls, raw: Any) -> Transfer | None:
        """Build a transfer, or None when the entry is malformed."""
        if not isinstance(raw, dict):
            return None
        source = raw.get("from_bucket")
        target = raw.get("to_bucket")
        amount = raw.get("amount_usd")
        if not (isinstance(source, str) and source in BUCKETS):
            return None
        if not (isinstance(target, str) and target in BUCKETS):
            return None
        if not _is_number(amount):
            return None
        return cls(from_bucket=source, to_bucket=target, amount_usd=float(amount))

    def to_dict(self) -> dict:
        return {
            "from_bucket": self.from_bucket,
            "to_bucket": self.to_bucket,
            "amount_usd": self.amount_usd,
        }


@dataclass(frozen=True)
class StrategyPoint:
    """A single strategy's state on one simulated day."""

    portfolio_value: float | None = None
    event: str | None = None  # e.g. "buy", "sell", "rebalance"; None on no-op days
    transfers: tuple[Transfer, ...] = ()
    is_baseline: bool = False  # plain DCA reference, never chart-critical
    portfolio_constituant: dict = field(default_factory=dict)
    metrics: dict = field(default_factory=dict)

    @property
    def has_activity(self) -> bool:
        """True when the strategy signalled or moved funds that day."""
        return self.event is not None or bool(self.transfers)

    @classmethod
    def from_dict(cls, strategy_id: str, raw: Any) -> StrategyPoint:
        """Parse one ``strategies[<id>]`` record from the analytics engine.

        Transfers are read from ``metrics.metadata.transfers``; anything
        that is not a list yields no transfers and malformed entries are
        dropped. The baseline tag is derived here so nothing downstream
        compares strategy identifiers.
        """
        raw = _as_dict(raw)
        metrics = _as_dict(raw.get("metrics"))

        raw_transfers = _as_dict(metrics.get("metadata")).get("transfers")
        transfers: tuple[Transfer, ...] = ()
        if isinstance(raw_transfers, list):
            parsed = (Transfer.from_dict(t) for t in raw_transfers)
            transfers = tuple(t for t in parsed if t is not None)

        event = raw.get("event")
        value = raw.get("portfolio_value")

        return cls(
            portfolio_value=float(value) if _is_number(value) else None,
            event=event if isinstance(event, str) and event else None,
            transfers=transfers,
            is_baseline=(
                strategy_id == BASELINE_STRATEGY_ID
                or metrics.get("signal") == BASELINE_SIGNAL
            ),
            portfolio_constituant=_as_dict(raw.get("portfolio_constituant")),
            metrics=metrics,
        )

    def to_dict(self) -> dict:
        return {
            "portfolio_value": self.portfolio_value,
            "portfolio_constituant": self.portfolio_constituant,
            "event": self.event,
            "metrics": self.metrics,
        }


@dataclass(frozen=True)
class TimelinePoint:
    """One simulated day across all compared strategies.

    Array position is the only chronology; ``date`` is the unique
    identity key. ``dma_200`` stays None until enrichment.
    """

    date: str
    token_price: dict[str, Any] = field(default_factory=dict)
    strategies: dict[str, StrategyPoint] = field(default_factory=dict)
    sentiment: float | None = None
    sentiment_label: str | None = None
    dma_200: float | None = None

    @property
    def has_signal(self) -> bool:
        """True when any non-baseline strategy has an event or transfer."""
        return any(
            not s.is_baseline and s.has_activity
            for s in self.strategies.values()
        )

    def with_dma_200(self, value: float | None) -> TimelinePoint:
        return replace(self, dma_200=value)

    @classmethod
    def from_dict(cls, raw: Any) -> TimelinePoint | None:
        """Parse one timeline entry, or None when it has no usable date."""
        if not isinstance(raw, dict) or not isinstance(raw.get("date"), str):
            return None

        strategies = {
            str(sid): StrategyPoint.from_dict(str(sid), record)
            for sid, record in _as_dict(raw.get("strategies")).items()
        }
        sentiment = raw.get("sentiment")
        label = raw.get("sentiment_label")
        dma = raw.get("dma_200")

        return cls(
            date=raw["date"],
            token_price=dict(_as_dict(raw.get("token_price"))),
            strategies=strategies,
            sentiment=float(sentiment) if _is_number(sentiment) else None,
            sentiment_label=label if isinstance(label, str) else None,
            dma_200=float(dma) if _is_number(dma) else None,
        )

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "token_price": self.token_price,
            "sentiment": self.sentiment,
            "sentiment_label": self.sentiment_label,
            "dma_200": self.dma_200,
            "strategies": {
                sid: record.to_dict() for sid, record in self.strategies.items()
            },
        }


@dataclass(frozen=True)
class IndexedPoint:
    """A timeline point paired with its position in the source timeline."""

    index: int
    point: TimelinePoint


def parse_timeline(raw: Any) -> list[TimelinePoint]:
    """Parse a raw timeline list; bad entries are skipped, never raised."""
    if not isinstance(raw, list):
        return []

    timeline: list[TimelinePoint] = []
    for position, entry in enumerate(raw):
        point = TimelinePoint.from_dict(entry)
        if point is None:
            log.warning("timeline_entry_skipped", position=position)
            continue
        timeline.append(point)
    return timeline


# ---------------------------------------------------------------------------
# Service payloads
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StrategyConfig:
    """One strategy configuration to include in a comparison run."""

    config_id: str
    strategy_id: str
    params: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "config_id": self.config_id,
            "strategy_id": self.strategy_id,
            "params": self.params,
        }


@dataclass(frozen=True)
class BacktestRequest:
    """Comparison request submitted to the analytics engine."""

    token_symbol: str
    total_capital: float
    configs: tuple[StrategyConfig, ...]
    days: int | None = None

    def to_payload(self) -> dict:
        payload: dict[str, Any] = {
            "token_symbol": self.token_symbol,
            "total_capital": self.total_capital,
            "configs": [c.to_dict() for c in self.configs],
        }
        if self.days is not None:
            payload["days"] = self.days
        return payload

    @classmethod
    def from_dict(cls, raw: Any) -> BacktestRequest:
        """Build a request from a JSON document.

        Raises:
            ValueError: when a required field is missing or malformed.
        """
        raw = _as_dict(raw)
        token = raw.get("token_symbol")
        capital = raw.get("total_capital")
        configs = raw.get("configs")
        if not isinstance(token, str) or not token:
            raise ValueError("token_symbol is required")
        if not _is_number(capital):
            raise ValueError("total_capital must be a number")
        if not isinstance(configs, list) or not configs:
            raise ValueError("configs must be a non-empty list")

        parsed = []
        for entry in configs:
            entry = _as_dict(entry)
            strategy_id = entry.get("strategy_id")
            if not isinstance(strategy_id, str):
                raise ValueError("every config needs a strategy_id")
            parsed.append(
                StrategyConfig(
                    config_id=str(entry.get("config_id") or strategy_id),
                    strategy_id=strategy_id,
                    params=_as_dict(entry.get("params")),
                )
            )

        days = raw.get("days")
        return cls(
            token_symbol=token,
            total_capital=capital,
            configs=tuple(parsed),
            days=int(days) if _is_number(days) else None,
        )


@dataclass
class BacktestResponse:
    """Comparison result: per-strategy summaries plus the daily timeline."""

    strategies: dict = field(default_factory=dict)
    timeline: list[TimelinePoint] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Any) -> BacktestResponse:
        raw = _as_dict(raw)
        return cls(
            strategies=_as_dict(raw.get("strategies")),
            timeline=parse_timeline(raw.get("timeline")),
        )

    def to_dict(self) -> dict:
        return {
            "strategies": self.strategies,
            "timeline": [p.to_dict() for p in self.timeline],
        }
