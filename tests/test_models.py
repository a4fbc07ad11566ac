"""Tests for timeline models and payload parsing."""

import pytest

from src.backtest_timeline.models import (
    BacktestRequest,
    BacktestResponse,
    StrategyConfig,
    StrategyPoint,
    TimelinePoint,
    Transfer,
    parse_timeline,
)


# ---------------------------------------------------------------------------
# Transfer / StrategyPoint
# ---------------------------------------------------------------------------


def test_transfer_from_dict():
    t = Transfer.from_dict({"from_bucket": "stable", "to_bucket": "spot", "amount_usd": 200})
    assert t == Transfer("stable", "spot", 200.0)


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "spot->lp",
        {"from_bucket": "invalid", "to_bucket": "stable", "amount_usd": 1},
        {"from_bucket": "spot", "to_bucket": ["lp"], "amount_usd": 1},
        {"from_bucket": "spot", "to_bucket": "lp", "amount_usd": "1"},
        {"from_bucket": "spot", "to_bucket": "lp"},
    ],
)
def test_transfer_malformed(raw):
    assert Transfer.from_dict(raw) is None


def test_strategy_point_parses_transfers():
    record = StrategyPoint.from_dict(
        "simple_regime",
        {
            "portfolio_value": 12000,
            "event": None,
            "metrics": {"metadata": {"transfers": [
                {"from_bucket": "spot", "to_bucket": "stable", "amount_usd": 100},
                {"from_bucket": "moon", "to_bucket": "stable", "amount_usd": 100},
            ]}},
        },
    )
    assert record.transfers == (Transfer("spot", "stable", 100.0),)
    assert record.portfolio_value == 12000.0
    assert record.has_activity
    assert not record.is_baseline


def test_strategy_point_non_list_transfers():
    record = StrategyPoint.from_dict(
        "simple_regime", {"metrics": {"metadata": {"transfers": "not-an-array"}}},
    )
    assert record.transfers == ()
    assert not record.has_activity


def test_strategy_point_baseline_by_id():
    assert StrategyPoint.from_dict("dca_classic", {"event": "buy"}).is_baseline


def test_strategy_point_baseline_by_signal():
    record = StrategyPoint.from_dict("weekly", {"event": "buy", "metrics": {"signal": "dca"}})
    assert record.is_baseline


def test_strategy_point_empty_event_is_no_event():
    assert StrategyPoint.from_dict("s", {"event": ""}).event is None


def test_strategy_point_tolerates_garbage():
    record = StrategyPoint.from_dict("s", "garbage")
    assert record == StrategyPoint()


# ---------------------------------------------------------------------------
# TimelinePoint
# ---------------------------------------------------------------------------


def test_timeline_point_from_dict():
    point = TimelinePoint.from_dict(
        {
            "date": "2024-01-01",
            "token_price": {"btc": 50000},
            "sentiment": 45,
            "sentiment_label": "fear",
            "strategies": {"simple_regime": {"event": "sell"}},
        }
    )
    assert point.date == "2024-01-01"
    assert point.token_price == {"btc": 50000}
    assert point.sentiment == 45.0
    assert point.sentiment_label == "fear"
    assert point.dma_200 is None
    assert point.has_signal


def test_timeline_point_defaults_for_missing_fields():
    point = TimelinePoint.from_dict({"date": "2024-01-01"})
    assert point.token_price == {}
    assert point.strategies == {}
    assert not point.has_signal


@pytest.mark.parametrize("raw", [None, [], {"token_price": {}}, {"date": 20240101}])
def test_timeline_point_without_date(raw):
    assert TimelinePoint.from_dict(raw) is None


def test_with_dma_200_returns_copy():
    point = TimelinePoint(date="2024-01-01")
    enriched = point.with_dma_200(48000.0)
    assert enriched.dma_200 == 48000.0
    assert point.dma_200 is None


def test_timeline_point_dict_roundtrip(make_raw_timeline):
    point = TimelinePoint.from_dict(make_raw_timeline(3, transfer_days={2})[2])
    assert TimelinePoint.from_dict(point.to_dict()) == point


def test_parse_timeline_skips_bad_entries():
    timeline = parse_timeline(
        [{"date": "2024-01-01"}, "junk", {"no_date": 1}, {"date": "2024-01-02"}]
    )
    assert [p.date for p in timeline] == ["2024-01-01", "2024-01-02"]


@pytest.mark.parametrize("raw", [None, {}, "timeline", 42])
def test_parse_timeline_non_list(raw):
    assert parse_timeline(raw) == []


# ---------------------------------------------------------------------------
# Service payloads
# ---------------------------------------------------------------------------


def test_request_payload():
    request = BacktestRequest(
        token_symbol="BTC",
        total_capital=10000,
        days=30,
        configs=(
            StrategyConfig("dca_classic", "dca_classic"),
            StrategyConfig("simple_regime", "simple_regime", {"pacing_policy": "fgi_linear"}),
        ),
    )
    assert request.to_payload() == {
        "token_symbol": "BTC",
        "total_capital": 10000,
        "days": 30,
        "configs": [
            {"config_id": "dca_classic", "strategy_id": "dca_classic", "params": {}},
            {
                "config_id": "simple_regime",
                "strategy_id": "simple_regime",
                "params": {"pacing_policy": "fgi_linear"},
            },
        ],
    }


def test_request_payload_omits_days():
    request = BacktestRequest("BTC", 10000, (StrategyConfig("a", "a"),))
    assert "days" not in request.to_payload()


def test_request_from_dict():
    request = BacktestRequest.from_dict(
        {
            "token_symbol": "ETH",
            "total_capital": 5000,
            "configs": [{"strategy_id": "simple_regime", "params": {"k": 1}}],
        }
    )
    assert request.token_symbol == "ETH"
    assert request.days is None
    assert request.configs == (StrategyConfig("simple_regime", "simple_regime", {"k": 1}),)


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"token_symbol": "BTC", "total_capital": "lots", "configs": [{"strategy_id": "a"}]},
        {"token_symbol": "BTC", "total_capital": 1, "configs": []},
        {"token_symbol": "BTC", "total_capital": 1, "configs": [{"config_id": "a"}]},
    ],
)
def test_request_from_dict_invalid(raw):
    with pytest.raises(ValueError):
        BacktestRequest.from_dict(raw)


def test_response_from_dict(make_raw_timeline):
    response = BacktestResponse.from_dict(
        {"strategies": {"dca_classic": {"roi": 0.1}}, "timeline": make_raw_timeline(5)}
    )
    assert response.strategies == {"dca_classic": {"roi": 0.1}}
    assert len(response.timeline) == 5


def test_response_from_garbage():
    response = BacktestResponse.from_dict(None)
    assert response.strategies == {}
    assert response.timeline == []
