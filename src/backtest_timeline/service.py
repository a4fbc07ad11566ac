"""Analytics engine client for backtest comparisons.

Requests go to the v3 backtesting API. The returned timeline is enriched
with dma_200 over every simulated day and only then downsampled, so the
moving average never sees a sampled series.
"""

from __future__ import annotations

from typing import Any

import requests
import structlog

from src.backtest_timeline.config import (
    BACKTEST_ERROR_MESSAGE,
    BACKTEST_TIMEOUT_SECONDS,
    COMPARE_PATH,
    REFERENCE_TOKEN,
    STRATEGIES_PATH,
    ApiSettings,
)
from src.backtest_timeline.enrichment import enrich_timeline_with_dma200
from src.backtest_timeline.models import (
    BacktestRequest,
    BacktestResponse,
    TimelinePoint,
)
from src.backtest_timeline.params import SamplingParams
from src.backtest_timeline.sampling import sample_timeline

log = structlog.get_logger()


class BacktestServiceError(RuntimeError):
    """Raised when the analytics engine cannot serve a backtesting call."""


def prepare_timeline(
    timeline: list[TimelinePoint] | None,
    params: SamplingParams | None = None,
    reference_token: str = REFERENCE_TOKEN,
) -> list[TimelinePoint]:
    """Enrich the full timeline with dma_200, then sample it for charting."""
    enriched = enrich_timeline_with_dma200(timeline, reference_token=reference_token)
    return sample_timeline(enriched, params)


class BacktestClient:
    """Thin wrapper over requests to talk to the analytics engine."""

    def __init__(
        self,
        settings: ApiSettings,
        timeout: int = BACKTEST_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.settings = settings
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def headers(self) -> dict[str, str]:
        return {"Accept": "application/json"}

    def run_backtest(
        self,
        request: BacktestRequest,
        params: SamplingParams | None = None,
    ) -> BacktestResponse:
        """Run a strategy comparison and return a chart-ready response."""
        response = self.compare(request)

        n_raw = len(response.timeline)
        response.timeline = prepare_timeline(response.timeline, params)

        log.info(
            "backtest_completed",
            token=request.token_symbol,
            n_configs=len(request.configs),
            n_raw=n_raw,
            n_sampled=len(response.timeline),
        )
        return response

    def compare(self, request: BacktestRequest) -> BacktestResponse:
        """Submit *request* and return the full, unsampled response."""
        raw = self._request("POST", COMPARE_PATH, json_body=request.to_payload())
        return BacktestResponse.from_dict(raw)

    def get_strategies(self) -> Any:
        """List the strategies the analytics engine can backtest."""
        return self._request("GET", STRATEGIES_PATH)

    def _request(
        self,
        method: str,
        path: str,
        json_body: dict | None = None,
    ) -> Any:
        url = f"{self.settings.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                headers=self.headers,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as exc:
            log.error(
                "backtest_request_failed", method=method, url=url, error=str(exc),
            )
            raise BacktestServiceError(BACKTEST_ERROR_MESSAGE) from exc
