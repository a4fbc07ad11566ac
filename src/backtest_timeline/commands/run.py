"""Submit a comparison request to the analytics engine."""

import logging
import sys
from pathlib import Path

from src.backtest_timeline.cli_utils import (
    add_sampling_arguments,
    create_output_dir,
    load_json,
    sampling_params_from_args,
    setup_logging,
)
from src.backtest_timeline.config import (
    BACKTEST_TIMEOUT_SECONDS,
    MissingConfigurationError,
    get_api_settings,
)
from src.backtest_timeline.models import BacktestRequest
from src.backtest_timeline.reporting import (
    compute_sampling_stats,
    format_sampling_report,
    save_timeline_json,
)
from src.backtest_timeline.service import (
    BacktestClient,
    BacktestServiceError,
    prepare_timeline,
)

COMMAND_NAME = "run"


def register(subparsers) -> None:
    p = subparsers.add_parser(
        COMMAND_NAME, help="Run a backtest comparison and save the chart timeline",
    )
    p.add_argument(
        "--request", type=Path, required=True,
        help="Backtest request JSON (token_symbol, total_capital, configs, days)",
    )
    p.add_argument(
        "--base-url", default=None,
        help="Analytics engine URL (default: $ANALYTICS_ENGINE_URL)",
    )
    p.add_argument(
        "--timeout", type=int, default=BACKTEST_TIMEOUT_SECONDS,
        help=f"Request timeout in seconds (default: {BACKTEST_TIMEOUT_SECONDS})",
    )
    add_sampling_arguments(p)


def run(args) -> None:
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        request = BacktestRequest.from_dict(load_json(args.request))
        client = BacktestClient(get_api_settings(args.base_url), timeout=args.timeout)
    except (ValueError, MissingConfigurationError) as exc:
        print(f"\nERROR: {exc}")
        sys.exit(1)

    print(
        f"\nRunning {len(request.configs)} strategies on {request.token_symbol} "
        f"(capital {request.total_capital:,.0f})..."
    )
    try:
        response = client.compare(request)
    except BacktestServiceError as exc:
        print(f"\nERROR: {exc}")
        sys.exit(1)

    raw_timeline = response.timeline
    response.timeline = prepare_timeline(raw_timeline, sampling_params_from_args(args))

    print()
    print(format_sampling_report(compute_sampling_stats(raw_timeline, response.timeline)))

    output_dir = create_output_dir("backtest", args.output_dir)
    save_timeline_json(response, output_dir)
