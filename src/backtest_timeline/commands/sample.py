"""Enrich and downsample a saved backtest timeline."""

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
from src.backtest_timeline.config import REFERENCE_TOKEN
from src.backtest_timeline.models import BacktestResponse
from src.backtest_timeline.reporting import (
    compute_sampling_stats,
    format_sampling_report,
    save_timeline_json,
)
from src.backtest_timeline.service import prepare_timeline

COMMAND_NAME = "sample"


def register(subparsers) -> None:
    p = subparsers.add_parser(
        COMMAND_NAME, help="Enrich a timeline JSON file with DMA-200 and sample it",
    )
    p.add_argument(
        "--input", type=Path, required=True,
        help="Timeline list or compare response saved as JSON",
    )
    p.add_argument(
        "--reference-token", default=REFERENCE_TOKEN,
        help=f"Token whose price drives DMA-200 (default: {REFERENCE_TOKEN})",
    )
    add_sampling_arguments(p)


def run(args) -> None:
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        raw = load_json(args.input)
    except ValueError as exc:
        print(f"\nERROR: {exc}")
        sys.exit(1)

    # Accept either a bare timeline or a full compare response
    response = BacktestResponse.from_dict(
        raw if isinstance(raw, dict) else {"timeline": raw}
    )
    if not response.timeline:
        print(f"\nERROR: No timeline points found in {args.input}.")
        sys.exit(1)

    raw_timeline = response.timeline
    response.timeline = prepare_timeline(
        raw_timeline,
        sampling_params_from_args(args),
        reference_token=args.reference_token,
    )

    print()
    print(format_sampling_report(compute_sampling_stats(raw_timeline, response.timeline)))

    output_dir = create_output_dir("sample", args.output_dir)
    save_timeline_json(response, output_dir)
