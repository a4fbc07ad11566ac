"""CLI dispatcher with subcommands for backtest_timeline."""

from __future__ import annotations

import argparse


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="timeline",
        description="Backtest timeline DMA-200 enrichment and chart sampling",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    from src.backtest_timeline.commands import run, sample

    commands: dict[str, object] = {}
    for mod in [sample, run]:
        mod.register(subparsers)
        commands[mod.COMMAND_NAME] = mod.run

    args = parser.parse_args(argv)
    commands[args.command](args)


if __name__ == "__main__":
    main()
