"""Command line entry point.

Run with: portfolio-tracker show --file positions.json
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from portfolio_tracker.app_context import AppContext
from portfolio_tracker.config.logging_config import setup_logging
from portfolio_tracker.config.settings import get_settings, set_settings
from portfolio_tracker.core.exceptions import AppError
from portfolio_tracker.formatting import render_performance, render_portfolio, render_series

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portfolio-tracker",
        description="Value a portfolio of cash and ticker-backed positions",
    )
    parser.add_argument("command", choices=["show", "watch", "performance"])
    parser.add_argument("--file", type=Path, help="Plaintext positions JSON")
    parser.add_argument("--stub", action="store_true", help="Use the offline stub quote provider")
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    parser.add_argument(
        "--no-record",
        action="store_true",
        help="Do not append the new total to the balance log",
    )
    return parser


def apply_overrides(args: argparse.Namespace) -> None:
    """Fold command line flags into the global settings."""
    overrides = {}
    if args.file is not None:
        overrides["positions_file"] = args.file
    if args.stub:
        overrides["quote_provider"] = "stub"
    if args.log_level:
        overrides["log_level"] = args.log_level
    if overrides:
        set_settings(get_settings().model_copy(update=overrides))


async def show(context: AppContext, record: bool) -> None:
    previous_total = context.balance_log.last_value()
    update = await context.orchestrator.run_once(record=record)
    print(render_portfolio(update, previous_total=previous_total))


async def performance(context: AppContext) -> None:
    update = await context.orchestrator.run_once(record=False)
    if update.portfolio is None:
        print(render_portfolio(update))
        return
    data = await context.orchestrator.compute_performance(update.portfolio)
    print(render_performance(data))


async def watch(context: AppContext) -> None:
    """Run both refresh cycles and print every update until interrupted."""
    orchestrator = context.orchestrator
    orchestrator.start()

    async def print_portfolios() -> None:
        while True:
            update = await orchestrator.portfolio_updates.receive()
            print(render_portfolio(update), flush=True)
            if update.portfolio is not None:
                print(render_performance(await orchestrator.compute_performance(update.portfolio)), flush=True)

    async def print_series() -> None:
        while True:
            update = await orchestrator.series_updates.receive()
            print(render_series(update), flush=True)

    try:
        await asyncio.gather(print_portfolios(), print_series())
    finally:
        await orchestrator.stop()


def main(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    apply_overrides(args)
    setup_logging(log_to_file=args.command == "watch")

    context = AppContext()
    logger.debug("Starting %s (%s)", context.settings.app_name, args.command)
    try:
        if args.command == "show":
            asyncio.run(show(context, record=not args.no_record))
        elif args.command == "performance":
            asyncio.run(performance(context))
        else:
            asyncio.run(watch(context))
    except KeyboardInterrupt:
        pass
    except AppError as e:
        logger.error(e.message)
        print(f"\nError: {e.message}")
        sys.exit(1)
    finally:
        context.close()


if __name__ == "__main__":
    main()
