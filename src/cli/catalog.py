#!/usr/bin/env python3
"""
Command-line consumer for the catalog data fetcher.

Loads configuration once, mounts a DataFetcher on an endpoint,
waits for the fetch to settle and prints a per-category summary.

Usage:
    catalog-fetch                 # fetch the configured endpoint
    catalog-fetch /catalog/new    # fetch another endpoint
    catalog-fetch --offline       # serve the built-in offline catalog

Exit status is 0 when items were retrieved, 1 otherwise.
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import NoReturn

from src.core.config.loader import get_config, load_api_config
from src.core.models.catalog import MediaItem
from src.core.primitives.api_client import ApiClient
from src.core.primitives.exceptions import ApiError
from src.core.services.data_fetcher import DEFAULT_ENDPOINT, DataFetcher, FetchState
from src.core.services.mock_catalog import (
    DEFAULT_COUNT,
    generate_mock_catalog,
    group_by_category,
)

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "CATALOG_LOG_LEVEL"


def setup_logging(log_level: str) -> None:
    """
    Configure logging for the CLI.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="catalog-fetch",
        description="Fetch a catalog endpoint and summarize the result.",
    )
    parser.add_argument(
        "endpoint",
        nargs="?",
        help="Endpoint relative to the API base URL (default: from config)",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Serve the built-in offline catalog instead of calling the API",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=DEFAULT_COUNT,
        help="Number of offline items to generate (default: %(default)s)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for offline ratings")
    parser.add_argument("--log-level", default=None, help="Override the log level")
    return parser


def format_state(state: FetchState, endpoint: str) -> list[str]:
    """
    Render a settled FetchState as summary lines.

    Args:
        state: The settled state.
        endpoint: The endpoint that was fetched.

    Returns:
        Lines to print.
    """
    if state.error:
        return [f"Error: {state.error}"]

    items = state.data or []
    lines = [f"Fetched {len(items)} item{'s' if len(items) != 1 else ''} from {endpoint}"]

    media = [item for item in items if isinstance(item, MediaItem)]
    for category, grouped in group_by_category(media).items():
        lines.append(f"  {category or '(uncategorized)'}: {len(grouped)}")

    return lines


async def run_fetch(fetcher: DataFetcher) -> FetchState:
    """Mount the fetcher, wait for the outcome and tear it down."""

    def log_transition(state: FetchState) -> None:
        logger.debug(
            f"State generation={state.generation} loading={state.loading} "
            f"error={state.error!r} items={len(state.data) if state.data else 0}"
        )

    fetcher.subscribe(log_transition)
    async with fetcher:
        return await fetcher.wait()


async def main_async(argv: list[str] | None = None) -> int:
    """
    Async entrypoint for the CLI.

    Returns:
        Process exit code.
    """
    args = build_parser().parse_args(argv)
    settings = get_config()

    setup_logging(
        args.log_level
        or os.environ.get(LOG_LEVEL_ENV)
        or settings.get("logging", {}).get("level")
        or "INFO"
    )

    endpoint = args.endpoint or settings.get("fetcher", {}).get("endpoint") or DEFAULT_ENDPOINT

    if args.offline:
        logger.info(f"Offline mode: serving {args.count} generated item(s)")
        fetcher = DataFetcher(
            None,
            endpoint,
            fallback_data=generate_mock_catalog(args.count, seed=args.seed),
        )
    else:
        api_config = load_api_config()
        logger.info(f"Fetching {endpoint} from {api_config.base_url}")
        fetcher = DataFetcher(ApiClient(api_config), endpoint, parser=MediaItem.from_dict)

    state = await run_fetch(fetcher)

    for line in format_state(state, endpoint):
        print(line)

    if isinstance(fetcher.failure, ApiError):
        logger.info(f"Cause: {fetcher.failure.message} (status {fetcher.failure.status})")

    return 0 if state.succeeded else 1


def main(argv: list[str] | None = None) -> NoReturn:
    """
    Main entrypoint for the CLI.

    This is the synchronous wrapper that starts the async event loop.
    """
    try:
        exit_code = asyncio.run(main_async(argv))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
