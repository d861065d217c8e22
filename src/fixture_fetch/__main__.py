"""
Command line entry point.

Usage:
    python -m fixture_fetch assets.toml test-assets
    python -m fixture_fetch assets.toml test-assets --filter png
    python -m fixture_fetch assets.yaml test-assets --no-cache --max-attempts 3

Exit codes:
    0: All assets present and verified
    1: An asset failed to download, verify or write
    2: Manifest or configuration error
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from fixture_fetch.config import FetchConfig
from fixture_fetch.errors import ConfigurationError, FixtureFetchError
from fixture_fetch.logging.setup import setup_logging
from fixture_fetch.manifest import filter_assets, load_manifest
from fixture_fetch.runner import fetch_assets

EXIT_OK = 0
EXIT_FETCH_FAILED = 1
EXIT_CONFIG_ERROR = 2

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="fixture-fetch",
        description="Download test fixture files and verify them by SHA-256",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Fetch everything declared in assets.toml into test-assets/
    fixture-fetch assets.toml test-assets

    # Only assets whose manifest key contains "png"
    fixture-fetch assets.toml test-assets --filter png

    # Always re-download, even when a verified copy exists
    fixture-fetch assets.toml test-assets --no-cache
        """,
    )

    parser.add_argument("manifest", type=Path, help="Path to the TOML or YAML manifest")
    parser.add_argument("out", type=Path, help="Base path to write downloaded files")

    parser.add_argument(
        "--filter",
        default=None,
        help="Only fetch assets whose manifest key contains this text",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Re-download even when the local file already matches its hash",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=None,
        help="Total attempts per asset on transient errors (env: FIXTURE_FETCH_MAX_ATTEMPTS)",
    )
    parser.add_argument(
        "--base-delay",
        type=float,
        default=None,
        help="Seconds before the first retry (env: FIXTURE_FETCH_BASE_DELAY)",
    )
    parser.add_argument(
        "--max-delay",
        type=float,
        default=None,
        help="Upper bound for a single retry delay (env: FIXTURE_FETCH_MAX_DELAY)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (env: FIXTURE_FETCH_TIMEOUT)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO, env: FIXTURE_FETCH_LOG_LEVEL)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit console logs as JSON lines",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Also write rotating JSON log files under this directory",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> FetchConfig:
    """Environment configuration with command line overrides applied."""
    config = FetchConfig.from_env()
    if args.max_attempts is not None:
        config.max_attempts = args.max_attempts
    if args.base_delay is not None:
        config.base_delay = args.base_delay
    if args.max_delay is not None:
        config.max_delay = args.max_delay
    if args.timeout is not None:
        config.timeout_seconds = args.timeout
    if args.no_cache:
        config.use_cache = False
    if args.log_level is not None:
        config.log_level = args.log_level
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Run the fetch and map the result to an exit code."""
    args = parse_args(argv)

    try:
        config = build_config(args)
        retry = config.retry_config()
        setup_logging(
            level=config.log_level, json_format=args.json_logs, log_dir=args.log_dir
        )
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        assets = filter_assets(load_manifest(args.manifest), args.filter)
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if not assets:
        logger.warning(f"No assets selected from {args.manifest}")
        return EXIT_OK

    try:
        asyncio.run(
            fetch_assets(
                assets,
                args.out,
                retry=retry,
                use_cache=config.use_cache,
                timeout_seconds=config.timeout_seconds,
            )
        )
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except FixtureFetchError as e:
        print(f"error: failed to fetch {e.filename}: {e}", file=sys.stderr)
        return EXIT_FETCH_FAILED

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
