"""Command-line entry point for the Coolify snapshot scraper."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import Sequence

from .config import SnapshotConfig
from .errors import FatalRunError
from .pipeline import run_snapshot
from .summary import log_summary, summarize

logger = logging.getLogger("coolify_snapshot.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Log into a Coolify dashboard with Playwright and snapshot every project, "
            "resource and resource configuration to JSON."
        ),
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Dashboard URL (defaults to COOLIFY_URL)",
    )
    parser.add_argument(
        "--output",
        default=None,
        type=Path,
        help="Directory where JSON snapshots should be written (defaults to COOLIFY_OUTPUT_DIR or scraped-data)",
    )
    parser.add_argument(
        "--screenshots",
        default=None,
        type=Path,
        help="Save full-page screenshots of every visited view to this directory",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Navigation timeout in seconds",
    )
    parser.add_argument(
        "--wait",
        type=float,
        default=1.0,
        help="Seconds to wait after network idle before reading a view",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Launch the browser with a visible window",
    )
    parser.add_argument(
        "--no-save",
        action="store_true",
        help="Run the scrape without writing JSON files",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    overrides = {
        "base_url": args.base_url,
        "output_root": args.output.resolve() if args.output else None,
        "screenshot_dir": args.screenshots.resolve() if args.screenshots else None,
        "navigation_timeout": args.timeout,
        "settle_wait": args.wait,
    }
    if args.headed:
        overrides["headless"] = False
    try:
        config = SnapshotConfig.from_env(**overrides)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    overall_start = time.perf_counter()
    try:
        snapshot = asyncio.run(run_snapshot(config, save=not args.no_save))
    except FatalRunError as exc:
        logger.error("Run aborted: %s", exc)
        return 1
    total_elapsed = time.perf_counter() - overall_start

    logger.info("Finished in %.2fs", total_elapsed)
    log_summary(summarize(snapshot), logger)
    return 0


if __name__ == "__main__":
    sys.exit(main())
