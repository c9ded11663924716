"""CAMPEX — Command-line export.

    campex                      # test mode, one batch
    campex --production         # every campaign
    campex --no-filter -o all.json
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from campex.config import settings
from campex.pipeline.export import run_configured_export
from campex.core.logging import get_logger

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="campex",
        description="Export ActiveCampaign campaigns with their messages.",
    )
    parser.add_argument(
        "--production",
        action="store_true",
        help="process all campaigns instead of a single test batch",
    )
    parser.add_argument(
        "--no-filter", action="store_true", help="disable all campaign filters"
    )
    parser.add_argument(
        "-o", "--output", default=None, help="export file (default: EXPORT_FILE)"
    )
    parser.add_argument(
        "--max-pages", type=int, default=None, help="stop after this many pages"
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="seconds to wait between page requests",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.production:
        overrides["test_mode"] = False
    if args.no_filter:
        overrides["filters"] = settings.filter_settings().model_copy(
            update={"enabled": False}
        )
    if args.max_pages is not None:
        overrides["max_pages"] = args.max_pages
    if args.delay is not None:
        overrides["delay_between_requests"] = args.delay

    try:
        config = settings.export_config(**overrides)
        asyncio.run(run_configured_export(config=config, export_file=args.output))
    except Exception as e:
        logger.error(f"Failed to process campaigns: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
