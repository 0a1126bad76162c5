"""CLI entry point: run the digest and write an HTML report."""

import argparse
import logging
import os
import sys
from datetime import datetime, timezone

from rss_digest.config import load_config, window_from_days
from rss_digest.core import run_pipeline
from rss_digest.exceptions import ConfigError
from rss_digest.report import write_report

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser():
    env_level = os.getenv("LOG_LEVEL", "INFO").upper()
    parser = argparse.ArgumentParser(
        prog="rss-digest",
        description="Collect recent keyword-matching articles from RSS/Atom feeds into an HTML report.",
    )
    parser.add_argument("--config", help="YAML config file with feeds, keywords and timeouts")
    parser.add_argument("--output", help="report path (default: output/digest_<date>.html)")
    parser.add_argument("--days", type=int, help="recency window in days")
    parser.add_argument("--keyword", action="append", dest="keywords", help="keyword to match (repeatable)")
    parser.add_argument("--feed", action="append", dest="feeds", help="feed URL (repeatable)")
    parser.add_argument("--summarize", action=argparse.BooleanOptionalAction, default=None,
                        help="summarize article bodies with Azure OpenAI")
    parser.add_argument("--workers", type=int, help="number of feeds processed in parallel")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS,
                        default=env_level if env_level in LOG_LEVELS else "INFO")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(asctime)s - %(levelname)s - %(message)s")

    try:
        config = load_config(args.config)
        window = window_from_days(args.days) if args.days is not None else None
    except ConfigError as e:
        logger.error(str(e))
        return 2

    config = config.with_overrides(
        feeds=args.feeds,
        keywords=args.keywords,
        window=window,
        summarize=config.summarize.merged(enabled=args.summarize),
        max_workers=args.workers,
    )

    result = run_pipeline(config)
    if not result.records:
        logger.warning("No matching articles found")

    now = datetime.now(timezone.utc)
    output = args.output or os.path.join("output", f"digest_{now.strftime('%Y-%m-%d')}.html")
    write_report(result, output, generated_at=now)
    return 0


if __name__ == "__main__":
    sys.exit(main())
