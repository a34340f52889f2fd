"""Main entry point for Smart Crawler."""
import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from . import __version__
from .core.runner import run
from .models.options import DEFAULT_OUTPUT_FILE, DEFAULT_USER_AGENT, CrawlOptions, RunOptions, WalkOptions

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser.

    Defaults are read from the environment when the matching variable is set.
    """
    parser = argparse.ArgumentParser(
        description="Smart Crawler - Turn a website, a Git repository or a local directory into one Markdown file",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "-u", "--url",
        type=str,
        help="Website URL to crawl",
    )
    source.add_argument(
        "-r", "--repo",
        type=str,
        help="Git repository URL (HTTPS or SSH) to clone and process",
    )
    source.add_argument(
        "-d", "--dir",
        type=str,
        dest="directory",
        help="Local directory to process",
    )
    parser.add_argument(
        "-l", "--depth",
        type=int,
        default=int(os.getenv("SMARTCRAWLER_DEPTH", "1")),
        help="Maximum crawl depth (URL mode)",
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=os.getenv("SMARTCRAWLER_OUTPUT", DEFAULT_OUTPUT_FILE),
        help="Markdown output file",
    )
    parser.add_argument(
        "-b", "--branch",
        type=str,
        default=None,
        help="Branch to clone (repo mode)",
    )
    parser.add_argument(
        "--include-dot-files",
        action="store_true",
        default=False,
        help="Include files and directories starting with a dot (.git and ignored paths are still excluded)",
    )
    parser.add_argument(
        "--user-agent",
        type=str,
        default=os.getenv("SMARTCRAWLER_USER_AGENT", DEFAULT_USER_AGENT),
        help="User-Agent header for web requests",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=float(os.getenv("SMARTCRAWLER_TIMEOUT", "15")),
        help="Timeout for each page fetch in seconds",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=os.getenv("LOG_LEVEL", "info"),
        choices=["debug", "info", "warning", "error", "critical"],
        help="Logging level",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Smart Crawler {__version__}",
        help="Show version and exit",
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> RunOptions:
    """Parse command line arguments into run options.

    Returns:
        Validated run options.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.getLogger().setLevel(args.log_level.upper())

    try:
        return RunOptions(
            url=args.url,
            repo=args.repo,
            directory=Path(args.directory) if args.directory else None,
            branch=args.branch,
            output=Path(args.output),
            crawl=CrawlOptions(
                max_depth=args.depth,
                user_agent=args.user_agent,
                request_timeout=args.timeout,
            ),
            walk=WalkOptions(include_dot_files=args.include_dot_files),
        )
    except ValidationError as e:
        parser.error(str(e))


def main(argv: Optional[List[str]] = None) -> None:
    """Run Smart Crawler from the command line."""
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Load environment variables from .env file if it exists
    env_path = Path(".") / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
        logger.info(f"Loaded environment variables from {env_path}")

    options = parse_args(argv)

    logger.info("Starting Smart Crawler...")
    try:
        exit_code = asyncio.run(run(options))
    except Exception as e:
        logger.critical(f"Unexpected error: {e}", exc_info=True)
        exit_code = 1
    logger.info("Smart Crawler finished.")
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
