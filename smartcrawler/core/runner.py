"""Mode dispatch and output handling for one Smart Crawler run."""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from ..crawler.crawler import WebCrawler
from ..exceptions import SmartCrawlerError
from ..filesystem.walker import DirectoryWalker
from ..models.options import RunMode, RunOptions
from .aggregator import render_directory_document, render_web_document
from .repository import RepositoryMaterializer

logger = logging.getLogger(__name__)


async def reset_output_file(path: Path) -> None:
    """Truncate the output file so a previous run's content never survives."""
    try:
        await asyncio.to_thread(path.write_text, "", encoding="utf-8")
        logger.info(f"Cleared previous output file {path}")
    except OSError as e:
        logger.warning(f"Could not clear previous output file {path}: {e}")


async def write_output(content: str, path: Path) -> None:
    await asyncio.to_thread(path.write_text, content.strip(), encoding="utf-8")
    logger.info(f"Done. Content saved to: {path}")


async def build_document(options: RunOptions) -> str:
    """Run the traversal selected by the options and aggregate its output.

    Raises:
        SmartCrawlerError: On a fatal setup error for the selected mode.
    """
    if options.mode is RunMode.WEB:
        async with WebCrawler(options.crawl) as crawler:
            result = await crawler.crawl(options.url)
        return render_web_document(result.pages)

    walker = DirectoryWalker(options.walk)
    if options.mode is RunMode.REPO:
        materializer = RepositoryMaterializer(walker)
        output = await materializer.materialize(options.repo, branch=options.branch)
    else:
        output = await walker.walk(options.directory.resolve())
    return render_directory_document(output)


async def run(options: RunOptions) -> int:
    """Execute one run and write its output file.

    Args:
        options: Run options.

    Returns:
        Process exit status: 0 on success (even if nothing was produced),
        1 on a fatal error.
    """
    logger.info(f"Mode: {options.mode.value}")
    logger.info(f"Output file: {options.output}")
    await reset_output_file(options.output)

    try:
        document = await build_document(options)
    except SmartCrawlerError as e:
        logger.error(f"Fatal error in {options.mode.value} mode: {e}")
        return 1

    if not document:
        logger.info("Finished, but no Markdown content was produced.")
        return 0

    try:
        await write_output(document, options.output)
    except OSError as e:
        logger.error(f"Fatal error writing output file {options.output}: {e}")
        return 1
    return 0
