"""Breadth-first web crawler producing per-page Markdown."""
from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Set

import aiohttp
from aiohttp import ClientSession, ClientTimeout

from ..exceptions import InvalidSeedUrlError
from ..models.document import CrawledPage
from ..models.options import CrawlOptions
from .extractors import HTMLExtractor
from .urls import ScopeGuard, normalize_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrontierEntry:
    """A discovered URL waiting to be fetched."""

    url: str
    depth: int


@dataclass
class CrawlResult:
    """Result of one crawl invocation."""

    start_url: str
    "Normalized seed URL"

    pages: List[CrawledPage] = field(default_factory=list)
    "Pages with non-empty content, in crawl-completion order"

    visited: Set[str] = field(default_factory=set)
    "Every URL that was enqueued (and therefore fetched or attempted)"

    failed: List[str] = field(default_factory=list)
    "URLs whose fetch or processing failed"


class WebCrawler:
    """Crawls a website breadth-first within the origin of the seed URL."""

    def __init__(
        self,
        options: Optional[CrawlOptions] = None,
        session: Optional[ClientSession] = None,
    ):
        """Initialize the crawler.

        Args:
            options: Crawling options. If None, default options will be used.
            session: Optional aiohttp ClientSession to reuse. A session created
                by the crawler is closed by it.
        """
        self.options = options or CrawlOptions()
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        """Close the HTTP session if it was created by this instance."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def _get_session(self) -> ClientSession:
        """Get or create an aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = ClientSession()
            self._owns_session = True
        return self._session

    async def crawl(self, start_url: str) -> CrawlResult:
        """Crawl from a seed URL up to the configured depth.

        Args:
            start_url: URL to start from.

        Returns:
            The crawl result with the pages in breadth-first order.

        Raises:
            InvalidSeedUrlError: If the seed URL is malformed or not HTTP(S).
        """
        seed = normalize_url(start_url, start_url)
        if seed is None:
            raise InvalidSeedUrlError(f"Invalid seed URL: {start_url}")
        scope = ScopeGuard(seed)

        logger.info(f"Starting web crawl from {seed} up to depth {self.options.max_depth}")
        logger.info(f"Base origin (scheme, host, port): {scope.origin}")

        result = CrawlResult(start_url=seed)
        queue: Deque[FrontierEntry] = deque([FrontierEntry(url=seed, depth=0)])
        result.visited.add(seed)

        while queue:
            entry = queue.popleft()
            await self._crawl_entry(entry, scope, queue, result)
            if queue and self.options.request_delay:
                await asyncio.sleep(self.options.request_delay)

        logger.info(
            f"Unique URLs visited or attempted: {len(result.visited)} "
            f"({len(result.pages)} with content, {len(result.failed)} failed)"
        )
        return result

    async def _crawl_entry(
        self,
        entry: FrontierEntry,
        scope: ScopeGuard,
        queue: Deque[FrontierEntry],
        result: CrawlResult,
    ) -> None:
        """Fetch one frontier entry, record its content and enqueue its links."""
        logger.info(f"[depth {entry.depth}] Crawling: {entry.url}")
        try:
            html = await self._fetch_html(entry.url)
            if html is None:
                return
            page = HTMLExtractor.extract(html)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"   -> Error fetching {entry.url}: {e!r}")
            result.failed.append(entry.url)
            return
        except Exception as e:
            logger.error(f"   -> Error processing {entry.url}: {e}", exc_info=True)
            result.failed.append(entry.url)
            return

        if page.markdown:
            result.pages.append(CrawledPage(url=entry.url, depth=entry.depth, markdown=page.markdown))
            logger.info(f"   -> Converted content of {entry.url} to Markdown")
        else:
            logger.debug(f"   -> No content extracted from {entry.url}")

        if entry.depth >= self.options.max_depth:
            return

        for href in page.links:
            link = normalize_url(href, entry.url)
            if link is None or not scope.in_scope(link) or link in result.visited:
                continue
            # Visited on enqueue: a link found on several pages is queued once
            result.visited.add(link)
            queue.append(FrontierEntry(url=link, depth=entry.depth + 1))

    async def _fetch_html(self, url: str) -> Optional[str]:
        """Fetch a page and return its HTML.

        Returns:
            The decoded body, or None if the response is not HTML.

        Raises:
            aiohttp.ClientResponseError: If the status is 4xx or 5xx.
        """
        session = self._get_session()
        async with session.get(
            url,
            headers={"User-Agent": self.options.user_agent},
            timeout=ClientTimeout(total=self.options.request_timeout),
        ) as response:
            response.raise_for_status()

            content_type = response.headers.get("Content-Type", "")
            if not HTMLExtractor.accepts(content_type):
                logger.warning(f"   -> Content at {url} is not HTML ({content_type or 'unknown'}). Skipping.")
                return None

            return await response.text(errors="replace")
