"""Pytest configuration and fixtures for Smart Crawler tests."""
import logging
import sys
from pathlib import Path
from typing import AsyncGenerator, Callable, Dict

import pytest
import pytest_asyncio
from aiohttp import ClientSession
from aioresponses import aioresponses

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from smartcrawler.models.options import CrawlOptions

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)

# Reduce log noise for test output
logging.getLogger("aiohttp").setLevel(logging.WARNING)
logging.getLogger("asyncio").setLevel(logging.WARNING)


@pytest_asyncio.fixture
async def http_session() -> AsyncGenerator[ClientSession, None]:
    """Create an aiohttp client session for testing."""
    async with ClientSession() as session:
        yield session


@pytest.fixture
def crawl_options() -> CrawlOptions:
    """Crawl options without politeness delay."""
    return CrawlOptions(max_depth=1, request_delay=0)


@pytest.fixture
def mock_aioresponse():
    """Create a mock aiohttp response using aioresponses."""
    with aioresponses() as m:
        yield m


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[Dict[str, object]], Path]:
    """Create a directory tree from a mapping of relative paths to contents.

    String values are written as UTF-8 text, bytes as-is, and None creates
    an empty directory.
    """
    def _make_tree(files: Dict[str, object]) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        for relative_path, content in files.items():
            path = root / relative_path
            if content is None:
                path.mkdir(parents=True, exist_ok=True)
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return root

    return _make_tree
