"""Smart Crawler: turn a website, a Git repository or a local directory into one Markdown document."""

__version__ = "0.1.0"
__license__ = "MIT"

# Import key components for easier access
from .core import RepositoryMaterializer, build_document, run
from .crawler import WebCrawler
from .exceptions import (
    CloneError,
    InvalidDirectoryError,
    InvalidSeedUrlError,
    SmartCrawlerError,
)
from .filesystem import DirectoryWalker
from .models import CrawlOptions, RunMode, RunOptions, WalkOptions

__all__ = [
    "WebCrawler",
    "DirectoryWalker",
    "RepositoryMaterializer",
    "build_document",
    "run",
    "CrawlOptions",
    "RunMode",
    "RunOptions",
    "WalkOptions",
    "SmartCrawlerError",
    "InvalidSeedUrlError",
    "InvalidDirectoryError",
    "CloneError",
]
