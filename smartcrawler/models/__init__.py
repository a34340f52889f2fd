"""Data models for Smart Crawler."""

from .document import CrawledPage, FileDescriptor
from .options import CrawlOptions, RunMode, RunOptions, WalkOptions

__all__ = [
    "CrawledPage",
    "FileDescriptor",
    "CrawlOptions",
    "RunMode",
    "RunOptions",
    "WalkOptions",
]
