"""Web crawling and content extraction for Smart Crawler."""

from .crawler import CrawlResult, FrontierEntry, WebCrawler
from .extractors import ExtractedPage, HTMLExtractor
from .urls import ScopeGuard, is_non_content_url, normalize_url

__all__ = [
    "WebCrawler",
    "CrawlResult",
    "FrontierEntry",
    "ExtractedPage",
    "HTMLExtractor",
    "ScopeGuard",
    "is_non_content_url",
    "normalize_url",
]
