"""Content extraction from crawled HTML pages."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from bs4 import BeautifulSoup
from markdownify import ATX, markdownify

logger = logging.getLogger(__name__)

# Nodes that never carry page content
NOISE_SELECTOR = ", ".join([
    "script",
    "style",
    "noscript",
    'link[rel="stylesheet"]',
    "header",
    "footer",
    "nav",
    "aside",
    "form",
    "iframe",
    "button",
    "input",
    "img",
    "video",
    "audio",
])

# Content regions, most specific first
CONTENT_REGION_SELECTORS = ("main", "article", "body")


@dataclass
class ExtractedPage:
    """Result of extracting a single HTML page."""

    markdown: str
    "Markdown converted from the main content region"

    links: List[str] = field(default_factory=list)
    "Raw href values of every link in the unstripped document"


def extract_links(soup: BeautifulSoup) -> List[str]:
    """Collect the non-empty href of every anchor in document order."""
    links = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if href:
            links.append(href)
    return links


def strip_noise(soup: BeautifulSoup) -> None:
    """Remove scripts, styles, navigation chrome, media and forms in place."""
    for node in soup.select(NOISE_SELECTOR):
        node.decompose()


def select_main_content(soup: BeautifulSoup) -> str:
    """Get the inner HTML of the most specific content region available."""
    for selector in CONTENT_REGION_SELECTORS:
        region = soup.select_one(selector)
        if region is not None:
            inner_html = region.decode_contents()
            if inner_html:
                return inner_html
    return str(soup)


def html_to_markdown(html: str) -> str:
    return markdownify(html, heading_style=ATX, strong_em_symbol="*")


class HTMLExtractor:
    """Extractor for HTML pages."""

    content_type = "text/html"

    @classmethod
    def accepts(cls, content_type: Optional[str]) -> bool:
        """Whether a response with the given Content-Type header can be extracted."""
        return bool(content_type) and cls.content_type in content_type.lower()

    @classmethod
    def extract(cls, html: str) -> ExtractedPage:
        """Extract Markdown content and outgoing links from an HTML page.

        Links are taken before noise nodes are removed, so navigation links
        are still followed even though navigation text is left out.

        Args:
            html: Raw HTML of the page.

        Returns:
            The extracted page.
        """
        soup = BeautifulSoup(html, "html.parser")
        links = extract_links(soup)
        strip_noise(soup)
        markdown = html_to_markdown(select_main_content(soup))
        return ExtractedPage(markdown=markdown.strip(), links=links)
