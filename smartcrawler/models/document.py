"""Value types produced by the traversal engines."""
from dataclasses import dataclass


@dataclass(frozen=True)
class FileDescriptor:
    """A file that passed filtering, with its content or a marker in its place."""

    relative_path: str
    "Slash-separated path relative to the traversal root"

    content: str
    "Decoded text, or an omission/truncation/unreadable marker"


@dataclass(frozen=True)
class CrawledPage:
    """Markdown extracted from one crawled page."""

    url: str
    depth: int
    markdown: str
