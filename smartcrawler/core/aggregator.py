"""Assembly of the final Markdown document."""
from __future__ import annotations

from pathlib import PurePosixPath
from typing import Iterable, Optional

from ..filesystem.walker import WalkOutput
from ..models.document import CrawledPage

EMPTY_CONTENT_PLACEHOLDER = "[EMPTY OR INVALID CONTENT]"

# Map file extensions to fenced code block languages
_LANGUAGE_BY_EXTENSION = {
    ".js": "javascript", ".jsx": "javascript", ".ts": "typescript", ".tsx": "typescript",
    ".py": "python", ".java": "java", ".c": "c", ".cpp": "cpp", ".cs": "csharp",
    ".html": "html", ".css": "css", ".scss": "scss", ".less": "less",
    ".json": "json", ".yaml": "yaml", ".yml": "yaml", ".xml": "xml",
    ".md": "markdown", ".sh": "shell", ".bash": "bash", ".ps1": "powershell",
    ".rb": "ruby", ".php": "php", ".go": "go", ".rs": "rust", ".sql": "sql",
    ".swift": "swift", ".kt": "kotlin", ".lua": "lua", ".pl": "perl",
    ".dockerfile": "dockerfile",
}

# Whole file names that carry no extension
_LANGUAGE_BY_FILENAME = {
    "dockerfile": "dockerfile",
    ".gitignore": "gitignore",
    ".env": "env",
}


def get_language(path: str) -> str:
    """Get a best-effort fence language for a file, or an empty string if unknown."""
    name = PurePosixPath(path.replace("\\", "/")).name.lower()
    if name in _LANGUAGE_BY_FILENAME:
        return _LANGUAGE_BY_FILENAME[name]
    return _LANGUAGE_BY_EXTENSION.get(PurePosixPath(name).suffix, "")


def render_page(page: CrawledPage) -> str:
    return f"\n\n## Source URL: {page.url}\n\n{page.markdown.strip()}\n\n---\n\n"


def render_web_document(pages: Iterable[CrawledPage]) -> str:
    """Concatenate crawled pages in crawl-completion order.

    Args:
        pages: Crawled pages.

    Returns:
        The trimmed document, empty if no page had content.
    """
    return "".join(render_page(page) for page in pages).strip()


def render_directory_document(output: WalkOutput, title: Optional[str] = None) -> str:
    """Render a directory walk as a tree followed by every file's content.

    The tree keeps directory enumeration order, while file sections are
    emitted in lexicographic path order.

    Args:
        output: Result of a directory walk.
        title: Name for the document title. Defaults to the tree root name.

    Returns:
        The trimmed document.
    """
    parts = [
        f"# Directory Structure and Content: {title or output.root_name}\n\n",
        "## Directory Tree\n\n```\n",
        output.tree,
        "```\n",
        "\n\n## File Contents\n",
    ]
    for descriptor in sorted(output.files, key=lambda f: f.relative_path):
        parts.append(f"\n\n### File: `{descriptor.relative_path}`\n\n")
        parts.append(f"```{get_language(descriptor.relative_path)}\n")
        parts.append(descriptor.content or EMPTY_CONTENT_PLACEHOLDER)
        parts.append("\n```\n")
        parts.append("\n---\n")
    return "".join(parts).strip()
