"""Gitignore-style filtering of paths relative to a traversal root."""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Iterable

import pathspec

logger = logging.getLogger(__name__)

GITIGNORE_FILENAME = ".gitignore"

# Always excluded, whatever the rules file says
IMPLICIT_PATTERNS = (".git",)


class GitIgnoreFilter:
    """Returns True for paths that must be skipped according to .gitignore."""

    def __init__(self, patterns: Iterable[str] = ()):
        self._spec = pathspec.GitIgnoreSpec.from_lines([*IMPLICIT_PATTERNS, *patterns])

    def __call__(self, relative_path: str) -> bool:
        """Check whether a POSIX-style relative path is ignored.

        Directories should be passed with a trailing slash so that
        directory-only patterns such as ``build/`` apply to them.
        """
        return self._spec.match_file(relative_path)


async def load_ignore_filter(root: Path) -> GitIgnoreFilter:
    """Compile the ignore predicate for a traversal root.

    A missing .gitignore means no additional rules. Any other read error is
    logged and only the implicit rules are used.

    Args:
        root: Directory that may contain a .gitignore file.

    Returns:
        The compiled filter.
    """
    gitignore_path = root / GITIGNORE_FILENAME
    try:
        content = await asyncio.to_thread(gitignore_path.read_text, encoding="utf-8")
    except FileNotFoundError:
        logger.info(f"   -> No .gitignore found in {root}. Only ignoring '.git'.")
        return GitIgnoreFilter()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"   -> Error reading .gitignore in {root}: {e}")
        return GitIgnoreFilter()

    logger.info(f"   -> Loaded .gitignore from {root}")
    return GitIgnoreFilter(content.splitlines())
