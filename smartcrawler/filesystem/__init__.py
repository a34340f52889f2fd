"""Local directory traversal for Smart Crawler."""

from .ignore import GitIgnoreFilter, load_ignore_filter
from .walker import DirectoryWalker, WalkOutput, read_file_descriptor

__all__ = [
    "DirectoryWalker",
    "GitIgnoreFilter",
    "WalkOutput",
    "load_ignore_filter",
    "read_file_descriptor",
]
