"""Core functionality for Smart Crawler."""

from .aggregator import get_language, render_directory_document, render_web_document
from .repository import RepositoryMaterializer, clone_repository, scratch_directory
from .runner import build_document, run

__all__ = [
    "RepositoryMaterializer",
    "build_document",
    "clone_repository",
    "get_language",
    "render_directory_document",
    "render_web_document",
    "run",
    "scratch_directory",
]
