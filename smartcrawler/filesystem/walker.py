"""Recursive directory walker building a tree rendering and file contents."""
from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..exceptions import InvalidDirectoryError
from ..models.document import FileDescriptor
from ..models.options import WalkOptions
from .ignore import GITIGNORE_FILENAME, load_ignore_filter

logger = logging.getLogger(__name__)

# Files whose content is never read
OMIT_CONTENT_EXTENSIONS = frozenset({
    ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".svg", ".webp", ".ico", ".tif", ".tiff",
    ".mp3", ".wav", ".ogg", ".aac", ".flac", ".m4a", ".opus",
    ".mp4", ".mov", ".avi", ".wmv", ".mkv", ".flv", ".webm", ".mpeg", ".mpg",
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".odt", ".ods", ".odp",
    ".exe", ".msi", ".bin", ".dll", ".so", ".o", ".a", ".lib", ".class", ".pyc", ".wasm",
    ".zip", ".rar", ".tar", ".gz", ".7z", ".bz2", ".xz", ".iso", ".img",
    ".ttf", ".otf", ".woff", ".woff2", ".eot",
    ".db", ".sqlite", ".mdb", ".jar", ".war", ".swc", ".swf",
    ".obj", ".fbx", ".stl", ".blend", ".glb", ".gltf",
    ".lock", ".log",
})

MAX_FILE_SIZE_BYTES = 5 * 1024 * 1024
TRUNCATED_LENGTH = MAX_FILE_SIZE_BYTES // 2
TRUNCATION_MARKER = "\n... [CONTENT TRUNCATED] ..."

BRANCH_CONNECTOR = "├── "
LAST_CONNECTOR = "└── "
BRANCH_PREFIX = "|   "
LAST_PREFIX = "    "

IgnorePredicate = Callable[[str], bool]


def omitted_marker(extension: str) -> str:
    return f"[Content omitted (file type: {extension})]"


def unreadable_marker(relative_path: str) -> str:
    return f"[Unreadable or binary content: {relative_path}]"


@dataclass
class WalkOutput:
    """Accumulator shared by every level of one directory walk."""

    root_name: str
    "Name shown as the root of the tree and in the document title"

    tree_lines: List[str] = field(default_factory=list)
    "Tree lines in directory enumeration order, root excluded"

    files: List[FileDescriptor] = field(default_factory=list)
    "Descriptors of every included file, in no particular order"

    @property
    def tree(self) -> str:
        """Get the tree rendering, root line first."""
        return "\n".join([self.root_name, *self.tree_lines]) + "\n"


async def read_file_descriptor(path: Path, relative_path: str) -> FileDescriptor:
    """Read a file into a descriptor, substituting a marker where content is not captured.

    Args:
        path: Absolute path of the file.
        relative_path: Slash-separated path relative to the walk root.

    Returns:
        The file descriptor.
    """
    extension = path.suffix.lower()
    if extension in OMIT_CONTENT_EXTENSIONS:
        return FileDescriptor(relative_path=relative_path, content=omitted_marker(extension))

    try:
        data = await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        logger.warning(f"   -> Could not read {relative_path}: {e}. Skipping content.")
        return FileDescriptor(relative_path=relative_path, content=unreadable_marker(relative_path))

    try:
        content = data.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning(f"   -> Not valid UTF-8 (binary?): {relative_path}. Skipping content.")
        return FileDescriptor(relative_path=relative_path, content=unreadable_marker(relative_path))

    if len(data) > MAX_FILE_SIZE_BYTES:
        logger.warning(f"   -> File too large: {relative_path}. Content truncated.")
        content = content[:TRUNCATED_LENGTH] + TRUNCATION_MARKER

    return FileDescriptor(relative_path=relative_path, content=content)


class DirectoryWalker:
    """Walks a directory tree honouring .gitignore and the dotfile policy."""

    def __init__(self, options: Optional[WalkOptions] = None):
        """Initialize the walker.

        Args:
            options: Walk options. If None, default options will be used.
        """
        self.options = options or WalkOptions()

    async def walk(self, root: Path, root_name: Optional[str] = None) -> WalkOutput:
        """Walk a directory and collect its tree rendering and files.

        Args:
            root: Directory to walk.
            root_name: Name to show for the root. Defaults to the directory name.

        Returns:
            The walk output.

        Raises:
            InvalidDirectoryError: If root is not an existing directory.
        """
        root = Path(os.path.normpath(root))
        if not await asyncio.to_thread(root.is_dir):
            raise InvalidDirectoryError(f"Not a directory: {root}")

        logger.info(f"Processing directory: {root}")
        is_ignored = await load_ignore_filter(root)
        output = WalkOutput(root_name=root_name or root.name or str(root))
        await self._walk_dir(root, root, is_ignored, output, prefix="", level=0)
        logger.info(f"Collected {len(output.files)} files from {root}")
        return output

    @staticmethod
    def _list_entries(path: Path) -> List[os.DirEntry]:
        with os.scandir(path) as entries:
            return list(entries)

    def _classify(
        self, entry: os.DirEntry, root: Path, is_ignored: IgnorePredicate
    ) -> Optional[Tuple[os.DirEntry, bool, str]]:
        """Decide whether an entry survives filtering.

        Returns:
            (entry, is_directory, relative_path) for a surviving directory or
            regular file, None otherwise. Symbolic links are never followed.
        """
        name = entry.name
        if name.startswith(".") and not self.options.include_dot_files and name != GITIGNORE_FILENAME:
            return None

        try:
            if entry.is_dir(follow_symlinks=False):
                is_directory = True
            elif entry.is_file(follow_symlinks=False):
                is_directory = False
            else:
                logger.debug(f"   -> Skipping special file or link: {entry.path}")
                return None
        except OSError as e:
            logger.warning(f"   -> Could not stat {entry.path}: {e}")
            return None

        relative_path = Path(os.path.relpath(entry.path, root)).as_posix()
        if is_ignored(relative_path + "/" if is_directory else relative_path):
            return None
        return entry, is_directory, relative_path

    async def _walk_dir(
        self,
        current: Path,
        root: Path,
        is_ignored: IgnorePredicate,
        output: WalkOutput,
        prefix: str,
        level: int,
    ) -> None:
        try:
            entries = await asyncio.to_thread(self._list_entries, current)
        except OSError as e:
            logger.error(f"[level {level}] Error reading directory {current}: {e}")
            return

        visible = []
        for entry in entries:
            classified = self._classify(entry, root, is_ignored)
            if classified is not None:
                visible.append(classified)

        files_to_read = []
        for index, (entry, is_directory, relative_path) in enumerate(visible):
            is_last = index == len(visible) - 1
            connector = LAST_CONNECTOR if is_last else BRANCH_CONNECTOR
            if is_directory:
                output.tree_lines.append(f"{prefix}{connector}**{entry.name}/**")
                await self._walk_dir(
                    Path(entry.path),
                    root,
                    is_ignored,
                    output,
                    prefix + (LAST_PREFIX if is_last else BRANCH_PREFIX),
                    level + 1,
                )
            else:
                output.tree_lines.append(f"{prefix}{connector}{entry.name}")
                files_to_read.append((Path(entry.path), relative_path))

        descriptors = await asyncio.gather(
            *(read_file_descriptor(path, relative_path) for path, relative_path in files_to_read)
        )
        output.files.extend(descriptors)
