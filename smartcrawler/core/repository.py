"""Cloning of remote repositories into scratch directories."""
from __future__ import annotations

import asyncio
import logging
import shutil
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, List, Optional

from ..exceptions import CloneError
from ..filesystem.walker import DirectoryWalker, WalkOutput

logger = logging.getLogger(__name__)

SCRATCH_DIR_PREFIX = "repo-crawler-"
CLEANUP_RETRIES = 3
CLEANUP_RETRY_DELAY = 0.1

# Progress chatter git writes to stderr even on success
_BENIGN_STDERR = ("cloning into", "already exists")


def repository_name(repo_url: str) -> str:
    """Get the repository name from an HTTPS or SSH clone URL."""
    name = repo_url.rstrip("/").replace(":", "/").rsplit("/", 1)[-1]
    if name.endswith(".git"):
        name = name[:-4]
    return name


async def remove_tree(
    path: Path,
    retries: int = CLEANUP_RETRIES,
    retry_delay: float = CLEANUP_RETRY_DELAY,
) -> bool:
    """Recursively delete a directory, retrying on transient errors.

    Returns:
        True if the directory is gone, False if it could not be removed.
    """
    for attempt in range(retries + 1):
        try:
            await asyncio.to_thread(shutil.rmtree, path)
        except FileNotFoundError:
            return True
        except OSError as e:
            if attempt == retries:
                logger.error(f"   -> Could not remove scratch directory {path}: {e}")
                return False
            logger.debug(f"   -> Retrying removal of {path} after error: {e}")
            await asyncio.sleep(retry_delay * (attempt + 1))
        else:
            logger.info(f"   -> Removed scratch directory {path}")
            return True
    return False


@asynccontextmanager
async def scratch_directory(prefix: str = SCRATCH_DIR_PREFIX) -> AsyncIterator[Path]:
    """Create a uniquely named temporary directory, removed on every exit path."""
    path = Path(await asyncio.to_thread(tempfile.mkdtemp, prefix=prefix))
    logger.info(f"Created scratch directory: {path}")
    try:
        yield path
    finally:
        logger.info(f"Cleaning up scratch directory: {path}")
        await remove_tree(path)


async def clone_repository(
    repo_url: str,
    destination: Path,
    branch: Optional[str] = None,
    depth: int = 1,
) -> None:
    """Shallow-clone a repository into an existing empty directory.

    Args:
        repo_url: HTTPS or SSH URL of the repository.
        destination: Directory to clone into.
        branch: Branch to check out. Defaults to the remote's default branch.
        depth: History depth to fetch.

    Raises:
        CloneError: If git is unavailable or the clone fails.
    """
    command: List[str] = ["git", "clone", "--depth", str(depth)]
    if branch:
        command += ["--branch", branch]
    command += ["--quiet", "--", repo_url, str(destination)]

    logger.info(f"Running: {' '.join(command)}")
    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise CloneError(f"Could not run git: {e}") from e

    stdout, stderr = await process.communicate()
    stderr_text = stderr.decode("utf-8", errors="replace").strip()

    if process.returncode != 0:
        logger.error(f"git clone exited with status {process.returncode}")
        logger.error(f"Stderr: {stderr_text or '(no stderr)'}")
        raise CloneError(
            f"Failed to clone repository from {repo_url}. Check the URL and your credentials/permissions."
        )

    if stderr_text and not any(chatter in stderr_text.lower() for chatter in _BENIGN_STDERR):
        logger.warning(f"Stderr from git clone:\n{stderr_text}")


class RepositoryMaterializer:
    """Clones a repository to a scratch directory and walks it."""

    def __init__(self, walker: Optional[DirectoryWalker] = None, clone_depth: int = 1):
        self.walker = walker or DirectoryWalker()
        self.clone_depth = clone_depth

    async def materialize(self, repo_url: str, branch: Optional[str] = None) -> WalkOutput:
        """Clone and walk a repository. The clone is deleted before returning or raising.

        Args:
            repo_url: HTTPS or SSH URL of the repository.
            branch: Optional branch to clone.

        Returns:
            The walk output of the cloned tree, rooted at the repository name.

        Raises:
            CloneError: If cloning fails.
        """
        async with scratch_directory() as workdir:
            await clone_repository(repo_url, workdir, branch=branch, depth=self.clone_depth)
            return await self.walker.walk(workdir, root_name=repository_name(repo_url) or None)
