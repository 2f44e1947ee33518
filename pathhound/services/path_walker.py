"""Manual recursive walker used when the git fast path does not apply.

# FILE_CONTEXT: Concurrent directory traversal for a single root
# ROLE: Applies ignore patterns, follows symlinks safely and reports regular
#   files to the root's BatchEmitter
# CONCURRENCY: Children of a directory are walked concurrently; a subtree is
#   complete once every child subtree has completed. Filesystem calls run in
#   worker threads gated by a shared semaphore to cap open descriptors.
# RACE CONDITION SAFETY: Entries that vanish or become unreadable mid-walk are
#   skipped; a failing branch never aborts its siblings
"""

import asyncio
import os
import stat

from loguru import logger

from pathhound.services.batch_emitter import BatchEmitter
from pathhound.services.inode_tracker import InodeTracker
from pathhound.utils.file_patterns import IgnorePattern, is_ignored


def _describe_os_error(error: OSError) -> str:
    if isinstance(error, FileNotFoundError):
        return "vanished"
    if isinstance(error, PermissionError):
        return "permission denied"
    if isinstance(error, NotADirectoryError):
        return "no longer a directory"
    return f"{type(error).__name__}: {error}"


class PathWalker:
    """Walks one root directory and reports every regular file found."""

    def __init__(
        self,
        root: str,
        emitter: BatchEmitter,
        ignore_patterns: list[IgnorePattern],
        traverse_symlink_directories: bool = False,
        limiter: asyncio.Semaphore | None = None,
        inodes: InodeTracker | None = None,
    ):
        """Initialize the walker.

        Args:
            root: Absolute root directory
            emitter: Emitter receiving discovered files
            ignore_patterns: Compiled patterns, matched relative to root
            traverse_symlink_directories: Recurse into symlinked directories
            limiter: Semaphore bounding concurrent filesystem calls
            inodes: Visited identity set (one per root)
        """
        self.root = root
        self.emitter = emitter
        self.ignore_patterns = ignore_patterns
        self.traverse_symlink_directories = traverse_symlink_directories
        self.limiter = limiter or asyncio.Semaphore(64)
        self.inodes = inodes if inodes is not None else InodeTracker()

    async def walk(self) -> None:
        """Walk the whole root."""
        await self.load_path(self.root, is_root=True)

    async def load_path(self, path: str, is_root: bool = False) -> None:
        """Load a single path, recursing into directories."""
        if not is_root and is_ignored(path, self.root, self.ignore_patterns):
            return

        try:
            stats = await self._run(os.lstat, path)
        except OSError as e:
            logger.debug(f"Skipping {path}: {_describe_os_error(e)}")
            return

        if stat.S_ISLNK(stats.st_mode):
            await self._load_symlink(path)
            return

        self.inodes.add(stats)
        if stat.S_ISDIR(stats.st_mode):
            await self._load_directory(path)
        elif stat.S_ISREG(stats.st_mode):
            await self.emitter.report(path)
        # Sockets, devices and fifos are skipped

    async def _load_symlink(self, path: str) -> None:
        try:
            target_stats = await self._run(os.stat, path)
        except OSError as e:
            logger.debug(f"Skipping symlink {path}: {_describe_os_error(e)}")
            return

        if not self.inodes.add(target_stats):
            logger.debug(f"Skipping {path}: target already visited")
            return

        if stat.S_ISREG(target_stats.st_mode):
            await self.emitter.report(path)
        elif stat.S_ISDIR(target_stats.st_mode) and self.traverse_symlink_directories:
            await self._load_directory(path)

    async def _load_directory(self, path: str) -> None:
        try:
            children = await self._run(os.listdir, path)
        except OSError as e:
            logger.debug(f"Skipping directory {path}: {_describe_os_error(e)}")
            return

        if not children:
            return

        await asyncio.gather(
            *(self.load_path(os.path.join(path, child)) for child in children)
        )

    async def _run(self, func, path: str):
        async with self.limiter:
            return await asyncio.to_thread(func, path)
