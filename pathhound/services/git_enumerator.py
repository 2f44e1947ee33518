"""Git-assisted path enumeration.

# FILE_CONTEXT: Fast path used when a root is exactly the top of a git
#   working tree
# ROLE: Streams `git ls-files --cached --others -z` output into a BatchEmitter
# FALLBACK: Any failure before the working-tree root is confirmed returns
#   GitLoadOutcome.FALLBACK so the caller walks the root manually
"""

import asyncio
import contextlib
import os
import shutil
from enum import Enum
from typing import Iterable

from loguru import logger

from pathhound.services.batch_emitter import BatchEmitter

# Bytes requested from git's stdout per read
READ_CHUNK_SIZE = 64 * 1024


class GitLoadOutcome(Enum):
    """Result of attempting the git fast path for one root."""

    COMPLETED = "completed"
    FALLBACK = "fallback"


def default_git_binary() -> str:
    return shutil.which("git") or "git"


def same_path(left: str, right: str) -> bool:
    """Compare two directory paths ignoring trailing separators and slash style."""
    return os.path.normpath(left) == os.path.normpath(right)


class GitEnumerator:
    """Lists tracked and untracked files of a git working tree."""

    def __init__(
        self,
        ignore_vcs_ignores: bool = True,
        exclude_patterns: Iterable[str] = (),
        git_binary: str | None = None,
        root_timeout_seconds: float = 10.0,
    ):
        """Initialize the enumerator.

        Args:
            ignore_vcs_ignores: Pass --exclude-standard so .gitignore and
                friends are honored
            exclude_patterns: Raw ignore strings forwarded as --exclude
            git_binary: Git executable (default: first git on PATH)
            root_timeout_seconds: Timeout for the working-tree root query
        """
        self.ignore_vcs_ignores = ignore_vcs_ignores
        self.exclude_patterns = list(exclude_patterns)
        self.git_binary = git_binary or default_git_binary()
        self.root_timeout_seconds = root_timeout_seconds

    def build_ls_files_args(self) -> list[str]:
        """Arguments for the streaming ls-files invocation."""
        args = ["ls-files", "--cached", "--others", "-z"]
        if self.ignore_vcs_ignores:
            args.append("--exclude-standard")
        for pattern in self.exclude_patterns:
            args.append("--exclude")
            args.append(pattern)
        return args

    async def find_worktree_root(self, path: str) -> str | None:
        """Ask git for the working-tree root containing path.

        Returns:
            The reported top-level directory, or None if git is unavailable,
            path is not inside a working tree, or the query timed out
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                self.git_binary,
                "rev-parse",
                "--show-toplevel",
                cwd=path,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            logger.debug(f"git unavailable for {path}: {e}")
            return None

        try:
            stdout, _ = await asyncio.wait_for(
                proc.communicate(), timeout=self.root_timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.debug(f"git root query timed out for {path}")
            await _terminate(proc)
            return None
        except asyncio.CancelledError:
            await _terminate(proc)
            raise
        except OSError as e:
            logger.debug(f"git root query failed for {path}: {e}")
            await _terminate(proc)
            return None

        if proc.returncode != 0:
            return None

        return os.fsdecode(stdout).rstrip("\r\n")

    async def load(self, root: str, emitter: BatchEmitter) -> GitLoadOutcome:
        """Enumerate root through git if it is a working-tree top.

        Args:
            root: Absolute root directory
            emitter: Emitter receiving every listed file

        Returns:
            COMPLETED once git's output has been consumed, FALLBACK when the
            caller must walk the root itself
        """
        worktree_root = await self.find_worktree_root(root)
        if worktree_root is None:
            logger.debug(f"Not a git working tree: {root}")
            return GitLoadOutcome.FALLBACK
        if not same_path(worktree_root, root):
            logger.debug(
                f"Root {root} is inside working tree {worktree_root}, not its top"
            )
            return GitLoadOutcome.FALLBACK

        try:
            proc = await asyncio.create_subprocess_exec(
                self.git_binary,
                *self.build_ls_files_args(),
                cwd=root,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            logger.debug(f"Failed to spawn git ls-files in {root}: {e}")
            return GitLoadOutcome.FALLBACK

        try:
            await self._consume_output(proc, root, emitter)
            await proc.wait()
        except OSError as e:
            # Partial output has already been emitted; do not walk the root again
            logger.warning(f"Reading git ls-files output failed for {root}: {e}")
        finally:
            await _terminate(proc)

        if proc.returncode:
            logger.debug(f"git ls-files exited with {proc.returncode} in {root}")
        return GitLoadOutcome.COMPLETED

    async def _consume_output(
        self, proc: asyncio.subprocess.Process, root: str, emitter: BatchEmitter
    ) -> None:
        assert proc.stdout is not None

        remainder = b""
        while True:
            chunk = await proc.stdout.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            segments = (remainder + chunk).split(b"\0")
            # Last segment is incomplete until the next NUL arrives
            remainder = segments.pop()
            for segment in segments:
                if not segment or segment.endswith(b"/"):
                    # Empty entry or a nested repository directory
                    continue
                relative = os.fsdecode(segment)
                await emitter.report(os.path.normpath(os.path.join(root, relative)))

        if remainder:
            logger.debug(f"Dropping truncated git ls-files entry in {root}")


async def _terminate(proc: asyncio.subprocess.Process) -> None:
    """Kill and reap a subprocess that is still running."""
    if proc.returncode is not None:
        return
    with contextlib.suppress(ProcessLookupError):
        proc.kill()
    await proc.wait()
