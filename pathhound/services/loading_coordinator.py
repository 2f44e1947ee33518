"""Loading coordinator service for PathHound - orchestrates per-root path loading.

# FILE_CONTEXT: Entry point used by the host to enumerate files under roots
# ROLE: Runs one task per root; each tries the git fast path and falls back to
#   the manual walker, then flushes its final batch
# CONCURRENCY: Roots run concurrently; filesystem calls share one semaphore
#   per invocation. The completion signal is the load() coroutine returning
#   (or the stream() generator being exhausted).
# ERROR ISOLATION: A failing root contributes zero paths and never aborts the
#   other roots
"""

import asyncio
import inspect
import os
from typing import Any, AsyncIterator, Callable, Iterable, Sequence

from loguru import logger

from pathhound.core.config.loading_config import LoadingConfig
from pathhound.services.batch_emitter import BatchEmitter, BatchSink, EmittedPathSet
from pathhound.services.git_enumerator import GitEnumerator, GitLoadOutcome
from pathhound.services.inode_tracker import InodeTracker
from pathhound.services.path_walker import PathWalker
from pathhound.utils.file_patterns import IgnorePattern, compile_ignore_patterns

BatchCallback = Callable[[list[str]], Any]

STRATEGY_GIT = "git"
STRATEGY_WALK = "walk"


class LoadingCoordinator:
    """Coordinates concurrent path loading across several roots.

    # CLASS_CONTEXT: One coordinator can serve many invocations; each call to
    #   load()/stream() gets a fresh EmittedPathSet and statistics
    # RELATIONSHIP: Uses -> GitEnumerator, PathWalker, BatchEmitter
    """

    def __init__(self, config: LoadingConfig | None = None):
        self.config = config or LoadingConfig()
        self._stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> dict[str, int]:
        return {
            "roots": 0,
            "git_roots": 0,
            "walked_roots": 0,
            "failed_roots": 0,
            "paths": 0,
            "batches": 0,
            "duplicates": 0,
        }

    def get_stats(self) -> dict[str, int]:
        """Statistics for the most recent invocation."""
        return dict(self._stats)

    async def load(
        self,
        roots: Iterable[str | os.PathLike[str]],
        ignores: Sequence[str] | None = None,
        on_batch: BatchCallback | None = None,
    ) -> None:
        """Load every root, delivering batches to on_batch as they are flushed.

        Returns once every root has finished emitting.

        Args:
            roots: Absolute root directories
            ignores: Raw ignore patterns (default: config.ignored_names)
            on_batch: Sync or async callable receiving each batch
        """

        async def _deliver(batch: list[str]) -> None:
            if on_batch is None:
                return
            try:
                result = on_batch(batch)
                if inspect.isawaitable(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning(f"on_batch handler failed: {e}")

        await self._run(roots, ignores, _deliver)

    async def stream(
        self,
        roots: Iterable[str | os.PathLike[str]],
        ignores: Sequence[str] | None = None,
    ) -> AsyncIterator[list[str]]:
        """Yield batches as they are flushed by any root.

        Batches pass through a bounded queue, so a slow consumer applies
        backpressure to the traversal. Closing the generator early cancels
        the traversal.
        """
        queue: asyncio.Queue[list[str] | None] = asyncio.Queue(
            maxsize=self.config.queue_size
        )

        async def _produce() -> None:
            try:
                await self._run(roots, ignores, queue.put)
            except asyncio.CancelledError:
                raise
            except Exception:
                await queue.put(None)
                raise
            await queue.put(None)

        producer = asyncio.create_task(_produce())
        try:
            while True:
                batch = await queue.get()
                if batch is None:
                    break
                yield batch
            await producer
        finally:
            if not producer.done():
                producer.cancel()
                try:
                    await producer
                except asyncio.CancelledError:
                    pass

    async def _run(
        self,
        roots: Iterable[str | os.PathLike[str]],
        ignores: Sequence[str] | None,
        sink: BatchSink,
    ) -> None:
        root_paths = [os.path.abspath(os.fspath(root)) for root in roots]
        raw_ignores = list(self.config.ignored_names if ignores is None else ignores)
        patterns = compile_ignore_patterns(raw_ignores)

        self._stats = self._empty_stats()
        emitted_paths = EmittedPathSet()
        limiter = asyncio.Semaphore(self.config.max_concurrent)

        logger.debug(
            f"Loading paths for {len(root_paths)} roots with {len(patterns)} ignore patterns"
        )

        await asyncio.gather(
            *(
                self._load_root(root, patterns, emitted_paths, sink, limiter)
                for root in root_paths
            )
        )

        logger.debug(
            f"Path loading complete: {self._stats['paths']} paths in "
            f"{self._stats['batches']} batches"
        )

    async def _load_root(
        self,
        root: str,
        patterns: list[IgnorePattern],
        emitted_paths: EmittedPathSet,
        sink: BatchSink,
        limiter: asyncio.Semaphore,
    ) -> None:
        emitter = BatchEmitter(emitted_paths, sink, self.config.batch_size)
        strategy = STRATEGY_WALK

        try:
            outcome = GitLoadOutcome.FALLBACK
            if self.config.use_git:
                async with limiter:
                    outcome = await self._git_enumerator(patterns).load(root, emitter)

            if outcome is GitLoadOutcome.COMPLETED:
                strategy = STRATEGY_GIT
            else:
                walker = PathWalker(
                    root,
                    emitter,
                    patterns,
                    traverse_symlink_directories=self.config.traverse_symlink_directories,
                    limiter=limiter,
                    inodes=InodeTracker(),
                )
                await walker.walk()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._stats["failed_roots"] += 1
            logger.warning(f"Failed to load paths under {root}: {type(e).__name__}: {e}")

        await emitter.finish()

        self._stats["roots"] += 1
        self._stats["git_roots" if strategy == STRATEGY_GIT else "walked_roots"] += 1
        self._stats["paths"] += emitter.stats["paths"]
        self._stats["batches"] += emitter.stats["batches"]
        self._stats["duplicates"] += emitter.stats["duplicates"]

        logger.debug(
            f"Loaded {emitter.stats['paths']} paths under {root} via {strategy}"
        )

    def _git_enumerator(self, patterns: list[IgnorePattern]) -> GitEnumerator:
        return GitEnumerator(
            ignore_vcs_ignores=self.config.ignore_vcs_ignores,
            exclude_patterns=[p.pattern for p in patterns],
            git_binary=self.config.git_binary,
            root_timeout_seconds=self.config.git_root_timeout_seconds,
        )


async def load_paths(
    roots: Iterable[str | os.PathLike[str]],
    traverse_symlink_directories: bool = False,
    ignore_vcs_ignores: bool = True,
    ignores: Sequence[str] = (),
    on_batch: BatchCallback | None = None,
) -> None:
    """Load all files under roots, calling on_batch for each batch of paths."""
    config = LoadingConfig(
        traverse_symlink_directories=traverse_symlink_directories,
        ignore_vcs_ignores=ignore_vcs_ignores,
    )
    await LoadingCoordinator(config).load(roots, list(ignores), on_batch)


async def stream_paths(
    roots: Iterable[str | os.PathLike[str]],
    traverse_symlink_directories: bool = False,
    ignore_vcs_ignores: bool = True,
    ignores: Sequence[str] = (),
) -> AsyncIterator[list[str]]:
    """Async iterator over batches of paths found under roots."""
    config = LoadingConfig(
        traverse_symlink_directories=traverse_symlink_directories,
        ignore_vcs_ignores=ignore_vcs_ignores,
    )
    async for batch in LoadingCoordinator(config).stream(roots, list(ignores)):
        yield batch
