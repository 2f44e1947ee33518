"""Batch emitter for discovered paths.

# FILE_CONTEXT: Accumulates paths found by one root task and flushes them
#   downstream in fixed-size batches
# ROLE: Only point at which results become visible to the host
# CONCURRENCY: EmittedPathSet is shared by every root task of one invocation;
#   each root task owns its own BatchEmitter
"""

import threading
from typing import Awaitable, Callable

from loguru import logger

# Default number of paths per flushed batch
PATHS_CHUNK_SIZE = 100

BatchSink = Callable[[list[str]], Awaitable[None]]


class EmittedPathSet:
    """Invocation-scoped set of absolute paths already sent downstream.

    Created once per load and discarded afterwards so that independent
    invocations never share state.
    """

    def __init__(self) -> None:
        self._paths: set[str] = set()
        self._lock = threading.Lock()

    def add(self, path: str) -> bool:
        """Add a path, returning False if it had already been emitted."""
        with self._lock:
            if path in self._paths:
                return False
            self._paths.add(path)
            return True

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._paths

    def __len__(self) -> int:
        with self._lock:
            return len(self._paths)


class BatchEmitter:
    """Collects paths for one root and pushes them to a sink in batches."""

    def __init__(
        self,
        emitted_paths: EmittedPathSet,
        sink: BatchSink,
        batch_size: int = PATHS_CHUNK_SIZE,
    ):
        """Initialize the emitter.

        Args:
            emitted_paths: Shared cross-root de-duplication set
            sink: Async callable receiving each flushed batch
            batch_size: Capacity of the pending batch
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        self.emitted_paths = emitted_paths
        self.sink = sink
        self.batch_size = batch_size

        self._pending: list[str] = []

        # Statistics for monitoring
        self.stats = {"paths": 0, "batches": 0, "duplicates": 0}

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def report(self, path: str) -> None:
        """Queue a discovered path unless it was already emitted by any root."""
        if not self.emitted_paths.add(path):
            self.stats["duplicates"] += 1
            return

        self._pending.append(path)
        self.stats["paths"] += 1

        if len(self._pending) >= self.batch_size:
            await self._flush()

    async def finish(self) -> None:
        """Flush whatever is left in the pending batch."""
        if self._pending:
            await self._flush()

    async def _flush(self) -> None:
        # Swap before awaiting so concurrent reports start a fresh batch
        batch, self._pending = self._pending, []
        self.stats["batches"] += 1
        logger.debug(f"Flushing batch of {len(batch)} paths")
        await self.sink(batch)
