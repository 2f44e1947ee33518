"""Service layer for PathHound path loading."""

from .batch_emitter import BatchEmitter, EmittedPathSet
from .git_enumerator import GitEnumerator, GitLoadOutcome
from .inode_tracker import InodeTracker
from .loading_coordinator import LoadingCoordinator, load_paths, stream_paths
from .path_walker import PathWalker

__all__ = [
    "BatchEmitter",
    "EmittedPathSet",
    "GitEnumerator",
    "GitLoadOutcome",
    "InodeTracker",
    "LoadingCoordinator",
    "PathWalker",
    "load_paths",
    "stream_paths",
]
