"""Per-root record of physical file identities visited during a walk."""

import os
import threading


class InodeTracker:
    """Set of (device, inode) pairs seen while walking one root.

    Identities are only ever added. A second path resolving to an identity
    that is already present is a symlink cycle or a duplicate visit.
    """

    def __init__(self) -> None:
        self._seen: set[tuple[int, int]] = set()
        self._lock = threading.Lock()

    @staticmethod
    def identity(stat_result: os.stat_result) -> tuple[int, int] | None:
        """Physical identifier for a stat result, or None when the platform has none."""
        if not stat_result.st_ino:
            return None
        return (stat_result.st_dev, stat_result.st_ino)

    def add(self, stat_result: os.stat_result) -> bool:
        """Record a stat result's identity.

        Returns:
            True if the identity was not seen before (or is unknown),
            False if it was already recorded
        """
        key = self.identity(stat_result)
        if key is None:
            return True
        with self._lock:
            if key in self._seen:
                return False
            self._seen.add(key)
            return True

    def __contains__(self, stat_result: os.stat_result) -> bool:
        key = self.identity(stat_result)
        if key is None:
            return False
        with self._lock:
            return key in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
