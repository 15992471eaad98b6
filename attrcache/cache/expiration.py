"""
Expiration sweeps

A sweep scans the whole cache directory and deletes every expired file. To
keep the cost amortized, cache operations only sweep once the check interval
has passed since the previous sweep.
"""

import logging
import time
from pathlib import Path
from typing import Callable

from ..exceptions import FilesystemError
from ..fs.abstract import AbstractFilesystemAdapter
from .index import StorageIndex
from .metadata import MetadataStore

logger = logging.getLogger(__name__)

DEFAULT_CHECK_EXPIRED_INTERVAL = 10 * 60


class ExpirationPolicy:
    """
    Tracks when the last sweep happened and performs sweeps.

    Args:
        fsAdapter: Filesystem adapter for listing and deleting files
        metadata: Metadata store to read expiration times from
        index: Storage index to keep in sync with deletions
        checkExpiredInterval: Minimal number of seconds between lazy sweeps
        clock: Returns current Unix time in seconds
    """

    def __init__(
        self,
        fsAdapter: AbstractFilesystemAdapter,
        metadata: MetadataStore,
        index: StorageIndex,
        checkExpiredInterval: float = DEFAULT_CHECK_EXPIRED_INTERVAL,
        clock: Callable[[], float] = time.time,
    ):
        self._fs = fsAdapter
        self._metadata = metadata
        self._index = index
        self._clock = clock
        self.checkExpiredInterval = checkExpiredInterval
        self.lastRemoveExpired: float = 0.0

    @property
    def isCheckExpiredIntervalDone(self) -> bool:
        return self._clock() - self.lastRemoveExpired > self.checkExpiredInterval

    def isExpired(self, path: Path) -> bool:
        return self._metadata.isExpired(path, self._clock())

    def sweep(self, directory: Path) -> int:
        """
        Delete every expired file in the directory.

        Returns:
            Number of deleted files
        """
        now = self._clock()
        try:
            files = self._fs.listFiles(directory)
        except FilesystemError as e:
            logger.error(f"Unable to list cache directory {directory}: {e}")
            return 0

        removed = 0
        for path in files:
            if not self._metadata.isExpired(path, now):
                continue
            try:
                self._fs.deleteFile(path)
            except FilesystemError as e:
                logger.error(f"Unable to delete expired file: {e}")
                continue
            self._index.removeStorageName(path.name)
            removed += 1

        self.lastRemoveExpired = now
        if removed:
            logger.debug(f"Removed {removed} expired entries from {directory}")
        return removed

    def sweepIfDue(self, directory: Path) -> int:
        if not self.isCheckExpiredIntervalDone:
            return 0
        return self.sweep(directory)
