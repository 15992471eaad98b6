"""
Disk cache: persistent key-value cache with one file per entry

Entries live in `{baseDir}/{name}/{storageName}`. The file content is the
encoded value, the original key and the expiration time are kept in extended
attributes (see metadata.py). On first use the cache scans its directory to
rebuild the key index, so entries survive process restarts without any
separate index file.

Every public operation holds the cache lock for its whole duration. Expired
entries are removed lazily: get() drops the entry it hits if that one is
expired, and get()/set() sweep the whole directory once the check interval
has passed.
"""

import datetime
import logging
import threading
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, cast

from .. import utils
from ..exceptions import FilesystemError
from ..fs.abstract import AbstractFilesystemAdapter
from ..fs.filesystem import FSAdapter
from .expiration import DEFAULT_CHECK_EXPIRED_INTERVAL, ExpirationPolicy
from .index import StorageIndex
from .interface import CacheInterface
from .metadata import MetadataStore
from .storage_name import deriveStorageName
from .types import V, ValueConverter
from .value_converter import BytesValueConverter

logger = logging.getLogger(__name__)

DEFAULT_CACHE_NAME = "attrcache.disk"


class DiskCache(CacheInterface[V]):
    """
    Filesystem-backed cache with per-entry expiration.

    Args:
        name: Name of the cache directory. Names should be unique enough to
            separate different caches; reverse domain notation like
            `com.example.app.responses` is a good choice.
        baseDir: Directory holding the cache directory, the user cache
            directory (`$XDG_CACHE_HOME` or `~/.cache`) if None
        valueConverter: Converts values to bytes and back, raw bytes if None
        fsAdapter: Filesystem primitives, local filesystem if None
        checkExpiredInterval: Minimal number of seconds between lazy sweeps
        clock: Returns current Unix time in seconds

    Example:
        >>> cache = DiskCache[str](name="weather", baseDir="/tmp/cache", valueConverter=StringValueConverter())
        >>> cache.set("weather/oslo", "23C")
        True
        >>> cache.get("weather/oslo")
        '23C'
        >>> cache.setExpirationDate("weather/oslo", datetime.datetime(2000, 1, 1, tzinfo=datetime.timezone.utc))
        True
        >>> cache.get("weather/oslo") is None
        True

    Errors:
        If the cache directory can't be created every operation logs an error
        and behaves as on an empty cache. Undecodable values are reported as
        missing. Only KeyEncodingError for keys that can't be encoded at all
        (empty or not valid UTF-8) reaches the caller.
    """

    def __init__(
        self,
        name: str = DEFAULT_CACHE_NAME,
        baseDir: Optional[str | Path] = None,
        valueConverter: Optional[ValueConverter[V]] = None,
        fsAdapter: Optional[AbstractFilesystemAdapter] = None,
        checkExpiredInterval: float = DEFAULT_CHECK_EXPIRED_INTERVAL,
        clock: Callable[[], float] = time.time,
    ):
        self.name = name
        self._lock = threading.RLock()
        self._clock = clock
        self._converter: ValueConverter[V] = (
            valueConverter if valueConverter is not None else cast(ValueConverter[V], BytesValueConverter())
        )
        self._fs: AbstractFilesystemAdapter = fsAdapter if fsAdapter is not None else FSAdapter()
        self._metadata = MetadataStore(self._fs)
        self._index = StorageIndex(self._fs, self._metadata)
        self._expiration = ExpirationPolicy(
            self._fs,
            self._metadata,
            self._index,
            checkExpiredInterval=checkExpiredInterval,
            clock=clock,
        )
        self._indexLoaded = False

        base = Path(baseDir) if baseDir is not None else utils.getDefaultCacheDir()
        self._url: Optional[Path] = base / name if base is not None else None
        if self._url is None:
            logger.error(f"Unable to resolve cache directory for '{name}', cache is disabled")

    @property
    def directory(self) -> Optional[Path]:
        """
        Cache directory, created if it doesn't exist.

        None if the directory can't be resolved or created.
        """
        if self._url is None:
            return None
        try:
            self._fs.ensureDirectory(self._url)
        except FilesystemError as e:
            logger.error(f"Unable to create {self._url}: {e}")
            return None
        return self._url

    @property
    def checkExpiredInterval(self) -> float:
        return self._expiration.checkExpiredInterval

    @checkExpiredInterval.setter
    def checkExpiredInterval(self, value: float) -> None:
        self._expiration.checkExpiredInterval = value

    @property
    def isCheckExpiredIntervalDone(self) -> bool:
        return self._expiration.isCheckExpiredIntervalDone

    @property
    def lastRemoveExpired(self) -> datetime.datetime:
        return utils.fromTimestamp(self._expiration.lastRemoveExpired)

    def _prepare(self) -> Optional[Path]:
        """
        Ensure the directory exists and the index is loaded.

        Returns None if either fails. A failed load is retried by the next
        operation, working on a partial index could orphan existing files.
        """
        directory = self.directory
        if directory is None:
            return None
        if not self._indexLoaded:
            if not self._index.load(directory):
                return None
            self._indexLoaded = True
        return directory

    def reloadIndex(self) -> None:
        """
        Rebuild the key index from the files on disk.

        Legacy files without a key attribute are migrated on the way.
        """
        with self._lock:
            self._indexLoaded = False
            if self._prepare() is None:
                self._index.clear()

    def _encode(self, value: V) -> Optional[bytes]:
        try:
            data = self._converter.encode(value)
        except (TypeError, ValueError) as e:
            logger.warning(f"Could not convert {type(value).__name__} to bytes: {e}")
            return None
        if data is None:
            logger.warning(f"Could not convert {type(value).__name__} to bytes")
        return data

    def _decode(self, data: bytes) -> Optional[V]:
        try:
            value = self._converter.decode(data)
        except (TypeError, ValueError) as e:
            logger.warning(f"Could not convert cached data with {type(self._converter).__name__}: {e}")
            return None
        if value is None:
            logger.warning(f"Could not convert cached data with {type(self._converter).__name__}")
        return value

    def _deleteFile(self, path: Path) -> bool:
        try:
            return self._fs.deleteFile(path)
        except FilesystemError as e:
            logger.error(f"Unable to delete {path}: {e}")
            return False

    def get(self, key: str) -> Optional[V]:
        with self._lock:
            directory = self._prepare()
            if directory is None:
                return None

            self._expiration.sweepIfDue(directory)

            storageName = self._index.lookup(key)
            if storageName is None:
                return None
            path = directory / storageName

            if not self._fs.exists(path):
                logger.debug(f"Cache file for '{key}' is gone, dropping it from index")
                self._index.remove(key)
                return None

            if self._expiration.isExpired(path):
                logger.debug(f"Cache entry for '{key}' expired")
                self._index.remove(key)
                self._deleteFile(path)
                return None

            try:
                data = self._fs.readFile(path)
            except FilesystemError as e:
                logger.error(f"Unable to read cache entry for '{key}': {e}")
                return None

            if data is None:
                # File went away behind our back
                self._index.remove(key)
                return None

            return self._decode(data)

    def set(
        self,
        key: str,
        value: V,
        expires: Optional[datetime.datetime] = None,
        *,
        ttl: Optional[float] = None,
    ) -> bool:
        if expires is not None and ttl is not None:
            raise ValueError("Pass either expires or ttl, not both")

        expiresTs: Optional[float] = None
        if expires is not None:
            expiresTs = utils.toTimestamp(expires)
        elif ttl is not None:
            expiresTs = self._clock() + ttl

        with self._lock:
            directory = self._prepare()
            if directory is None:
                return False

            self._expiration.sweepIfDue(directory)

            data = self._encode(value)
            if data is None:
                return False

            # Long keys get a random storage name, so reuse the one we have
            storageName = self._index.lookup(key) or deriveStorageName(key)
            path = directory / storageName

            try:
                self._fs.createFile(path, data)
            except FilesystemError as e:
                logger.error(f"Unable to create file for '{key}': {e}")
                self._index.remove(key)
                return False

            if not self._metadata.setKey(path, key):
                # Without the key attribute the file can't be indexed after restart
                self._index.remove(key)
                self._deleteFile(path)
                return False

            if expiresTs is not None:
                self._metadata.setExpiration(path, expiresTs)

            self._index.insert(key, storageName)
            logger.debug(f"Stored {len(data)} bytes for '{key}' in {storageName}")
            return True

    def remove(self, key: str) -> bool:
        with self._lock:
            directory = self._prepare()
            if directory is None:
                return False

            storageName = self._index.remove(key)
            if storageName is None:
                logger.warning(f"No cache entry for '{key}'")
                return False

            return self._deleteFile(directory / storageName)

    def contains(self, key: str) -> bool:
        with self._lock:
            directory = self._prepare()
            if directory is None:
                return False

            storageName = self._index.lookup(key)
            return storageName is not None and self._fs.exists(directory / storageName)

    def removeExpired(self) -> int:
        with self._lock:
            directory = self._prepare()
            if directory is None:
                return 0
            return self._expiration.sweep(directory)

    def removeAll(self) -> bool:
        with self._lock:
            if self._url is None:
                return False

            self._index.clear()
            self._indexLoaded = False
            try:
                self._fs.deleteDirectory(self._url)
            except FilesystemError as e:
                logger.error(f"Unable to remove cache directory: {e}")
                return False
            logger.info(f"Removed all entries of cache '{self.name}'")
            return True

    def removeItemsOlderThan(self, date: datetime.datetime) -> int:
        """
        Remove entries whose file was created at or before date.

        Uses file creation time, not expiration time. Where the platform has
        no birth time (Linux) the adapter reports the modification time
        instead, so this relies on cache files never being modified in place:
        set() always re-creates the file. A file touched by another program
        counts as created at that moment.
        """
        cutoff = utils.toTimestamp(date)
        with self._lock:
            directory = self._prepare()
            if directory is None:
                return 0

            try:
                files = self._fs.listFiles(directory)
            except FilesystemError as e:
                logger.error(f"Unable to list cache directory {directory}: {e}")
                return 0

            removed = 0
            for path in files:
                try:
                    created = self._fs.getCreationTime(path)
                except FilesystemError as e:
                    logger.error(f"Unable to get creation time: {e}")
                    continue
                if created <= cutoff and self._deleteFile(path):
                    self._index.removeStorageName(path.name)
                    removed += 1

            logger.debug(f"Removed {removed} entries created before {date.isoformat()}")
            return removed

    def expirationDate(self, key: str) -> Optional[datetime.datetime]:
        with self._lock:
            directory = self._prepare()
            if directory is None:
                return None

            storageName = self._index.lookup(key)
            if storageName is None:
                return None

            expires = self._metadata.getExpiration(directory / storageName)
            return utils.fromTimestamp(expires) if expires is not None else None

    def setExpirationDate(self, key: str, expires: Optional[datetime.datetime]) -> bool:
        with self._lock:
            directory = self._prepare()
            if directory is None:
                return False

            storageName = self._index.lookup(key)
            if storageName is None:
                logger.warning(f"No cache entry for '{key}'")
                return False

            expiresTs = utils.toTimestamp(expires) if expires is not None else None
            return self._metadata.setExpiration(directory / storageName, expiresTs)

    def getStats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "enabled": self._url is not None,
                "name": self.name,
                "directory": str(self._url) if self._url is not None else None,
                "entries": len(self._index),
                "indexLoaded": self._indexLoaded,
                "checkExpiredInterval": self.checkExpiredInterval,
                "lastRemoveExpired": self._expiration.lastRemoveExpired,
            }
