"""
In-memory storage index

Maps cache keys to storage names. The index is never persisted on its own:
it is rebuilt from the key attributes of the files in the cache directory,
so it always follows what is actually on disk.
"""

import logging
from pathlib import Path
from typing import Dict, Iterator, Optional

from ..exceptions import FilesystemError, KeyEncodingError
from ..fs.abstract import AbstractFilesystemAdapter
from .key_encoder import decodeKey
from .metadata import MetadataStore
from .storage_name import deriveStorageName

logger = logging.getLogger(__name__)


class StorageIndex:
    """
    Key to storage name mapping with reverse lookup.

    Not thread safe on its own, the owning cache serializes access.
    """

    def __init__(self, fsAdapter: AbstractFilesystemAdapter, metadata: MetadataStore):
        self._fs = fsAdapter
        self._metadata = metadata
        self._names: Dict[str, str] = {}
        self._keys: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, key: object) -> bool:
        return key in self._names

    def keys(self) -> Iterator[str]:
        return iter(list(self._names))

    def lookup(self, key: str) -> Optional[str]:
        return self._names.get(key)

    def insert(self, key: str, storageName: str) -> None:
        oldName = self._names.get(key)
        if oldName is not None and oldName != storageName:
            self._keys.pop(oldName, None)

        oldKey = self._keys.get(storageName)
        if oldKey is not None and oldKey != key:
            self._names.pop(oldKey, None)

        self._names[key] = storageName
        self._keys[storageName] = key

    def remove(self, key: str) -> Optional[str]:
        """
        Remove key from the index.

        Returns:
            The storage name the key was mapped to, None if it wasn't indexed
        """
        storageName = self._names.pop(key, None)
        if storageName is not None:
            self._keys.pop(storageName, None)
        return storageName

    def removeStorageName(self, storageName: str) -> Optional[str]:
        """
        Remove whatever key is stored under storageName.

        Returns:
            The removed key, None if nothing was stored under that name
        """
        key = self._keys.pop(storageName, None)
        if key is not None:
            self._names.pop(key, None)
        return key

    def clear(self) -> None:
        self._names.clear()
        self._keys.clear()

    def load(self, directory: Path) -> bool:
        """
        Rebuild the index from the files in the cache directory.

        Files that carry a key attribute are indexed under their current
        name. Files without one were written by the old scheme where the
        file name is the encoded key: they get the key attribute written
        (and are renamed if the current scheme names them differently)
        before being indexed. Legacy files that can't be decoded or migrated
        are left on disk and stay unindexed.

        Returns:
            False if the directory couldn't be listed, the index is left empty then
        """
        self.clear()

        try:
            files = self._fs.listFiles(directory)
        except FilesystemError as e:
            logger.error(f"Unable to list cache directory {directory}: {e}")
            return False

        migrated = 0
        for path in files:
            key = self._metadata.getKey(path)
            if key is not None:
                self.insert(key, path.name)
                continue

            if self._migrateLegacyFile(directory, path):
                migrated += 1

        logger.debug(f"Indexed {len(self)} entries in {directory}, migrated {migrated} legacy files")
        return True

    def _migrateLegacyFile(self, directory: Path, path: Path) -> bool:
        try:
            key = decodeKey(path.name)
        except KeyEncodingError as e:
            logger.warning(f"Skipping undecodable legacy file {path}: {e}")
            return False

        if key in self._names:
            logger.warning(f"Skipping legacy file {path}: key '{key}' is already stored in {self._names[key]}")
            return False

        storageName = deriveStorageName(key)
        if storageName != path.name:
            target = directory / storageName
            if self._fs.exists(target):
                logger.warning(f"Skipping legacy file {path}: {target} already exists")
                return False
            try:
                self._fs.renameFile(path, target)
            except FilesystemError as e:
                logger.error(f"Unable to migrate legacy file {path}: {e}")
                return False
            path = target

        if not self._metadata.setKey(path, key):
            logger.warning(f"Skipping legacy file {path}: unable to write key attribute")
            return False

        self.insert(key, storageName)
        logger.info(f"Migrated legacy cache file {path.name} for key '{key}'")
        return True
