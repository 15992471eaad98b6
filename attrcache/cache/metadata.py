"""
Per-file cache metadata

Every cache file carries two extended attributes:

- KEY_ATTRIBUTE: the original cache key as UTF-8 bytes
- EXPIRES_ATTRIBUTE: expiration time as a little-endian 8-byte float of
  Unix epoch seconds. No attribute means the entry never expires.

Attribute names must stay stable, existing caches are indexed by them.
"""

import logging
import struct
from pathlib import Path
from typing import Optional

from ..exceptions import FilesystemError
from ..fs.abstract import AbstractFilesystemAdapter

logger = logging.getLogger(__name__)

KEY_ATTRIBUTE = "user.attrcache.key"
EXPIRES_ATTRIBUTE = "user.attrcache.expires"

_EXPIRES_FORMAT = "<d"
_EXPIRES_SIZE = struct.calcsize(_EXPIRES_FORMAT)


class MetadataStore:
    """
    Reads and writes cache metadata attributes.

    None of the methods raise: failures are logged and reported as an absent
    value or False.
    """

    def __init__(self, fsAdapter: AbstractFilesystemAdapter):
        self._fs = fsAdapter

    def getKey(self, path: Path) -> Optional[str]:
        """
        Get the cache key stored on the file.

        Returns:
            The key, None if the attribute is absent, unreadable or not UTF-8
        """
        try:
            raw = self._fs.getAttribute(path, KEY_ATTRIBUTE)
        except FilesystemError as e:
            logger.error(f"Unable to read key of {path}: {e}")
            return None

        if raw is None:
            return None

        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.error(f"Corrupt key attribute on {path}: {e}")
            return None

    def setKey(self, path: Path, key: str) -> bool:
        try:
            self._fs.setAttribute(path, KEY_ATTRIBUTE, key.encode("utf-8"))
            return True
        except FilesystemError as e:
            logger.error(f"Unable to write key of {path}: {e}")
            return False

    def getExpiration(self, path: Path) -> Optional[float]:
        """
        Get the expiration time stored on the file.

        Returns:
            Unix epoch seconds, None if the entry never expires or the
            attribute can't be read
        """
        try:
            raw = self._fs.getAttribute(path, EXPIRES_ATTRIBUTE)
        except FilesystemError as e:
            logger.error(f"Unable to read expiration of {path}: {e}")
            return None

        if raw is None:
            return None

        if len(raw) != _EXPIRES_SIZE:
            logger.error(f"Corrupt expiration attribute on {path}: expected {_EXPIRES_SIZE} bytes, got {len(raw)}")
            return None

        return struct.unpack(_EXPIRES_FORMAT, raw)[0]

    def setExpiration(self, path: Path, expires: Optional[float]) -> bool:
        """
        Set or clear the expiration time of the file.

        Args:
            path: Cache file
            expires: Unix epoch seconds, None removes the expiration
        """
        try:
            if expires is None:
                self._fs.removeAttribute(path, EXPIRES_ATTRIBUTE)
            else:
                self._fs.setAttribute(path, EXPIRES_ATTRIBUTE, struct.pack(_EXPIRES_FORMAT, expires))
            return True
        except FilesystemError as e:
            logger.error(f"Unable to write expiration of {path}: {e}")
            return False

    def isExpired(self, path: Path, now: float) -> bool:
        expires = self.getExpiration(path)
        return expires is not None and expires < now
