"""
Abstract cache interface for attrcache

This module defines the CacheInterface that the disk cache and the null
cache implement, so configuration can switch caching off without changing
calling code.
"""

import datetime
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional

from .types import V


class CacheInterface(ABC, Generic[V]):
    """
    Generic cache interface for string-keyed storage.

    Type Parameters:
        V: The value type

    Example:
        >>> cache: CacheInterface[bytes] = DiskCache[bytes](name="responses")
        >>> cache.set("https://example.com/", b"<html>...</html>", ttl=300)
        True
        >>> cache.get("https://example.com/")
        b'<html>...</html>'
    """

    @abstractmethod
    def get(self, key: str) -> Optional[V]:
        """
        Get cached value by key.

        Returns:
            The cached value, None if it is missing, expired or can't be decoded
        """
        pass

    @abstractmethod
    def set(
        self,
        key: str,
        value: V,
        expires: Optional[datetime.datetime] = None,
        *,
        ttl: Optional[float] = None,
    ) -> bool:
        """
        Store value in cache.

        Args:
            key: The cache key
            value: The value to cache
            expires: When the entry expires, None for never
            ttl: Seconds from now until the entry expires, alternative to expires

        Returns:
            bool: True if the value was stored, False otherwise
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> bool:
        """
        Remove the entry for key.

        Returns:
            bool: True if an entry was removed
        """
        pass

    @abstractmethod
    def contains(self, key: str) -> bool:
        """
        Check if an entry exists for key, without checking expiration.
        """
        pass

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains(key)

    @abstractmethod
    def removeExpired(self) -> int:
        """
        Remove all expired entries now.

        Returns:
            int: Number of removed entries
        """
        pass

    @abstractmethod
    def removeAll(self) -> bool:
        """
        Remove every entry of the cache.
        """
        pass

    @abstractmethod
    def removeItemsOlderThan(self, date: datetime.datetime) -> int:
        """
        Remove entries created at or before date.

        Returns:
            int: Number of removed entries
        """
        pass

    @abstractmethod
    def expirationDate(self, key: str) -> Optional[datetime.datetime]:
        """
        Get expiration time of the entry, None if it never expires or doesn't exist.
        """
        pass

    @abstractmethod
    def setExpirationDate(self, key: str, expires: Optional[datetime.datetime]) -> bool:
        """
        Change expiration time of an existing entry, None makes it never expire.
        """
        pass

    @abstractmethod
    def getStats(self) -> Dict[str, Any]:
        """
        Get cache statistics.
        """
        pass
