"""
Null cache implementation for attrcache

This module provides a no-op cache implementation that implements the
CacheInterface but doesn't actually cache anything. Useful for tests and
for disabling caching through configuration.
"""

import datetime
from typing import Any, Dict, Optional

from .interface import CacheInterface
from .types import V


class NullCache(CacheInterface[V]):
    """No-op cache that never stores anything.

    Useful for:
    - Testing without cache side effects
    - Disabling cache in production
    - Benchmarking cache impact
    """

    def get(self, key: str) -> Optional[V]:
        return None

    def set(
        self,
        key: str,
        value: V,
        expires: Optional[datetime.datetime] = None,
        *,
        ttl: Optional[float] = None,
    ) -> bool:
        """Do nothing, but pretend to succeed."""
        return True

    def remove(self, key: str) -> bool:
        return False

    def contains(self, key: str) -> bool:
        return False

    def removeExpired(self) -> int:
        return 0

    def removeAll(self) -> bool:
        return True

    def removeItemsOlderThan(self, date: datetime.datetime) -> int:
        return 0

    def expirationDate(self, key: str) -> Optional[datetime.datetime]:
        return None

    def setExpirationDate(self, key: str, expires: Optional[datetime.datetime]) -> bool:
        return False

    def getStats(self) -> Dict[str, Any]:
        return {"enabled": False}
