"""
attrcache - persistent filesystem-backed key-value cache.

Every cache entry is one regular file. The original key and the expiration
time live in extended file attributes, so the in-memory index can always be
rebuilt by scanning the cache directory.

Example Usage:
    >>> from attrcache import DiskCache, StringValueConverter
    >>>
    >>> cache = DiskCache[str](name="weather", baseDir="/tmp/cache", valueConverter=StringValueConverter())
    >>> cache.set("weather/oslo", "23C", ttl=3600)
    True
    >>> cache.get("weather/oslo")
    '23C'
"""

from .cache import (
    BytesValueConverter,
    CacheInterface,
    DiskCache,
    JsonValueConverter,
    NullCache,
    StringValueConverter,
    ValueConverter,
)
from .exceptions import CacheConfigError, CacheError, FilesystemError, KeyEncodingError
from .service import CacheService

__version__ = "0.1.0"

__all__ = [
    # Caches
    "CacheInterface",
    "DiskCache",
    "NullCache",
    "CacheService",
    # Value converters
    "ValueConverter",
    "BytesValueConverter",
    "StringValueConverter",
    "JsonValueConverter",
    # Errors
    "CacheError",
    "CacheConfigError",
    "FilesystemError",
    "KeyEncodingError",
]
