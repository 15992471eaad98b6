"""
attrcache.cache - key-value caches for attrcache.

Core Components:
- CacheInterface: Abstract base class for all cache implementations
- DiskCache: Filesystem-backed cache keeping key and expiration in extended attributes
- NullCache: No-op cache for testing and disabling caching
- ValueConverter: Protocol converting cached values to bytes and back
"""

from .disk_cache import DiskCache
from .interface import CacheInterface
from .null_cache import NullCache
from .types import V, ValueConverter
from .value_converter import BytesValueConverter, JsonValueConverter, StringValueConverter

__all__ = [
    # Core types
    "ValueConverter",
    "V",
    # Interfaces
    "CacheInterface",
    # Implementations
    "DiskCache",
    "NullCache",
    # Value converters
    "BytesValueConverter",
    "StringValueConverter",
    "JsonValueConverter",
]
