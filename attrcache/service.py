"""
Cache service: Singleton registry of configured caches

This module provides a singleton service that builds caches from the
`[cache]` configuration table and hands out one instance per cache name.
"""

import logging
import threading
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from .cache.disk_cache import DEFAULT_CACHE_NAME, DiskCache
from .cache.expiration import DEFAULT_CHECK_EXPIRED_INTERVAL
from .cache.interface import CacheInterface
from .cache.null_cache import NullCache
from .cache.types import ValueConverter
from .cache.value_converter import BytesValueConverter, JsonValueConverter, StringValueConverter
from .exceptions import CacheConfigError
from .logging_utils import initLogging

if TYPE_CHECKING:
    from .config.manager import ConfigManager

logger = logging.getLogger(__name__)

CONVERTERS: Dict[str, type] = {
    "bytes": BytesValueConverter,
    "string": StringValueConverter,
    "json": JsonValueConverter,
}

CACHE_TYPES = ("disk", "null")


class CacheService:
    """
    Singleton service for named caches.

    Usage:
        service = CacheService.getInstance()
        service.injectConfig(configManager)

        responses = service.getCache("com.example.responses")
        responses.set("https://example.com/", b"...", ttl=300)

    Configuration format:
        {
            "type": "disk",                 # or "null"
            "base-dir": "./cache",          # user cache directory if absent
            "check-expired-interval": 600,
            "converter": "bytes",           # or "string", "json"
            "caches": {                     # optional per-name overrides
                "com.example.settings": {"converter": "json"}
            }
        }

    Thread Safety:
        The singleton instance creation and the cache registry are guarded
        by one RLock. Each cache serializes its own operations.
    """

    _instance: Union["CacheService", None] = None
    _lock = threading.RLock()

    def __new__(cls) -> "CacheService":
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
            return cls._instance

    def __init__(self):
        if not hasattr(self, "initialized"):
            self.config: Dict[str, Any] = {}
            self.caches: Dict[str, CacheInterface[Any]] = {}
            self.initialized = False
            logger.info("CacheService created, awaiting configuration")

    @classmethod
    def getInstance(cls) -> "CacheService":
        return cls()

    def injectConfig(self, configManager: "ConfigManager", configureLogging: bool = False) -> None:
        """
        Initialize service with configuration from ConfigManager.

        Caches handed out before are dropped, later getCache() calls build
        them from the new configuration. With configureLogging the `[logging]`
        table is applied through initLogging(), for applications that leave
        logging setup to the cache configuration.

        Raises:
            CacheConfigError: If the configuration is invalid
        """
        config = configManager.getCacheConfig()
        if not isinstance(config, dict):
            raise CacheConfigError("Cache configuration must be a table")

        self._validate(config)
        for name, override in config.get("caches", {}).items():
            if not isinstance(override, dict):
                raise CacheConfigError(f"Configuration of cache '{name}' must be a table")
            self._validate(override)

        if configureLogging:
            initLogging(configManager.getLoggingConfig())

        with self._lock:
            self.config = config
            self.caches = {}
            self.initialized = True
        logger.info(f"CacheService initialized with {config.get('type', 'disk')} caches")

    def _validate(self, config: Dict[str, Any]) -> None:
        cacheType = config.get("type", "disk")
        if cacheType not in CACHE_TYPES:
            raise CacheConfigError(f"Unknown cache type: {cacheType}")

        converter = config.get("converter", "bytes")
        if converter not in CONVERTERS:
            raise CacheConfigError(f"Unknown value converter: {converter}")

        interval = config.get("check-expired-interval", DEFAULT_CHECK_EXPIRED_INTERVAL)
        if isinstance(interval, bool) or not isinstance(interval, (int, float)) or interval < 0:
            raise CacheConfigError(f"Invalid check-expired-interval: {interval!r}")

        baseDir = config.get("base-dir")
        if baseDir is not None and not isinstance(baseDir, str):
            raise CacheConfigError(f"Invalid base-dir: {baseDir!r}")

    def _ensureInitialized(self) -> None:
        if not self.initialized:
            raise CacheConfigError("CacheService is not initialized. Call injectConfig() first")

    def getCache(self, name: str = DEFAULT_CACHE_NAME) -> CacheInterface[Any]:
        """
        Get the cache with the given name, creating it on first request.

        Raises:
            CacheConfigError: If service is not initialized
        """
        self._ensureInitialized()
        with self._lock:
            cache = self.caches.get(name)
            if cache is None:
                cache = self._createCache(name)
                self.caches[name] = cache
            return cache

    def _createCache(self, name: str) -> CacheInterface[Any]:
        config = {k: v for k, v in self.config.items() if k != "caches"}
        config.update(self.config.get("caches", {}).get(name, {}))

        if config.get("type", "disk") == "null":
            logger.info(f"Cache '{name}' is disabled, using NullCache")
            return NullCache[Any]()

        converter: ValueConverter[Any] = CONVERTERS[config.get("converter", "bytes")]()
        cache = DiskCache[Any](
            name=name,
            baseDir=config.get("base-dir"),
            valueConverter=converter,
            checkExpiredInterval=float(config.get("check-expired-interval", DEFAULT_CHECK_EXPIRED_INTERVAL)),
        )
        logger.info(f"Created disk cache '{name}' in {cache.getStats()['directory']}")
        return cache

    def reset(self) -> None:
        """Drop configuration and all caches."""
        with self._lock:
            self.config = {}
            self.caches = {}
            self.initialized = False
