"""
Pytest configuration and common fixtures for attrcache tests.

All fixtures follow camelCase naming convention.
"""

import logging
from pathlib import Path
from typing import Callable, Generator

import pytest

from attrcache.cache.disk_cache import DiskCache
from attrcache.cache.value_converter import BytesValueConverter
from attrcache.fs.abstract import AbstractFilesystemAdapter
from attrcache.fs.filesystem import FSAdapter
from attrcache.service import CacheService
from tests.fixtures import FakeClock, InMemoryAttributesFSAdapter, xattrSupported

# ============================================================================
# Filesystem Fixtures
# ============================================================================


@pytest.fixture
def tempDir(tmp_path: Path) -> Path:
    """Provide an empty temporary directory."""
    return tmp_path


@pytest.fixture
def fsAdapter(tempDir: Path) -> AbstractFilesystemAdapter:
    """
    Provide a filesystem adapter for tempDir.

    The real FSAdapter is used when the temporary filesystem supports user
    extended attributes, otherwise attributes are kept in memory.
    """
    if xattrSupported(tempDir):
        return FSAdapter()
    return InMemoryAttributesFSAdapter()


@pytest.fixture
def fakeClock() -> FakeClock:
    """Provide a manually advanced clock."""
    return FakeClock()


# ============================================================================
# Cache Fixtures
# ============================================================================


@pytest.fixture
def cacheFactory(
    tempDir: Path, fsAdapter: AbstractFilesystemAdapter, fakeClock: FakeClock
) -> Callable[..., DiskCache]:
    """
    Provide a factory creating caches in tempDir.

    Every cache created by the factory shares the filesystem adapter and the
    clock, which lets tests simulate a process restart by creating a second
    cache with the same name.

    Example:
        def testSomething(cacheFactory):
            cache = cacheFactory(name="test")
            cache.set("key", b"value")
    """

    def factory(**kwargs) -> DiskCache:
        kwargs.setdefault("name", "test.cache")
        kwargs.setdefault("baseDir", tempDir)
        kwargs.setdefault("valueConverter", BytesValueConverter())
        kwargs.setdefault("fsAdapter", fsAdapter)
        kwargs.setdefault("clock", fakeClock)
        return DiskCache(**kwargs)

    return factory


@pytest.fixture
def diskCache(cacheFactory: Callable[..., DiskCache]) -> DiskCache:
    """Provide a bytes cache in tempDir."""
    return cacheFactory()


@pytest.fixture
def cacheDir(diskCache: DiskCache) -> Path:
    """Provide the directory of diskCache."""
    directory = diskCache.directory
    assert directory is not None
    return directory


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def cacheService() -> Generator[CacheService, None, None]:
    """Provide a fresh CacheService singleton, reset after the test."""
    service = CacheService.getInstance()
    service.reset()
    yield service
    service.reset()


@pytest.fixture(autouse=True)
def resetRootLogger() -> Generator[None, None, None]:
    """Restore root logger handlers and level changed by logging tests."""
    rootLogger = logging.getLogger()
    handlers = rootLogger.handlers[:]
    level = rootLogger.level
    yield
    for handler in rootLogger.handlers[:]:
        if handler not in handlers:
            rootLogger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in rootLogger.handlers:
            rootLogger.addHandler(handler)
    rootLogger.setLevel(level)
