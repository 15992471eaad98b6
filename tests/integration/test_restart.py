"""
Integration tests for cache persistence across process restarts.

A restart is simulated by creating a second DiskCache with the same name and
base directory. Both instances share the filesystem adapter, so attributes
kept in memory by the test adapter survive as they would on disk.
"""

import logging

from attrcache.cache.metadata import KEY_ATTRIBUTE, MetadataStore
from attrcache.utils import fromTimestamp


class TestRestart:
    """Test that a fresh instance rebuilds its index from disk."""

    def testEntriesSurviveRestart(self, cacheFactory):
        first = cacheFactory()
        first.set("weather/oslo", b"23C")
        first.set("weather/bergen", b"14C")

        second = cacheFactory()

        assert second.get("weather/oslo") == b"23C"
        assert second.get("weather/bergen") == b"14C"
        assert second.getStats()["entries"] == 2

    def testLongKeysSurviveRestart(self, cacheFactory):
        suffix = "/page" * 100
        keys = [f"https://example.com/{n}{suffix}" for n in range(3)]
        first = cacheFactory()
        for key in keys:
            first.set(key, key.encode())

        second = cacheFactory()

        for key in keys:
            assert second.get(key) == key.encode()

    def testExpirationSurvivesRestart(self, cacheFactory, fakeClock):
        first = cacheFactory()
        first.set("short", b"1", ttl=10)
        first.set("long", b"2", ttl=1000)

        fakeClock.advance(11)
        second = cacheFactory()

        assert second.get("short") is None
        assert second.get("long") == b"2"
        assert second.expirationDate("long") == fromTimestamp(fakeClock.now - 11 + 1000)

    def testRemovedEntriesStayRemoved(self, cacheFactory):
        first = cacheFactory()
        first.set("a", b"1")
        first.set("b", b"2")
        first.remove("a")

        second = cacheFactory()

        assert second.contains("a") is False
        assert second.get("b") == b"2"

    def testReloadIndexPicksUpOtherWriters(self, cacheFactory):
        reader = cacheFactory()
        assert reader.get("key") is None

        writer = cacheFactory()
        writer.set("key", b"value")
        assert reader.contains("key") is False

        reader.reloadIndex()

        assert reader.get("key") == b"value"


class TestLegacyMigration:
    """Test files written by the old naming scheme without key attributes."""

    def testLegacyFileMigrated(self, cacheFactory, cacheDir, fsAdapter):
        (cacheDir / "weather%2Foslo").write_bytes(b"23C")

        cache = cacheFactory()

        assert cache.get("weather/oslo") == b"23C"
        assert fsAdapter.getAttribute(cacheDir / "weather%2Foslo", KEY_ATTRIBUTE) == b"weather/oslo"

    def testLegacyFileRenamedToCurrentScheme(self, cacheFactory, cacheDir):
        (cacheDir / "weather%2foslo").write_bytes(b"23C")

        cache = cacheFactory()

        assert cache.get("weather/oslo") == b"23C"
        assert [p.name for p in cacheDir.iterdir()] == ["weather%2Foslo"]

    def testUndecodableLegacyFileIgnored(self, cacheFactory, cacheDir, caplog):
        (cacheDir / "broken%zz").write_bytes(b"data")

        with caplog.at_level(logging.WARNING):
            cache = cacheFactory()
            assert cache.getStats()["entries"] == 0
            cache.get("anything")

        assert "Skipping undecodable legacy file" in caplog.text
        assert (cacheDir / "broken%zz").exists()

    def testMigratedFileHasNoExpiration(self, cacheFactory, cacheDir, fsAdapter, fakeClock):
        (cacheDir / "plain").write_bytes(b"value")

        cache = cacheFactory()
        fakeClock.advance(10_000)

        assert cache.get("plain") == b"value"
        assert MetadataStore(fsAdapter).getExpiration(cacheDir / "plain") is None
