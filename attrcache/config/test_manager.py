"""
Tests for the Configuration Manager.
"""

import os
import tempfile
from pathlib import Path

import pytest

from ..exceptions import CacheConfigError
from .manager import ConfigManager, mergeConfigs, substituteEnvVars

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def tempDir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sampleConfigToml():
    """Provide sample valid TOML configuration."""
    return """
[cache]
type = "disk"
base-dir = "/var/cache/app"
check-expired-interval = 300
converter = "json"

[logging]
level = "INFO"
"""


@pytest.fixture
def overrideToml():
    """Provide override configuration TOML."""
    return """
[cache]
check-expired-interval = 60

[cache.caches."com.example.raw"]
converter = "bytes"

[logging]
level = "DEBUG"
"""


# ============================================================================
# Loading
# ============================================================================


class TestConfigLoading:
    def testLoadMainConfig(self, tempDir, sampleConfigToml):
        configPath = tempDir / "config.toml"
        configPath.write_text(sampleConfigToml)

        manager = ConfigManager(str(configPath), dotEnvFile=str(tempDir / ".env"))

        assert manager.getCacheConfig() == {
            "type": "disk",
            "base-dir": "/var/cache/app",
            "check-expired-interval": 300,
            "converter": "json",
        }
        assert manager.getLoggingConfig() == {"level": "INFO"}

    def testMissingConfigRaises(self, tempDir):
        with pytest.raises(CacheConfigError):
            ConfigManager(str(tempDir / "missing.toml"), dotEnvFile=str(tempDir / ".env"))

    def testInvalidSyntaxRaises(self, tempDir):
        configPath = tempDir / "config.toml"
        configPath.write_text("[cache\ntype = ")

        with pytest.raises(CacheConfigError):
            ConfigManager(str(configPath), dotEnvFile=str(tempDir / ".env"))

    def testMissingSectionsDefaultToEmpty(self, tempDir):
        configPath = tempDir / "config.toml"
        configPath.write_text("")

        manager = ConfigManager(str(configPath), dotEnvFile=str(tempDir / ".env"))

        assert manager.getCacheConfig() == {}
        assert manager.getLoggingConfig() == {}
        assert manager.get("missing", "default") == "default"


class TestConfigDirs:
    def testConfigDirsMergedOverMain(self, tempDir, sampleConfigToml, overrideToml):
        configPath = tempDir / "config.toml"
        configPath.write_text(sampleConfigToml)
        confDir = tempDir / "conf.d" / "nested"
        confDir.mkdir(parents=True)
        (confDir / "override.toml").write_text(overrideToml)

        manager = ConfigManager(str(configPath), [str(tempDir / "conf.d")], dotEnvFile=str(tempDir / ".env"))

        cacheConfig = manager.getCacheConfig()
        assert cacheConfig["check-expired-interval"] == 60
        assert cacheConfig["converter"] == "json"
        assert cacheConfig["caches"] == {"com.example.raw": {"converter": "bytes"}}
        assert manager.getLoggingConfig()["level"] == "DEBUG"

    def testOnlyConfigDirs(self, tempDir, overrideToml):
        confDir = tempDir / "conf.d"
        confDir.mkdir()
        (confDir / "cache.toml").write_text(overrideToml)

        manager = ConfigManager(str(tempDir / "missing.toml"), [str(confDir)], dotEnvFile=str(tempDir / ".env"))

        assert manager.getCacheConfig()["check-expired-interval"] == 60

    def testBrokenFileInConfigDirSkipped(self, tempDir, sampleConfigToml):
        configPath = tempDir / "config.toml"
        configPath.write_text(sampleConfigToml)
        confDir = tempDir / "conf.d"
        confDir.mkdir()
        (confDir / "broken.toml").write_text("[cache\n")

        manager = ConfigManager(str(configPath), [str(confDir)], dotEnvFile=str(tempDir / ".env"))

        assert manager.getCacheConfig()["converter"] == "json"

    def testMissingConfigDirSkipped(self, tempDir, sampleConfigToml):
        configPath = tempDir / "config.toml"
        configPath.write_text(sampleConfigToml)

        manager = ConfigManager(str(configPath), [str(tempDir / "nope")], dotEnvFile=str(tempDir / ".env"))

        assert manager.getCacheConfig()["type"] == "disk"


class TestEnvSubstitution:
    def testSubstituteNested(self, monkeypatch):
        monkeypatch.setenv("CACHE_ROOT", "/srv/cache")

        result = substituteEnvVars({"a": "${CACHE_ROOT}/x", "b": ["${CACHE_ROOT}", 1], "c": 2})

        assert result == {"a": "/srv/cache/x", "b": ["/srv/cache", 1], "c": 2}

    def testUnknownVariableKept(self, monkeypatch):
        monkeypatch.delenv("ATTRCACHE_UNSET_VAR", raising=False)
        assert substituteEnvVars("${ATTRCACHE_UNSET_VAR}") == "${ATTRCACHE_UNSET_VAR}"

    def testDotEnvFileUsedForSubstitution(self, tempDir, monkeypatch):
        monkeypatch.delenv("ATTRCACHE_TEST_BASE", raising=False)
        dotEnv = tempDir / ".env"
        dotEnv.write_text('# comment\nATTRCACHE_TEST_BASE="/tmp/from-dotenv"\n')
        configPath = tempDir / "config.toml"
        configPath.write_text('[cache]\nbase-dir = "${ATTRCACHE_TEST_BASE}/cache"\n')

        try:
            manager = ConfigManager(str(configPath), dotEnvFile=str(dotEnv))
            assert manager.getCacheConfig()["base-dir"] == "/tmp/from-dotenv/cache"
        finally:
            os.environ.pop("ATTRCACHE_TEST_BASE", None)


class TestMergeConfigs:
    def testTablesMergedKeyByKey(self):
        base = {"cache": {"type": "disk", "caches": {"a": {"converter": "json"}}}, "logging": {"level": "INFO"}}
        override = {"cache": {"caches": {"b": {"type": "null"}}}, "logging": "off"}

        merged = mergeConfigs(base, override)

        assert merged == {
            "cache": {"type": "disk", "caches": {"a": {"converter": "json"}, "b": {"type": "null"}}},
            "logging": "off",
        }
        assert base["cache"]["caches"] == {"a": {"converter": "json"}}

    def testLaterConfigDirFilesWin(self, tempDir):
        confDir = tempDir / "conf.d"
        confDir.mkdir()
        (confDir / "10-base.toml").write_text('[cache]\nconverter = "string"\n')
        (confDir / "20-local.toml").write_text('[cache]\nconverter = "json"\n')

        manager = ConfigManager(str(tempDir / "missing.toml"), [str(confDir)], dotEnvFile=str(tempDir / ".env"))

        assert manager.getCacheConfig() == {"converter": "json"}
