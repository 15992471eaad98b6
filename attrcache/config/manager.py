"""
Configuration management for attrcache.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli

from .. import utils
from ..exceptions import CacheConfigError

logger = logging.getLogger(__name__)


_ENV_PLACEHOLDER = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}")


def replaceMatchToEnv(match: re.Match[str]) -> str:
    # Unset variables keep their placeholder
    return os.getenv(match.group(1), match.group(0))


def substituteEnvVars(value: Any) -> Any:
    """Recursively substitute environment variable placeholders in configuration values.

    Placeholders have the form ${VAR_NAME}. Strings inside dictionaries and
    lists are processed recursively, other types are returned unchanged.
    """
    if isinstance(value, str):
        return _ENV_PLACEHOLDER.sub(replaceMatchToEnv, value)
    elif isinstance(value, dict):
        return {k: substituteEnvVars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substituteEnvVars(item) for item in value]
    return value


def mergeConfigs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into a copy of base, tables are merged key by key."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = mergeConfigs(merged[key], value)
        else:
            merged[key] = value
    return merged


def _readToml(path: Path) -> Dict[str, Any]:
    with open(path, "rb") as f:
        return tomli.load(f)


class ConfigManager:
    """
    Loads cache configuration from TOML files.

    The main config file is merged with every `*.toml` file found in the
    optional config directories (in sorted order, later files win), then
    `${VAR}` placeholders are replaced with environment variables. Variables
    from `dotEnvFile` are loaded into the environment first if the file exists.

    Example config:
        [cache]
        type = "disk"
        base-dir = "${HOME}/.cache/myapp"
        check-expired-interval = 600
        converter = "json"

        [logging]
        level = "INFO"
        console = true
    """

    def __init__(
        self, configPath: str = "config.toml", configDirs: Optional[List[str]] = None, dotEnvFile: str = ".env"
    ):
        """
        Raises:
            CacheConfigError: If no configuration can be loaded
        """
        self.configPath = configPath
        self.configDirs = configDirs or []
        if os.path.isfile(dotEnvFile):
            utils.load_dotenv(path=dotEnvFile)
        self.config = substituteEnvVars(self._loadConfig())

    def _configDirFiles(self, directory: str) -> List[Path]:
        dirPath = Path(directory)
        if not dirPath.is_dir():
            logger.warning(f"Config directory {directory} does not exist or is not a directory, skipping")
            return []
        return sorted(p for p in dirPath.rglob("*.toml") if p.is_file())

    def _loadConfig(self) -> Dict[str, Any]:
        configFile = Path(self.configPath)
        if not configFile.is_file() and not self.configDirs:
            raise CacheConfigError(f"Configuration file {self.configPath} not found")

        config: Dict[str, Any] = {}
        if configFile.is_file():
            try:
                config = _readToml(configFile)
            except (OSError, tomli.TOMLDecodeError) as e:
                raise CacheConfigError(f"Failed to load configuration {self.configPath}: {e}") from e

        for configDir in self.configDirs:
            for tomlFile in self._configDirFiles(configDir):
                try:
                    config = mergeConfigs(config, _readToml(tomlFile))
                except (OSError, tomli.TOMLDecodeError) as e:
                    # A broken drop-in file must not take the whole config down
                    logger.error(f"Failed to load config file {tomlFile}: {e}")
                    continue
                logger.debug(f"Merged config from {tomlFile}")

        logger.info(f"Configuration loaded from {self.configPath} and {len(self.configDirs)} config directories")
        return config

    def get(self, key: str, default=None) -> Any:
        """Get configuration value by key."""
        return self.config.get(key, default)

    def getLoggingConfig(self) -> Dict[str, Any]:
        """Get logging-specific configuration."""
        return self.get("logging", {})

    def getCacheConfig(self) -> Dict[str, Any]:
        """
        Get cache configuration.

        Returns a dictionary with the following keys, all optional:
        - type: "disk" (default) or "null"
        - base-dir: Directory holding the cache directories
        - check-expired-interval: Seconds between lazy expiration sweeps
        - converter: "bytes" (default), "string" or "json"
        - caches: Per-cache-name overrides of the keys above

        Example:
            {
                "type": "disk",
                "base-dir": "./cache",
                "converter": "json",
                "caches": {"responses": {"converter": "bytes"}}
            }
        """
        return self.get("cache", {})
