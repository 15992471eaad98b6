"""
Logging setup from the `[logging]` config table.

Keys understood by configureLogger():
- level, format, propagate
- console, console-level
- file, file-level, rotate, rotate-when, rotate-backup-count

Every `[logging.logger.<name>]` sub-table takes the same keys and configures
the named logger, e.g. `[logging.logger."attrcache.cache"]`.
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_ROTATE_WHEN = "midnight"
DEFAULT_ROTATE_BACKUP_COUNT = 7


def getLogLevelByStr(levelStr: str, default: Optional[int] = None) -> Optional[int]:
    """Get log level by name, default if the name is unknown."""
    level = logging.getLevelNamesMapping().get(levelStr.upper())
    if level is None:
        logger.error(f"Invalid log level '{levelStr}'")
        return default
    return level


def _handlerLevel(config: Dict[str, Any], key: str, fallback: int) -> int:
    if key not in config:
        return fallback
    level = getLogLevelByStr(config[key])
    return level if level is not None else fallback


def _createFileHandler(config: Dict[str, Any]) -> logging.Handler:
    logFile = Path(config["file"])
    logFile.parent.mkdir(parents=True, exist_ok=True)

    if not config.get("rotate", False):
        return logging.FileHandler(logFile, encoding="utf-8")

    return TimedRotatingFileHandler(
        filename=logFile,
        when=config.get("rotate-when", DEFAULT_ROTATE_WHEN),
        backupCount=int(config.get("rotate-backup-count", DEFAULT_ROTATE_BACKUP_COUNT)),
        encoding="utf-8",
    )


def configureLogger(localLogger: logging.Logger, config: Dict[str, Any]) -> None:
    """
    Configure one logger from a config table.

    Handlers previously attached to the logger are replaced. A log file that
    can't be opened is reported and skipped, the console handler still works.
    """
    if "propagate" in config:
        localLogger.propagate = bool(config["propagate"])

    if "level" in config:
        level = getLogLevelByStr(config["level"])
        if level is not None:
            localLogger.setLevel(level)
    logLevel = localLogger.getEffectiveLevel()

    handlers: List[logging.Handler] = []
    if config.get("console", False):
        consoleHandler = logging.StreamHandler()
        consoleHandler.setLevel(_handlerLevel(config, "console-level", logLevel))
        handlers.append(consoleHandler)

    if "file" in config:
        try:
            fileHandler = _createFileHandler(config)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to setup file logging for {localLogger.name}: {e}")
        else:
            fileHandler.setLevel(_handlerLevel(config, "file-level", logLevel))
            handlers.append(fileHandler)

    for handler in localLogger.handlers[:]:
        localLogger.removeHandler(handler)

    formatter = logging.Formatter(config.get("format", DEFAULT_LOG_FORMAT))
    for handler in handlers:
        handler.setFormatter(formatter)
        localLogger.addHandler(handler)

    logger.debug(
        f"Logger '{localLogger.name}' configured: level={logging.getLevelName(logLevel)}, "
        f"handlers={[type(h).__name__ for h in handlers]}"
    )


def initLogging(config: Dict[str, Any]) -> None:
    """
    Configure the root logger and every `logger.<name>` sub-table.

    The root logger defaults to INFO when the table has no level.
    """
    rootLogger = logging.getLogger()
    rootLogger.setLevel(logging.INFO)
    configureLogger(rootLogger, {k: v for k, v in config.items() if k != "logger"})

    for loggerName, loggerConfig in config.get("logger", {}).items():
        configureLogger(logging.getLogger(loggerName), loggerConfig)

    logger.info(f"Logging configured: root level={logging.getLevelName(rootLogger.level)}")
