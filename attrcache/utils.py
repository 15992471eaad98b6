"""
Common utilities for attrcache.
"""

import datetime
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def toTimestamp(dt: datetime.datetime) -> float:
    """
    Convert datetime to Unix epoch seconds.

    Naive datetimes are treated as UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return dt.timestamp()


def fromTimestamp(ts: float) -> datetime.datetime:
    """
    Convert Unix epoch seconds to timezone-aware UTC datetime.
    """
    return datetime.datetime.fromtimestamp(ts, tz=datetime.timezone.utc)


def getDefaultCacheDir() -> Optional[Path]:
    """
    Get the per-user cache directory.

    Uses `$XDG_CACHE_HOME` if set, otherwise `~/.cache`.

    Returns:
        Path to the cache directory, None if the home directory can't be resolved
    """
    xdgCacheHome = os.getenv("XDG_CACHE_HOME")
    if xdgCacheHome:
        return Path(xdgCacheHome)

    try:
        return Path.home() / ".cache"
    except RuntimeError as e:
        logger.error(f"Unable to resolve home directory: {e}")
        return None


def jsonDumps(data: Any, **kwargs) -> str:
    """
    Dump JSON with sorted keys and non-ASCII text kept as is.

    Output is compact unless an indent is given. Keyword arguments override
    the defaults and are passed on to json.dumps().
    """
    dumpKwargs: Dict[str, Any] = {"ensure_ascii": False, "default": str, "sort_keys": True}
    if "indent" not in kwargs:
        dumpKwargs["separators"] = (",", ":")
    dumpKwargs.update(kwargs)
    return json.dumps(data, **dumpKwargs)


def load_dotenv(path: str = ".env", populateEnv: bool = True) -> Dict[str, str]:
    """
    Read `KEY=value` lines from a dotenv file.

    Blank lines, comments and lines without `=` are skipped. An `export `
    prefix and matching quotes around the value are dropped, so files shared
    with a shell work too. With populateEnv the values are put into
    `os.environ`, where `${VAR}` placeholders in the config pick them up.
    """
    values: Dict[str, str] = {}
    with open(path, "rt", encoding="utf-8") as f:
        for rawLine in f:
            line = rawLine.strip()
            if not line or line.startswith("#"):
                continue
            line = line.removeprefix("export ")
            key, sep, value = line.partition("=")
            if not sep:
                continue
            value = value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = value[1:-1]
            values[key.strip()] = value

    if populateEnv:
        os.environ.update(values)
    return values
