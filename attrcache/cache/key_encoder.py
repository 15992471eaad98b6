"""
Cache key encoding

This module turns arbitrary cache keys into file names that are legal on
every common filesystem and back. Disallowed characters follow the NTFS/exFAT
rules, which are a superset of ext4, APFS and HFS+ restrictions:

- ASCII control characters 0x00-0x1F and 0x7F
- The characters " * / : < > ? \\ |

Each disallowed character is replaced with a %XX escape. The escape
character itself is escaped too, so decodeKey(encodeKey(key)) == key for
every key.
"""

import re

from ..exceptions import KeyEncodingError

# Characters that can't appear in a file name
DISALLOWED_CHARS = frozenset([chr(c) for c in range(0x20)] + [chr(0x7F)] + list('"*/:<>?\\|'))

ESCAPE_CHAR = "%"

_ESCAPE_PATTERN = re.compile(r"%([0-9A-Fa-f]{2})")


def _escape(char: str) -> str:
    return f"{ESCAPE_CHAR}{ord(char):02X}"


def encodeKey(key: str) -> str:
    """
    Encode a cache key into a filesystem-legal name.

    Args:
        key: The cache key

    Returns:
        The encoded key. Its byte length is not bounded, see
        deriveStorageName() for the length-bounded storage name.

    Raises:
        KeyEncodingError: If the key is empty or not valid UTF-8

    Examples:
        >>> encodeKey("weather/oslo")
        'weather%2Foslo'
        >>> encodeKey("100%")
        '100%25'
    """
    if not key:
        raise KeyEncodingError("Cache key cannot be empty")

    try:
        key.encode("utf-8")
    except UnicodeEncodeError as e:
        raise KeyEncodingError(f"Cache key is not valid UTF-8: {key!r}") from e

    # "." and ".." would name the cache directory or its parent
    if key.strip(".") == "":
        return "".join(_escape(char) for char in key)

    return "".join(_escape(char) if char in DISALLOWED_CHARS or char == ESCAPE_CHAR else char for char in key)


def decodeKey(name: str) -> str:
    """
    Decode a file name produced by encodeKey() back into the cache key.

    Escapes may use either hex case. Escaped bytes are collected and decoded
    as UTF-8, so names written by other percent-encoders decode as well.

    Raises:
        KeyEncodingError: If the name contains a malformed escape or the
            decoded bytes are not valid UTF-8
    """
    if not name:
        raise KeyEncodingError("File name cannot be empty")

    result = bytearray()
    pos = 0
    while pos < len(name):
        char = name[pos]
        if char != ESCAPE_CHAR:
            result += char.encode("utf-8", errors="surrogateescape")
            pos += 1
            continue

        match = _ESCAPE_PATTERN.match(name, pos)
        if match is None:
            raise KeyEncodingError(f"Malformed escape at position {pos} in {name!r}")
        result.append(int(match.group(1), 16))
        pos = match.end()

    try:
        return result.decode("utf-8")
    except UnicodeDecodeError as e:
        raise KeyEncodingError(f"File name {name!r} doesn't decode to UTF-8: {e}") from e
