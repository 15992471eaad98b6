"""
Storage name derivation

Most filesystems limit a file name to 255 bytes. Encoded keys that fit are
used as file names directly. Longer ones keep their tail, which is usually
the most specific part of hierarchical keys, and get a random UUID written
over their first 36 characters so that keys sharing a long tail still land in
different files.

The resulting name can't be recomputed from the key, so it must be stored in
the storage index and looked up from there on every later access.
"""

import uuid
from typing import Callable

from .key_encoder import encodeKey

MAX_NAME_BYTES = 255

# Candidate suffix length shrinks by this many characters per attempt
SUFFIX_STEP = 4

UUID_LENGTH = 36


def _byteLength(value: str) -> int:
    return len(value.encode("utf-8"))


def deriveStorageName(key: str, uuidFactory: Callable[[], uuid.UUID] = uuid.uuid4) -> str:
    """
    Derive the file name used to store a key.

    Args:
        key: The cache key
        uuidFactory: Source of the random prefix for long keys

    Returns:
        A filesystem-legal name of at most 255 UTF-8 bytes

    Raises:
        KeyEncodingError: If the key can't be encoded
    """
    encoded = encodeKey(key)
    if _byteLength(encoded) <= MAX_NAME_BYTES:
        return encoded

    # Character count doesn't bound byte count for multi-byte characters,
    # so shrink the suffix until it fits. Each character is at most 4 bytes,
    # which keeps the loop well above UUID_LENGTH.
    suffixLength = MAX_NAME_BYTES
    suffix = encoded[-suffixLength:]
    while _byteLength(suffix) > MAX_NAME_BYTES:
        suffixLength -= SUFFIX_STEP
        suffix = encoded[-suffixLength:]

    return str(uuidFactory()) + suffix[UUID_LENGTH:]
