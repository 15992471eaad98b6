"""
Value converter implementations for cache storage

This module provides concrete implementations of the ValueConverter protocol
for raw bytes, UTF-8 text and JSON-serializable objects.
"""

import json
from typing import Any

from .. import utils
from .types import ValueConverter


class BytesValueConverter(ValueConverter[bytes]):
    """
    Pass-through converter for raw byte payloads.
    """

    def encode(self, obj: bytes) -> bytes:
        """
        Encode a bytes-like object for storage.

        Raises:
            TypeError: If obj is not bytes-like
        """
        if not isinstance(obj, (bytes, bytearray, memoryview)):
            raise TypeError(f"BytesValueConverter expects bytes input, got {type(obj).__name__}")

        return bytes(obj)

    def decode(self, data: bytes) -> bytes:
        return data


class StringValueConverter(ValueConverter[str]):
    """
    Converter for text values, stored as UTF-8.
    """

    __slots__ = ("encoding",)

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def encode(self, obj: str) -> bytes:
        """
        Encode a string object for storage.

        Raises:
            TypeError: If obj is not a string
            UnicodeEncodeError: If obj can't be represented in the encoding
        """
        if not isinstance(obj, str):
            raise TypeError(f"StringValueConverter expects string input, got {type(obj).__name__}")

        return obj.encode(self.encoding)

    def decode(self, data: bytes) -> str:
        return data.decode(self.encoding)


class JsonValueConverter(ValueConverter[Any]):
    """
    JSON converter for serializable objects.

    Objects are stored as compact UTF-8 JSON. Unlike key generation, values
    must round-trip, so objects that are not JSON-serializable are rejected
    instead of being stringified.
    """

    def encode(self, obj: Any) -> bytes:
        """
        Raises:
            TypeError: If obj is not JSON-serializable
            ValueError: If obj contains circular references or NaN handling fails
        """
        return utils.jsonDumps(obj, sort_keys=False, default=None).encode("utf-8")

    def decode(self, data: bytes) -> Any:
        return json.loads(data.decode("utf-8"))
