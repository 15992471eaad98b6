"""
Core type definitions and protocols for attrcache.cache

This module contains the type variables and the value codec protocol used
throughout the cache package.
"""

from typing import Optional, Protocol, TypeVar

V = TypeVar("V")  # Value type - can be any type


class ValueConverter(Protocol[V]):
    """
    Protocol for converting cached objects to raw bytes and back.

    Both directions may fail. A failure is signalled either by raising
    (TypeError, ValueError, UnicodeError) or by returning None; the cache
    treats both as "write skipped" or "not found".

    Type Parameters:
        V: The type of objects the converter handles

    Example:
        >>> class UpperConverter(ValueConverter[str]):
        ...     def encode(self, obj: str) -> bytes:
        ...         return obj.upper().encode("utf-8")
        ...     def decode(self, data: bytes) -> str:
        ...         return data.decode("utf-8")
    """

    def encode(self, obj: V) -> Optional[bytes]:
        """
        Convert object to bytes for storage.

        Args:
            obj: The object to store

        Returns:
            bytes: Raw payload, or None if the object can't be converted
        """
        ...

    def decode(self, data: bytes) -> Optional[V]:
        """
        Convert stored bytes back to an object.

        Args:
            data: Raw payload read from disk

        Returns:
            V: The decoded object, or None if the payload can't be converted
        """
        ...
