"""
Cache exceptions

This module defines the exception hierarchy for attrcache.
All cache-related errors inherit from CacheError base class.

Note that the public cache operations never raise these for routine
misses, expired entries or broken files: those are logged and reported as
an absent result. The exceptions are raised by the lower layers and by
configuration handling.
"""


class CacheError(Exception):
    """
    Base exception for all cache errors.

    Catch this to handle any attrcache error generically.
    """

    pass


class KeyEncodingError(CacheError, ValueError):
    """
    Exception raised when a key cannot be encoded or a file name cannot be decoded.

    This exception is raised when:
    - The key is empty
    - The key is not valid UTF-8 (e.g. contains lone surrogates)
    - A file name contains a malformed percent escape
    - A decoded file name is not valid UTF-8

    Args:
        message: Description of why the key is invalid
    """

    pass


class CacheConfigError(CacheError):
    """
    Exception raised when cache configuration is invalid.

    This exception is raised when:
    - The configuration file is missing or cannot be parsed
    - The cache type or value converter is not recognized
    - Configuration values have the wrong type

    Args:
        message: Description of the configuration error
    """

    pass


class FilesystemError(CacheError):
    """
    Exception raised when a filesystem adapter operation fails.

    This exception wraps errors such as:
    - File system I/O errors
    - Permission errors
    - Disk full
    - Extended attributes not supported by the filesystem

    Args:
        message: Description of the filesystem error
        originalError: The original exception that caused this error (optional)
    """

    def __init__(self, message: str, originalError: Exception | None = None):
        """
        Initialize FilesystemError with message and optional original error.

        Args:
            message: Description of the filesystem error
            originalError: The original exception that caused this error
        """
        super().__init__(message)
        self.originalError = originalError
