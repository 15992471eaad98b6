"""
Abstract filesystem adapter interface

This module defines the abstract base class with the filesystem operations
the cache requires: flat directory listing, whole-file create/read/delete,
named extended attributes and file creation time.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class AbstractFilesystemAdapter(ABC):
    """
    Abstract base class for filesystem adapters.

    All operations may fail with FilesystemError. Callers in the cache layer
    catch it, log it and degrade to an absent result.
    """

    @abstractmethod
    def ensureDirectory(self, path: Path) -> None:
        """
        Create the directory (and parents) if it doesn't exist.

        Raises:
            FilesystemError: If the directory can't be created or the path is not a directory
        """
        pass

    @abstractmethod
    def listFiles(self, directory: Path) -> list[Path]:
        """
        List regular files directly inside the directory, sorted by name.

        Raises:
            FilesystemError: If the directory can't be listed
        """
        pass

    @abstractmethod
    def createFile(self, path: Path, data: bytes) -> None:
        """
        Create a file with the given content.

        An existing file at the same path is removed first, so the new file
        starts without any extended attributes.

        Raises:
            FilesystemError: If the file can't be written
        """
        pass

    @abstractmethod
    def readFile(self, path: Path) -> bytes | None:
        """
        Read the whole file.

        Returns:
            The file content, None if the file doesn't exist

        Raises:
            FilesystemError: If the read fails (not for missing files)
        """
        pass

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Check if a regular file exists at the path."""
        pass

    @abstractmethod
    def deleteFile(self, path: Path) -> bool:
        """
        Delete a file.

        Returns:
            True if the file was deleted, False if it didn't exist

        Raises:
            FilesystemError: If the deletion fails
        """
        pass

    @abstractmethod
    def deleteDirectory(self, path: Path) -> bool:
        """
        Recursively delete a directory.

        Returns:
            True if the directory was deleted, False if it didn't exist

        Raises:
            FilesystemError: If the deletion fails
        """
        pass

    @abstractmethod
    def renameFile(self, source: Path, target: Path) -> None:
        """
        Rename a file inside the same filesystem, keeping its attributes.

        Raises:
            FilesystemError: If the rename fails
        """
        pass

    @abstractmethod
    def getAttribute(self, path: Path, name: str) -> bytes | None:
        """
        Read a named extended attribute.

        Returns:
            The attribute value, None if the file has no such attribute

        Raises:
            FilesystemError: If the attribute can't be read
        """
        pass

    @abstractmethod
    def setAttribute(self, path: Path, name: str, value: bytes) -> None:
        """
        Write a named extended attribute, replacing any previous value.

        Raises:
            FilesystemError: If the attribute can't be written
        """
        pass

    @abstractmethod
    def removeAttribute(self, path: Path, name: str) -> bool:
        """
        Remove a named extended attribute.

        Returns:
            True if the attribute was removed, False if it didn't exist

        Raises:
            FilesystemError: If the attribute can't be removed
        """
        pass

    @abstractmethod
    def getCreationTime(self, path: Path) -> float:
        """
        Get file creation time as Unix epoch seconds.

        Raises:
            FilesystemError: If the file can't be stat'ed
        """
        pass
