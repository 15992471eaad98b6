"""
Local filesystem adapter implementation

This module provides the filesystem adapter backed by the local filesystem,
storing per-file metadata in Linux extended attributes (`os.*xattr`).
"""

import errno
import logging
import os
import shutil
from pathlib import Path

from ..exceptions import FilesystemError
from .abstract import AbstractFilesystemAdapter

logger = logging.getLogger(__name__)

# errno values meaning "no such attribute" (ENOATTR is the BSD/macOS spelling)
_MISSING_ATTRIBUTE_ERRNOS = frozenset({errno.ENODATA, getattr(errno, "ENOATTR", errno.ENODATA)})


class FSAdapter(AbstractFilesystemAdapter):
    """
    Local filesystem adapter.

    Stores entries as plain files in a flat directory. Extended attributes
    must be enabled on the underlying filesystem (ext4, xfs, btrfs and tmpfs
    on recent kernels support the `user.` namespace).

    Features:
    - Files are re-created on overwrite, dropping stale attributes
    - File permissions set to 0o644 (readable by all, writable by owner)
    - OSError is wrapped into FilesystemError with originalError

    Example:
        >>> adapter = FSAdapter()
        >>> adapter.ensureDirectory(Path("/tmp/cache"))
        >>> adapter.createFile(Path("/tmp/cache/entry"), b"data")
        >>> adapter.setAttribute(Path("/tmp/cache/entry"), "user.example", b"value")
        >>> adapter.getAttribute(Path("/tmp/cache/entry"), "user.example")
        b'value'
    """

    def ensureDirectory(self, path: Path) -> None:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"Failed to create directory '{path}': {e}", originalError=e)

        if not path.is_dir():
            raise FilesystemError(f"Path '{path}' exists but is not a directory")

    def listFiles(self, directory: Path) -> list[Path]:
        try:
            return sorted(p for p in directory.iterdir() if p.is_file())
        except OSError as e:
            raise FilesystemError(f"Failed to list directory '{directory}': {e}", originalError=e)

    def createFile(self, path: Path, data: bytes) -> None:
        try:
            # Re-create instead of truncating so the old inode, with its
            # attributes and creation time, goes away
            path.unlink(missing_ok=True)
            with open(path, "xb") as f:
                f.write(data)
            os.chmod(path, 0o644)
        except OSError as e:
            try:
                path.unlink(missing_ok=True)
            except OSError as cleanupError:
                logger.debug(f"Failed to clean up partial file '{path}': {cleanupError}")
            raise FilesystemError(f"Failed to create file '{path}': {e}", originalError=e)

    def readFile(self, path: Path) -> bytes | None:
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise FilesystemError(f"Failed to read file '{path}': {e}", originalError=e)

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def deleteFile(self, path: Path) -> bool:
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise FilesystemError(f"Failed to delete file '{path}': {e}", originalError=e)

    def deleteDirectory(self, path: Path) -> bool:
        if not path.exists():
            return False
        try:
            shutil.rmtree(path)
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise FilesystemError(f"Failed to delete directory '{path}': {e}", originalError=e)

    def renameFile(self, source: Path, target: Path) -> None:
        try:
            source.rename(target)
        except OSError as e:
            raise FilesystemError(f"Failed to rename '{source}' to '{target}': {e}", originalError=e)

    def _checkXattrSupport(self) -> None:
        if not hasattr(os, "getxattr"):
            raise FilesystemError("Extended attributes are not supported on this platform")

    def getAttribute(self, path: Path, name: str) -> bytes | None:
        self._checkXattrSupport()
        try:
            return os.getxattr(path, name)
        except OSError as e:
            if e.errno in _MISSING_ATTRIBUTE_ERRNOS:
                return None
            raise FilesystemError(f"Failed to read attribute '{name}' of '{path}': {e}", originalError=e)

    def setAttribute(self, path: Path, name: str, value: bytes) -> None:
        self._checkXattrSupport()
        try:
            os.setxattr(path, name, value)
        except OSError as e:
            raise FilesystemError(f"Failed to write attribute '{name}' of '{path}': {e}", originalError=e)

    def removeAttribute(self, path: Path, name: str) -> bool:
        self._checkXattrSupport()
        try:
            os.removexattr(path, name)
            return True
        except OSError as e:
            if e.errno in _MISSING_ATTRIBUTE_ERRNOS:
                return False
            raise FilesystemError(f"Failed to remove attribute '{name}' of '{path}': {e}", originalError=e)

    def getCreationTime(self, path: Path) -> float:
        try:
            stat = path.stat()
        except OSError as e:
            raise FilesystemError(f"Failed to stat '{path}': {e}", originalError=e)
        # Linux has no st_birthtime; files are never modified in place, so
        # modification time is the creation time there
        return getattr(stat, "st_birthtime", stat.st_mtime)
