"""
Filesystem adapters

This package provides the filesystem primitives the cache is built on:
regular files in one flat directory plus named extended attributes.
"""

from .abstract import AbstractFilesystemAdapter
from .filesystem import FSAdapter

__all__ = ["AbstractFilesystemAdapter", "FSAdapter"]
