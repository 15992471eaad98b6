"""
Test fixtures package for attrcache tests.
"""

from .fs_fixtures import FakeClock, InMemoryAttributesFSAdapter, xattrSupported

__all__ = ["FakeClock", "InMemoryAttributesFSAdapter", "xattrSupported"]
