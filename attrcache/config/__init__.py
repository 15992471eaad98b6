"""
Configuration loading for attrcache.
"""

from .manager import ConfigManager

__all__ = ["ConfigManager"]
