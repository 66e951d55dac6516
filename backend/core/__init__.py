"""
Core Module
Process settings and logging shared by every other package.

Exports:
    Config: Settings, get_settings
    Logging: setup_logger, get_logger
"""

from .config import Settings, get_settings
from .logger import setup_logger, get_logger

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "setup_logger",
    "get_logger",
]
