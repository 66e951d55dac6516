"""
Storage Layer
In-memory state; nothing survives a restart.
"""

from .store import ConfigStore, ConfigValidationError, get_config_store, normalize_config

__all__ = ["ConfigStore", "ConfigValidationError", "get_config_store", "normalize_config"]
