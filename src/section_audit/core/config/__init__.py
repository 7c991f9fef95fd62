from __future__ import annotations

from .manager import ConfigManager, PROJECT_CONFIG_NAMES, write_default_config
from .validation import validate_config

__all__ = [
    "ConfigManager",
    "PROJECT_CONFIG_NAMES",
    "write_default_config",
    "validate_config",
]
