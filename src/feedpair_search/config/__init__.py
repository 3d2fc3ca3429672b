"""Configuration management for the feed pair search.

This module provides Hydra-based configuration management with hierarchical
parameter groups and runtime override capabilities.
"""

from .config_manager import (
    ConfigManager, load_config, search_config_from_dict, entry_size_from_config
)
from .validators import validate_config, ConfigValidationError

__all__ = [
    'ConfigManager',
    'load_config',
    'search_config_from_dict',
    'entry_size_from_config',
    'validate_config',
    'ConfigValidationError'
]
