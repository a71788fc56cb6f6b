"""
Configuration management for ARlink

This module provides configuration loading, validation, and management
for the ARlink association pipeline.
"""

from .config import (INPUT_TABLES, Config, get_default_config, load_config,
                     save_config, validate_config)

__all__ = [
    "Config",
    "INPUT_TABLES",
    "load_config",
    "save_config",
    "validate_config",
    "get_default_config",
]
