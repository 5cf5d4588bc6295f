"""Configuration management module for CodeLens."""

from .config_manager import (
    ConfigManager, ClientConfig, DEFAULT_API_URL, DEFAULT_EXTENSIONS, coerce_env_value, merge_config
)
from .config_validator import ConfigValidator, parse_size

__all__ = [
    'ConfigManager', 'ClientConfig', 'ConfigValidator', 'parse_size',
    'DEFAULT_API_URL', 'DEFAULT_EXTENSIONS', 'coerce_env_value', 'merge_config'
]
