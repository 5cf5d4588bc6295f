"""Layered configuration for CodeLens: defaults, YAML file, environment."""

import copy
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional, List, Mapping

import yaml

from ..exceptions import (
    ConfigFileNotFoundError, ConfigFileFormatError, ConfigValidationError
)


DEFAULT_API_URL = 'http://localhost:3000'

DEFAULT_EXTENSIONS = [
    '.js', '.ts', '.jsx', '.tsx', '.py', '.go', '.java',
    '.rb', '.php', '.cs', '.c', '.cpp', '.rs'
]

DEFAULT_CONFIG: Dict[str, Any] = {
    'api': {
        'url': DEFAULT_API_URL,
        'timeout': 30,
    },
    'scan': {
        'max_concurrency': 10,
        'extensions': DEFAULT_EXTENSIONS,
    },
    'logging': {
        'level': 'WARNING',
        'format': '%(levelname)s %(name)s: %(message)s',
        'file': None,
        'max_file_size': '10MB',
        'backup_count': 3,
    },
}

CONFIG_PATH_ENV = 'CODELENS_CONFIG'

# Environment variable -> dotted configuration key
ENV_OVERRIDES: Dict[str, str] = {
    'CODELENS_API_URL': 'api.url',
    'CODELENS_TIMEOUT': 'api.timeout',
    'CODELENS_MAX_CONCURRENT': 'scan.max_concurrency',
    'CODELENS_LOG_LEVEL': 'logging.level',
    'CODELENS_LOG_FILE': 'logging.file',
}

_INT_PATTERN = re.compile(r'^[+-]?\d+$')
_FLOAT_PATTERN = re.compile(r'^[+-]?(\d+\.\d*|\.\d+)$')


def coerce_env_value(value: str) -> Any:
    """Turn numeric environment strings into numbers; leave anything else alone.

    Values that do not look numeric stay strings so the validator can
    report them against the key they were meant for.
    """
    text = value.strip()
    if _INT_PATTERN.match(text):
        return int(text)
    if _FLOAT_PATTERN.match(text):
        return float(text)
    return value


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``base`` with ``override`` merged in, recursing into nested sections."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


@dataclass(frozen=True)
class ClientConfig:
    """Settings shared by every component that talks to the CodeLens API.

    Built once at process entry and passed down explicitly.
    """
    api_url: str = DEFAULT_API_URL
    timeout: float = 30.0
    max_concurrency: int = 10


class ConfigManager:
    """Builds the effective configuration for one CodeLens process.

    Sources, lowest priority first: :data:`DEFAULT_CONFIG`, the YAML file
    named by ``config_path`` (or ``CODELENS_CONFIG``), then the
    ``CODELENS_*`` variables in :data:`ENV_OVERRIDES`. This is the only
    place that reads the environment.
    """

    def __init__(self, config_path: Optional[str] = None,
                 environ: Optional[Mapping[str, str]] = None):
        """Initialize configuration manager.

        Args:
            config_path: YAML file to load; a missing file is an error
            environ: Environment to read overrides from (defaults to os.environ)

        Raises:
            ConfigFileNotFoundError: If the configuration file does not exist
            ConfigFileFormatError: If it is not valid YAML or not a mapping
        """
        self.environ = os.environ if environ is None else environ
        self.config_path = config_path or self.environ.get(CONFIG_PATH_ENV) or None

        config = copy.deepcopy(DEFAULT_CONFIG)
        if self.config_path:
            config = merge_config(config, self._read_config_file(Path(self.config_path)))
        self.config: Dict[str, Any] = config

        for env_var, key in ENV_OVERRIDES.items():
            value = self.environ.get(env_var)
            if value:
                self.set(key, coerce_env_value(value))

    @staticmethod
    def _read_config_file(file_path: Path) -> Dict[str, Any]:
        if not file_path.is_file():
            raise ConfigFileNotFoundError(str(file_path))

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (yaml.YAMLError, OSError, UnicodeDecodeError) as e:
            raise ConfigFileFormatError(str(file_path), str(e))

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigFileFormatError(str(file_path), 'top level must be a mapping')

        for section in DEFAULT_CONFIG:
            value = data.get(section)
            if value is None:
                # An empty section (`api:`) keeps the defaults
                data.pop(section, None)
            elif not isinstance(value, dict):
                raise ConfigFileFormatError(str(file_path), f"'{section}' must be a mapping")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key such as ``'api.url'``.

        Returns:
            The value, or ``default`` when any part of the path is missing
        """
        node: Any = self.config
        for part in key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        *parents, leaf = key.split('.')
        node = self.config
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value

    def get_section(self, section: str) -> Dict[str, Any]:
        return self.config.get(section) or {}

    def validate(self) -> List[str]:
        from .config_validator import ConfigValidator
        return ConfigValidator(self.config).validate()

    def client_config(self) -> ClientConfig:
        """Validate the configuration and build the client settings from it.

        Raises:
            ConfigValidationError: If any configuration value is invalid
        """
        errors = self.validate()
        if errors:
            raise ConfigValidationError(errors)

        return ClientConfig(
            api_url=str(self.get('api.url')).rstrip('/'),
            timeout=float(self.get('api.timeout')),
            max_concurrency=int(self.get('scan.max_concurrency'))
        )

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.config)
