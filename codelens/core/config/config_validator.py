"""Configuration validator for CodeLens."""

import re
from typing import Dict, Any, List, Optional
from urllib.parse import urlparse


MAX_CONCURRENCY_LIMIT = 100

VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

_SIZE_UNITS = {'B': 1, 'KB': 1024, 'MB': 1024 ** 2, 'GB': 1024 ** 3}
_SIZE_PATTERN = re.compile(r'^\s*(\d+(?:\.\d+)?)\s*([KMG]?B)\s*$', re.IGNORECASE)


def parse_size(size: Any) -> Optional[int]:
    """Convert a size string such as ``'10MB'`` or ``'1.5 kb'`` to bytes.

    Returns:
        Number of bytes, or None if ``size`` is not a valid size string
    """
    if not isinstance(size, str):
        return None
    match = _SIZE_PATTERN.match(size)
    if not match:
        return None
    number, unit = match.groups()
    return int(float(number) * _SIZE_UNITS[unit.upper()])


def _is_positive_int(value: Any) -> bool:
    # bool is an int subclass
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class ConfigValidator:
    """Checks a merged configuration dictionary section by section.

    ``validate()`` never raises; it returns one message per problem so the
    caller can report everything at once.
    """

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.errors: List[str] = []

    def validate(self) -> List[str]:
        """Validate complete configuration.

        Returns:
            List of validation error messages (empty when valid)
        """
        self.errors = []

        for name, check in (('api', self._validate_api_config),
                            ('scan', self._validate_scan_config),
                            ('logging', self._validate_logging_config)):
            section = self.config.get(name)
            if section is None:
                section = {}
            if not isinstance(section, dict):
                self.errors.append(f"{name} must be a mapping")
                continue
            check(section)

        return self.errors

    def is_valid(self) -> bool:
        return not self.validate()

    def _validate_api_config(self, api: Dict[str, Any]) -> None:
        url = api.get('url')
        parsed = urlparse(url) if isinstance(url, str) else None
        if parsed is None or parsed.scheme not in ('http', 'https') or not parsed.netloc:
            self.errors.append("api.url must be an http(s) URL with a host")

        timeout = api.get('timeout')
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            self.errors.append("api.timeout must be a positive number of seconds")

    def _validate_scan_config(self, scan: Dict[str, Any]) -> None:
        max_concurrency = scan.get('max_concurrency')
        if not _is_positive_int(max_concurrency):
            self.errors.append("scan.max_concurrency must be a positive integer")
        elif max_concurrency > MAX_CONCURRENCY_LIMIT:
            self.errors.append(f"scan.max_concurrency should not exceed {MAX_CONCURRENCY_LIMIT}")

        extensions = scan.get('extensions')
        if not isinstance(extensions, list) or not extensions:
            self.errors.append("scan.extensions must be a non-empty list")
            return
        self.errors.extend(
            f"Invalid file extension: {extension!r}" for extension in extensions
            if not isinstance(extension, str) or not extension.strip(' .')
        )

    def _validate_logging_config(self, logging_config: Dict[str, Any]) -> None:
        level = logging_config.get('level')
        if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
            self.errors.append(f"logging.level must be one of: {', '.join(VALID_LOG_LEVELS)}")

        log_file = logging_config.get('file')
        if log_file is not None and not isinstance(log_file, str):
            self.errors.append("logging.file must be a path string")

        if parse_size(logging_config.get('max_file_size')) is None:
            self.errors.append("logging.max_file_size must be a valid size string (e.g., '10MB')")

        backup_count = logging_config.get('backup_count')
        if isinstance(backup_count, bool) or not isinstance(backup_count, int) or backup_count < 0:
            self.errors.append("logging.backup_count must be a non-negative integer")
