"""Logging setup for a CodeLens process."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict, Any, List, Optional

from .structured_formatter import StructuredFormatter
from ..config.config_validator import parse_size


ROOT_LOGGER_NAME = 'codelens'

DEFAULT_CONSOLE_FORMAT = '%(levelname)s %(name)s: %(message)s'
DEFAULT_MAX_BYTES = 10 * 1024 * 1024


class LoggerManager:
    """Owns the handlers attached to the ``codelens`` logger.

    Components log through ``logging.getLogger('codelens.<component>')`` and
    never configure handlers themselves. Records go to stderr in a short
    human format, and additionally to a rotating JSON file when
    ``logging.file`` is set. The ``codelens`` logger does not propagate, so
    stdout stays reserved for command output.
    """

    def __init__(self, config: Dict[str, Any], level_override: Optional[str] = None):
        """Configure logging from the ``logging`` section of ``config``.

        Args:
            config: Full configuration dictionary
            level_override: Level name from the command line, wins over the config
        """
        logging_config = config.get('logging')
        self.logging_config = logging_config if isinstance(logging_config, dict) else {}
        self.level = self._resolve_level(level_override or self.logging_config.get('level'))
        self.root = logging.getLogger(ROOT_LOGGER_NAME)
        self.handlers: List[logging.Handler] = []
        self._configure()

    @staticmethod
    def _resolve_level(name: Optional[str]) -> int:
        level = logging.getLevelName(str(name or 'WARNING').upper())
        return level if isinstance(level, int) else logging.WARNING

    def _configure(self) -> None:
        # Repeated setup (tests, several CLI invocations in one process) replaces handlers
        self._detach(self.root)
        self.root.setLevel(self.level)
        self.root.propagate = False

        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(
            self.logging_config.get('format') or DEFAULT_CONSOLE_FORMAT
        ))
        self._attach(console)

        log_file = self.logging_config.get('file')
        if log_file:
            self._attach(self._file_handler(Path(log_file)))

    def _file_handler(self, log_file: Path) -> logging.Handler:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=parse_size(self.logging_config.get('max_file_size')) or DEFAULT_MAX_BYTES,
            backupCount=self.logging_config.get('backup_count', 3),
            encoding='utf-8'
        )
        handler.setFormatter(StructuredFormatter())
        return handler

    def _attach(self, handler: logging.Handler) -> None:
        handler.setLevel(self.level)
        self.root.addHandler(handler)
        self.handlers.append(handler)

    @staticmethod
    def _detach(logger: logging.Logger) -> None:
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')

    def shutdown(self) -> None:
        """Flush and close every handler this manager attached."""
        for handler in self.handlers:
            self.root.removeHandler(handler)
            handler.close()
        self.handlers = []
