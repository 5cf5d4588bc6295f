"""JSON formatter for the rotating log file."""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any, FrozenSet


# Attributes every LogRecord carries; anything else came in through ``extra=``
_RESERVED_ATTRIBUTES: FrozenSet[str] = frozenset(
    logging.LogRecord('', logging.NOTSET, '', 0, '', (), None).__dict__
) | {'message', 'asctime'}


class StructuredFormatter(logging.Formatter):
    """Formats each record as a single JSON line.

    Values passed through ``extra=`` are collected under ``"context"``;
    anything json cannot encode is written with ``str()``.
    """

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'location': f"{record.module}:{record.funcName}:{record.lineno}",
        }

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        if self.include_extra:
            context = self.extra_fields(record)
            if context:
                entry['context'] = context

        return json.dumps(entry, ensure_ascii=False, default=str)

    @staticmethod
    def extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
        return {
            key: value for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRIBUTES and not key.startswith('_')
        }
