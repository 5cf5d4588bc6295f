"""Logging setup for CodeLens."""

from .logger_manager import LoggerManager
from .structured_formatter import StructuredFormatter

__all__ = ['LoggerManager', 'StructuredFormatter']
