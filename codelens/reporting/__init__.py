"""Terminal presentation of CodeLens results."""

from .console import ConsoleRenderer, severity_color

__all__ = ['ConsoleRenderer', 'severity_color']
