"""Core framework components for CodeLens."""

from .scanning import ScanEngine, AnalysisClient

__all__ = ['ScanEngine', 'AnalysisClient']
