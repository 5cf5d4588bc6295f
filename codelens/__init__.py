"""CodeLens - AI-powered code analysis CLI

A command-line client for the CodeLens analysis service. It discovers
local source files, submits them to the service for security scanning or
natural-language explanation, and renders severity-ranked results.

This package provides:
- File discovery with extension and directory exclusion rules
- An async HTTP client for the CodeLens API
- A bounded, order-preserving scan engine
- Result aggregation and terminal rendering
"""

__version__ = "1.0.0"
__author__ = "CodeLens Development Team"
__description__ = "AI-powered code analysis CLI"
__license__ = "MIT"

from .core import ScanEngine, AnalysisClient
from .core.exceptions import CodeLensException, CodeLensError

__all__ = [
    'ScanEngine',
    'AnalysisClient',
    'CodeLensException',
    'CodeLensError',
    '__version__'
]
