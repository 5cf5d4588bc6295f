"""Exception classes for CodeLens."""

from .base_exceptions import CodeLensException, CodeLensError, CodeLensCriticalError
from .config_exceptions import (
    ConfigurationError, ConfigValidationError, ConfigFileNotFoundError,
    ConfigFileFormatError
)
from .scan_exceptions import (
    ScanError, InvalidScanOptionsError, DiscoveryError, AnalysisError,
    AnalysisTimeoutError, MalformedResponseError, ServiceUnavailableError
)

__all__ = [
    'CodeLensException', 'CodeLensError', 'CodeLensCriticalError',
    'ConfigurationError', 'ConfigValidationError', 'ConfigFileNotFoundError',
    'ConfigFileFormatError',
    'ScanError', 'InvalidScanOptionsError', 'DiscoveryError', 'AnalysisError',
    'AnalysisTimeoutError', 'MalformedResponseError', 'ServiceUnavailableError'
]
