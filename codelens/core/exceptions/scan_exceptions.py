"""Errors raised by the scan pipeline and the API client."""

from typing import Optional, List
from .base_exceptions import CodeLensError, CodeLensCriticalError


class ScanError(CodeLensError):
    """Base class for scan pipeline errors."""

    default_error_code = 'SCAN_ERROR'

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        """Initialize scan error.

        Args:
            message: Error message
            path: File or directory the error relates to
            **kwargs: Passed to CodeLensException
        """
        super().__init__(message, **kwargs)
        self.add_detail('path', path)

        self.path = path


class InvalidScanOptionsError(ScanError):
    """Command options do not describe a runnable scan (usage error)."""

    default_error_code = 'INVALID_SCAN_OPTIONS'

    def __init__(self, reason: str, **kwargs):
        super().__init__(reason, **kwargs)
        self.reason = reason


class DiscoveryError(ScanError):
    """The discovery root cannot be traversed at all.

    Problems below the root are recorded as skipped paths instead.
    """

    default_error_code = 'DISCOVERY_ERROR'
    default_suggestion = 'Check that the directory exists and is readable'

    def __init__(self, root: str, reason: str, **kwargs):
        super().__init__(f"Cannot scan directory '{root}': {reason}", path=root, **kwargs)
        self.add_detail('reason', reason)

        self.root = root
        self.reason = reason


class AnalysisError(ScanError):
    """A single analysis request failed.

    The scan workflow never lets this escape the client; it becomes the
    cause carried by a failed file outcome.
    """

    default_error_code = 'ANALYSIS_ERROR'

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        """Initialize analysis error.

        Args:
            message: Human-readable cause
            status_code: HTTP status returned by the service, if any
            **kwargs: Passed to ScanError
        """
        super().__init__(message, **kwargs)
        self.add_detail('status_code', status_code)

        self.status_code = status_code


class AnalysisTimeoutError(AnalysisError):
    """The service did not answer within the configured timeout."""

    default_error_code = 'ANALYSIS_TIMEOUT'
    default_suggestion = 'Increase api.timeout or check the service load'

    def __init__(self, timeout_seconds: float, **kwargs):
        super().__init__(f"Request timed out after {timeout_seconds:g} seconds", **kwargs)
        self.add_detail('timeout_seconds', timeout_seconds)

        self.timeout_seconds = timeout_seconds


class MalformedResponseError(AnalysisError):
    """A response body does not match the API contract."""

    default_error_code = 'MALFORMED_RESPONSE'

    def __init__(self, endpoint: str, problems: List[str], **kwargs):
        """Initialize malformed response error.

        Args:
            endpoint: API path that returned the payload
            problems: Everything found wrong with the payload
            **kwargs: Passed to AnalysisError
        """
        super().__init__(f"Malformed response from {endpoint}: {'; '.join(problems)}", **kwargs)
        self.add_detail('endpoint', endpoint)
        self.add_detail('problems', problems)

        self.endpoint = endpoint
        self.problems = problems


class ServiceUnavailableError(CodeLensCriticalError):
    """A non-scan command could not get an answer from the service."""

    default_error_code = 'SERVICE_UNAVAILABLE'
    default_suggestion = 'Make sure the CodeLens API is running or set CODELENS_API_URL'

    def __init__(self, api_url: str, reason: str, **kwargs):
        super().__init__(f"Request to CodeLens API at {api_url} failed: {reason}", **kwargs)
        self.add_detail('api_url', api_url)
        self.add_detail('reason', reason)

        self.api_url = api_url
        self.reason = reason
