"""HTTP client for the CodeLens analysis API."""

import asyncio
import logging
from typing import Any, Callable, List, Optional

import httpx

from .data_structures import (
    ScanRequest, Vulnerability, FileOutcome, LanguageInfo, HealthStatus
)
from ..config import ClientConfig
from ..exceptions import (
    AnalysisError, AnalysisTimeoutError, MalformedResponseError,
    ServiceUnavailableError
)


# Called with (file path, succeeded, error message) after each file is analysed
ProgressListener = Callable[[str, bool, Optional[str]], None]


class AnalysisClient:
    """Async client for the CodeLens API.

    Scan calls are isolated per file: :meth:`scan_file` turns every failure
    into a failed :class:`FileOutcome` instead of raising. The remaining
    endpoints raise :class:`ServiceUnavailableError` because a failure there
    ends the command.
    """

    SCAN_ENDPOINT = '/api/v1/security/scan'
    EXPLAIN_ENDPOINT = '/api/v1/explain'
    LANGUAGES_ENDPOINT = '/api/v1/languages'
    HEALTH_ENDPOINT = '/health'

    def __init__(self, config: ClientConfig,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize analysis client.

        Args:
            config: Immutable client settings for this run
            transport: Optional httpx transport (used to stub the service)
        """
        self.config = config
        self.logger = logging.getLogger('codelens.client')
        self._client = httpx.AsyncClient(
            base_url=config.api_url,
            timeout=httpx.Timeout(config.timeout),
            limits=httpx.Limits(max_connections=config.max_concurrency),
            transport=transport
        )

    async def __aenter__(self) -> 'AnalysisClient':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def scan_file(self, path: str, language: Optional[str] = None,
                        progress: Optional[ProgressListener] = None) -> FileOutcome:
        """Read one file and submit it for a security scan.

        Args:
            path: File to analyse
            language: Optional language hint passed to the service
            progress: Optional listener notified once the file settles

        Returns:
            Successful or failed FileOutcome for ``path``
        """
        try:
            code = self._read_source(path)
            vulnerabilities = await self.scan_code(ScanRequest(code=code, language=language))
            outcome = FileOutcome.success(path, vulnerabilities)
        except OSError as e:
            outcome = FileOutcome.failure(path, f"Cannot read file: {e.strerror or e}")
        except AnalysisError as e:
            outcome = FileOutcome.failure(path, e.message)

        if outcome.succeeded:
            self.logger.debug(f"Analyzed {path}: {outcome.vulnerability_count} findings")
        else:
            self.logger.info(f"Failed to analyze {path}: {outcome.error}",
                             extra={'file': path})

        self._notify(progress, outcome)
        return outcome

    def _read_source(self, path: str) -> str:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            return f.read()

    def _notify(self, progress: Optional[ProgressListener], outcome: FileOutcome) -> None:
        if progress is None:
            return
        try:
            progress(outcome.file, outcome.succeeded, outcome.error)
        except Exception as e:
            self.logger.warning(f"Progress listener error for {outcome.file}: {e}")

    async def scan_code(self, request: ScanRequest) -> List[Vulnerability]:
        """Submit source text for a security scan.

        Args:
            request: Code and optional language hint

        Returns:
            Findings in the order the service reported them

        Raises:
            AnalysisError: On network failure, timeout, error status or malformed payload
        """
        data = await self._request('POST', self.SCAN_ENDPOINT, json=request.to_payload())
        return self._parse_vulnerabilities(data)

    async def explain(self, code: str, language: Optional[str] = None) -> str:
        """Ask the service for a natural-language explanation of ``code``.

        Raises:
            ServiceUnavailableError: If the request fails for any reason
        """
        request = ScanRequest(code=code, language=language)
        try:
            data = await self._request('POST', self.EXPLAIN_ENDPOINT, json=request.to_payload())
            explanation = data.get('explanation') if isinstance(data, dict) else None
            if not isinstance(explanation, str):
                raise MalformedResponseError(self.EXPLAIN_ENDPOINT,
                                             ["'explanation' is missing or not a string"])
        except AnalysisError as e:
            raise ServiceUnavailableError(self.config.api_url, e.message)
        return explanation

    async def list_languages(self) -> List[LanguageInfo]:
        """Fetch the languages the service can analyse.

        Raises:
            ServiceUnavailableError: If the request fails for any reason
        """
        try:
            data = await self._request('GET', self.LANGUAGES_ENDPOINT)
            return self._parse_languages(data)
        except AnalysisError as e:
            raise ServiceUnavailableError(self.config.api_url, e.message)

    async def health(self) -> HealthStatus:
        """Fetch service health.

        A non-2xx answer still counts as a reply if its body describes the
        service status, so a degraded service is reported rather than
        treated as unreachable.

        Raises:
            ServiceUnavailableError: If no health document could be obtained
        """
        try:
            data = await self._request('GET', self.HEALTH_ENDPOINT, check_status=False)
            return self._parse_health(data)
        except AnalysisError as e:
            raise ServiceUnavailableError(self.config.api_url, e.message)

    async def _request(self, method: str, endpoint: str, check_status: bool = True,
                       **kwargs) -> Any:
        """Perform one HTTP request and decode its JSON body.

        Args:
            method: HTTP method
            endpoint: API path relative to the base URL
            check_status: Whether a non-2xx status is an error
            **kwargs: Passed through to httpx

        Returns:
            Decoded JSON body

        Raises:
            AnalysisTimeoutError: If the request exceeded the configured timeout
            AnalysisError: On transport failure or error status
            MalformedResponseError: If the body is not JSON
        """
        try:
            # httpx limits each phase separately; wait_for bounds the whole exchange
            response = await asyncio.wait_for(
                self._client.request(method, endpoint, **kwargs), self.config.timeout
            )
        except (httpx.TimeoutException, asyncio.TimeoutError):
            raise AnalysisTimeoutError(self.config.timeout)
        except httpx.HTTPError as e:
            raise AnalysisError(f"Request failed: {str(e) or e.__class__.__name__}")

        if check_status and not response.is_success:
            raise AnalysisError(
                f"API error: {response.status_code} {response.reason_phrase}".rstrip(),
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError:
            raise MalformedResponseError(endpoint, ["body is not valid JSON"],
                                         status_code=response.status_code)

    def _parse_vulnerabilities(self, data: Any) -> List[Vulnerability]:
        """Validate and convert a scan response body.

        A missing ``vulnerabilities`` key means nothing was found.

        Raises:
            MalformedResponseError: If the body does not match the scan contract
        """
        if not isinstance(data, dict):
            raise MalformedResponseError(self.SCAN_ENDPOINT, ["expected a JSON object"])

        raw_items = data.get('vulnerabilities')
        if raw_items is None:
            return []
        if not isinstance(raw_items, list):
            raise MalformedResponseError(self.SCAN_ENDPOINT, ["'vulnerabilities' is not a list"])

        problems: List[str] = []
        vulnerabilities: List[Vulnerability] = []
        for index, item in enumerate(raw_items):
            if not isinstance(item, dict):
                problems.append(f"entry {index} is not an object")
                continue

            line = item.get('line')
            message = item.get('message')
            entry_problems = []
            if isinstance(line, bool) or not isinstance(line, int) or line < 1:
                entry_problems.append(f"entry {index} has invalid line {line!r}")
            if not isinstance(message, str):
                entry_problems.append(f"entry {index} has no message")
            if entry_problems:
                problems.extend(entry_problems)
                continue

            severity = item.get('severity')
            cwe = item.get('cwe')
            vulnerabilities.append(Vulnerability(
                line=line,
                severity='unknown' if severity is None else str(severity),
                message=message,
                cwe=None if cwe is None else str(cwe)
            ))

        if problems:
            raise MalformedResponseError(self.SCAN_ENDPOINT, problems)
        return vulnerabilities

    def _parse_languages(self, data: Any) -> List[LanguageInfo]:
        items = data.get('languages') if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise MalformedResponseError(self.LANGUAGES_ENDPOINT, ["'languages' is not a list"])

        languages = []
        for index, item in enumerate(items):
            if not isinstance(item, dict) or not isinstance(item.get('name'), str):
                raise MalformedResponseError(self.LANGUAGES_ENDPOINT,
                                             [f"entry {index} has no name"])
            extensions = item.get('extensions') or []
            if not isinstance(extensions, list):
                raise MalformedResponseError(self.LANGUAGES_ENDPOINT,
                                             [f"entry {index} has invalid extensions"])
            languages.append(LanguageInfo(
                name=item['name'],
                extensions=tuple(str(ext) for ext in extensions)
            ))
        return languages

    def _parse_health(self, data: Any) -> HealthStatus:
        if not isinstance(data, dict) or 'status' not in data:
            raise MalformedResponseError(self.HEALTH_ENDPOINT, ["'status' is missing"])

        return HealthStatus(
            status=str(data['status']),
            version=str(data.get('version', 'unknown')),
            ai_configured=bool(data.get('aiConfigured', False))
        )
