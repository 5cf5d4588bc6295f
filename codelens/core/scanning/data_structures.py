"""Core data structures for the scan pipeline."""

from typing import Dict, List, Any, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum


class Severity(Enum):
    """Vulnerability severity, ordered from least to most severe."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANKS[self]

    @classmethod
    def from_value(cls, value: Optional[str]) -> Optional['Severity']:
        """Look up a severity by its wire name, ignoring case.

        Args:
            value: Severity string as returned by the service

        Returns:
            Matching Severity, or None for absent/unrecognized values
        """
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


# Unknown severities rank 0, below LOW
_SEVERITY_RANKS = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
    Severity.CRITICAL: 4,
}


class ScanState(Enum):
    """Stages of a single scan run."""
    IDLE = "idle"
    DISCOVERING = "discovering"
    DISPATCHING = "dispatching"
    AGGREGATING = "aggregating"
    DONE = "done"


@dataclass(frozen=True)
class ScanOptions:
    """Validated command options for one scan run."""
    file: Optional[str] = None
    directory: Optional[str] = None
    extensions: Tuple[str, ...] = ()
    language: Optional[str] = None

    @property
    def is_single_file(self) -> bool:
        return self.file is not None


@dataclass(frozen=True)
class ScanRequest:
    """Body of one analysis request."""
    code: str
    language: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """Convert to the JSON body expected by the API.

        The language key is omitted entirely when no hint is given.
        """
        payload: Dict[str, Any] = {'code': self.code}
        if self.language:
            payload['language'] = self.language
        return payload


@dataclass(frozen=True)
class Vulnerability:
    """A single finding reported by the service."""
    line: int
    severity: str
    message: str
    cwe: Optional[str] = None

    @property
    def severity_level(self) -> Optional[Severity]:
        return Severity.from_value(self.severity)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'line': self.line,
            'severity': self.severity,
            'message': self.message,
        }
        if self.cwe is not None:
            data['cwe'] = self.cwe
        return data


@dataclass(frozen=True)
class FileOutcome:
    """Result of analysing one file.

    A failed outcome carries an error and no vulnerabilities; a successful
    one with an empty tuple means the file was analysed and is clean.
    """
    file: str
    vulnerabilities: Tuple[Vulnerability, ...] = ()
    error: Optional[str] = None

    @classmethod
    def success(cls, file: str, vulnerabilities: List[Vulnerability]) -> 'FileOutcome':
        return cls(file=file, vulnerabilities=tuple(vulnerabilities))

    @classmethod
    def failure(cls, file: str, error: str) -> 'FileOutcome':
        return cls(file=file, error=error)

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def vulnerability_count(self) -> int:
        return len(self.vulnerabilities) if self.succeeded else 0

    def to_dict(self) -> Dict[str, Any]:
        if not self.succeeded:
            return {'file': self.file, 'error': self.error}
        return {
            'file': self.file,
            'vulnerabilities': [vuln.to_dict() for vuln in self.vulnerabilities]
        }


@dataclass(frozen=True)
class SkippedPath:
    """A path discovery could not read, with the reason."""
    path: str
    reason: str


@dataclass
class DiscoveryResult:
    """Files found under a root plus the paths that had to be skipped."""
    files: List[str] = field(default_factory=list)
    skipped: List[SkippedPath] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.skipped


@dataclass(frozen=True)
class Report:
    """Aggregated outcome of a scan run, ready for rendering."""
    total_vulnerability_count: int
    per_file: Tuple[FileOutcome, ...] = ()
    severity_counts: Tuple[Tuple[str, int], ...] = ()
    skipped: Tuple[SkippedPath, ...] = ()

    @property
    def is_clean(self) -> bool:
        return self.total_vulnerability_count == 0

    @property
    def failed(self) -> List[FileOutcome]:
        return [outcome for outcome in self.per_file if not outcome.succeeded]

    @property
    def succeeded(self) -> List[FileOutcome]:
        return [outcome for outcome in self.per_file if outcome.succeeded]

    def to_dict(self) -> Dict[str, Any]:
        """Convert report to dictionary format.

        Returns:
            Dictionary representation of the report
        """
        return {
            'total_vulnerability_count': self.total_vulnerability_count,
            'clean': self.is_clean,
            'severity_counts': dict(self.severity_counts),
            'files': [outcome.to_dict() for outcome in self.per_file],
            'failed_files': [outcome.file for outcome in self.failed],
            'skipped': [{'path': s.path, 'reason': s.reason} for s in self.skipped],
        }


@dataclass(frozen=True)
class LanguageInfo:
    """A language supported by the service."""
    name: str
    extensions: Tuple[str, ...] = ()


@dataclass(frozen=True)
class HealthStatus:
    """Service health as reported by ``GET /health``."""
    status: str
    version: str
    ai_configured: bool

    @property
    def ok(self) -> bool:
        return self.status == 'ok'
