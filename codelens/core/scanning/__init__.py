"""Scan pipeline modules for CodeLens."""

from .scan_engine import ScanEngine
from .client import AnalysisClient, ProgressListener
from .discovery import FileDiscovery, normalize_extensions, parse_extensions
from .options import build_scan_options
from .data_structures import (
    Severity, ScanState, ScanOptions, ScanRequest, Vulnerability,
    FileOutcome, SkippedPath, DiscoveryResult, Report,
    LanguageInfo, HealthStatus
)
from .result_aggregator import ResultAggregator, severity_rank, rank_vulnerabilities

__all__ = [
    'ScanEngine',
    'AnalysisClient', 'ProgressListener',
    'FileDiscovery', 'normalize_extensions', 'parse_extensions', 'build_scan_options',
    'Severity', 'ScanState', 'ScanOptions', 'ScanRequest', 'Vulnerability',
    'FileOutcome', 'SkippedPath', 'DiscoveryResult', 'Report',
    'LanguageInfo', 'HealthStatus',
    'ResultAggregator', 'severity_rank', 'rank_vulnerabilities'
]
