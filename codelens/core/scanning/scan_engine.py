"""Scan engine driving discovery, dispatch and aggregation."""

import asyncio
import logging
from typing import Callable, List, Optional, Sequence

from .client import AnalysisClient, ProgressListener
from .data_structures import DiscoveryResult, FileOutcome, Report, ScanOptions, ScanState
from .discovery import FileDiscovery
from .result_aggregator import ResultAggregator
from ..exceptions import InvalidScanOptionsError


class ScanEngine:
    """Runs one scan: discover files, analyse them, aggregate the outcomes.

    Analyses are fed through an ``asyncio.Queue`` to at most
    ``max_concurrency`` worker tasks. Every file settles independently, so a
    failure never cancels its siblings, and outcomes are returned in input
    order whatever order the responses arrive in.
    """

    def __init__(self, client: AnalysisClient, max_concurrency: int = 10,
                 progress: Optional[ProgressListener] = None,
                 on_discovered: Optional[Callable[[DiscoveryResult], None]] = None,
                 result_aggregator: Optional[ResultAggregator] = None):
        """Initialize scan engine.

        Args:
            client: Client used for every analysis request
            max_concurrency: Upper bound on requests in flight
            progress: Listener notified as each file settles
            on_discovered: Called once with the discovery result before dispatch
            result_aggregator: Aggregator to use (a fresh one by default)
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.client = client
        self.max_concurrency = max_concurrency
        self.progress = progress
        self.on_discovered = on_discovered
        self.result_aggregator = result_aggregator or ResultAggregator()
        self.logger = logging.getLogger('codelens.scan_engine')
        self.state = ScanState.IDLE

    def _set_state(self, state: ScanState) -> None:
        self.logger.debug(f"Scan state: {self.state.value} -> {state.value}")
        self.state = state

    async def run(self, options: ScanOptions) -> Report:
        """Execute the whole scan pipeline for ``options``.

        Args:
            options: Validated scan options

        Returns:
            Aggregated report

        Raises:
            InvalidScanOptionsError: If neither a file nor a directory is given
            DiscoveryError: If the directory cannot be scanned at all
        """
        self.state = ScanState.IDLE
        self._set_state(ScanState.DISCOVERING)
        discovery = self.discover(options)
        self.logger.info(f"Found {len(discovery.files)} files to scan")
        if self.on_discovered:
            self.on_discovered(discovery)

        self._set_state(ScanState.DISPATCHING)
        outcomes = await self.dispatch(discovery.files, options.language)

        self._set_state(ScanState.AGGREGATING)
        report = self.result_aggregator.aggregate(outcomes, discovery.skipped)

        self._set_state(ScanState.DONE)
        return report

    def discover(self, options: ScanOptions) -> DiscoveryResult:
        """Resolve the file set for a scan.

        An explicit file bypasses discovery and is scanned whatever its
        extension.
        """
        if options.file is not None:
            return DiscoveryResult(files=[options.file])
        if options.directory is None:
            raise InvalidScanOptionsError("Please specify --file or --directory")

        return FileDiscovery(options.extensions).discover(options.directory)

    async def dispatch(self, files: Sequence[str],
                       language: Optional[str] = None) -> List[FileOutcome]:
        """Analyse every file and wait for all of them to settle.

        Args:
            files: Files to analyse
            language: Optional language hint sent with every request

        Returns:
            One outcome per file, positionally aligned with ``files``
        """
        if not files:
            return []

        outcomes: List[Optional[FileOutcome]] = [None] * len(files)
        queue: asyncio.Queue = asyncio.Queue()
        for index, path in enumerate(files):
            queue.put_nowait((index, path))

        async def worker() -> None:
            while True:
                try:
                    index, path = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                try:
                    outcomes[index] = await self._analyze(path, language)
                finally:
                    queue.task_done()

        worker_count = min(self.max_concurrency, len(files))
        self.logger.debug(f"Dispatching {len(files)} files to {worker_count} workers")
        await asyncio.gather(*(worker() for _ in range(worker_count)))

        return outcomes

    async def _analyze(self, path: str, language: Optional[str]) -> FileOutcome:
        try:
            return await self.client.scan_file(path, language, progress=self.progress)
        except Exception as e:
            # Workers must outlive any single analysis or queued files never settle
            self.logger.exception(f"Unexpected error analyzing {path}")
            return FileOutcome.failure(path, f"Unexpected error: {e}")
