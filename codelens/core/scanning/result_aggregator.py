"""Result aggregation for scan runs."""

import logging
from collections import Counter
from typing import Iterable, List, Optional, Sequence, Tuple

from .data_structures import FileOutcome, Report, Severity, SkippedPath, Vulnerability


def severity_rank(severity: Optional[str]) -> int:
    """Rank a severity string for presentation ordering.

    critical > high > medium > low > anything else (including missing).

    Args:
        severity: Severity name as reported by the service

    Returns:
        Integer rank, 0 for absent or unrecognized values
    """
    level = Severity.from_value(severity)
    return level.rank if level else 0


def rank_vulnerabilities(vulnerabilities: Iterable[Vulnerability]) -> List[Vulnerability]:
    """Order findings most severe first, keeping service order within a severity."""
    return sorted(vulnerabilities, key=lambda vuln: -severity_rank(vuln.severity))


class ResultAggregator:
    """Merges per-file outcomes into a single :class:`Report`.

    Failed outcomes are kept in the report (so they can be flagged) but never
    contribute to the vulnerability total. The aggregator performs no I/O.
    """

    def __init__(self):
        self.logger = logging.getLogger('codelens.result_aggregator')

    def aggregate(self, outcomes: Sequence[FileOutcome],
                  skipped: Sequence[SkippedPath] = ()) -> Report:
        """Aggregate outcomes for one scan run.

        Args:
            outcomes: Per-file outcomes in discovery order
            skipped: Paths discovery could not read

        Returns:
            Report with totals and per-severity counts
        """
        total = sum(outcome.vulnerability_count for outcome in outcomes)
        failed = sum(1 for outcome in outcomes if not outcome.succeeded)

        report = Report(
            total_vulnerability_count=total,
            per_file=tuple(outcomes),
            severity_counts=self._count_severities(outcomes),
            skipped=tuple(skipped)
        )

        self.logger.info(
            f"Aggregated {len(outcomes)} files: {total} vulnerabilities, "
            f"{failed} failed, {len(skipped)} skipped"
        )
        return report

    def _count_severities(self, outcomes: Sequence[FileOutcome]) -> Tuple[Tuple[str, int], ...]:
        """Count findings per severity, most severe first.

        Known severities are always present (possibly with a zero count);
        unrecognized ones are grouped under their lower-cased name after them.
        """
        counts = Counter(
            vuln.severity.strip().lower()
            for outcome in outcomes if outcome.succeeded
            for vuln in outcome.vulnerabilities
        )

        known = sorted(Severity, key=lambda level: level.rank, reverse=True)
        ordered = [(level.value, counts.pop(level.value, 0)) for level in known]
        ordered.extend(sorted(counts.items()))
        return tuple(ordered)
