"""Tests for result aggregation and severity ordering."""

from codelens.core.scanning import (
    ResultAggregator, FileOutcome, Vulnerability, SkippedPath, Severity,
    severity_rank, rank_vulnerabilities
)


def vuln(severity, line=1, message='finding'):
    return Vulnerability(line=line, severity=severity, message=message)


class TestSeverity:
    """Test cases for severity ranking."""

    def test_rank_order(self):
        assert severity_rank('critical') > severity_rank('high') > severity_rank('medium') \
            > severity_rank('low') > severity_rank('informational')

    def test_rank_is_case_insensitive(self):
        assert severity_rank('HIGH') == severity_rank('high') == Severity.HIGH.rank

    def test_unknown_and_missing_rank_lowest(self):
        assert severity_rank(None) == 0
        assert severity_rank('unknown') == 0
        assert Severity.from_value('bogus') is None

    def test_rank_vulnerabilities_is_stable(self):
        findings = [
            vuln('low', line=1),
            vuln('critical', line=2),
            vuln('unknown', line=3),
            vuln('high', line=4),
            vuln('critical', line=5),
        ]

        ranked = rank_vulnerabilities(findings)

        assert [finding.line for finding in ranked] == [2, 5, 4, 1, 3]


class TestResultAggregator:
    """Test cases for ResultAggregator."""

    def test_totals_across_files(self):
        outcomes = [
            FileOutcome.success('a.ts', []),
            FileOutcome.success('b.ts', [vuln('high', line=3)]),
            FileOutcome.success('c.py', [vuln('low'), vuln('critical'), vuln('high')]),
        ]

        report = ResultAggregator().aggregate(outcomes)

        assert report.total_vulnerability_count == 4
        assert not report.is_clean
        assert [outcome.file for outcome in report.per_file] == ['a.ts', 'b.ts', 'c.py']
        assert dict(report.severity_counts) == {'critical': 1, 'high': 2, 'medium': 0, 'low': 1}

    def test_failed_files_do_not_count(self):
        outcomes = [
            FileOutcome.success('a.ts', []),
            FileOutcome.failure('b.ts', 'API error: 500 Internal Server Error'),
        ]

        report = ResultAggregator().aggregate(outcomes)

        assert report.total_vulnerability_count == 0
        assert report.is_clean
        assert [outcome.file for outcome in report.failed] == ['b.ts']
        assert [outcome.file for outcome in report.succeeded] == ['a.ts']

    def test_empty_scan_is_clean(self):
        report = ResultAggregator().aggregate([])

        assert report.total_vulnerability_count == 0
        assert report.is_clean
        assert report.per_file == ()
        assert report.severity_counts == (
            ('critical', 0), ('high', 0), ('medium', 0), ('low', 0)
        )

    def test_unrecognized_severities_follow_known_ones(self):
        outcomes = [FileOutcome.success('a.py', [
            vuln('Info'), vuln('unknown'), vuln('LOW'), vuln('info'),
        ])]

        report = ResultAggregator().aggregate(outcomes)

        assert report.severity_counts == (
            ('critical', 0), ('high', 0), ('medium', 0), ('low', 1),
            ('info', 2), ('unknown', 1)
        )
        assert report.total_vulnerability_count == 4

    def test_skipped_paths_are_carried(self):
        skipped = [SkippedPath('/src/locked', 'Permission denied')]

        report = ResultAggregator().aggregate([FileOutcome.success('a.py', [])], skipped)

        assert report.skipped == tuple(skipped)

    def test_aggregation_is_pure(self):
        outcomes = [
            FileOutcome.success('a.py', [vuln('medium')]),
            FileOutcome.failure('b.py', 'Request timed out after 30 seconds'),
        ]
        aggregator = ResultAggregator()

        assert aggregator.aggregate(outcomes) == aggregator.aggregate(list(outcomes))

    def test_to_dict(self):
        outcomes = [
            FileOutcome.success('a.py', [Vulnerability(2, 'high', 'XSS', cwe='CWE-79')]),
            FileOutcome.failure('b.py', 'Cannot read file: Permission denied'),
        ]
        report = ResultAggregator().aggregate(outcomes, [SkippedPath('/x', 'Permission denied')])

        assert report.to_dict() == {
            'total_vulnerability_count': 1,
            'clean': False,
            'severity_counts': {'critical': 0, 'high': 1, 'medium': 0, 'low': 0},
            'files': [
                {'file': 'a.py', 'vulnerabilities': [
                    {'line': 2, 'severity': 'high', 'message': 'XSS', 'cwe': 'CWE-79'}
                ]},
                {'file': 'b.py', 'error': 'Cannot read file: Permission denied'},
            ],
            'failed_files': ['b.py'],
            'skipped': [{'path': '/x', 'reason': 'Permission denied'}],
        }
