"""Terminal rendering for CodeLens results."""

import json
from typing import List, Optional

from rich.console import Console
from rich.text import Text

from ..core.scanning import (
    Report, FileOutcome, LanguageInfo, HealthStatus, rank_vulnerabilities
)


RULE_WIDTH = 50

SEVERITY_COLORS = {
    'critical': 'red',
    'high': 'yellow',
    'medium': 'yellow',
}
DEFAULT_SEVERITY_COLOR = 'bright_black'


def severity_color(severity: Optional[str]) -> str:
    if not severity:
        return DEFAULT_SEVERITY_COLOR
    return SEVERITY_COLORS.get(severity.strip().lower(), DEFAULT_SEVERITY_COLOR)


class ConsoleRenderer:
    """Renders reports and command results with rich.

    Anything that comes from the service or the filesystem is printed as
    :class:`rich.text.Text` so brackets in messages or paths are never read
    as console markup.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def file_progress(self, path: str, succeeded: bool, error: Optional[str] = None) -> None:
        """Print the per-file status line for one analysed file."""
        if succeeded:
            self.console.print(Text.assemble(("✓ ", "green"), f"Analyzed {path}"))
        else:
            self.console.print(Text.assemble(
                ("✗ ", "red"), (f"Failed to analyze {path}: {error}", "red")
            ))

    def scan_report(self, report: Report) -> None:
        """Print the aggregated scan report.

        Args:
            report: Report produced by the result aggregator
        """
        self.console.print()
        self.console.print("═" * RULE_WIDTH, style="bold")
        self.console.print("🔍 Security Scan Results", style="bold")
        self.console.print("═" * RULE_WIDTH, style="bold")

        for outcome in report.per_file:
            if outcome.succeeded and outcome.vulnerabilities:
                self._file_findings(outcome)

        if report.failed:
            self._failed_files(report.failed)

        if report.skipped:
            self.console.print()
            self.console.print(
                f"⚠ {len(report.skipped)} paths could not be read; results may be incomplete:",
                style="yellow"
            )
            for skipped in report.skipped:
                self.console.print(Text(f"  {skipped.path}: {skipped.reason}", style="bright_black"))

        self.console.print()
        self.console.print(Text.assemble(
            "\nTotal vulnerabilities: ", (str(report.total_vulnerability_count), "bold")
        ))

        if report.is_clean:
            self.console.print("\n✅ No security issues found!", style="green")
        else:
            self.console.print("\n⚠️  Fix the issues above before committing!", style="yellow")

    def _file_findings(self, outcome: FileOutcome) -> None:
        self.console.print()
        self.console.print(Text(outcome.file, style="underline"))

        for vuln in rank_vulnerabilities(outcome.vulnerabilities):
            color = severity_color(vuln.severity)
            self.console.print(Text.assemble(
                (f"[{vuln.severity.upper()}]", f"bold {color}"),
                f" Line {vuln.line}: {vuln.message}"
            ))
            if vuln.cwe:
                self.console.print(Text(f"  CWE: {vuln.cwe}", style="bright_black"))

    def _failed_files(self, failed: List[FileOutcome]) -> None:
        self.console.print()
        self.console.print(f"✗ {len(failed)} files could not be analyzed:", style="bold red")
        for outcome in failed:
            self.console.print(Text(f"  {outcome.file}: {outcome.error}", style="red"))

    def scan_report_json(self, report: Report) -> None:
        self.console.print_json(json.dumps(report.to_dict()))

    def explanation(self, text: str) -> None:
        self.console.print()
        self.console.print("📖 Explanation:", style="bold")
        self.console.print(Text(text))

    def languages(self, languages: List[LanguageInfo]) -> None:
        self.console.print()
        self.console.print("📋 Supported Languages:", style="bold")
        self.console.print()
        for language in languages:
            self.console.print(Text.assemble(
                "  ", (language.name, "cyan"), f" ({', '.join(language.extensions)})"
            ))

    def health(self, status: HealthStatus, api_url: str) -> None:
        """Print the doctor report for a reachable service.

        Args:
            status: Health document returned by the service
            api_url: Base URL the client talked to
        """
        self.console.print(Text.assemble(
            "  Status: ",
            ("✓ OK", "green") if status.ok else ("✗ FAIL", "red")
        ))
        self.console.print(Text(f"  Version: {status.version}"))
        self.console.print(Text.assemble(
            "  API Configured: ",
            ("✓ Yes", "green") if status.ai_configured
            else ("⚠ No (AI features disabled)", "yellow")
        ))
        self.console.print(Text(f"  API URL: {api_url}"))

        if not status.ai_configured:
            self.console.print(
                "\n  To enable AI features, set OPENAI_API_KEY environment variable",
                style="yellow"
            )

    def health_unreachable(self, api_url: str, reason: str) -> None:
        self.console.print(Text(f"  ✗ Failed to connect to API at {api_url}", style="red"))
        self.console.print(Text(f"    {reason}", style="bright_black"))
        self.console.print("\n  Make sure the CodeLens API is running:", style="yellow")
        self.console.print("    npm run dev", style="bright_black")

    def error(self, message: str, suggestion: Optional[str] = None) -> None:
        self.console.print(Text(f"Error: {message}", style="red"))
        if suggestion:
            self.console.print(Text(f"Suggestion: {suggestion}", style="yellow"))
