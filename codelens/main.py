"""Main entry point for the CodeLens command line interface."""

import asyncio
import dataclasses
import logging
from typing import Optional

import click
from rich.console import Console

from . import __version__
from .core.config import ConfigManager, ClientConfig, DEFAULT_EXTENSIONS
from .core.exceptions import CodeLensException, ConfigurationError, ServiceUnavailableError
from .core.logger import LoggerManager
from .core.scanning import (
    AnalysisClient, ScanEngine, DiscoveryResult, build_scan_options
)
from .reporting import ConsoleRenderer


console = Console()
logger = logging.getLogger('codelens.cli')


class CodeLensCLI:
    """Command implementations behind the click commands.

    Each command returns the process exit code.
    """

    def __init__(self, config_manager: ConfigManager, renderer: ConsoleRenderer):
        self.config_manager = config_manager
        self.renderer = renderer

    def _client_config(self, concurrency: Optional[int] = None) -> ClientConfig:
        client_config = self.config_manager.client_config()
        if concurrency:
            client_config = dataclasses.replace(client_config, max_concurrency=concurrency)
        return client_config

    def _fail(self, e: CodeLensException, prefix: str = '') -> int:
        logger.debug(f"{prefix}{e.message}", extra={'error': e.to_dict()})
        self.renderer.error(f"{prefix}{e.message}", e.suggestion)
        return 1

    async def scan(self, file: Optional[str], directory: Optional[str],
                   language: Optional[str], extensions: Optional[str],
                   concurrency: Optional[int] = None, as_json: bool = False) -> int:
        """Scan a file or directory for security vulnerabilities.

        Returns:
            0 when the scan completed, 1 when it could not run or the only
            requested file failed
        """
        try:
            # Configuration errors are reported ahead of option errors
            client_config = self._client_config(concurrency)
            options = build_scan_options(
                file=file,
                directory=directory,
                extensions=extensions,
                language=language,
                default_extensions=self.config_manager.get('scan.extensions', DEFAULT_EXTENSIONS)
            )
        except CodeLensException as e:
            return self._fail(e)

        # Per-file lines would corrupt JSON output
        progress = None if as_json else self.renderer.file_progress

        try:
            with console.status("Starting scan...") as status:
                def on_discovered(discovery: DiscoveryResult) -> None:
                    status.update(f"Found {len(discovery.files)} files to scan")

                async with AnalysisClient(client_config) as client:
                    engine = ScanEngine(
                        client,
                        max_concurrency=client_config.max_concurrency,
                        progress=progress,
                        on_discovered=on_discovered
                    )
                    report = await engine.run(options)
        except CodeLensException as e:
            return self._fail(e, "Scan failed: ")

        if as_json:
            self.renderer.scan_report_json(report)
        else:
            console.print("✓ Scan complete!", style="green")
            self.renderer.scan_report(report)

        if options.is_single_file and report.failed:
            return 1
        return 0

    async def explain(self, file: Optional[str], code: Optional[str],
                      language: Optional[str]) -> int:
        """Explain code in natural language."""
        if not file and not code:
            self.renderer.error("Please specify --file or --code")
            return 1

        try:
            client_config = self._client_config()
            if file:
                with open(file, 'r', encoding='utf-8', errors='replace') as f:
                    code = f.read()
        except ConfigurationError as e:
            return self._fail(e)
        except OSError as e:
            self.renderer.error(f"Cannot read {file}: {e.strerror or e}")
            return 1

        try:
            with console.status("Analyzing code..."):
                async with AnalysisClient(client_config) as client:
                    explanation = await client.explain(code, language)
        except ServiceUnavailableError as e:
            return self._fail(e, "Failed: ")

        console.print("✓ Analysis complete!", style="green")
        self.renderer.explanation(explanation)
        return 0

    async def list_languages(self) -> int:
        """List languages supported by the service."""
        try:
            client_config = self._client_config()
            async with AnalysisClient(client_config) as client:
                languages = await client.list_languages()
        except CodeLensException as e:
            return self._fail(e, "Failed to fetch languages: ")

        self.renderer.languages(languages)
        return 0

    async def doctor(self) -> int:
        """Check the API connection and configuration."""
        console.print("\n🏥 CodeLens Health Check\n", style="bold")

        try:
            client_config = self._client_config()
        except ConfigurationError as e:
            return self._fail(e)

        try:
            async with AnalysisClient(client_config) as client:
                status = await client.health()
        except ServiceUnavailableError as e:
            logger.debug(f"Health check failed: {e.reason}")
            self.renderer.health_unreachable(client_config.api_url, e.reason)
            return 1

        self.renderer.health(status, client_config.api_url)
        return 0


# Click CLI commands

@click.group()
@click.version_option(__version__, prog_name='codelens')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False),
              help='Path to a YAML configuration file')
@click.option('--log-level', type=click.Choice(
    ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    help='Logging level (overrides config)')
@click.pass_context
def cli(ctx, config_path, log_level):
    """AI-powered code analysis CLI."""
    renderer = ConsoleRenderer(console)
    try:
        config_manager = ConfigManager(config_path)
    except ConfigurationError as e:
        renderer.error(e.message, e.suggestion)
        ctx.exit(1)

    LoggerManager(config_manager.to_dict(), level_override=log_level)
    ctx.obj = CodeLensCLI(config_manager, renderer)


@cli.command()
@click.option('--file', '-f', 'file', type=str, help='Single file to scan')
@click.option('--directory', '-d', type=str, help='Directory to scan')
@click.option('--language', '-l', type=str,
              help='Language (auto-detected if not specified)')
@click.option('--extensions', '-e', type=str,
              help='File extensions to scan, comma separated (default: .js,.ts,.py,.go,.java,...)')
@click.option('--concurrency', '-c', type=click.IntRange(1, 100),
              help='Maximum simultaneous requests (overrides config)')
@click.option('--json', 'as_json', is_flag=True, help='Print the report as JSON')
@click.pass_context
def scan(ctx, file, directory, language, extensions, concurrency, as_json):
    """Scan files for security vulnerabilities."""
    cli_app = ctx.obj
    ctx.exit(asyncio.run(cli_app.scan(file, directory, language, extensions,
                                      concurrency, as_json)))


@cli.command()
@click.option('--file', '-f', 'file', type=str, help='File to explain')
@click.option('--code', '-c', type=str, help='Code to explain directly')
@click.option('--language', '-l', type=str, help='Language')
@click.pass_context
def explain(ctx, file, code, language):
    """Explain code in natural language."""
    cli_app = ctx.obj
    ctx.exit(asyncio.run(cli_app.explain(file, code, language)))


@cli.command()
@click.pass_context
def languages(ctx):
    """List supported languages."""
    cli_app = ctx.obj
    ctx.exit(asyncio.run(cli_app.list_languages()))


@cli.command()
@click.pass_context
def doctor(ctx):
    """Check API connection and configuration."""
    cli_app = ctx.obj
    ctx.exit(asyncio.run(cli_app.doctor()))


def main() -> None:
    cli(prog_name='codelens')


if __name__ == '__main__':
    main()
