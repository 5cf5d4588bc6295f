"""Validation of scan command options."""

import logging
from typing import Iterable, Optional

from .data_structures import ScanOptions
from .discovery import normalize_extensions, parse_extensions
from ..exceptions import InvalidScanOptionsError


logger = logging.getLogger('codelens.options')


def build_scan_options(file: Optional[str] = None, directory: Optional[str] = None,
                       extensions: Optional[str] = None,
                       language: Optional[str] = None,
                       default_extensions: Iterable[str] = ()) -> ScanOptions:
    """Turn raw command options into a validated ScanOptions record.

    ``file`` takes precedence when both a file and a directory are given.

    Args:
        file: Single file to scan
        directory: Directory to scan recursively
        extensions: Comma-separated extension list from the command line
        language: Optional language hint
        default_extensions: Extensions used when ``extensions`` is not given

    Returns:
        Validated scan options

    Raises:
        InvalidScanOptionsError: If no target is given or no extensions remain
    """
    if not file and not directory:
        raise InvalidScanOptionsError("Please specify --file or --directory")

    if file and directory:
        logger.warning(f"Both --file and --directory given; scanning {file} only")
        directory = None

    if extensions:
        parsed = parse_extensions(extensions)
    else:
        parsed = normalize_extensions(default_extensions)

    return ScanOptions(
        file=file or None,
        directory=directory or None,
        extensions=parsed,
        language=language or None
    )
