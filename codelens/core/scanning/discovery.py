"""Source file discovery for directory scans."""

import logging
import os
import stat
from typing import Iterable, List, Optional, Set, Tuple, FrozenSet

from .data_structures import DiscoveryResult, SkippedPath
from ..exceptions import DiscoveryError, InvalidScanOptionsError


EXCLUDED_DIRECTORIES: FrozenSet[str] = frozenset({'node_modules'})


def normalize_extensions(extensions: Iterable[str]) -> Tuple[str, ...]:
    """Normalize user-supplied extensions to lower-case, dot-prefixed form.

    Blank entries are dropped and duplicates collapsed while keeping the
    first-seen order.

    Args:
        extensions: Raw extension strings such as ``"py"`` or ``" .TS"``

    Returns:
        Tuple of normalized extensions

    Raises:
        InvalidScanOptionsError: If no usable extension remains or an entry is not a string
    """
    normalized: List[str] = []
    for raw in extensions:
        if not isinstance(raw, str):
            raise InvalidScanOptionsError(f"Invalid file extension: {raw!r}")
        ext = raw.strip().lower()
        if not ext or ext == '.':
            continue
        if not ext.startswith('.'):
            ext = f'.{ext}'
        if ext not in normalized:
            normalized.append(ext)

    if not normalized:
        raise InvalidScanOptionsError("No file extensions to scan")
    return tuple(normalized)


def parse_extensions(value: str) -> Tuple[str, ...]:
    """Parse a comma-separated extension list such as ``"py, .ts,js"``."""
    return normalize_extensions(value.split(','))


class FileDiscovery:
    """Recursively enumerates source files under a root directory.

    Hidden directories and the names in ``excluded_directories`` are never
    entered. Entries that cannot be listed or stat'ed are recorded as
    skipped and traversal carries on with their siblings. Order follows
    ``os.scandir`` and each subdirectory is fully expanded before the next
    sibling entry is visited.
    """

    def __init__(self, extensions: Iterable[str],
                 excluded_directories: Optional[Iterable[str]] = None):
        """Initialize file discovery.

        Args:
            extensions: Extensions to include (normalized on the way in)
            excluded_directories: Directory names never descended into
        """
        self.extensions = frozenset(normalize_extensions(extensions))
        self.excluded_directories = frozenset(
            EXCLUDED_DIRECTORIES if excluded_directories is None else excluded_directories
        )
        self.logger = logging.getLogger('codelens.discovery')

    def discover(self, root: str) -> DiscoveryResult:
        """Find every matching file under ``root``.

        Args:
            root: Directory to scan

        Returns:
            DiscoveryResult with matching files and skipped paths

        Raises:
            DiscoveryError: If root does not exist or is not a directory
        """
        if not os.path.exists(root):
            raise DiscoveryError(root, "directory does not exist")
        if not os.path.isdir(root):
            raise DiscoveryError(root, "not a directory")

        result = DiscoveryResult()
        root_stat = os.stat(root)
        root_key = (root_stat.st_dev, root_stat.st_ino)

        self._walk(root, result, {root_key}, {root_key})

        self.logger.info(
            f"Discovered {len(result.files)} files under {root} "
            f"({len(result.skipped)} paths skipped)"
        )
        return result

    def _walk(self, directory: str, result: DiscoveryResult,
              visited: Set[Tuple[int, int]], ancestors: Set[Tuple[int, int]]) -> None:
        """Expand ``directory`` depth-first.

        ``ancestors`` holds the directories on the current descent path; a link
        back to one of them is a loop. ``visited`` holds every directory
        expanded so far, so a second route to one (an alias) is not listed twice.
        """
        try:
            with os.scandir(directory) as listing:
                # Materialize so the directory handle is released before recursing
                entries = list(listing)
        except OSError as e:
            self._skip(result, directory, e)
            return

        for entry in entries:
            try:
                # Follows symlinks; a dangling link raises here
                entry_stat = entry.stat()
            except OSError as e:
                self._skip(result, entry.path, e)
                continue

            if stat.S_ISDIR(entry_stat.st_mode):
                if not self._should_descend(entry.name):
                    continue
                key = (entry_stat.st_dev, entry_stat.st_ino)
                if key in ancestors:
                    result.skipped.append(SkippedPath(entry.path, "symbolic link loop"))
                    continue
                if key in visited:
                    self.logger.debug(f"Skipping {entry.path}: already scanned through another path")
                    continue
                visited.add(key)
                ancestors.add(key)
                self._walk(entry.path, result, visited, ancestors)
                ancestors.discard(key)
            elif stat.S_ISREG(entry_stat.st_mode) and self._matches(entry.name):
                result.files.append(entry.path)

    def _should_descend(self, name: str) -> bool:
        return not name.startswith('.') and name not in self.excluded_directories

    def _matches(self, name: str) -> bool:
        return os.path.splitext(name)[1].lower() in self.extensions

    def _skip(self, result: DiscoveryResult, path: str, error: OSError) -> None:
        reason = error.strerror or str(error)
        self.logger.debug(f"Skipping {path}: {reason}")
        result.skipped.append(SkippedPath(path, reason))
