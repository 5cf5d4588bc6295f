"""Tests for source file discovery and extension handling."""

import os

import pytest

from codelens.core.exceptions import DiscoveryError, InvalidScanOptionsError
from codelens.core.scanning import (
    FileDiscovery, normalize_extensions, parse_extensions, build_scan_options
)


def relative_files(result, root):
    return sorted(os.path.relpath(path, root) for path in result.files)


class TestExtensions:
    """Test cases for extension normalization."""

    def test_normalize_extensions(self):
        assert normalize_extensions(['py', '.TS', ' .js ', 'py']) == ('.py', '.ts', '.js')

    def test_parse_extensions(self):
        assert parse_extensions(".py, ts,,JS") == ('.py', '.ts', '.js')

    @pytest.mark.parametrize('value', ['', ' , ', '.', ', . ,'])
    def test_no_usable_extensions(self, value):
        with pytest.raises(InvalidScanOptionsError) as exc_info:
            parse_extensions(value)

        assert exc_info.value.message == "No file extensions to scan"

    def test_non_string_extension_is_rejected(self):
        with pytest.raises(InvalidScanOptionsError) as exc_info:
            normalize_extensions(['.py', 1])

        assert exc_info.value.message == "Invalid file extension: 1"


class TestBuildScanOptions:
    """Test cases for command option validation."""

    def test_requires_file_or_directory(self):
        with pytest.raises(InvalidScanOptionsError) as exc_info:
            build_scan_options(default_extensions=['.py'])

        assert exc_info.value.message == "Please specify --file or --directory"

    def test_directory_with_default_extensions(self):
        options = build_scan_options(directory='src', default_extensions=['.py', 'ts'])

        assert options.directory == 'src'
        assert options.file is None
        assert options.extensions == ('.py', '.ts')
        assert not options.is_single_file

    def test_explicit_extensions_replace_defaults(self):
        options = build_scan_options(directory='src', extensions='go',
                                     default_extensions=['.py'])
        assert options.extensions == ('.go',)

    def test_file_wins_over_directory(self, caplog):
        """Test both targets given scans only the file and warns."""
        options = build_scan_options(file='app.py', directory='src',
                                     default_extensions=['.py'])

        assert options.file == 'app.py'
        assert options.directory is None
        assert options.is_single_file
        assert 'scanning app.py only' in caplog.text

    def test_empty_language_is_no_hint(self):
        options = build_scan_options(file='app.py', language='', default_extensions=['.py'])
        assert options.language is None


class TestFileDiscovery:
    """Test cases for FileDiscovery."""

    def test_filters_by_extension(self, temp_dir, source_tree):
        source_tree({
            'a.ts': 'let a = 1;',
            'b.TS': 'let b = 2;',
            'c.txt': 'notes',
            'src/app.py': 'print(1)',
            'src/deep/er/util.py': 'pass',
            'README': 'readme',
        })

        result = FileDiscovery(['.ts', '.py']).discover(str(temp_dir))

        assert relative_files(result, temp_dir) == [
            'a.ts', 'b.TS',
            os.path.join('src', 'app.py'),
            os.path.join('src', 'deep', 'er', 'util.py'),
        ]
        assert result.complete

    def test_skips_hidden_and_excluded_directories(self, temp_dir, source_tree):
        source_tree({
            'main.js': 'x',
            '.git/hooks/pre-commit.js': 'x',
            'node_modules/lib/index.js': 'x',
            'packages/node_modules/dep.js': 'x',
            'packages/core/index.js': 'x',
        })

        result = FileDiscovery(['.js']).discover(str(temp_dir))

        assert relative_files(result, temp_dir) == [
            'main.js', os.path.join('packages', 'core', 'index.js')
        ]

    def test_hidden_files_are_still_scanned(self, temp_dir, source_tree):
        """Test only hidden directories are skipped, not hidden files."""
        source_tree({'.eslintrc.js': 'x'})

        result = FileDiscovery(['.js']).discover(str(temp_dir))
        assert relative_files(result, temp_dir) == ['.eslintrc.js']

    def test_custom_excluded_directories(self, temp_dir, source_tree):
        source_tree({'vendor/lib.go': 'x', 'main.go': 'x'})

        result = FileDiscovery(['.go'], excluded_directories=['vendor']).discover(str(temp_dir))
        assert relative_files(result, temp_dir) == ['main.go']

    def test_empty_directory(self, temp_dir):
        result = FileDiscovery(['.py']).discover(str(temp_dir))

        assert result.files == []
        assert result.skipped == []

    def test_missing_root(self, temp_dir):
        missing = str(temp_dir / 'missing')

        with pytest.raises(DiscoveryError) as exc_info:
            FileDiscovery(['.py']).discover(missing)

        assert exc_info.value.reason == "directory does not exist"
        assert exc_info.value.root == missing

    def test_root_is_a_file(self, temp_dir, source_tree):
        source_tree({'app.py': 'x'})

        with pytest.raises(DiscoveryError) as exc_info:
            FileDiscovery(['.py']).discover(str(temp_dir / 'app.py'))

        assert exc_info.value.reason == "not a directory"

    def test_unreadable_subtree_is_skipped(self, temp_dir, source_tree, monkeypatch):
        """Test a directory that cannot be listed does not abort discovery."""
        source_tree({
            'ok/a.py': 'x',
            'locked/b.py': 'x',
            'c.py': 'x',
        })
        locked = os.path.join(str(temp_dir), 'locked')
        real_scandir = os.scandir

        def guarded_scandir(path):
            if os.fspath(path) == locked:
                raise PermissionError(13, 'Permission denied', path)
            return real_scandir(path)

        monkeypatch.setattr(os, 'scandir', guarded_scandir)

        result = FileDiscovery(['.py']).discover(str(temp_dir))

        assert relative_files(result, temp_dir) == ['c.py', os.path.join('ok', 'a.py')]
        assert len(result.skipped) == 1
        assert result.skipped[0].path == locked
        assert result.skipped[0].reason == 'Permission denied'
        assert not result.complete

    @pytest.mark.skipif(not hasattr(os, 'symlink'), reason="symlinks not supported")
    def test_broken_symlink_is_skipped(self, temp_dir, source_tree):
        source_tree({'a.py': 'x'})
        os.symlink(str(temp_dir / 'gone.py'), str(temp_dir / 'dangling.py'))

        result = FileDiscovery(['.py']).discover(str(temp_dir))

        assert relative_files(result, temp_dir) == ['a.py']
        assert [skipped.path for skipped in result.skipped] == [str(temp_dir / 'dangling.py')]

    @pytest.mark.skipif(not hasattr(os, 'symlink'), reason="symlinks not supported")
    def test_symlink_loop_terminates(self, temp_dir, source_tree):
        source_tree({'pkg/a.py': 'x'})
        os.symlink(str(temp_dir), str(temp_dir / 'pkg' / 'back'), target_is_directory=True)

        result = FileDiscovery(['.py']).discover(str(temp_dir))

        assert relative_files(result, temp_dir) == [os.path.join('pkg', 'a.py')]
        assert len(result.skipped) == 1
        assert result.skipped[0].reason == "symbolic link loop"

    @pytest.mark.skipif(not hasattr(os, 'symlink'), reason="symlinks not supported")
    def test_sibling_alias_is_not_a_loop(self, temp_dir, source_tree):
        source_tree({'pkg/x.py': 'x'})
        os.symlink(str(temp_dir / 'pkg'), str(temp_dir / 'alias'), target_is_directory=True)

        result = FileDiscovery(['.py']).discover(str(temp_dir))

        assert len(result.files) == 1
        assert os.path.basename(result.files[0]) == 'x.py'
        assert result.skipped == []
        assert result.complete

    def test_each_file_reported_once(self, temp_dir, source_tree):
        source_tree({
            f'dir{i}/file{j}.py': 'x' for i in range(3) for j in range(4)
        })

        result = FileDiscovery(['.py']).discover(str(temp_dir))

        assert len(result.files) == 12
        assert len(set(result.files)) == 12
