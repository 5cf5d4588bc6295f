"""Test configuration and utilities for the CodeLens test suite."""

import json
import logging
import tempfile
import shutil
from pathlib import Path
from typing import Any, Callable, Dict, List

import httpx
import pytest

from codelens.core.config import ClientConfig
from codelens.core.scanning import AnalysisClient


TEST_API_URL = 'http://codelens.test'


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def test_config() -> Dict[str, Any]:
    """Basic test configuration."""
    return {
        'api': {
            'url': TEST_API_URL,
            'timeout': 5,
        },
        'scan': {
            'max_concurrency': 4,
            'extensions': ['.py', '.ts'],
        },
        'logging': {
            'level': 'ERROR',  # Reduce noise in tests
            'format': '%(message)s',
            'file': None,
            'max_file_size': '1MB',
            'backup_count': 1,
        },
    }


@pytest.fixture
def config_file(temp_dir, test_config):
    """Create temporary configuration file."""
    import yaml

    config_file = temp_dir / 'test_config.yml'
    with open(config_file, 'w') as f:
        yaml.dump(test_config, f)

    return config_file


@pytest.fixture
def clean_env(monkeypatch):
    """Remove CODELENS_* variables that would leak into configuration."""
    for name in ('CODELENS_API_URL', 'CODELENS_TIMEOUT', 'CODELENS_MAX_CONCURRENT',
                 'CODELENS_LOG_LEVEL', 'CODELENS_LOG_FILE', 'CODELENS_CONFIG'):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(api_url=TEST_API_URL, timeout=5.0, max_concurrency=4)


@pytest.fixture
def make_client(client_config) -> Callable[..., AnalysisClient]:
    """Build an AnalysisClient whose requests are answered by ``handler``."""
    def factory(handler, config: ClientConfig = None) -> AnalysisClient:
        return AnalysisClient(config or client_config,
                              transport=httpx.MockTransport(handler))
    return factory


@pytest.fixture(autouse=True)
def reset_codelens_logging():
    """Undo LoggerManager setup so records reach caplog in later tests."""
    yield
    root_logger = logging.getLogger('codelens')
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True


@pytest.fixture
def source_tree(temp_dir) -> Callable[[Dict[str, str]], Path]:
    """Write files (relative path -> content) under the temp directory."""
    def create(files: Dict[str, str]) -> Path:
        for relative, content in files.items():
            path = temp_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding='utf-8')
        return temp_dir
    return create


@pytest.fixture
def findings_handler() -> Callable[[Dict[str, List[Dict[str, Any]]]], Callable]:
    """Build a transport handler answering scans by the submitted code."""
    def build(mapping: Dict[str, List[Dict[str, Any]]]):
        def handler(request: httpx.Request) -> httpx.Response:
            code = json.loads(request.content)['code']
            return httpx.Response(200, json={'vulnerabilities': mapping.get(code, [])})
        return handler
    return build
