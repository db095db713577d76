"""Shared pytest configuration and fixtures for the apilogs test suite.

This module provides:
- Isolation of every test from the real cache and data directories
- Common fixtures (logs directory, writer, log file helpers)
- Test markers
"""
import json
import sys
from pathlib import Path

import pytest


# Add src/ to path so test modules can import the apilogs package
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path_factory, monkeypatch):
    """Point cache and data directories at a throwaway location."""
    base = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("APILOGS_CACHE_DIR", str(base / "cache"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(base / "xdg-cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(base / "xdg-data"))
    return base


@pytest.fixture
def log_dir(tmp_path):
    """Provide an API logs directory that does not exist yet."""
    return tmp_path / "api-logs"


@pytest.fixture
def writer(log_dir):
    """Provide an ApiLogWriter bound to the temporary logs directory."""
    from apilogs.capture.writer import ApiLogWriter

    return ApiLogWriter(log_dir=log_dir)


@pytest.fixture
def read_log():
    """Return a helper that parses every line of today's log file."""

    def _read(writer):
        path = writer.get_log_file_path()
        if not path.exists():
            return []
        lines = path.read_text(encoding="utf-8").splitlines()
        return [json.loads(line) for line in lines]

    return _read


@pytest.fixture
def sample_entry():
    """Provide a fully populated log entry as stored on disk."""
    return {
        "timestamp": "2024-05-01T12:00:00.000Z",
        "id": "3f7c1a9e-0000-4000-8000-000000000001",
        "service": "anthropic",
        "url": "https://api.anthropic.com/v1/messages?beta=true",
        "method": "POST",
        "headers": {"content-type": "application/json"},
        "body": {"model": "m", "prompt": "hi"},
        "responseHeaders": {"content-type": "application/json"},
        "responseBody": {"id": "msg_1"},
        "statusCode": 200,
        "durationMs": 15,
    }


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (fast, isolated)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (slower)"
    )


def pytest_collection_modifyitems(config, items):
    """Auto-mark tests based on their location."""
    for item in items:
        if "integration" not in item.nodeid:
            item.add_marker(pytest.mark.unit)
