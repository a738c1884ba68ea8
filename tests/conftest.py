"""Shared pytest fixtures."""

import pytest

from ccfeed.logging.context import clear_log_context

BASE_URI = "https://ci.example.com"


@pytest.fixture(autouse=True)
def clean_log_context():
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def base_uri():
    return BASE_URI


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Minimal valid environment for configuration loading."""
    monkeypatch.setenv("CONCOURSE_USERNAME", "concourse")
    monkeypatch.setenv("CONCOURSE_PASSWORD", "secret")
    for name in ("CONCOURSE_URL", "LOG_LEVEL", "PORT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
