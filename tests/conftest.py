"""
Shared pytest fixtures for the subdomain checker test suite.

No fixture touches the network: tests patch ``requests.head`` (or the
classifier) to simulate every probe outcome.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from subdomain_checker import create_app
from subdomain_checker.checker.handler import DEFAULT_PLATFORM_SUFFIX
from subdomain_checker.checker.probe import DEFAULT_TIMEOUT_SECONDS


# ---------------------------------------------------------------------------
# Test configuration
# ---------------------------------------------------------------------------


class TestConfig:
    """Minimal Flask config for automated testing."""

    TESTING = True
    WTF_CSRF_ENABLED = False
    SECRET_KEY = "test-secret-key-not-for-production"
    PLATFORM_SUFFIX = DEFAULT_PLATFORM_SUFFIX
    PROBE_TIMEOUT_SECONDS = DEFAULT_TIMEOUT_SECONDS
    PROBE_STRICT_ERROR_STATUSES = True


# ---------------------------------------------------------------------------
# Core fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="function")
def app():
    """Create a Flask application instance for one test."""
    flask_app = create_app(TestConfig)
    with flask_app.app_context():
        yield flask_app


@pytest.fixture(scope="function")
def client(app):
    """Return a Flask test client."""
    return app.test_client()


# ---------------------------------------------------------------------------
# Simulated HTTP responses
# ---------------------------------------------------------------------------


def make_head_response(status_code: int, headers: dict | None = None) -> MagicMock:
    """Build a MagicMock that looks like the ``requests.Response`` of a HEAD."""
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status_code
    resp.headers = CaseInsensitiveDict(headers or {})
    return resp


@pytest.fixture()
def head_response():
    """Factory fixture for simulated HEAD responses."""
    return make_head_response
