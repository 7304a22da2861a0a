"""
Shared test configuration for rancli.

Isolates every test from the user's config files and RANCLI_* environment,
and provides helpers for faking API clients and HTTP servers.
"""

import os
from unittest.mock import MagicMock

import httpx
import pytest
from click.testing import CliRunner


# =============================================================================
# ISOLATION
# =============================================================================

@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config lookup at a temp dir and clear cached settings."""
    import rancli.config

    for name in list(os.environ):
        if name.startswith("RANCLI_"):
            monkeypatch.delenv(name, raising=False)

    config_file = tmp_path / "rancli.yaml"
    monkeypatch.setattr(rancli.config, "CONFIG_PATHS", [config_file])
    rancli.config.get_settings.cache_clear()
    yield config_file
    rancli.config.get_settings.cache_clear()


# =============================================================================
# CLI HELPERS
# =============================================================================

@pytest.fixture
def runner():
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def make_mock_client():
    """Factory for MagicMock API clients usable as context managers."""

    def _make(spec):
        client = MagicMock(spec=spec)
        client.__enter__ = MagicMock(return_value=client)
        client.__exit__ = MagicMock(return_value=False)
        return client

    return _make


# =============================================================================
# HTTP HELPERS
# =============================================================================


@pytest.fixture
def recorded_requests():
    """List that mock transports append each received request to."""
    return []


@pytest.fixture
def mock_transport(recorded_requests):
    """Build an httpx.MockTransport from a ``(method, path) -> response`` table.

    Values may be an ``httpx.Response`` or a list of responses returned in turn.
    Unknown routes answer 404.
    """

    def _build(routes):
        def handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            response = routes.get((request.method, request.url.path))
            if isinstance(response, list):
                response = response.pop(0)
            if response is None:
                return httpx.Response(404, text="not found")
            return response
        return httpx.MockTransport(handler)

    return _build
