"""
Unit test specific fixtures.

These fixtures are only available to unit tests.
"""

import pytest

from revive_mcp.core.config import reset_config
from revive_mcp.core.helpers.client_helpers import set_client

_ENV_VARS = (
    "REVIVE_API_URL",
    "REVIVE_API_USERNAME",
    "REVIVE_API_PASSWORD",
    "REVIVE_TIMEOUT_SECONDS",
    "REVIVE_SESSION_LIFETIME_SECONDS",
    "REVIVE_AGENCY_ID",
    "REVIVE_VERIFY_SSL",
    "REVIVE_USER_AGENT",
    "REVIVE_MCP_TRANSPORT",
    "REVIVE_MCP_HOST",
    "REVIVE_MCP_PORT",
    "LOG_LEVEL",
    "PRODUCTION",
    "ENVIRONMENT",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep the developer's environment, .env file and cached singletons out of unit tests."""
    monkeypatch.chdir(tmp_path)
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    set_client(None)

    with pytest.MonkeyPatch.context() as mp:
        # Never let a test reach the network
        mp.setattr("requests.Session.post", _network_forbidden)
        yield

    reset_config()
    set_client(None)


def _network_forbidden(*args, **kwargs):
    raise AssertionError("Unit tests must not make HTTP requests")
