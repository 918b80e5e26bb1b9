"""
Global pytest configuration and fixtures for all tests.

This file provides fixtures available to all test modules.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from revive_mcp.adapters.revive.client import ReviveClient  # noqa: E402
from revive_mcp.adapters.revive.dispatcher import AuthenticatedDispatcher  # noqa: E402
from revive_mcp.adapters.revive.session import SessionManager  # noqa: E402
from revive_mcp.adapters.revive.transport import XmlRpcTransport  # noqa: E402
from revive_mcp.core.config import ReviveSettings  # noqa: E402
from tests.fixtures import RpcRouter  # noqa: E402

API_URL = "https://ads.example.com/www/api/v2/xmlrpc/"


@pytest.fixture
def revive_settings():
    """Connection settings that ignore the local environment and .env file."""
    return ReviveSettings(
        _env_file=None,
        api_url=API_URL,
        api_username="admin",
        api_password="secret",
        agency_id=1,
    )


@pytest.fixture
def mock_transport():
    """Transport double; configure ``call`` per test."""
    return MagicMock(spec=XmlRpcTransport)


@pytest.fixture
def session_manager(mock_transport):
    return SessionManager(mock_transport, "admin", "secret")


@pytest.fixture
def rpc_router():
    """Routes for the mocked dispatcher, filled in by each test."""
    return RpcRouter()


@pytest.fixture
def revive_client(revive_settings, mock_transport, rpc_router):
    """ReviveClient whose dispatcher answers from ``rpc_router``."""
    dispatcher = MagicMock(spec=AuthenticatedDispatcher)
    dispatcher.invoke.side_effect = rpc_router
    return ReviveClient(
        revive_settings,
        transport=mock_transport,
        session_manager=MagicMock(spec=SessionManager),
        dispatcher=dispatcher,
    )
