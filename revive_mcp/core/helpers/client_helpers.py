"""Revive client instance helpers for the tool layer."""

import logging

from revive_mcp.adapters.revive.client import ReviveClient
from revive_mcp.core.config import get_config

logger = logging.getLogger(__name__)

_client: ReviveClient | None = None


def get_client() -> ReviveClient:
    """Get the server's Revive client, building it from configuration on first use."""
    global _client
    if _client is None:
        settings = get_config().revive
        logger.info(f"Creating Revive client for {settings.api_url or '<unset REVIVE_API_URL>'}")
        _client = ReviveClient(settings)
    return _client


def set_client(client: ReviveClient | None) -> None:
    """Install (or with None, drop) the client used by the tools."""
    global _client
    _client = client
