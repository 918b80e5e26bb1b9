"""Revive Adserver MCP server: an MCP tool surface over Revive's XML-RPC API."""

__version__ = "1.0.0"
