"""Helper modules for the Revive Adserver MCP server.

- list_helpers: Client-side filtering, sorting and pagination
- statistics_helpers: Weekly/monthly roll-up of daily statistics
- client_helpers: The Revive client instance used by the tools
"""
