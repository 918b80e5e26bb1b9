"""
Core MCP server components for the Revive Adserver MCP server.

This module contains:
- MCP server implementation (main.py) and tool modules (tools/)
- Data models and schemas (schemas.py)
- Configuration management (config.py)
- Logging setup (logging_config.py, tool_error_logging.py)
"""
