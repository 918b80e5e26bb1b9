#!/usr/bin/env python3
"""Run the Revive Adserver MCP server with HTTP transport."""

import os
import sys


def main():
    """Run the server with configurable host and port."""
    os.environ.setdefault("REVIVE_MCP_TRANSPORT", "http")

    # Check if we're in production (Docker)
    if os.environ.get("PRODUCTION"):
        # In production, bind to all interfaces
        os.environ["REVIVE_MCP_HOST"] = "0.0.0.0"

    host = os.environ.get("REVIVE_MCP_HOST", "127.0.0.1")
    port = os.environ.get("REVIVE_MCP_PORT", "8080")
    print("🚀 Starting Revive Adserver MCP server...")
    print(f"Server endpoint: http://{host}:{port}/mcp")

    try:
        from revive_mcp.core.main import main as run

        run()
    except KeyboardInterrupt:
        print("\nServer stopped.")
        sys.exit(0)


if __name__ == "__main__":
    main()
