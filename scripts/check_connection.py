#!/usr/bin/env python3
"""
Check that the Revive XML-RPC API is reachable and the credentials work.

Tries the configured REVIVE_API_URL and the usual alternative XML-RPC paths, logs on
and lists the server's methods on each until one succeeds.

Usage:
    python scripts/check_connection.py [--url URL]

Returns:
    Exit code 0 if a working endpoint was found, 1 otherwise
"""

import argparse
import sys

from rich.console import Console
from rich.table import Table

from revive_mcp.adapters.revive.client import ReviveClient
from revive_mcp.core.config import ReviveSettings

console = Console()


def candidate_endpoints(api_url: str) -> list[str]:
    """The configured URL followed by the XML-RPC paths Revive installs commonly use."""
    base = api_url.rstrip("/")
    variants = [
        api_url,
        base.replace("/api", "/www/api/v2/xmlrpc"),
        base.replace("/api", "/www/api/v1/xmlrpc"),
        base.replace("/api", "/api/v2/xmlrpc"),
        base.replace("/api", "/api/xmlrpc"),
        f"{base}/v2/xmlrpc",
        f"{base}/xmlrpc",
    ]
    unique = []
    for url in variants:
        if url not in unique:
            unique.append(url)
    return unique


def main():
    parser = argparse.ArgumentParser(description="Check the Revive Adserver XML-RPC connection")
    parser.add_argument("--url", help="Endpoint to start from (defaults to REVIVE_API_URL)")
    args = parser.parse_args()

    settings = ReviveSettings()
    api_url = args.url or settings.api_url
    missing = [name for name in settings.missing_credentials if not (args.url and name == "REVIVE_API_URL")]
    if missing:
        console.print(f"[bold red]❌ Not set: {', '.join(missing)}[/bold red]")
        return 1

    table = Table(title="Revive XML-RPC endpoints")
    table.add_column("URL")
    table.add_column("Result")

    working = None
    for url in candidate_endpoints(api_url):
        client = ReviveClient(settings.model_copy(update={"api_url": url}))
        result = client.test_connection()
        if result.success:
            table.add_row(url, f"[green]✅ {result.data['methodCount']} methods[/green]")
            client.logout()
            working = url
            break
        table.add_row(url, f"[red]❌ {result.error}[/red]")

    console.print(table)
    if working is None:
        console.print("[bold red]Could not connect to Revive Adserver with any URL variant[/bold red]")
        return 1

    console.print(f"[bold green]Connected to Revive at {working}[/bold green]")
    if working != settings.api_url:
        console.print(f"Set REVIVE_API_URL={working} in your .env file")
    return 0


if __name__ == "__main__":
    sys.exit(main())
