#!/usr/bin/env python3
"""
Create a standard set of ad zones for a publisher website.

Finds the publisher by website or name, then creates each zone from a JSON file
(a list of zone definitions) or the default leaderboard/mobile set.

Usage:
    python scripts/setup/setup_publisher_zones.py --website example.com
    python scripts/setup/setup_publisher_zones.py --publisher-id 3 --zones-file zones.json
"""

import argparse
import json
import sys

from rich.console import Console

from revive_mcp.adapters.revive.client import ReviveClient
from revive_mcp.core.schemas import Publisher

console = Console()

DEFAULT_ZONES = [
    {
        "name": "Desktop Top Banner",
        "type": "banner",
        "width": 728,
        "height": 90,
        "description": "Desktop Leaderboard banner (728x90) at top of page",
    },
    {
        "name": "Mobile Top Banner",
        "type": "banner",
        "width": 320,
        "height": 50,
        "description": "Mobile banner (320x50) at top of page",
    },
    {
        "name": "Desktop Bottom Banner",
        "type": "banner",
        "width": 728,
        "height": 90,
        "description": "Desktop Leaderboard banner (728x90) at bottom of page",
    },
    {
        "name": "Mobile Bottom Banner",
        "type": "banner",
        "width": 320,
        "height": 50,
        "description": "Mobile banner (320x50) at bottom of page",
    },
]


def find_publisher(publishers: list[Publisher], website: str) -> Publisher | None:
    website = website.lower()
    for publisher in publishers:
        if (publisher.website or "").lower() == website or (publisher.name or "").lower() == website:
            return publisher
    return None


def main():
    parser = argparse.ArgumentParser(description="Create ad zones for a Revive publisher")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--website", help="Publisher website (or name) to look up")
    target.add_argument("--publisher-id", type=int, help="Publisher ID, skips the lookup")
    parser.add_argument("--zones-file", help="JSON file with a list of zone definitions")
    args = parser.parse_args()

    zones = DEFAULT_ZONES
    if args.zones_file:
        with open(args.zones_file) as f:
            zones = json.load(f)

    client = ReviveClient()
    publisher_id = args.publisher_id

    if publisher_id is None:
        result = client.list_publishers()
        if not result.success:
            console.print(f"[bold red]❌ Failed to get publishers: {result.error}[/bold red]")
            return 1
        publisher = find_publisher(result.data, args.website)
        if publisher is None:
            console.print(f"[bold red]❌ No publisher found for {args.website}[/bold red]")
            console.print("Create the publisher in the Revive admin interface first, or pass --publisher-id")
            return 1
        publisher_id = publisher.id
        console.print(f"Found publisher {publisher.name} (ID: {publisher_id})")

    created = []
    for zone in zones:
        console.print(f"Creating zone: {zone['name']} ({zone.get('width')}x{zone.get('height')})")
        result = client.create_zone({**zone, "website_id": publisher_id})
        if result.success:
            created.append(result.data)
            console.print(f"  [green]✅ Created zone {result.data.name} (ID: {result.data.id})[/green]")
        else:
            console.print(f"  [red]❌ {result.error}[/red]")

    client.logout()
    console.print(f"\nCreated {len(created)} out of {len(zones)} zones")
    return 0 if len(created) == len(zones) else 1


if __name__ == "__main__":
    sys.exit(main())
