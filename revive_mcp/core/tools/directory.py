"""Advertiser and publisher directory tools."""

from revive_mcp.core.helpers.client_helpers import get_client
from revive_mcp.core.schemas import SortOrder


def revive_advertiser_list(
    agency_id: int | None = None,
    limit: int | None = None,
    offset: int = 0,
    sort_by: str | None = None,
    sort_order: SortOrder = "asc",
) -> str:
    """List the advertisers of an agency (the configured agency by default)."""
    result = get_client().list_advertisers(
        agency_id=agency_id, limit=limit, offset=offset, sort_by=sort_by, sort_order=sort_order
    )
    return result.to_text()


def revive_publisher_list(
    agency_id: int | None = None,
    limit: int | None = None,
    offset: int = 0,
    sort_by: str | None = None,
    sort_order: SortOrder = "asc",
) -> str:
    """List the publishers (websites) of an agency (the configured agency by default)."""
    result = get_client().list_publishers(
        agency_id=agency_id, limit=limit, offset=offset, sort_by=sort_by, sort_order=sort_order
    )
    return result.to_text()
