"""Zone tools."""

from revive_mcp.core.helpers.client_helpers import get_client
from revive_mcp.core.schemas import DeliveryMethod, FrequencyCap, SortOrder, TargetingRules, ZoneType


def revive_zone_configure(
    name: str,
    website_id: int,
    type: ZoneType,
    width: int | None = None,
    height: int | None = None,
    description: str | None = None,
    delivery: DeliveryMethod | None = None,
    frequency_cap: FrequencyCap | None = None,
) -> str:
    """Create and configure an ad zone on a website.

    Args:
        name: Zone name
        website_id: Website (publisher) ID
        type: Zone type (banner, interstitial, popup, text, email)
        width: Zone width in pixels
        height: Zone height in pixels
        description: Zone description
        delivery: Delivery method (javascript, iframe, local, xmlhttprequest)
        frequency_cap: Impression/click cap per period
    """
    result = get_client().create_zone(
        name=name,
        website_id=website_id,
        type=type,
        width=width,
        height=height,
        description=description,
        delivery=delivery,
        frequency_cap=frequency_cap,
    )
    return result.to_text()


def revive_zone_list(
    website_id: int | None = None,
    type: ZoneType | None = None,
    limit: int | None = None,
    offset: int = 0,
    sort_by: str | None = None,
    sort_order: SortOrder = "asc",
) -> str:
    """List zones, optionally for one website, with filtering, sorting and pagination."""
    result = get_client().list_zones(
        website_id=website_id,
        type=type,
        limit=limit,
        offset=offset,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return result.to_text()


def revive_zone_update(
    zone_id: int,
    name: str | None = None,
    description: str | None = None,
    width: int | None = None,
    height: int | None = None,
    delivery: DeliveryMethod | None = None,
    frequency_cap: FrequencyCap | None = None,
    targeting: TargetingRules | None = None,
) -> str:
    """Update zone settings and targeting. Only the supplied fields change."""
    result = get_client().update_zone(
        zone_id=zone_id,
        name=name,
        description=description,
        width=width,
        height=height,
        delivery=delivery,
        frequency_cap=frequency_cap,
        targeting=targeting,
    )
    return result.to_text()
