"""Banner tools."""

from revive_mcp.core.helpers.client_helpers import get_client
from revive_mcp.core.schemas import BannerStatus, SortOrder, StorageType


def revive_banner_upload(
    campaign_id: int,
    name: str,
    storage_type: StorageType,
    width: int,
    height: int,
    image_url: str | None = None,
    html_template: str | None = None,
    weight: int = 1,
    click_url: str | None = None,
) -> str:
    """Upload and configure a banner creative.

    Args:
        campaign_id: Campaign ID
        name: Banner name
        storage_type: Storage type (web, sql, html, text)
        width: Banner width
        height: Banner height
        image_url: Image URL for web storage
        html_template: HTML template, required for html banners
        weight: Banner weight for rotation
        click_url: Click destination URL
    """
    result = get_client().create_banner(
        campaign_id=campaign_id,
        name=name,
        storage_type=storage_type,
        width=width,
        height=height,
        image_url=image_url,
        html_template=html_template,
        weight=weight,
        click_url=click_url,
    )
    return result.to_text()


def revive_banner_list(
    campaign_id: int | None = None,
    status: BannerStatus | None = None,
    storage_type: StorageType | None = None,
    limit: int | None = None,
    offset: int = 0,
    sort_by: str | None = None,
    sort_order: SortOrder = "asc",
) -> str:
    """List banners, optionally for one campaign, with filtering, sorting and pagination."""
    result = get_client().list_banners(
        campaign_id=campaign_id,
        status=status,
        storage_type=storage_type,
        limit=limit,
        offset=offset,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return result.to_text()


def revive_banner_update(
    banner_id: int,
    name: str | None = None,
    weight: int | None = None,
    status: BannerStatus | None = None,
    click_url: str | None = None,
    image_url: str | None = None,
    html_template: str | None = None,
) -> str:
    """Update an existing banner. Only the supplied fields change."""
    result = get_client().update_banner(
        banner_id=banner_id,
        name=name,
        weight=weight,
        status=status,
        click_url=click_url,
        image_url=image_url,
        html_template=html_template,
    )
    return result.to_text()
