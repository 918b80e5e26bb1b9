"""Campaign tools."""

from revive_mcp.core.helpers.client_helpers import get_client
from revive_mcp.core.schemas import BudgetType, CampaignStatus, SortOrder


def revive_campaign_create(
    name: str,
    advertiser_id: int,
    budget: float | None = None,
    budget_type: BudgetType | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    priority: int | None = None,
    weight: int | None = None,
    target_impressions: int | None = None,
    target_clicks: int | None = None,
) -> str:
    """Create a new advertising campaign in Revive Adserver.

    Args:
        name: Campaign name
        advertiser_id: Advertiser ID
        budget: Campaign budget
        budget_type: Budget type (daily, weekly, monthly, total)
        start_date: Start date (YYYY-MM-DD)
        end_date: End date (YYYY-MM-DD)
        priority: Campaign priority (-2 to 10)
        weight: Campaign weight
        target_impressions: Booked impressions
        target_clicks: Booked clicks
    """
    result = get_client().create_campaign(
        name=name,
        advertiser_id=advertiser_id,
        budget=budget,
        budget_type=budget_type,
        start_date=start_date,
        end_date=end_date,
        priority=priority,
        weight=weight,
        target_impressions=target_impressions,
        target_clicks=target_clicks,
    )
    return result.to_text()


def revive_campaign_list(
    advertiser_id: int | None = None,
    status: CampaignStatus | None = None,
    limit: int | None = None,
    offset: int = 0,
    sort_by: str | None = None,
    sort_order: SortOrder = "asc",
) -> str:
    """List campaigns with optional filtering, sorting and pagination.

    Without an advertiser filter, campaigns of every advertiser in the configured
    agency are listed.
    """
    result = get_client().list_campaigns(
        advertiser_id=advertiser_id,
        status=status,
        limit=limit,
        offset=offset,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return result.to_text()


def revive_campaign_update(
    campaign_id: int,
    name: str | None = None,
    budget: float | None = None,
    budget_type: BudgetType | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    status: CampaignStatus | None = None,
    priority: int | None = None,
    weight: int | None = None,
    target_impressions: int | None = None,
    target_clicks: int | None = None,
) -> str:
    """Update an existing campaign. Only the supplied fields change."""
    result = get_client().update_campaign(
        campaign_id=campaign_id,
        name=name,
        budget=budget,
        budget_type=budget_type,
        start_date=start_date,
        end_date=end_date,
        status=status,
        priority=priority,
        weight=weight,
        target_impressions=target_impressions,
        target_clicks=target_clicks,
    )
    return result.to_text()
