"""Pydantic schemas for the Revive Adserver MCP server.

Three families of models live here:
- Domain records (Campaign, Zone, Banner, Statistics, Advertiser, Publisher) built by
  the normalizer from XML-RPC responses. They are frozen and serialize with camelCase keys.
- Argument models validating tool/caller input before any network call.
- OperationResult, the tagged success/failure envelope every domain operation returns.
"""

import json
from datetime import date, datetime
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# --- Value sets ---

CampaignStatus = Literal["active", "paused", "inactive", "expired", "pending"]
BudgetType = Literal["daily", "weekly", "monthly", "total"]
ZoneType = Literal["banner", "interstitial", "popup", "text", "email"]
DeliveryMethod = Literal["javascript", "iframe", "local", "xmlhttprequest"]
TimePeriod = Literal["hour", "day", "week", "month"]
StorageType = Literal["web", "sql", "html", "text"]
BannerStatus = Literal["active", "paused", "inactive"]
DeviceType = Literal["desktop", "mobile", "tablet"]
StatsEntityType = Literal["campaign", "banner", "zone", "advertiser", "publisher"]
TargetableEntityType = Literal["campaign", "banner"]
SortOrder = Literal["asc", "desc"]

STATISTICS_METRICS = (
    "requests",
    "impressions",
    "clicks",
    "conversions",
    "click_rate",
    "conversion_rate",
    "revenue",
    "cost",
    "ecpm",
    "ecpc",
    "ecpa",
)


class ReviveBaseModel(BaseModel):
    """Base model: snake_case attributes, camelCase on the wire to MCP clients.

    Both spellings are accepted on input so tool arguments like ``advertiserId``
    and Python callers using ``advertiser_id`` validate the same way.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_json_dict(self, **kwargs) -> dict[str, Any]:
        """Dump with camelCase keys, JSON-safe values and absent fields omitted."""
        kwargs.setdefault("by_alias", True)
        kwargs.setdefault("exclude_none", True)
        return self.model_dump(mode="json", **kwargs)


def resolve_field_name(model: type[BaseModel], name: str) -> str | None:
    """Map a snake_case or camelCase field name onto the model attribute name."""
    if name in model.model_fields:
        return name
    for field_name in model.model_fields:
        if to_camel(field_name) == name:
            return field_name
    return None


# --- Shared nested models ---


class FrequencyCap(ReviveBaseModel):
    """Impression/click capping for a zone over a time period."""

    impressions: int | None = Field(None, ge=0, description="Maximum impressions per period")
    clicks: int | None = Field(None, ge=0, description="Maximum clicks per period")
    period: TimePeriod = Field(..., description="Capping period")


class TargetingRules(ReviveBaseModel):
    """Delivery targeting attached to a campaign, banner or zone.

    Opaque to the transport: whatever validates here is sent to Revive as-is.
    Dimensions not listed below are preserved.
    """

    model_config = ConfigDict(extra="allow")

    country: list[str] | None = None  # ISO country codes: ["US", "CA"]
    region: list[str] | None = None
    city: list[str] | None = None
    language: list[str] | None = None
    browser: list[str] | None = None
    os: list[str] | None = None
    device: list[DeviceType] | None = None
    day_of_week: list[int] | None = None  # 0 = Sunday
    hour_of_day: list[int] | None = None
    keywords: list[str] | None = None
    custom_variables: dict[str, str] | None = None

    @field_validator("day_of_week")
    @classmethod
    def validate_day_of_week(cls, v):
        if v is not None and any(day < 0 or day > 6 for day in v):
            raise ValueError("dayOfWeek values must be between 0 and 6")
        return v

    @field_validator("hour_of_day")
    @classmethod
    def validate_hour_of_day(cls, v):
        if v is not None and any(hour < 0 or hour > 23 for hour in v):
            raise ValueError("hourOfDay values must be between 0 and 23")
        return v


# --- Domain records ---


class DomainRecord(ReviveBaseModel):
    """Immutable record produced by the normalizer from a Revive response."""

    model_config = ConfigDict(frozen=True)


class Campaign(DomainRecord):
    id: int | None = None
    name: str | None = None
    advertiser_id: int | None = None
    status: str | None = None
    budget: float | None = None
    budget_type: str | None = None
    priority: int | None = None
    weight: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    target_impressions: int | None = None
    target_clicks: int | None = None
    impressions: int = 0
    clicks: int = 0
    conversions: int = 0
    revenue: float = 0.0
    targeting: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Zone(DomainRecord):
    id: int | None = None
    name: str | None = None
    website_id: int | None = None
    type: str | None = None
    width: int | None = None
    height: int | None = None
    description: str | None = None
    delivery: str | None = None
    frequency_cap: FrequencyCap | None = None
    targeting: dict[str, Any] | None = None
    code: str | None = None
    impressions: int = 0
    clicks: int = 0
    revenue: float = 0.0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Banner(DomainRecord):
    id: int | None = None
    name: str | None = None
    campaign_id: int | None = None
    storage_type: str | None = None
    image_url: str | None = None
    html_template: str | None = None
    width: int = 0
    height: int = 0
    weight: int = 1
    status: str | None = None
    click_url: str | None = None
    targeting: dict[str, Any] | None = None
    impressions: int = 0
    clicks: int = 0
    conversions: int = 0
    conversion_rate: float = 0.0
    revenue: float = 0.0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Statistics(DomainRecord):
    """One row of a delivery report (an hour, a day, or a rolled-up bucket)."""

    entity_type: str = "unknown"
    entity_id: int | None = None
    date: datetime | None = None
    requests: int = 0
    impressions: int = 0
    clicks: int = 0
    conversions: int = 0
    click_rate: float = 0.0
    conversion_rate: float = 0.0
    revenue: float = 0.0
    cost: float = 0.0
    ecpm: float = 0.0
    ecpc: float = 0.0
    ecpa: float = 0.0


class Advertiser(DomainRecord):
    id: int | None = None
    name: str | None = None
    agency_id: int | None = None
    contact_name: str | None = None
    email_address: str | None = None
    comments: str | None = None


class Publisher(DomainRecord):
    id: int | None = None
    name: str | None = None
    agency_id: int | None = None
    website: str | None = None
    contact_name: str | None = None
    email_address: str | None = None


# --- Operation envelope ---


class OperationResult(BaseModel, Generic[T]):
    """Tagged result of a domain operation: ``{success, data}`` or ``{success, error}``."""

    success: bool
    data: T | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: Any = None) -> "OperationResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "OperationResult":
        return cls(success=False, error=error)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_text(self) -> str:
        """Serialize for an MCP text content block."""
        return json.dumps(self.to_json_dict(), indent=2)


# --- Argument models ---


class ListArgs(ReviveBaseModel):
    """Client-side filtering, sorting and pagination shared by every list operation."""

    limit: int | None = Field(None, ge=0, description="Number of results to return (unbounded when absent)")
    offset: int = Field(0, ge=0, description="Number of results to skip")
    sort_by: str | None = Field(None, description="Field to sort by (snake_case or camelCase)")
    sort_order: SortOrder = Field("asc", description="Sort order")


class _DateRangeArgs(ReviveBaseModel):
    """Rejects an end date before the start date."""

    @model_validator(mode="after")
    def validate_date_range(self):
        start = getattr(self, "start_date", None)
        end = getattr(self, "end_date", None)
        if start is not None and end is not None and end < start:
            raise ValueError("endDate must not be before startDate")
        return self


class CreateCampaignArgs(_DateRangeArgs):
    name: str = Field(..., min_length=1, description="Campaign name")
    advertiser_id: int = Field(..., gt=0, description="Advertiser ID")
    budget: float | None = Field(None, ge=0, description="Campaign budget")
    budget_type: BudgetType | None = Field(None, description="Budget type")
    start_date: date | None = Field(None, description="Start date (YYYY-MM-DD)")
    end_date: date | None = Field(None, description="End date (YYYY-MM-DD)")
    priority: int | None = Field(None, ge=-2, le=10, description="Campaign priority")
    weight: int | None = Field(None, ge=0, description="Campaign weight")
    target_impressions: int | None = Field(None, ge=0)
    target_clicks: int | None = Field(None, ge=0)
    status: CampaignStatus | None = None


class UpdateCampaignArgs(_DateRangeArgs):
    campaign_id: int = Field(..., gt=0, description="Campaign ID to update")
    name: str | None = Field(None, min_length=1)
    budget: float | None = Field(None, ge=0)
    budget_type: BudgetType | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: CampaignStatus | None = None
    priority: int | None = Field(None, ge=-2, le=10)
    weight: int | None = Field(None, ge=0)
    target_impressions: int | None = Field(None, ge=0)
    target_clicks: int | None = Field(None, ge=0)


class ListCampaignsArgs(ListArgs):
    advertiser_id: int | None = Field(None, gt=0, description="Filter by advertiser ID")
    status: CampaignStatus | None = Field(None, description="Filter by status")


class ConfigureZoneArgs(ReviveBaseModel):
    name: str = Field(..., min_length=1, description="Zone name")
    website_id: int = Field(..., gt=0, description="Website (publisher) ID")
    type: ZoneType = Field(..., description="Zone type")
    width: int | None = Field(None, gt=0)
    height: int | None = Field(None, gt=0)
    description: str | None = None
    delivery: DeliveryMethod | None = None
    frequency_cap: FrequencyCap | None = None


class UpdateZoneArgs(ReviveBaseModel):
    zone_id: int = Field(..., gt=0, description="Zone ID to update")
    name: str | None = Field(None, min_length=1)
    description: str | None = None
    width: int | None = Field(None, gt=0)
    height: int | None = Field(None, gt=0)
    delivery: DeliveryMethod | None = None
    frequency_cap: FrequencyCap | None = None
    targeting: TargetingRules | None = None


class ListZonesArgs(ListArgs):
    website_id: int | None = Field(None, gt=0, description="Filter by website (publisher) ID")
    type: ZoneType | None = Field(None, description="Filter by zone type")


class UploadBannerArgs(ReviveBaseModel):
    campaign_id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1)
    storage_type: StorageType
    image_url: str | None = Field(None, description="Image URL for web storage")
    html_template: str | None = Field(None, description="HTML template for HTML banners")
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    weight: int = Field(1, ge=0, description="Banner weight for rotation")
    click_url: str | None = None
    status: BannerStatus | None = None

    @model_validator(mode="after")
    def validate_storage_content(self):
        if self.storage_type == "html" and not self.html_template:
            raise ValueError("htmlTemplate is required for html banners")
        return self


class UpdateBannerArgs(ReviveBaseModel):
    banner_id: int = Field(..., gt=0)
    name: str | None = Field(None, min_length=1)
    weight: int | None = Field(None, ge=0)
    status: BannerStatus | None = None
    click_url: str | None = None
    image_url: str | None = None
    html_template: str | None = None
    targeting: TargetingRules | None = None


class ListBannersArgs(ListArgs):
    campaign_id: int | None = Field(None, gt=0, description="Filter by campaign ID")
    status: BannerStatus | None = None
    storage_type: StorageType | None = None


class SetTargetingArgs(ReviveBaseModel):
    entity_type: TargetableEntityType
    entity_id: int = Field(..., gt=0)
    targeting: TargetingRules


class GenerateStatsArgs(_DateRangeArgs):
    entity_type: StatsEntityType
    entity_id: int | None = Field(None, gt=0, description="Entity ID (agency totals when absent)")
    start_date: date
    end_date: date
    granularity: TimePeriod = "day"
    metrics: list[str] | None = Field(None, description="Metrics to include")

    @field_validator("metrics")
    @classmethod
    def validate_metrics(cls, v):
        if v is None:
            return v
        resolved = []
        for metric in v:
            name = resolve_field_name(Statistics, metric)
            if name not in STATISTICS_METRICS:
                raise ValueError(f"Unknown metric '{metric}'")
            resolved.append(name)
        return resolved


class ListAdvertisersArgs(ListArgs):
    agency_id: int | None = Field(None, gt=0, description="Agency ID (configured agency when absent)")


class ListPublishersArgs(ListArgs):
    agency_id: int | None = Field(None, gt=0, description="Agency ID (configured agency when absent)")
