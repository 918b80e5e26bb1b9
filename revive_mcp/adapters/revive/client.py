"""
Revive Adserver client.

One ``ReviveClient`` owns one logical Revive session and exposes a method per domain
action. Every public operation validates its arguments, talks to Revive through the
authenticated dispatcher, normalizes the response and returns an ``OperationResult``.
No exception crosses this boundary.
"""

import functools
import logging
from collections.abc import Callable, Mapping
from datetime import date, datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from revive_mcp.adapters.revive import normalizer
from revive_mcp.adapters.revive.dispatcher import AuthenticatedDispatcher
from revive_mcp.adapters.revive.errors import ReviveError, ReviveProtocolError, map_pydantic_error
from revive_mcp.adapters.revive.session import SessionManager
from revive_mcp.adapters.revive.transport import XmlRpcTransport
from revive_mcp.core.config import ReviveSettings
from revive_mcp.core.helpers.list_helpers import apply_list_args, resolve_sort_field
from revive_mcp.core.helpers.statistics_helpers import rollup_statistics
from revive_mcp.core.schemas import (
    Advertiser,
    Banner,
    Campaign,
    ConfigureZoneArgs,
    CreateCampaignArgs,
    GenerateStatsArgs,
    ListAdvertisersArgs,
    ListBannersArgs,
    ListCampaignsArgs,
    ListPublishersArgs,
    ListZonesArgs,
    OperationResult,
    Publisher,
    SetTargetingArgs,
    UpdateBannerArgs,
    UpdateCampaignArgs,
    UpdateZoneArgs,
    UploadBannerArgs,
    Zone,
)

logger = logging.getLogger(__name__)

ArgsT = TypeVar("ArgsT", bound=BaseModel)

CAMPAIGN_SERVICE = "CampaignXmlRpcService"
ZONE_SERVICE = "ZoneXmlRpcService"
BANNER_SERVICE = "BannerXmlRpcService"
ADVERTISER_SERVICE = "AdvertiserXmlRpcService"
PUBLISHER_SERVICE = "PublisherXmlRpcService"
AGENCY_SERVICE = "AgencyXmlRpcService"

# Statistics entity type -> XML-RPC service
STATISTICS_SERVICES = {
    "campaign": CAMPAIGN_SERVICE,
    "banner": BANNER_SERVICE,
    "zone": ZONE_SERVICE,
    "advertiser": ADVERTISER_SERVICE,
    "publisher": PUBLISHER_SERVICE,
    "agency": AGENCY_SERVICE,
}


def operation(failure_message: str) -> Callable:
    """Wrap a client method so its outcome is returned as an OperationResult.

    Revive errors are logged with their structured details; anything unexpected is
    logged with a traceback. Both become ``OperationResult.fail``.
    """

    def decorator(func: Callable) -> Callable[..., OperationResult]:
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs) -> OperationResult:
            try:
                return OperationResult.ok(func(self, *args, **kwargs))
            except ReviveError as e:
                logger.error(f"{failure_message}: {e}", extra={"revive_error": e.to_dict()})
                return OperationResult.fail(f"{failure_message}: {e}")
            except Exception as e:
                logger.exception(f"{failure_message}: unexpected error")
                return OperationResult.fail(f"{failure_message}: {e}")

        return wrapper

    return decorator


def _parse_args(model: type[ArgsT], args: Any, kwargs: dict[str, Any]) -> ArgsT:
    """Validate caller arguments given as a model instance, a mapping and/or keywords."""
    if isinstance(args, model) and not kwargs:
        return args
    if isinstance(args, BaseModel):
        data = args.model_dump(exclude_unset=True)
    elif isinstance(args, Mapping):
        data = dict(args)
    elif args is None:
        data = {}
    else:
        raise map_pydantic_error(TypeError(f"expected a mapping, got {type(args).__name__}"), model.__name__)
    data.update(kwargs)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise map_pydantic_error(e, model.__name__) from e


def _supplied(args: BaseModel, exclude: tuple[str, ...] = ()) -> dict[str, Any]:
    """The fields the caller actually supplied, as attribute -> value."""
    values: dict[str, Any] = {}
    for name in args.model_fields_set:
        value = getattr(args, name)
        if name in exclude or value is None:
            continue
        if isinstance(value, date) and not isinstance(value, datetime):
            value = datetime(value.year, value.month, value.day)
        if name == "targeting":
            value = value.to_json_dict()
        values[name] = value
    return values


def _created_id(result: Any, keys: tuple[str, ...], method: str) -> int:
    """Revive add* methods return the new id, either bare or inside a struct."""
    if isinstance(result, Mapping):
        result = next((result[k] for k in keys if result.get(k) is not None), None)
    new_id = normalizer.parse_int(result, None)
    if new_id is None:
        raise ReviveProtocolError(
            f"{method} did not return an id",
            {"method": method, "response_type": type(result).__name__},
        )
    return new_id


class ReviveClient:
    """Domain operations against one Revive Adserver instance."""

    def __init__(
        self,
        settings: ReviveSettings | None = None,
        *,
        transport: XmlRpcTransport | None = None,
        session_manager: SessionManager | None = None,
        dispatcher: AuthenticatedDispatcher | None = None,
    ):
        """Initialize the client.

        Args:
            settings: Connection settings (read from the environment when omitted)
            transport: Pre-built transport, mainly for tests
            session_manager: Pre-built session manager
            dispatcher: Pre-built dispatcher
        """
        self.settings = settings or ReviveSettings()
        self.transport = transport or XmlRpcTransport(
            self.settings.api_url,
            timeout=self.settings.timeout_seconds,
            user_agent=self.settings.user_agent,
            verify_ssl=self.settings.verify_ssl,
        )
        self.session_manager = session_manager or SessionManager(
            self.transport,
            self.settings.api_username,
            self.settings.api_password,
            default_lifetime=self.settings.session_lifetime,
        )
        self.dispatcher = dispatcher or AuthenticatedDispatcher(self.session_manager, self.transport)

    @property
    def is_authenticated(self) -> bool:
        return self.session_manager.is_authenticated

    def _invoke(self, service: str, method: str, *params: Any) -> Any:
        return self.dispatcher.invoke(service, method, list(params))

    # --- Campaigns ---

    @operation("Failed to create campaign")
    def create_campaign(self, args: CreateCampaignArgs | Mapping[str, Any] | None = None, **kwargs) -> Campaign:
        args = _parse_args(CreateCampaignArgs, args, kwargs)
        wire = normalizer.campaign_to_wire(_supplied(args))
        result = self._invoke(CAMPAIGN_SERVICE, "addCampaign", wire)
        campaign_id = _created_id(result, ("campaignId", "id"), "addCampaign")
        logger.info(f"Created Revive campaign {campaign_id} for advertiser {args.advertiser_id}")
        return normalizer.campaign_to_domain({**wire, "campaignId": campaign_id})

    @operation("Failed to list campaigns")
    def list_campaigns(self, args: ListCampaignsArgs | Mapping[str, Any] | None = None, **kwargs) -> list[Campaign]:
        args = _parse_args(ListCampaignsArgs, args, kwargs)
        resolve_sort_field(Campaign, args.sort_by)

        if args.advertiser_id is not None:
            campaigns = self._fetch_campaigns(args.advertiser_id)
        else:
            campaigns = []
            for advertiser in self._fetch_advertisers(self.settings.agency_id):
                if advertiser.id is not None:
                    campaigns.extend(self._fetch_campaigns(advertiser.id))

        return apply_list_args(campaigns, Campaign, args, {"status": args.status})

    @operation("Failed to update campaign")
    def update_campaign(self, args: UpdateCampaignArgs | Mapping[str, Any] | None = None, **kwargs) -> Campaign:
        args = _parse_args(UpdateCampaignArgs, args, kwargs)
        current = normalizer.campaign_to_domain(self._invoke(CAMPAIGN_SERVICE, "getCampaign", args.campaign_id))
        merged = current.model_copy(update={"id": args.campaign_id, **_supplied(args, exclude=("campaign_id",))})
        self._invoke(CAMPAIGN_SERVICE, "modifyCampaign", normalizer.campaign_to_wire(merged))
        logger.info(f"Updated Revive campaign {args.campaign_id}")
        return merged

    def _fetch_campaigns(self, advertiser_id: int) -> list[Campaign]:
        raw = self._invoke(CAMPAIGN_SERVICE, "getCampaignListByAdvertiserId", advertiser_id)
        return [
            campaign if campaign.advertiser_id is not None else campaign.model_copy(update={"advertiser_id": advertiser_id})
            for campaign in normalizer.campaigns_to_domain(raw)
        ]

    # --- Zones ---

    @operation("Failed to configure zone")
    def create_zone(self, args: ConfigureZoneArgs | Mapping[str, Any] | None = None, **kwargs) -> Zone:
        args = _parse_args(ConfigureZoneArgs, args, kwargs)
        wire = normalizer.zone_to_wire(_supplied(args))
        result = self._invoke(ZONE_SERVICE, "addZone", wire)
        zone_id = _created_id(result, ("zoneId", "id"), "addZone")
        logger.info(f"Created Revive zone {zone_id} on website {args.website_id}")
        return normalizer.zone_to_domain({**wire, "zoneId": zone_id})

    @operation("Failed to list zones")
    def list_zones(self, args: ListZonesArgs | Mapping[str, Any] | None = None, **kwargs) -> list[Zone]:
        args = _parse_args(ListZonesArgs, args, kwargs)
        resolve_sort_field(Zone, args.sort_by)

        if args.website_id is not None:
            zones = self._fetch_zones(args.website_id)
        else:
            zones = []
            for publisher in self._fetch_publishers(self.settings.agency_id):
                if publisher.id is not None:
                    zones.extend(self._fetch_zones(publisher.id))

        return apply_list_args(zones, Zone, args, {"type": args.type})

    @operation("Failed to update zone")
    def update_zone(self, args: UpdateZoneArgs | Mapping[str, Any] | None = None, **kwargs) -> Zone:
        args = _parse_args(UpdateZoneArgs, args, kwargs)
        current = normalizer.zone_to_domain(self._invoke(ZONE_SERVICE, "getZone", args.zone_id))
        merged = current.model_copy(update={"id": args.zone_id, **_supplied(args, exclude=("zone_id",))})
        self._invoke(ZONE_SERVICE, "modifyZone", normalizer.zone_to_wire(merged))
        logger.info(f"Updated Revive zone {args.zone_id}")
        return merged

    def _fetch_zones(self, publisher_id: int) -> list[Zone]:
        raw = self._invoke(ZONE_SERVICE, "getZoneListByPublisherId", publisher_id)
        return [
            zone if zone.website_id is not None else zone.model_copy(update={"website_id": publisher_id})
            for zone in normalizer.zones_to_domain(raw)
        ]

    # --- Banners ---

    @operation("Failed to upload banner")
    def create_banner(self, args: UploadBannerArgs | Mapping[str, Any] | None = None, **kwargs) -> Banner:
        args = _parse_args(UploadBannerArgs, args, kwargs)
        fields = _supplied(args)
        fields.setdefault("weight", args.weight)
        wire = normalizer.banner_to_wire(fields)
        result = self._invoke(BANNER_SERVICE, "addBanner", wire)
        banner_id = _created_id(result, ("bannerId", "id"), "addBanner")
        logger.info(f"Created Revive banner {banner_id} in campaign {args.campaign_id}")
        return normalizer.banner_to_domain({**wire, "bannerId": banner_id})

    @operation("Failed to list banners")
    def list_banners(self, args: ListBannersArgs | Mapping[str, Any] | None = None, **kwargs) -> list[Banner]:
        args = _parse_args(ListBannersArgs, args, kwargs)
        resolve_sort_field(Banner, args.sort_by)

        if args.campaign_id is not None:
            banners = self._fetch_banners(args.campaign_id)
        else:
            banners = []
            for advertiser in self._fetch_advertisers(self.settings.agency_id):
                if advertiser.id is None:
                    continue
                for campaign in self._fetch_campaigns(advertiser.id):
                    if campaign.id is not None:
                        banners.extend(self._fetch_banners(campaign.id))

        filters = {"status": args.status, "storage_type": args.storage_type}
        return apply_list_args(banners, Banner, args, filters)

    @operation("Failed to update banner")
    def update_banner(self, args: UpdateBannerArgs | Mapping[str, Any] | None = None, **kwargs) -> Banner:
        args = _parse_args(UpdateBannerArgs, args, kwargs)
        current = normalizer.banner_to_domain(self._invoke(BANNER_SERVICE, "getBanner", args.banner_id))
        merged = current.model_copy(update={"id": args.banner_id, **_supplied(args, exclude=("banner_id",))})
        self._invoke(BANNER_SERVICE, "modifyBanner", normalizer.banner_to_wire(merged))
        logger.info(f"Updated Revive banner {args.banner_id}")
        return merged

    def _fetch_banners(self, campaign_id: int) -> list[Banner]:
        raw = self._invoke(BANNER_SERVICE, "getBannerListByCampaignId", campaign_id)
        return [
            banner if banner.campaign_id is not None else banner.model_copy(update={"campaign_id": campaign_id})
            for banner in normalizer.banners_to_domain(raw)
        ]

    # --- Targeting ---

    @operation("Failed to set targeting")
    def set_targeting(self, args: SetTargetingArgs | Mapping[str, Any] | None = None, **kwargs) -> dict[str, Any]:
        args = _parse_args(SetTargetingArgs, args, kwargs)
        targeting = args.targeting.to_json_dict()
        if args.entity_type == "campaign":
            self._invoke(CAMPAIGN_SERVICE, "setCampaignTargeting", args.entity_id, targeting)
        else:
            self._invoke(BANNER_SERVICE, "setBannerTargeting", args.entity_id, targeting)
        logger.info(f"Set targeting on {args.entity_type} {args.entity_id}: {sorted(targeting)}")
        return {"entityType": args.entity_type, "entityId": args.entity_id, "targeting": targeting}

    # --- Statistics ---

    @operation("Failed to generate statistics")
    def generate_statistics(self, args: GenerateStatsArgs | Mapping[str, Any] | None = None, **kwargs) -> list:
        """Delivery statistics for one entity, or agency totals when no entity id is given.

        ``hour`` uses the hourly reports, every other granularity the daily ones;
        ``week`` and ``month`` are rolled up from daily rows.
        """
        args = _parse_args(GenerateStatsArgs, args, kwargs)
        if args.entity_id is not None:
            entity_type, entity_id = args.entity_type, args.entity_id
        else:
            entity_type, entity_id = "agency", self.settings.agency_id

        suffix = "HourlyStatistics" if args.granularity == "hour" else "DailyStatistics"
        start = datetime(args.start_date.year, args.start_date.month, args.start_date.day)
        end = datetime(args.end_date.year, args.end_date.month, args.end_date.day)
        raw = self._invoke(STATISTICS_SERVICES[entity_type], f"{entity_type}{suffix}", entity_id, start, end)

        rows = normalizer.statistics_list_to_domain(raw, entity_type, entity_id)
        return rollup_statistics(rows, args.granularity)

    # --- Directory ---

    @operation("Failed to list advertisers")
    def list_advertisers(self, args: ListAdvertisersArgs | Mapping[str, Any] | None = None, **kwargs) -> list[Advertiser]:
        args = _parse_args(ListAdvertisersArgs, args, kwargs)
        resolve_sort_field(Advertiser, args.sort_by)
        advertisers = self._fetch_advertisers(args.agency_id or self.settings.agency_id)
        return apply_list_args(advertisers, Advertiser, args, {})

    @operation("Failed to list publishers")
    def list_publishers(self, args: ListPublishersArgs | Mapping[str, Any] | None = None, **kwargs) -> list[Publisher]:
        args = _parse_args(ListPublishersArgs, args, kwargs)
        resolve_sort_field(Publisher, args.sort_by)
        publishers = self._fetch_publishers(args.agency_id or self.settings.agency_id)
        return apply_list_args(publishers, Publisher, args, {})

    def _fetch_advertisers(self, agency_id: int) -> list[Advertiser]:
        return normalizer.advertisers_to_domain(
            self._invoke(ADVERTISER_SERVICE, "getAdvertiserListByAgencyId", agency_id)
        )

    def _fetch_publishers(self, agency_id: int) -> list[Publisher]:
        return normalizer.publishers_to_domain(self._invoke(PUBLISHER_SERVICE, "getPublisherListByAgencyId", agency_id))

    # --- Session ---

    @operation("Connection test failed")
    def test_connection(self) -> dict[str, Any]:
        """Log on and list the server's XML-RPC methods."""
        self.session_manager.ensure_valid()
        methods = self.transport.list_methods()
        logger.info(f"Revive connection OK: {len(methods)} XML-RPC methods at {self.settings.api_url}")
        return {"endpoint": self.settings.api_url, "authenticated": True, "methodCount": len(methods)}

    @operation("Logout failed")
    def logout(self) -> None:
        self.session_manager.logout()
