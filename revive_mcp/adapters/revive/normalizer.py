"""
Normalization between Revive XML-RPC records and domain records.

Revive returns the same entity with different key spellings depending on the
service and server version (``campaignId`` vs ``id``, ``zoneName`` vs ``name``,
``clientid``, ``affiliateid``) and often sends numbers as text. Every field here has
an ordered list of wire keys: the canonical Revive key first, then legacy aliases.

All functions are total: malformed input degrades to defaults, never raises.
"""

import logging
import math
import xmlrpc.client
from collections.abc import Callable, Mapping
from datetime import date, datetime
from typing import Any, NamedTuple

from revive_mcp.core.schemas import (
    Advertiser,
    Banner,
    Campaign,
    DomainRecord,
    FrequencyCap,
    Publisher,
    Statistics,
    Zone,
)

logger = logging.getLogger(__name__)

# Revive OA_ENTITY_STATUS_* codes
CAMPAIGN_STATUS_CODES = {
    0: "active",
    1: "paused",
    2: "pending",
    3: "expired",
    4: "inactive",
    10: "pending",
}
CAMPAIGN_STATUS_NAMES = {"active": 0, "paused": 1, "pending": 2, "expired": 3, "inactive": 4}

ZONE_TYPE_CODES = {
    0: "banner",
    1: "interstitial",
    2: "popup",
    3: "text",
    4: "email",
}
ZONE_TYPE_NAMES = {name: code for code, name in ZONE_TYPE_CODES.items()}

_DATE_FORMATS = (
    "%Y%m%dT%H:%M:%S",
    "%Y%m%dT%H%M%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%Y%m%d",
)


# --- Scalar parsers ---


def parse_int(value: Any, default: int | None = 0) -> int | None:
    """Parse an integer from an XML-RPC value, returning ``default`` on failure."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            parsed = float(text)
        except ValueError:
            return default
        return int(parsed) if math.isfinite(parsed) else default
    return default


def parse_float(value: Any, default: float | None = 0.0) -> float | None:
    """Parse a float from an XML-RPC value; NaN and infinities count as failures."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, int | float):
        parsed = float(value)
    elif isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    return parsed if math.isfinite(parsed) else default


def parse_date(value: Any) -> datetime | None:
    """Parse a date-like XML-RPC value. Unparseable values (including 0000-00-00) become None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, xmlrpc.client.DateTime):
        value = value.value
    if not isinstance(value, str):
        return None

    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _text(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _mapping(value: Any) -> dict[str, Any] | None:
    return dict(value) if isinstance(value, Mapping) else None


def _int_or_none(value: Any) -> int | None:
    return parse_int(value, None)


def _float_or_none(value: Any) -> float | None:
    return parse_float(value, None)


def _counter(value: Any) -> int:
    return parse_int(value, 0)


def _amount(value: Any) -> float:
    return parse_float(value, 0.0)


def _campaign_status(value: Any) -> str | None:
    code = parse_int(value, None) if not isinstance(value, str) or value.strip().isdigit() else None
    if code is not None:
        return CAMPAIGN_STATUS_CODES.get(code, str(code))
    return _text(value)


def _status_to_wire(value: str) -> Any:
    return CAMPAIGN_STATUS_NAMES.get(value, value)


def _zone_type(value: Any) -> str | None:
    code = parse_int(value, None) if not isinstance(value, str) or value.strip().isdigit() else None
    if code is not None:
        return ZONE_TYPE_CODES.get(code, str(code))
    return _text(value)


def _zone_type_to_wire(value: str) -> Any:
    return ZONE_TYPE_NAMES.get(value, value)


def _cap_count(value: Any) -> int | None:
    count = parse_int(value, None)
    return count if count is not None and count >= 0 else None


def _frequency_cap(value: Any) -> FrequencyCap | None:
    wire = _mapping(value)
    if not wire or wire.get("period") not in ("hour", "day", "week", "month"):
        return None
    return FrequencyCap(
        impressions=_cap_count(wire.get("impressions")),
        clicks=_cap_count(wire.get("clicks")),
        period=wire["period"],
    )


def _frequency_cap_to_wire(value: FrequencyCap) -> dict[str, Any]:
    return value.model_dump(exclude_none=True)


# --- Field tables ---


class FieldSpec(NamedTuple):
    """How one domain attribute is read from and written to the wire."""

    attr: str
    keys: tuple[str, ...]  # canonical wire key first, then legacy aliases
    parse: Callable[[Any], Any]
    dump: Callable[[Any], Any] | None = None


CAMPAIGN_FIELDS = (
    FieldSpec("id", ("campaignId", "id", "campaignid"), _int_or_none),
    FieldSpec("name", ("campaignName", "name", "campaignname"), _text),
    FieldSpec("advertiser_id", ("advertiserId", "clientid"), _int_or_none),
    FieldSpec("status", ("status",), _campaign_status, _status_to_wire),
    FieldSpec("budget", ("budget",), _float_or_none),
    FieldSpec("budget_type", ("budgetType",), _text),
    FieldSpec("priority", ("priority",), _int_or_none),
    FieldSpec("weight", ("weight",), _int_or_none),
    FieldSpec("start_date", ("startDate", "activate_time"), parse_date),
    FieldSpec("end_date", ("endDate", "expire_time"), parse_date),
    FieldSpec("target_impressions", ("targetImpressions", "target_impression"), _int_or_none),
    FieldSpec("target_clicks", ("targetClicks", "target_click"), _int_or_none),
    FieldSpec("impressions", ("impressions",), _counter),
    FieldSpec("clicks", ("clicks",), _counter),
    FieldSpec("conversions", ("conversions",), _counter),
    FieldSpec("revenue", ("revenue",), _amount),
    FieldSpec("targeting", ("targeting",), _mapping),
    FieldSpec("created_at", ("createdAt",), parse_date),
    FieldSpec("updated_at", ("updatedAt", "updated"), parse_date),
)

ZONE_FIELDS = (
    FieldSpec("id", ("zoneId", "id", "zoneid"), _int_or_none),
    FieldSpec("name", ("zoneName", "name", "zonename"), _text),
    FieldSpec("website_id", ("publisherId", "websiteId", "affiliateid"), _int_or_none),
    FieldSpec("type", ("type", "zoneType", "delivery_type"), _zone_type, _zone_type_to_wire),
    FieldSpec("width", ("width",), _int_or_none),
    FieldSpec("height", ("height",), _int_or_none),
    FieldSpec("description", ("description",), _text),
    FieldSpec("delivery", ("delivery",), _text),
    FieldSpec("frequency_cap", ("frequencyCap",), _frequency_cap, _frequency_cap_to_wire),
    FieldSpec("targeting", ("targeting",), _mapping),
    FieldSpec("code", ("code", "invocationCode"), _text),
    FieldSpec("impressions", ("impressions",), _counter),
    FieldSpec("clicks", ("clicks",), _counter),
    FieldSpec("revenue", ("revenue",), _amount),
    FieldSpec("created_at", ("createdAt",), parse_date),
    FieldSpec("updated_at", ("updatedAt", "updated"), parse_date),
)

BANNER_FIELDS = (
    FieldSpec("id", ("bannerId", "id", "bannerid"), _int_or_none),
    FieldSpec("name", ("bannerName", "name", "description"), _text),
    FieldSpec("campaign_id", ("campaignId", "campaignid"), _int_or_none),
    FieldSpec("storage_type", ("storageType", "storagetype"), _text),
    FieldSpec("image_url", ("imageURL", "imageUrl", "filename"), _text),
    FieldSpec("html_template", ("htmlTemplate", "htmlcode"), _text),
    FieldSpec("width", ("width",), _counter),
    FieldSpec("height", ("height",), _counter),
    FieldSpec("weight", ("weight",), lambda v: parse_int(v, 1)),
    FieldSpec("status", ("status",), _campaign_status, _status_to_wire),
    FieldSpec("click_url", ("url", "clickUrl"), _text),
    FieldSpec("targeting", ("targeting",), _mapping),
    FieldSpec("impressions", ("impressions",), _counter),
    FieldSpec("clicks", ("clicks",), _counter),
    FieldSpec("conversions", ("conversions",), _counter),
    FieldSpec("conversion_rate", ("conversionRate",), _amount),
    FieldSpec("revenue", ("revenue",), _amount),
    FieldSpec("created_at", ("createdAt",), parse_date),
    FieldSpec("updated_at", ("updatedAt", "updated"), parse_date),
)

STATISTICS_FIELDS = (
    FieldSpec("entity_type", ("entityType",), lambda v: _text(v) or "unknown"),
    FieldSpec("entity_id", ("entityId",), _int_or_none),
    FieldSpec("date", ("day", "date", "hour", "interval_start"), parse_date),
    FieldSpec("requests", ("requests",), _counter),
    FieldSpec("impressions", ("impressions",), _counter),
    FieldSpec("clicks", ("clicks",), _counter),
    FieldSpec("conversions", ("conversions",), _counter),
    FieldSpec("click_rate", ("clickRate", "ctr"), _amount),
    FieldSpec("conversion_rate", ("conversionRate",), _amount),
    FieldSpec("revenue", ("revenue",), _amount),
    FieldSpec("cost", ("cost",), _amount),
    FieldSpec("ecpm", ("ecpm",), _amount),
    FieldSpec("ecpc", ("ecpc",), _amount),
    FieldSpec("ecpa", ("ecpa",), _amount),
)

ADVERTISER_FIELDS = (
    FieldSpec("id", ("advertiserId", "clientid", "id"), _int_or_none),
    FieldSpec("name", ("advertiserName", "clientname", "name"), _text),
    FieldSpec("agency_id", ("agencyId", "agencyid"), _int_or_none),
    FieldSpec("contact_name", ("contactName", "contact"), _text),
    FieldSpec("email_address", ("emailAddress", "email"), _text),
    FieldSpec("comments", ("comments",), _text),
)

PUBLISHER_FIELDS = (
    FieldSpec("id", ("publisherId", "affiliateid", "publisherid", "id"), _int_or_none),
    FieldSpec("name", ("publisherName", "name"), _text),
    FieldSpec("agency_id", ("agencyId", "agencyid"), _int_or_none),
    FieldSpec("website", ("website", "websitename"), _text),
    FieldSpec("contact_name", ("contactName", "contact"), _text),
    FieldSpec("email_address", ("emailAddress", "email"), _text),
)


# --- Generic mapping ---


def _pick(wire: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    """Return the value of the first key that is present and non-empty."""
    for key in keys:
        value = wire.get(key)
        if value is not None and value != "":
            return value
    return None


def _to_domain(model: type[DomainRecord], fields: tuple[FieldSpec, ...], wire: Any) -> Any:
    """Build a record from the fields present on the wire; absent ones keep model defaults and stay unset."""
    source = wire if isinstance(wire, Mapping) else {}
    values = {}
    for spec in fields:
        raw = _pick(source, spec.keys)
        if raw is None:
            continue
        parsed = spec.parse(raw)
        if parsed is not None:
            values[spec.attr] = parsed
    return model(**values)


def _to_wire(fields: tuple[FieldSpec, ...], record: Any) -> dict[str, Any]:
    """Write a record (or a mapping of attribute -> value) using canonical wire keys.

    Absent values are dropped since XML-RPC has no nil. For records only fields that
    were explicitly set (read from the wire or updated) are written, so defaulted
    counters never overwrite remote state.
    """
    wire: dict[str, Any] = {}
    for spec in fields:
        if isinstance(record, Mapping):
            value = record.get(spec.attr)
        elif spec.attr in record.model_fields_set:
            value = getattr(record, spec.attr, None)
        else:
            continue
        if value is None:
            continue
        wire[spec.keys[0]] = spec.dump(value) if spec.dump else value
    return wire


def _list_to_domain(convert: Callable[[Any], Any], items: Any) -> list:
    if not isinstance(items, list | tuple):
        return []
    records = []
    for item in items:
        if not isinstance(item, Mapping):
            logger.debug(f"Skipping non-struct list item of type {type(item).__name__}")
            continue
        records.append(convert(item))
    return records


# --- Per-entity functions ---


def campaign_to_domain(wire: Any) -> Campaign:
    return _to_domain(Campaign, CAMPAIGN_FIELDS, wire)


def campaign_to_wire(record: Campaign | Mapping[str, Any]) -> dict[str, Any]:
    return _to_wire(CAMPAIGN_FIELDS, record)


def campaigns_to_domain(items: Any) -> list[Campaign]:
    return _list_to_domain(campaign_to_domain, items)


def zone_to_domain(wire: Any) -> Zone:
    return _to_domain(Zone, ZONE_FIELDS, wire)


def zone_to_wire(record: Zone | Mapping[str, Any]) -> dict[str, Any]:
    return _to_wire(ZONE_FIELDS, record)


def zones_to_domain(items: Any) -> list[Zone]:
    return _list_to_domain(zone_to_domain, items)


def banner_to_domain(wire: Any) -> Banner:
    return _to_domain(Banner, BANNER_FIELDS, wire)


def banner_to_wire(record: Banner | Mapping[str, Any]) -> dict[str, Any]:
    return _to_wire(BANNER_FIELDS, record)


def banners_to_domain(items: Any) -> list[Banner]:
    return _list_to_domain(banner_to_domain, items)


def statistics_to_domain(wire: Any, entity_type: str | None = None, entity_id: int | None = None) -> Statistics:
    """Map one statistics row.

    Revive's daily/hourly reports do not repeat the entity on each row, so the
    caller can supply it. The click rate is derived when the server omits it.
    """
    source = dict(wire) if isinstance(wire, Mapping) else {}
    if entity_type and _pick(source, ("entityType",)) is None:
        source["entityType"] = entity_type
    if entity_id is not None and _pick(source, ("entityId",)) is None:
        source["entityId"] = entity_id

    stats = _to_domain(Statistics, STATISTICS_FIELDS, source)
    if _pick(source, ("clickRate", "ctr")) is None and stats.impressions > 0:
        stats = stats.model_copy(update={"click_rate": round(stats.clicks / stats.impressions, 6)})
    return stats


def statistics_to_wire(record: Statistics | Mapping[str, Any]) -> dict[str, Any]:
    return _to_wire(STATISTICS_FIELDS, record)


def statistics_list_to_domain(items: Any, entity_type: str | None = None, entity_id: int | None = None) -> list[Statistics]:
    return _list_to_domain(lambda item: statistics_to_domain(item, entity_type, entity_id), items)


def advertiser_to_domain(wire: Any) -> Advertiser:
    return _to_domain(Advertiser, ADVERTISER_FIELDS, wire)


def advertisers_to_domain(items: Any) -> list[Advertiser]:
    return _list_to_domain(advertiser_to_domain, items)


def publisher_to_domain(wire: Any) -> Publisher:
    return _to_domain(Publisher, PUBLISHER_FIELDS, wire)


def publishers_to_domain(items: Any) -> list[Publisher]:
    return _list_to_domain(publisher_to_domain, items)
