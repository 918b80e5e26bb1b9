"""Statistics tool."""

import json
from typing import Any

from pydantic.alias_generators import to_camel

from revive_mcp.core.helpers.client_helpers import get_client
from revive_mcp.core.schemas import OperationResult, StatsEntityType, Statistics, TimePeriod, resolve_field_name

# Always serialized, whatever metrics were requested
_ROW_KEYS = ("entityType", "entityId", "date")


def _select_metrics(result: OperationResult, metrics: list[str] | None) -> dict[str, Any]:
    """Serialize the result, keeping only the requested metric columns of each row."""
    payload = result.to_json_dict()
    if not result.success or not metrics:
        return payload

    keep = set(_ROW_KEYS)
    for metric in metrics:
        field_name = resolve_field_name(Statistics, metric)
        if field_name:
            keep.add(to_camel(field_name))
    payload["data"] = [{k: v for k, v in row.items() if k in keep} for row in payload.get("data") or []]
    return payload


def revive_stats_generate(
    entity_type: StatsEntityType,
    start_date: str,
    end_date: str,
    entity_id: int | None = None,
    granularity: TimePeriod = "day",
    metrics: list[str] | None = None,
) -> str:
    """Generate performance statistics and reports.

    Args:
        entity_type: campaign, banner, zone, advertiser or publisher
        start_date: Start date (YYYY-MM-DD)
        end_date: End date (YYYY-MM-DD)
        entity_id: Entity ID (agency totals when omitted)
        granularity: hour, day, week or month
        metrics: Metrics to include, e.g. ["impressions", "clicks", "revenue"]
    """
    result = get_client().generate_statistics(
        entity_type=entity_type,
        entity_id=entity_id,
        start_date=start_date,
        end_date=end_date,
        granularity=granularity,
        metrics=metrics,
    )
    return json.dumps(_select_metrics(result, metrics), indent=2)
