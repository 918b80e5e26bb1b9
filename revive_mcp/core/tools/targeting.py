"""Targeting tool."""

from revive_mcp.core.helpers.client_helpers import get_client
from revive_mcp.core.schemas import TargetableEntityType, TargetingRules


def revive_targeting_set(entity_type: TargetableEntityType, entity_id: int, targeting: TargetingRules) -> str:
    """Configure targeting rules for campaigns or banners.

    Args:
        entity_type: Entity to target (campaign or banner)
        entity_id: Entity ID
        targeting: Country, region, city, language, browser, os, device, dayOfWeek,
            hourOfDay, keywords and customVariables rules
    """
    result = get_client().set_targeting(entity_type=entity_type, entity_id=entity_id, targeting=targeting)
    return result.to_text()
