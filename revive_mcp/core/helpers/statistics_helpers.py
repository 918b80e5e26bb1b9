"""Roll daily statistics rows up into weekly or monthly buckets."""

from datetime import datetime, timedelta

from revive_mcp.core.schemas import Statistics

_SUMMED_FIELDS = ("requests", "impressions", "clicks", "conversions", "revenue", "cost")


def bucket_start(day: datetime, granularity: str) -> datetime:
    """Start of the week (Monday) or month containing ``day``."""
    day = day.replace(hour=0, minute=0, second=0, microsecond=0)
    if granularity == "week":
        return day - timedelta(days=day.weekday())
    if granularity == "month":
        return day.replace(day=1)
    return day


def _ratio(numerator: float, denominator: float, scale: float = 1.0) -> float:
    return round(numerator / denominator * scale, 6) if denominator else 0.0


def rollup_statistics(rows: list[Statistics], granularity: str) -> list[Statistics]:
    """Sum daily rows per bucket and recompute the derived rates.

    Rows without a date are grouped together ahead of the dated buckets.
    """
    if granularity not in ("week", "month"):
        return rows

    buckets: dict[datetime | None, list[Statistics]] = {}
    for row in rows:
        key = bucket_start(row.date, granularity) if row.date else None
        buckets.setdefault(key, []).append(row)

    rolled = []
    for key in sorted(buckets, key=lambda k: (k is not None, k.timestamp() if k else 0)):
        group = buckets[key]
        totals = {name: sum(getattr(row, name) for row in group) for name in _SUMMED_FIELDS}
        totals["revenue"] = round(totals["revenue"], 6)
        totals["cost"] = round(totals["cost"], 6)
        rolled.append(
            Statistics(
                entity_type=group[0].entity_type,
                entity_id=group[0].entity_id,
                date=key,
                click_rate=_ratio(totals["clicks"], totals["impressions"]),
                conversion_rate=_ratio(totals["conversions"], totals["clicks"]),
                ecpm=_ratio(totals["revenue"], totals["impressions"], 1000.0),
                ecpc=_ratio(totals["revenue"], totals["clicks"]),
                ecpa=_ratio(totals["revenue"], totals["conversions"]),
                **totals,
            )
        )
    return rolled
