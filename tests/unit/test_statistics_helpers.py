"""Tests for weekly/monthly statistics rollups."""

from datetime import datetime

import pytest

from revive_mcp.core.helpers.statistics_helpers import bucket_start, rollup_statistics
from revive_mcp.core.schemas import Statistics

pytestmark = pytest.mark.unit


def _row(day, impressions, clicks, revenue=0.0, conversions=0):
    return Statistics(
        entity_type="campaign",
        entity_id=12,
        date=day,
        requests=impressions,
        impressions=impressions,
        clicks=clicks,
        conversions=conversions,
        revenue=revenue,
    )


class TestBucketStart:
    def test_week_starts_on_monday(self):
        assert bucket_start(datetime(2025, 3, 2, 15, 30), "week") == datetime(2025, 2, 24)
        assert bucket_start(datetime(2025, 3, 3), "week") == datetime(2025, 3, 3)

    def test_month(self):
        assert bucket_start(datetime(2025, 3, 31, 23), "month") == datetime(2025, 3, 1)

    def test_day_truncates_time(self):
        assert bucket_start(datetime(2025, 3, 2, 15, 30), "day") == datetime(2025, 3, 2)


class TestRollup:
    @pytest.mark.parametrize("granularity", ["hour", "day"])
    def test_fine_granularities_pass_through(self, granularity):
        rows = [_row(datetime(2025, 3, 1), 10, 1)]
        assert rollup_statistics(rows, granularity) is rows

    def test_monthly_sums_and_rates(self):
        rows = [
            _row(datetime(2025, 3, 1), 1000, 10, revenue=2.0, conversions=2),
            _row(datetime(2025, 3, 15), 1000, 30, revenue=6.0, conversions=2),
            _row(datetime(2025, 4, 1), 500, 0),
        ]

        march, april = rollup_statistics(rows, "month")

        assert march.date == datetime(2025, 3, 1)
        assert march.impressions == 2000
        assert march.clicks == 40
        assert march.revenue == 8.0
        assert march.click_rate == 0.02
        assert march.conversion_rate == 0.1
        assert march.ecpm == 4.0
        assert march.ecpc == 0.2
        assert march.ecpa == 2.0
        assert march.entity_type == "campaign"
        assert march.entity_id == 12
        assert april.click_rate == 0.0
        assert april.ecpc == 0.0

    def test_undated_rows_grouped_first(self):
        rows = [_row(datetime(2025, 3, 3), 5, 0), _row(None, 7, 1)]

        undated, dated = rollup_statistics(rows, "week")

        assert undated.date is None
        assert undated.impressions == 7
        assert dated.date == datetime(2025, 3, 3)

    def test_empty(self):
        assert rollup_statistics([], "week") == []
