"""Tests for client-side filtering, sorting and pagination."""

from datetime import datetime

import pytest

from revive_mcp.adapters.revive.errors import ReviveValidationError
from revive_mcp.core.helpers.list_helpers import (
    apply_filters,
    apply_list_args,
    paginate,
    resolve_sort_field,
    sort_records,
)
from revive_mcp.core.schemas import Campaign, ListArgs, Zone

pytestmark = pytest.mark.unit


def _campaigns():
    return [
        Campaign(id=1, name="b", budget=100, status="active"),
        Campaign(id=2, name="a", budget=None, status="paused"),
        Campaign(id=3, name="c", budget=50, status="active"),
        Campaign(id=4, name="d", budget=100, status="active"),
    ]


class TestResolveSortField:
    def test_snake_and_camel_case(self):
        assert resolve_sort_field(Campaign, "advertiser_id") == "advertiser_id"
        assert resolve_sort_field(Campaign, "advertiserId") == "advertiser_id"
        assert resolve_sort_field(Zone, "websiteId") == "website_id"

    def test_none_means_unsorted(self):
        assert resolve_sort_field(Campaign, None) is None

    def test_unknown_field(self):
        with pytest.raises(ReviveValidationError, match="unknown field 'popularity'"):
            resolve_sort_field(Campaign, "popularity")


class TestFilters:
    def test_none_filters_are_ignored(self):
        assert len(apply_filters(_campaigns(), {"status": None})) == 4

    def test_equality_filter(self):
        assert [c.id for c in apply_filters(_campaigns(), {"status": "active"})] == [1, 3, 4]

    def test_filters_combine(self):
        assert [c.id for c in apply_filters(_campaigns(), {"status": "active", "budget": 100})] == [1, 4]


class TestSort:
    def test_absent_values_sort_first(self):
        assert [c.id for c in sort_records(_campaigns(), "budget")] == [2, 3, 1, 4]

    def test_sort_is_stable(self):
        ordered = sort_records(_campaigns(), "budget", "asc")
        assert [c.id for c in ordered if c.budget == 100] == [1, 4]

    def test_descending(self):
        assert [c.name for c in sort_records(_campaigns(), "name", "desc")] == ["d", "c", "b", "a"]

    def test_absent_values_sort_first_when_descending(self):
        records = [Campaign(id=1, budget=100), Campaign(id=2), Campaign(id=3, budget=50), Campaign(id=4)]
        assert [c.id for c in sort_records(records, "budget", "desc")] == [2, 4, 1, 3]

    def test_descending_is_stable(self):
        assert [c.id for c in sort_records(_campaigns(), "budget", "desc")] == [2, 1, 4, 3]

    def test_dates(self):
        records = [
            Campaign(id=1, start_date=datetime(2025, 5, 1)),
            Campaign(id=2, start_date=datetime(2025, 1, 1)),
        ]
        assert [c.id for c in sort_records(records, "start_date")] == [2, 1]

    def test_no_field_keeps_order(self):
        assert [c.id for c in sort_records(_campaigns(), None)] == [1, 2, 3, 4]


class TestPaginate:
    @pytest.mark.parametrize(
        "offset,limit,expected",
        [
            (0, None, [1, 2, 3, 4, 5]),
            (0, 2, [1, 2]),
            (2, 2, [3, 4]),
            (4, 10, [5]),
            (10, 2, []),
            (1, 0, []),
        ],
    )
    def test_slices(self, offset, limit, expected):
        assert paginate([1, 2, 3, 4, 5], offset, limit) == expected

    def test_negative_values_rejected(self):
        with pytest.raises(ReviveValidationError):
            paginate([1, 2], -1)
        with pytest.raises(ReviveValidationError):
            paginate([1, 2], 0, -5)


def test_apply_list_args_filters_before_sorting_and_slicing():
    args = ListArgs(sort_by="budget", sort_order="desc", limit=2, offset=0)

    result = apply_list_args(_campaigns(), Campaign, args, {"status": "active"})

    assert [c.id for c in result] == [1, 4]
