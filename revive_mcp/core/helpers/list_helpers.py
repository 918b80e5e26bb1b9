"""Client-side filtering, sorting and pagination for list operations.

Revive's list services return whole collections, so every list operation narrows,
orders and slices the normalized records here.
"""

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any, TypeVar

from pydantic import BaseModel

from revive_mcp.adapters.revive.errors import ReviveValidationError
from revive_mcp.core.schemas import ListArgs, resolve_field_name

RecordT = TypeVar("RecordT", bound=BaseModel)


def resolve_sort_field(model: type[BaseModel], sort_by: str | None) -> str | None:
    """Map a caller-supplied sort field onto a model attribute.

    Raises:
        ReviveValidationError: If the field does not exist on the record type
    """
    if sort_by is None:
        return None
    field_name = resolve_field_name(model, sort_by)
    if field_name is None:
        raise ReviveValidationError(
            f"Cannot sort {model.__name__} by unknown field '{sort_by}'",
            {"sort_by": sort_by, "record_type": model.__name__},
        )
    return field_name


def _sort_key(value: Any) -> tuple:
    """Total order over heterogeneous present field values."""
    if isinstance(value, bool | int | float):
        return (0, value)
    if isinstance(value, datetime):
        return (1, value.timestamp())
    if isinstance(value, date):
        return (1, datetime(value.year, value.month, value.day).timestamp())
    return (2, str(value))


def apply_filters(records: Iterable[RecordT], filters: Mapping[str, Any]) -> list[RecordT]:
    """Keep records whose attributes equal every provided (non-None) filter value."""
    active = {name: value for name, value in filters.items() if value is not None}
    return [record for record in records if all(getattr(record, name, None) == value for name, value in active.items())]


def sort_records(records: Iterable[RecordT], field_name: str | None, sort_order: str = "asc") -> list[RecordT]:
    """Stable sort by one attribute; ``desc`` reverses the order of present values.

    Records without the attribute come first in either direction, in input order.
    """
    records = list(records)
    if field_name is None:
        return records
    absent = [record for record in records if getattr(record, field_name, None) is None]
    present = [record for record in records if getattr(record, field_name, None) is not None]
    present.sort(key=lambda record: _sort_key(getattr(record, field_name)), reverse=sort_order == "desc")
    return absent + present


def paginate(records: list[RecordT], offset: int = 0, limit: int | None = None) -> list[RecordT]:
    if offset < 0 or (limit is not None and limit < 0):
        raise ReviveValidationError("offset and limit must not be negative", {"offset": offset, "limit": limit})
    end = None if limit is None else offset + limit
    return records[offset:end]


def apply_list_args(
    records: Iterable[RecordT], model: type[RecordT], args: ListArgs, filters: Mapping[str, Any]
) -> list[RecordT]:
    """Filter, sort then paginate ``records`` according to ``args``."""
    field_name = resolve_sort_field(model, args.sort_by)
    selected = apply_filters(records, filters)
    ordered = sort_records(selected, field_name, args.sort_order)
    return paginate(ordered, args.offset, args.limit)
