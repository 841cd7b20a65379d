# roo_client/services/filter_service.py
"""
In-memory search / status / category filtering for list screens.

Semantics (authoritative):
- text match is a substring match over a fixed set of fields per record kind;
  a record matches when ANY field matches; None fields never match
- most fields compare case-insensitively; fields flagged verbatim (phone
  numbers) compare exactly as typed
- an empty (or whitespace-only) query matches everything
- status "active" keeps is_active is True, "inactive" keeps is_active is
  False, anything else keeps everything
- category "" is the All sentinel
- all predicates are ANDed, so the order they run in does not matter, and
  re-filtering a filtered list with the same state is a no-op
- input order is preserved and the input sequence is never modified
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Sequence, Tuple, TypeVar

from ..models import ALL_CATEGORIES
from ..query import STATUS_ACTIVE, STATUS_ALL, STATUS_INACTIVE

R = TypeVar("R")


@dataclass(frozen=True)
class SearchField:
    name: str
    verbatim: bool = False


DRIVER_SEARCH_FIELDS: Tuple[SearchField, ...] = (
    SearchField("full_name"),
    SearchField("area"),
    SearchField("phone", verbatim=True),
)

PRODUCT_SEARCH_FIELDS: Tuple[SearchField, ...] = (
    SearchField("name"),
    SearchField("category_name"),
    SearchField("description"),
)


@dataclass(frozen=True)
class FilterState:
    """Last-applied filter parameters for one list screen."""
    query: str = ""
    status: str = STATUS_ALL
    category_id: str = ALL_CATEGORIES

    def with_query(self, query: str) -> "FilterState":
        return FilterState(query=query, status=self.status, category_id=self.category_id)

    def with_status(self, status: str) -> "FilterState":
        return FilterState(query=self.query, status=status, category_id=self.category_id)

    def with_category(self, category_id: str) -> "FilterState":
        return FilterState(query=self.query, status=self.status, category_id=category_id)


def _get(record: Any, name: str) -> Any:
    # records are dataclasses; raw API dicts are accepted too
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _field_matches(value: Any, query: str, lowered: str, verbatim: bool) -> bool:
    if value is None:
        return False
    text = str(value)
    if verbatim:
        return query in text
    return lowered in text.lower()


def matches_text(record: Any, query: str, fields: Iterable[SearchField]) -> bool:
    query = (query or "").strip()
    if not query:
        return True
    lowered = query.lower()
    return any(
        _field_matches(_get(record, f.name), query, lowered, f.verbatim)
        for f in fields
    )


def matches_status(record: Any, status: str) -> bool:
    if status == STATUS_ACTIVE:
        return _get(record, "is_active") is True
    if status == STATUS_INACTIVE:
        return _get(record, "is_active") is False
    return True


def matches_category(record: Any, category_id: str) -> bool:
    if not category_id:
        return True
    return _get(record, "category_id") == category_id


def filter_records(
    records: Sequence[R],
    query: str = "",
    status_filter: str = STATUS_ALL,
    fields: Iterable[SearchField] = DRIVER_SEARCH_FIELDS,
) -> List[R]:
    """Text + status filter; returns a new list in input order."""
    fields = tuple(fields)
    return [
        r for r in records
        if matches_text(r, query, fields) and matches_status(r, status_filter)
    ]


def apply_filter_state(
    records: Sequence[R],
    state: FilterState,
    fields: Iterable[SearchField] = DRIVER_SEARCH_FIELDS,
) -> List[R]:
    """filter_records plus the category predicate."""
    return [
        r for r in filter_records(records, state.query, state.status, fields)
        if matches_category(r, state.category_id)
    ]


def filter_drivers(drivers: Sequence[R], query: str = "", status_filter: str = STATUS_ALL) -> List[R]:
    return filter_records(drivers, query, status_filter, DRIVER_SEARCH_FIELDS)


def filter_products(products: Sequence[R], state: FilterState) -> List[R]:
    return apply_filter_state(products, state, PRODUCT_SEARCH_FIELDS)

