# roo_client/query.py
"""
Canonical query-string construction for list endpoints.

build_query() turns a loose filter mapping into an ordered list of
(key, value) string pairs. Keys always appear in the same order and
"no filter" values are dropped, so two equal configurations serialize to
byte-identical query strings.
"""
from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple

import httpx

from .models import ALL_CATEGORIES

QueryPairs = List[Tuple[str, str]]

STATUS_ALL = "all"
STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"
STATUS_VALUES = (STATUS_ALL, STATUS_ACTIVE, STATUS_INACTIVE)

# Canonical order for GET /products
QUERY_KEYS = ("search", "category", "status", "sort", "active")

# Canonical order for GET /inventory/items (camelCase on the wire)
INVENTORY_QUERY_KEYS = ("category", "status", "search", "sortBy", "sortOrder")


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value).strip()
    return text or None


def _product_value(key: str, value: Any) -> Optional[str]:
    if key == "active":
        if value is None or value == "":
            return None
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in ("true", "1"):
                return "true"
            if lowered in ("false", "0"):
                return "false"
            return None
        return "true" if bool(value) else "false"

    text = _as_text(value)
    if text is None:
        return None
    if key == "category" and text == ALL_CATEGORIES:
        return None
    if key == "status":
        lowered = text.lower()
        if lowered not in STATUS_VALUES or lowered == STATUS_ALL:
            return None
        return lowered
    return text


def build_query(config: Optional[Mapping[str, Any]] = None) -> QueryPairs:
    """
    Build the query pairs for GET /products.

    Recognized options: search, category, status, sort, active.
    Unknown keys are ignored; the input mapping is only read.
    """
    if not config:
        return []
    pairs: QueryPairs = []
    for key in QUERY_KEYS:
        value = _product_value(key, config.get(key))
        if value is not None:
            pairs.append((key, value))
    return pairs


def build_inventory_query(config: Optional[Mapping[str, Any]] = None) -> QueryPairs:
    """
    Build the query pairs for GET /inventory/items.

    The inventory screen filters by stock state ("Low Stock",
    "Out of Stock", "Expiring Soon"), so status is passed through verbatim.
    """
    if not config:
        return []
    pairs: QueryPairs = []
    for key in INVENTORY_QUERY_KEYS:
        value = _as_text(config.get(key))
        if value is None:
            continue
        if key == "category" and value == ALL_CATEGORIES:
            continue
        if key == "status" and value.lower() == STATUS_ALL:
            continue
        pairs.append((key, value))
    return pairs


def build_batch_query(
    include_expired: bool = False,
    sort_by: Optional[str] = None,
    limit: Optional[int] = None,
) -> QueryPairs:
    pairs: QueryPairs = []
    if include_expired:
        pairs.append(("includeExpired", "true"))
    sort_text = _as_text(sort_by)
    if sort_text:
        pairs.append(("sortBy", sort_text))
    if limit:
        pairs.append(("limit", str(int(limit))))
    return pairs


def serialize_query(pairs: QueryPairs) -> str:
    """URL-encode pairs in order; empty input gives an empty string."""
    return str(httpx.QueryParams(pairs))
