# roo_client/normalizers.py
"""
Turn decoded JSON into domain records.

Every normalizer either returns a fully-typed record or raises
MalformedResponse, and it raises only when the payload is not an object or
its identity field is unusable. Missing or untypeable optional fields fall
back to None or their default.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Callable, List, Mapping, Optional, TypeVar

from .errors import MalformedResponse
from .models import (
    Batch,
    BatchSummary,
    BatchView,
    Category,
    Driver,
    FullBatches,
    InventoryStats,
    Product,
    Supplier,
)
from .validation import (
    flag,
    non_negative_int,
    opt_date,
    opt_datetime,
    opt_decimal,
    opt_str,
    require_id,
    require_mapping,
    text,
)

T = TypeVar("T")

log = logging.getLogger(__name__)


def normalize_driver(raw: Any) -> Driver:
    data = require_mapping(raw, "driver")
    return Driver(
        user_id=require_id(data, "user_id", "driver"),
        username=text(data, "username"),
        full_name=text(data, "full_name"),
        email=opt_str(data, "email"),
        phone=opt_str(data, "phone"),
        address=opt_str(data, "address"),
        area=opt_str(data, "area"),
        is_active=flag(data, "is_active", default=True),
        current_deliveries=non_negative_int(data, "current_deliveries"),
        created_at=opt_datetime(data, "created_at"),
        updated_at=opt_datetime(data, "updated_at"),
    )


def _batch_quantity(data: Mapping[str, Any]) -> int:
    # POST /products/{id}/batches echoes the new row as {batch_id, batch_number, quantity}
    key = _first_present(data, ("current_quantity", "quantity", "initial_quantity"))
    return non_negative_int(data, key) if key else 0


def normalize_batch(raw: Any) -> Batch:
    data = require_mapping(raw, "batch")
    return Batch(
        batch_id=require_id(data, "batch_id", "batch"),
        batch_number=text(data, "batch_number"),
        current_quantity=_batch_quantity(data),
        expiry_date=opt_date(data, "expiry_date"),
        supplier_name=opt_str(data, "supplier_name"),
        supplier_id=opt_str(data, "supplier_id"),
        manufacturing_date=opt_date(data, "manufacturing_date"),
        cost_price=opt_decimal(data, "cost_price"),
        selling_price=opt_decimal(data, "selling_price"),
        is_active=flag(data, "is_active", default=True),
    )


def _batch_view(data: Mapping[str, Any]) -> BatchView:
    """
    Pick the batch representation a payload carries.

    Product detail sends the full list; product list sends batch_count and
    next_expiry. Some list payloads also carry an empty batches array next
    to real aggregates, so an empty list only wins when no summary exists.
    """
    raw_batches = data.get("batches")
    if raw_batches is not None and not isinstance(raw_batches, list):
        log.warning("Ignoring product.batches=%r: expected a list", raw_batches)
        raw_batches = None

    has_summary = data.get("batch_count") is not None or data.get("next_expiry") is not None

    if raw_batches:
        return FullBatches(batches=tuple(normalize_batch(b) for b in raw_batches))
    if has_summary:
        return BatchSummary(
            count=non_negative_int(data, "batch_count"),
            next_expiry=opt_date(data, "next_expiry"),
        )
    if raw_batches is not None:
        return FullBatches(batches=())
    return BatchSummary()


def _stock_level(data: Mapping[str, Any]) -> int:
    # inventory/items names the same aggregate total_stock
    if data.get("current_stock") is not None:
        return non_negative_int(data, "current_stock")
    return non_negative_int(data, "total_stock")


def normalize_product(raw: Any) -> Product:
    data = require_mapping(raw, "product")
    unit_price = opt_decimal(data, "unit_price")
    return Product(
        product_id=require_id(data, "product_id", "product"),
        name=text(data, "name"),
        unit_price=unit_price if unit_price is not None else Decimal("0"),
        category_id=opt_str(data, "category_id"),
        category_name=opt_str(data, "category_name"),
        description=opt_str(data, "description"),
        current_stock=_stock_level(data),
        reorder_level=non_negative_int(data, "reorder_level"),
        is_company_product=flag(data, "is_company_product"),
        is_active=flag(data, "is_active", default=True),
        image_url=opt_str(data, "image_url"),
        batch_view=_batch_view(data),
    )


def normalize_category(raw: Any) -> Category:
    data = require_mapping(raw, "category")
    return Category(
        category_id=require_id(data, "category_id", "category"),
        name=text(data, "name"),
        description=opt_str(data, "description"),
    )


def normalize_supplier(raw: Any) -> Supplier:
    data = require_mapping(raw, "supplier")
    return Supplier(
        supplier_id=require_id(data, "supplier_id", "supplier"),
        name=text(data, "name"),
        contact_person=opt_str(data, "contact_person"),
        phone=opt_str(data, "phone"),
        email=opt_str(data, "email"),
    )


_STATS_KEYS = {
    "total_items": ("total_items", "totalItems"),
    "low_stock_items": ("low_stock_items", "lowStockItems"),
    "out_of_stock_items": ("out_of_stock_items", "outOfStockItems"),
    "expiring_soon_items": ("expiring_soon_items", "expiringItems", "expiringSoonItems"),
}


def _first_present(data: Mapping[str, Any], keys) -> Optional[str]:
    for key in keys:
        if data.get(key) is not None:
            return key
    return None


def normalize_inventory_stats(raw: Any) -> InventoryStats:
    data = require_mapping(raw, "inventory stats")
    values = {}
    for attr, keys in _STATS_KEYS.items():
        key = _first_present(data, keys)
        values[attr] = non_negative_int(data, key) if key else 0
    return InventoryStats(**values)


def normalize_many(raw: Any, normalizer: Callable[[Any], T]) -> List[T]:
    if not isinstance(raw, list):
        raise MalformedResponse(f"expected a JSON array, got {type(raw).__name__}")
    return [normalizer(item) for item in raw]
