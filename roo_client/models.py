# roo_client/models.py
"""
Immutable domain records built from API payloads.

Records are snapshots: once normalized they are never mutated, so list
screens can share them across threads without locking.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Tuple, Union

from .time_utils import to_iso_date, to_utc_z

# category_id reserved for the "All" chip; never a real row
ALL_CATEGORIES = ""


def _money(value: Optional[Decimal]) -> Optional[str]:
    return str(value) if value is not None else None


@dataclass(frozen=True)
class Driver:
    user_id: str
    username: str
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    area: Optional[str] = None
    is_active: bool = True
    current_deliveries: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "full_name": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "area": self.area,
            "is_active": self.is_active,
            "current_deliveries": self.current_deliveries,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


@dataclass(frozen=True)
class Batch:
    batch_id: str
    batch_number: str
    current_quantity: int = 0
    expiry_date: Optional[date] = None
    supplier_name: Optional[str] = None
    supplier_id: Optional[str] = None
    manufacturing_date: Optional[date] = None
    cost_price: Optional[Decimal] = None
    selling_price: Optional[Decimal] = None
    is_active: bool = True

    @property
    def is_available(self) -> bool:
        """Counts towards next_expiry: still active and holding stock."""
        return self.is_active and self.current_quantity > 0

    def to_dict(self) -> dict:
        return {
            "batch_id": self.batch_id,
            "batch_number": self.batch_number,
            "current_quantity": self.current_quantity,
            "expiry_date": to_iso_date(self.expiry_date),
            "supplier_name": self.supplier_name,
            "supplier_id": self.supplier_id,
            "manufacturing_date": to_iso_date(self.manufacturing_date),
            "cost_price": _money(self.cost_price),
            "selling_price": _money(self.selling_price),
            "is_active": self.is_active,
        }


@dataclass(frozen=True)
class FullBatches:
    """Batch relationship delivered as the complete list (product detail)."""
    batches: Tuple[Batch, ...] = ()


@dataclass(frozen=True)
class BatchSummary:
    """Batch relationship delivered as server-side aggregates (product list)."""
    count: int = 0
    next_expiry: Optional[date] = None


BatchView = Union[FullBatches, BatchSummary]


def summarize_batches(view: BatchView) -> BatchSummary:
    """
    Reconcile either batch representation into the summary form.

    For a full list this reproduces what the backend computes for the list
    endpoint: count of active batches, and the earliest expiry among active
    batches that still hold stock.
    """
    if isinstance(view, BatchSummary):
        return view

    active = [b for b in view.batches if b.is_active]
    expiries = [b.expiry_date for b in active if b.is_available and b.expiry_date is not None]
    return BatchSummary(count=len(active), next_expiry=min(expiries) if expiries else None)


@dataclass(frozen=True)
class Product:
    product_id: str
    name: str
    unit_price: Decimal = Decimal("0")
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    description: Optional[str] = None
    current_stock: int = 0
    reorder_level: int = 0
    is_company_product: bool = False
    is_active: bool = True
    image_url: Optional[str] = None
    batch_view: BatchView = field(default_factory=BatchSummary)

    @property
    def batches(self) -> Tuple[Batch, ...]:
        if isinstance(self.batch_view, FullBatches):
            return self.batch_view.batches
        return ()

    @property
    def batch_count(self) -> int:
        return summarize_batches(self.batch_view).count

    @property
    def next_expiry(self) -> Optional[date]:
        return summarize_batches(self.batch_view).next_expiry

    def to_dict(self) -> dict:
        data = {
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": str(self.unit_price),
            "category_id": self.category_id,
            "category_name": self.category_name,
            "description": self.description,
            "current_stock": self.current_stock,
            "reorder_level": self.reorder_level,
            "is_company_product": self.is_company_product,
            "is_active": self.is_active,
            "image_url": self.image_url,
            "batch_count": self.batch_count,
            "next_expiry": to_iso_date(self.next_expiry),
        }
        if isinstance(self.batch_view, FullBatches):
            data["batches"] = [b.to_dict() for b in self.batch_view.batches]
        return data


@dataclass(frozen=True)
class Category:
    category_id: str
    name: str
    description: Optional[str] = None

    @property
    def is_all(self) -> bool:
        return self.category_id == ALL_CATEGORIES

    def to_dict(self) -> dict:
        return {"category_id": self.category_id, "name": self.name, "description": self.description}


ALL_CATEGORY = Category(category_id=ALL_CATEGORIES, name="All")


@dataclass(frozen=True)
class Supplier:
    supplier_id: str
    name: str
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "supplier_id": self.supplier_id,
            "name": self.name,
            "contact_person": self.contact_person,
            "phone": self.phone,
            "email": self.email,
        }


@dataclass(frozen=True)
class InventoryStats:
    total_items: int = 0
    low_stock_items: int = 0
    out_of_stock_items: int = 0
    expiring_soon_items: int = 0

    def to_dict(self) -> dict:
        return {
            "total_items": self.total_items,
            "low_stock_items": self.low_stock_items,
            "out_of_stock_items": self.out_of_stock_items,
            "expiring_soon_items": self.expiring_soon_items,
        }
