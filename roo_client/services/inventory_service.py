# Overview: Service-layer operations for inventory; wraps the /inventory endpoints used by stock-keeping screens.

# roo_client/services/inventory_service.py
"""
Client for the /inventory namespace used by the stock-keeping screens.

These endpoints predate the {"data": T} convention on some deployments and
answer with bare bodies; ApiClient.request unwraps whichever shape arrives.

Batch quantity and expiry edits always carry a reason: the server writes
them to the batch audit trail.
"""
from __future__ import annotations

from datetime import date
from typing import Any, List, Mapping, Optional, Union

from ..models import Batch, Category, InventoryStats, Product
from ..normalizers import (
    normalize_batch,
    normalize_category,
    normalize_inventory_stats,
    normalize_many,
    normalize_product,
)
from ..query import build_inventory_query
from ..time_utils import to_iso_date
from .api_client import ApiClient


class InventoryService:
    def __init__(self, api: ApiClient):
        self.api = api

    # ==================== STATISTICS ====================

    def get_stats(self) -> InventoryStats:
        data = self.api.get("/inventory/stats", error_message="Failed to fetch inventory stats")
        return normalize_inventory_stats(data)

    # ==================== ITEMS ====================

    def list_items(
        self,
        category: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> List[Product]:
        params = build_inventory_query(
            {
                "category": category,
                "status": status,
                "search": search,
                "sortBy": sort_by,
                "sortOrder": sort_order,
            }
        )
        data = self.api.get("/inventory/items", params=params, error_message="Failed to fetch inventory items")
        return normalize_many(data, normalize_product)

    # ==================== PRODUCTS ====================

    def get_product(self, product_id: str) -> Product:
        data = self.api.get(f"/inventory/products/{product_id}", error_message="Failed to fetch product details")
        return normalize_product(data)

    def create_product(self, payload: Mapping[str, Any]) -> Product:
        data = self.api.post("/inventory/products", json=dict(payload), error_message="Failed to create product")
        return normalize_product(data)

    def update_product(self, product_id: str, payload: Mapping[str, Any]) -> Product:
        data = self.api.put(
            f"/inventory/products/{product_id}",
            json=dict(payload),
            error_message="Failed to update product",
        )
        return normalize_product(data)

    def deactivate_product(self, product_id: str) -> dict:
        body = self.api.delete(
            f"/inventory/products/{product_id}",
            envelope=False,
            error_message="Failed to deactivate product",
        )
        return body if isinstance(body, dict) else {}

    # ==================== BATCHES ====================

    def add_batch(self, payload: Mapping[str, Any]) -> Batch:
        data = self.api.post("/inventory/batches", json=dict(payload), error_message="Failed to add batch")
        return normalize_batch(data)

    def get_batch(self, batch_id: str) -> Batch:
        data = self.api.get(f"/inventory/batches/{batch_id}", error_message="Failed to fetch batch details")
        return normalize_batch(data)

    def adjust_batch_quantity(self, batch_id: str, adjustment: int, reason: str) -> Batch:
        """PUT /inventory/batches/{id}/quantity; adjustment is a signed delta."""
        data = self.api.put(
            f"/inventory/batches/{batch_id}/quantity",
            json={"adjustment": int(adjustment), "reason": reason},
            error_message="Failed to adjust batch quantity",
        )
        return normalize_batch(data)

    def update_batch_expiry(self, batch_id: str, expiry_date: Union[date, str], reason: str) -> Batch:
        if isinstance(expiry_date, date):
            expiry_date = to_iso_date(expiry_date)
        data = self.api.put(
            f"/inventory/batches/{batch_id}/expiry",
            json={"expiry_date": expiry_date, "reason": reason},
            error_message="Failed to update batch expiry date",
        )
        return normalize_batch(data)

    def deactivate_batch(self, batch_id: str, reason: str) -> dict:
        body = self.api.request(
            "DELETE",
            f"/inventory/batches/{batch_id}",
            json={"reason": reason},
            envelope=False,
            error_message="Failed to deactivate batch",
        )
        return body if isinstance(body, dict) else {}

    # ==================== CATEGORIES ====================

    def list_categories(self) -> List[Category]:
        data = self.api.get("/inventory/categories", error_message="Failed to fetch categories")
        return normalize_many(data, normalize_category)

    def create_category(self, payload: Mapping[str, Any]) -> Category:
        data = self.api.post("/inventory/categories", json=dict(payload), error_message="Failed to create category")
        return normalize_category(data)

    # ==================== REPORTS ====================

    def get_overview_report(self) -> dict:
        """Report payloads are free-form aggregates; returned decoded, not normalized."""
        data = self.api.get("/inventory/reports/overview", error_message="Failed to fetch inventory report")
        return data if isinstance(data, dict) else {"items": data}

    def get_low_stock_report(self) -> List[Product]:
        data = self.api.get("/inventory/reports/low-stock", error_message="Failed to fetch low stock products")
        return normalize_many(data, normalize_product)
