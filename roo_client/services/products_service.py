# Overview: Service-layer operations for products; wraps the /products endpoints and normalizes their payloads.

# roo_client/services/products_service.py
"""
Products Service

Client for the /products namespace. Every read returns normalized records.

Wire notes:
- reads answer {"data": T}
- creates echo only a few columns under "data"; the submitted payload fills
  in the record
- PUT /batches/{id} and DELETE /products/{id} answer {"success", "message"}
  with no "data" key
- DELETE /products/{id} is a soft delete (is_active = 0) on the server
- an empty image_url is dropped before create/update so the server keeps
  its current value
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Union

from ..models import ALL_CATEGORY, Batch, Category, Product, Supplier
from ..normalizers import (
    normalize_batch,
    normalize_category,
    normalize_many,
    normalize_product,
    normalize_supplier,
)
from ..query import build_batch_query, build_query
from .api_client import ApiClient

log = logging.getLogger(__name__)


def clean_product_payload(payload: Mapping[str, Any]) -> dict:
    """Copy of payload without an empty image_url; the input is not modified."""
    data = dict(payload)
    if not data.get("image_url"):
        data.pop("image_url", None)
    return data


def _merge_echo(submitted: Mapping[str, Any], echoed: Any) -> Any:
    # create endpoints echo a few columns; what was sent fills in the rest
    if not isinstance(echoed, Mapping):
        return echoed
    return {**submitted, **echoed}


class ProductsService:
    def __init__(self, api: ApiClient):
        self.api = api

    def list_products(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        sort: Optional[str] = None,
        active: Optional[bool] = None,
        status: Optional[str] = None,
    ) -> List[Product]:
        """
        GET /products with server-side filtering.

        Options equal to their "no filter" value are left out of the query
        string entirely (see query.build_query).
        """
        params = build_query(
            {"search": search, "category": category, "status": status, "sort": sort, "active": active}
        )
        data = self.api.get("/products", params=params, error_message="Failed to fetch products")
        products = normalize_many(data, normalize_product)
        log.debug("Retrieved %d products", len(products))
        return products

    def get_product(self, product_id: str) -> Product:
        data = self.api.get(f"/products/{product_id}", error_message="Failed to fetch product details")
        return normalize_product(data)

    def create_product(self, payload: Mapping[str, Any]) -> Product:
        """
        POST /products. The server echoes only {product_id, name, unit_price};
        the remaining fields are taken from the submitted payload.
        """
        body = clean_product_payload(payload)
        data = self.api.post("/products", json=body, error_message="Failed to add product")
        return normalize_product(_merge_echo(body, data))

    def update_product(self, product_id: str, payload: Mapping[str, Any]) -> Product:
        data = self.api.put(
            f"/products/{product_id}",
            json=clean_product_payload(payload),
            error_message="Failed to update product",
        )
        return normalize_product(data)

    def deactivate_product(self, product_id: str) -> dict:
        # DELETE answers {"success": true, "message": ...} without a data key
        body = self.api.delete(
            f"/products/{product_id}",
            envelope=False,
            error_message="Failed to delete product",
        )
        return body if isinstance(body, dict) else {}

    def list_categories(self, include_all: bool = False) -> List[Category]:
        """
        GET /products/categories.

        include_all=True prepends the synthetic "All" entry used by
        category pickers; it is never sent back to the server.
        """
        data = self.api.get("/products/categories", error_message="Failed to fetch categories")
        categories = normalize_many(data, normalize_category)
        if include_all:
            return [ALL_CATEGORY] + categories
        return categories

    def list_suppliers(self) -> List[Supplier]:
        data = self.api.get("/products/suppliers", error_message="Failed to fetch suppliers")
        return normalize_many(data, normalize_supplier)

    def list_batches(
        self,
        product_id: str,
        include_expired: bool = False,
        sort_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Batch]:
        params = build_batch_query(include_expired=include_expired, sort_by=sort_by, limit=limit)
        data = self.api.get(
            f"/products/{product_id}/batches",
            params=params,
            error_message="Failed to fetch product batches",
        )
        return normalize_many(data, normalize_batch)

    def add_batch(self, product_id: str, payload: Mapping[str, Any]) -> Batch:
        """
        POST /products/{id}/batches. The echo is {batch_id, batch_number,
        quantity}; dates and prices come from the submitted payload.
        """
        body = dict(payload)
        data = self.api.post(
            f"/products/{product_id}/batches",
            json=body,
            error_message="Failed to add product batch",
        )
        return normalize_batch(_merge_echo(body, data))

    def update_batch(self, batch_id: str, payload: Mapping[str, Any]) -> Union[Batch, dict]:
        """
        PUT /batches/{id}.

        The server answers {"success": true, "message": ...} without the row;
        that body is returned as decoded. A deployment that does send the
        updated row under "data" gets it back normalized.
        """
        body = self.api.put(
            f"/batches/{batch_id}",
            json=dict(payload),
            envelope=False,
            error_message="Failed to update batch",
        )
        if isinstance(body, dict) and isinstance(body.get("data"), dict):
            return normalize_batch(body["data"])
        return body if isinstance(body, dict) else {}

    def list_low_stock(self) -> List[Product]:
        data = self.api.get("/products/low-stock", error_message="Failed to fetch low stock products")
        return normalize_many(data, normalize_product)

    def load_catalog(self, **filters) -> tuple:
        """
        Categories and products for the products screen.

        Either request failing fails the whole load; callers keep whatever
        they showed before.
        """
        categories = self.list_categories(include_all=True)
        products = self.list_products(**filters)
        return categories, products
