# roo_client/services/status_service.py
"""
Presentation-level classifications derived from raw record fields.

All functions here are total and pure: they never raise for a normalized
record and never read the clock. Callers pass `now` explicitly.

Boundary policy:
- stock: current_stock <= 0 is out of stock regardless of reorder level;
  low stock is strictly below the reorder level, so reaching it exactly is
  still in stock
- expiry: compared on calendar dates; a batch expiring today is not yet
  expired; "expiring soon" covers [now, now + EXPIRY_WARNING_DAYS)
"""
from __future__ import annotations

import enum
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, Optional, Union

from ..config import Config
from ..models import Product
from ..time_utils import as_date

EXPIRY_WARNING_DAYS = Config.EXPIRY_WARNING_DAYS


class StockStatus(str, enum.Enum):
    OUT_OF_STOCK = "out_of_stock"
    LOW_STOCK = "low_stock"
    IN_STOCK = "in_stock"


class ExpiryUrgency(str, enum.Enum):
    EXPIRED = "expired"
    EXPIRING_SOON = "expiring_soon"
    NORMAL = "normal"
    NONE = "none"


STOCK_LABELS = {
    StockStatus.OUT_OF_STOCK: "Out of Stock",
    StockStatus.LOW_STOCK: "Low Stock",
    StockStatus.IN_STOCK: "In Stock",
}

EXPIRY_LABELS = {
    ExpiryUrgency.EXPIRED: "Expired",
    ExpiryUrgency.EXPIRING_SOON: "Expiring soon",
    ExpiryUrgency.NORMAL: "Next expiry",
    ExpiryUrgency.NONE: "",
}


def stock_status(product: Product) -> StockStatus:
    if product.current_stock <= 0:
        return StockStatus.OUT_OF_STOCK
    if product.current_stock < product.reorder_level:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def is_low_stock(product: Product) -> bool:
    return stock_status(product) is StockStatus.LOW_STOCK


def expiry_urgency(
    expiry_date: Optional[Union[date, datetime]],
    now: Union[date, datetime],
    warning_days: int = EXPIRY_WARNING_DAYS,
) -> ExpiryUrgency:
    if expiry_date is None:
        return ExpiryUrgency.NONE
    expiry = as_date(expiry_date)
    today = as_date(now)
    if expiry < today:
        return ExpiryUrgency.EXPIRED
    if expiry < today + timedelta(days=warning_days):
        return ExpiryUrgency.EXPIRING_SOON
    return ExpiryUrgency.NORMAL


def product_expiry_urgency(product: Product, now: Union[date, datetime]) -> ExpiryUrgency:
    """Classify the product's next expiry, whichever batch view it carries."""
    return expiry_urgency(product.next_expiry, now)


def summarize_stock(products: Iterable[Product], now: Union[date, datetime]) -> Dict[str, int]:
    """
    Client-side equivalent of the inventory/stats counters, for screens
    that already hold the product list.
    """
    products = list(products)
    by_status = Counter(stock_status(p) for p in products)
    expiring = sum(
        1 for p in products
        if product_expiry_urgency(p, now) is ExpiryUrgency.EXPIRING_SOON
    )
    return {
        "total_items": len(products),
        "low_stock_items": by_status[StockStatus.LOW_STOCK],
        "out_of_stock_items": by_status[StockStatus.OUT_OF_STOCK],
        "expiring_soon_items": expiring,
    }
