# Overview: Service-layer operations for drivers; wraps the lorry driver endpoints.

# roo_client/services/drivers_service.py
"""
Client for lorry drivers (/drivers/drivers).

The drivers controller answers with bare bodies (a JSON array for the list,
an object for a single driver), not {"data": T}.
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping

from ..models import Driver
from ..normalizers import normalize_driver, normalize_many
from .api_client import ApiClient

log = logging.getLogger(__name__)


class DriversService:
    def __init__(self, api: ApiClient):
        self.api = api

    def list_drivers(self) -> List[Driver]:
        data = self.api.get("/drivers/drivers", error_message="Failed to fetch drivers")
        drivers = normalize_many(data, normalize_driver)
        log.debug("Received %d drivers", len(drivers))
        return drivers

    def get_driver(self, driver_id: str) -> Driver:
        data = self.api.get(f"/drivers/drivers/{driver_id}", error_message="Failed to fetch driver details")
        return normalize_driver(data)

    def create_driver(self, payload: Mapping[str, Any]) -> dict:
        """POST answers {"message": ..., "user_id": ...}; returned as decoded."""
        return self.api.post(
            "/drivers/drivers",
            json=dict(payload),
            envelope=False,
            error_message="Failed to add driver",
        )

    def update_driver(self, driver_id: str, payload: Mapping[str, Any]) -> dict:
        return self.api.put(
            f"/drivers/drivers/{driver_id}",
            json=dict(payload),
            envelope=False,
            error_message="Failed to update driver",
        )

    def set_driver_active(self, driver_id: str, is_active: bool) -> dict:
        return self.api.put(
            f"/drivers/drivers/{driver_id}/toggle-status",
            json={"is_active": bool(is_active)},
            envelope=False,
            error_message="Failed to toggle driver status",
        )
