# roo_client/config.py
from __future__ import annotations
import os


class Config:
    # Base URL of the Roo Herbals REST service, including the /api prefix
    API_URL = os.environ.get(
        "ROO_API_URL",  # optional alternative location
        "http://127.0.0.1:3000/api",  # default local backend
    )

    # Seconds; applied by the httpx transport, never by the core
    REQUEST_TIMEOUT = float(os.environ.get("ROO_REQUEST_TIMEOUT", "30"))

    # Minimum quiescence before a search-triggered refetch
    SEARCH_DEBOUNCE_SECONDS = 0.5

    # Batches expiring within this many days are "expiring soon"
    EXPIRY_WARNING_DAYS = 30

    # UTC offset of the API server. mysql2 sends DATE columns as local midnight
    # converted to UTC, so calendar dates are read back in this offset.
    SERVER_UTC_OFFSET = os.environ.get("ROO_SERVER_UTC_OFFSET", "+05:30")

    LOG_LEVEL = os.environ.get("ROO_LOG_LEVEL", "WARNING").upper()
