# roo_client/__init__.py
from __future__ import annotations

from typing import Optional

import httpx

from .config import Config
from .errors import ApiError, MalformedResponse, RooClientError, TransportError
from .services.api_client import ApiClient, AuthService, MemoryTokenStore, TokenStore


class RooClient:
    """One ApiClient shared by every resource service."""

    def __init__(self, api: ApiClient):
        from .services.drivers_service import DriversService
        from .services.inventory_service import InventoryService
        from .services.products_service import ProductsService

        self.api = api
        self.products = ProductsService(api)
        self.inventory = InventoryService(api)
        self.drivers = DriversService(api)

    def close(self) -> None:
        self.api.close()

    def __enter__(self) -> "RooClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def create_client(
    config: Optional[type] = None,
    token_store: Optional[TokenStore] = None,
    transport: Optional[httpx.BaseTransport] = None,
    base_url: Optional[str] = None,
) -> RooClient:
    config = config or Config
    api = ApiClient(
        base_url or config.API_URL,
        token_store=token_store,
        timeout=config.REQUEST_TIMEOUT,
        transport=transport,
    )
    return RooClient(api)


def login(client: RooClient, username: str, password: str, user_type: str) -> dict:
    """
    Authenticate and switch the client to the issued token.

    Replaces whatever token store the client had with an in-memory one.
    """
    store = MemoryTokenStore()
    user = AuthService(client.api, store).login(username, password, user_type)
    client.api.token_store = store
    return user


__all__ = [
    "ApiClient",
    "ApiError",
    "Config",
    "MalformedResponse",
    "RooClient",
    "RooClientError",
    "TransportError",
    "create_client",
    "login",
]
