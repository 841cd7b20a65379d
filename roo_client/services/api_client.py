# roo_client/services/api_client.py
"""
HTTP facade for the Roo Herbals REST service.

One attempt per call, no retries: resubmission is the caller's decision
(pull-to-refresh, retry button). Every call:
- attaches "Authorization: Bearer <token>" when the token store has one;
  a missing token is not an error, the server decides
- decodes the body as JSON
- maps HTTP >= 400 to ApiError(status, message)
- maps network failures and undecodable bodies to TransportError
- unwraps {"data": T} envelopes; bare bodies are returned as-is
"""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import httpx

from ..errors import ApiError, MalformedResponse, TransportError

log = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Request failed"


class TokenStore:
    """Source of the session token; persistence is someone else's job."""

    def get_token(self) -> Optional[str]:
        raise NotImplementedError


class StaticTokenStore(TokenStore):
    def __init__(self, token: Optional[str] = None):
        self._token = token or None

    def get_token(self) -> Optional[str]:
        return self._token


class MemoryTokenStore(StaticTokenStore):
    """Mutable store, filled in by AuthService.login()."""

    def set_token(self, token: Optional[str]) -> None:
        self._token = token or None

    def clear(self) -> None:
        self._token = None


class EnvTokenStore(TokenStore):
    def __init__(self, var_name: str = "ROO_API_TOKEN"):
        self.var_name = var_name

    def get_token(self) -> Optional[str]:
        return os.environ.get(self.var_name) or None


def unwrap_envelope(body: Any) -> Any:
    """{"data": T} -> T; anything else is already the payload."""
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def extract_error_message(body: Any, fallback: str) -> str:
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return fallback


class ApiClient:
    """
    Thin wrapper around httpx.Client with auth, envelope and error handling.

    `transport` is forwarded to httpx so tests can mount a WSGI app or a
    MockTransport instead of the network.
    """

    def __init__(
        self,
        base_url: str,
        token_store: Optional[TokenStore] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_store = token_store or StaticTokenStore()
        self.client = httpx.Client(timeout=timeout, transport=transport)

    def _headers(self, extra: Optional[Dict] = None) -> Dict:
        """Build request headers with optional auth."""
        headers = {"Content-Type": "application/json"}
        token = self.token_store.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if extra:
            headers.update(extra)
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Any = None,
        json: Any = None,
        envelope: bool = True,
        error_message: str = GENERIC_ERROR_MESSAGE,
    ) -> Any:
        """
        Perform one request and return the decoded payload.

        envelope=False returns the whole decoded body (endpoints whose
        success body carries siblings of "data" that callers need).
        """
        url = f"{self.base_url}{path}"
        log.debug("%s %s params=%s", method, url, params)

        try:
            response = self.client.request(
                method,
                url,
                headers=self._headers(),
                params=params,
                json=json,
            )
        except httpx.HTTPError as exc:
            log.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(f"{error_message}: {exc}") from exc

        body = self._decode(response, method, url, error_message)

        if response.status_code >= 400:
            message = extract_error_message(body, error_message)
            log.warning("%s %s -> HTTP %s: %s", method, url, response.status_code, message)
            raise ApiError(response.status_code, message)

        return unwrap_envelope(body) if envelope else body

    def _decode(self, response: httpx.Response, method: str, url: str, error_message: str) -> Any:
        if not response.content:
            # 204 or an empty error page; nothing to decode
            return None
        try:
            return response.json()
        except ValueError as exc:
            if response.status_code >= 400:
                # error pages from proxies are often HTML; keep the status
                return None
            log.warning("%s %s returned a non-JSON body", method, url)
            raise TransportError(
                f"{error_message}: response body is not valid JSON",
                status=response.status_code,
            ) from exc

    def get(self, path: str, params: Any = None, **kwargs) -> Any:
        return self.request("GET", path, params=params, **kwargs)

    def post(self, path: str, json: Any = None, **kwargs) -> Any:
        return self.request("POST", path, json=json, **kwargs)

    def put(self, path: str, json: Any = None, **kwargs) -> Any:
        return self.request("PUT", path, json=json, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        return self.request("DELETE", path, **kwargs)

    def close(self):
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class AuthService:
    """POST /users/login; stores the issued token for subsequent calls."""

    def __init__(self, api: ApiClient, token_store: MemoryTokenStore):
        self.api = api
        self.token_store = token_store

    def login(self, username: str, password: str, user_type: str) -> dict:
        body = self.api.post(
            "/users/login",
            json={"username": username, "password": password, "userType": user_type},
            envelope=False,
            error_message="Login failed",
        )
        if not isinstance(body, dict) or not body.get("token"):
            raise MalformedResponse("login response carried no token")
        self.token_store.set_token(body["token"])
        return body.get("user") or {}

    def logout(self) -> None:
        self.token_store.clear()
