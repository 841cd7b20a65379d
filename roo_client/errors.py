# roo_client/errors.py
from __future__ import annotations

from typing import Optional


class RooClientError(Exception):
    """Base class for everything the client raises on purpose."""


class MalformedResponse(RooClientError, ValueError):
    """A response payload could not be normalized into a domain record."""


class ApiError(RooClientError):
    """The server answered, but rejected the request (HTTP >= 400)."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"HTTP {status}: {message}")


class TransportError(RooClientError):
    """
    No usable response was obtained: network failure, timeout raised by the
    transport, or a body that is not valid JSON.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)
