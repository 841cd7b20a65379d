# Roo Client Test Suite - Shared Configuration and Fixtures
#
# This module provides:
# - An in-process fake backend (Flask app mounted through httpx.WSGITransport)
# - Client fixtures wired to the fake backend or to an httpx.MockTransport
# - Failure message formatting
# - Custom marker registration

import json
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import httpx
import pytest

from roo_client import RooClient, create_client
from roo_client.services.api_client import StaticTokenStore, TokenStore
from tests.fake_backend import FakeBackend, create_fake_backend


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class TestConfig:
    """Test configuration with environment variable overrides."""
    # Host is never resolved: requests go through the WSGI transport
    base_url: str = os.environ.get("TEST_BACKEND_URL", "http://testserver/api")

    # Token issued by the fake login endpoint for "driver1"
    token: str = "tok-driver1"
    password: str = "Password123!"

    # Timing for debounce / concurrency tests
    debounce_seconds: float = float(os.environ.get("TEST_DEBOUNCE_SECONDS", "0.05"))
    wait_timeout: float = float(os.environ.get("TEST_WAIT_TIMEOUT", "5"))


CONFIG = TestConfig()


# =============================================================================
# FAILURE MESSAGE HELPER
# =============================================================================

class TestFailure(Exception):
    """
    Custom exception with detailed, human-readable failure messages.

    Structure:
    1. Scenario: What was being tested
    2. Expected: What should have happened
    3. Actual: What actually happened
    4. Likely Cause: Most probable reason for failure
    5. Code Location: Where to look in the codebase
    """

    __test__ = False

    def __init__(
        self,
        scenario: str,
        expected: str,
        actual: str,
        likely_cause: str,
        code_location: str,
        extra_context: Optional[Dict[str, Any]] = None
    ):
        self.scenario = scenario
        self.expected = expected
        self.actual = actual
        self.likely_cause = likely_cause
        self.code_location = code_location
        self.extra_context = extra_context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        lines = [
            "",
            "=" * 80,
            "TEST FAILURE DETAILS",
            "=" * 80,
            f"SCENARIO: {self.scenario}",
            "-" * 80,
            f"EXPECTED: {self.expected}",
            f"ACTUAL: {self.actual}",
            "-" * 80,
            f"LIKELY CAUSE: {self.likely_cause}",
            f"CODE LOCATION: {self.code_location}",
        ]
        if self.extra_context:
            lines.append("-" * 80)
            lines.append("EXTRA CONTEXT:")
            for key, value in self.extra_context.items():
                lines.append(f"  {key}: {value}")
        lines.append("=" * 80)
        return "\n".join(lines)


def assert_last_request(
    backend: FakeBackend,
    method: str,
    path: str,
    scenario: str,
    code_location: str,
    query_string: Optional[str] = None,
):
    """
    Assert on the most recent request the fake backend received.
    Raises TestFailure with detailed message on mismatch.
    """
    if not backend.requests:
        raise TestFailure(
            scenario=scenario,
            expected=f"{method} {path}",
            actual="no request reached the backend",
            likely_cause="Service method short-circuited or raised before sending",
            code_location=code_location,
        )

    last = backend.last
    if (last.method, last.path) != (method, path):
        raise TestFailure(
            scenario=scenario,
            expected=f"{method} {path}",
            actual=f"{last.method} {last.path}",
            likely_cause="Wrong endpoint path or HTTP verb in the service method",
            code_location=code_location,
        )

    if query_string is not None and last.query_string != query_string:
        raise TestFailure(
            scenario=scenario,
            expected=f"query string {query_string!r}",
            actual=f"query string {last.query_string!r}",
            likely_cause="Query builder emitted a default value or changed key order",
            code_location=code_location,
        )


# =============================================================================
# MOCK TRANSPORT HELPERS
# =============================================================================

def json_response(status: int, body: Any) -> httpx.Response:
    return httpx.Response(status, content=json.dumps(body).encode(), headers={"Content-Type": "application/json"})


def mock_client(
    handler: Callable[[httpx.Request], httpx.Response],
    token_store: Optional[TokenStore] = None,
) -> RooClient:
    """Client whose every request is answered by `handler`."""
    return create_client(
        token_store=token_store,
        transport=httpx.MockTransport(handler),
        base_url=CONFIG.base_url,
    )


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def test_config() -> TestConfig:
    return CONFIG


@pytest.fixture
def backend() -> FakeBackend:
    """Fresh fake backend per test; writes never leak between tests."""
    return create_fake_backend()


@pytest.fixture
def client(backend: FakeBackend):
    """Authenticated client talking to the fake backend."""
    roo = create_client(
        token_store=StaticTokenStore(CONFIG.token),
        transport=httpx.WSGITransport(app=backend.app),
        base_url=CONFIG.base_url,
    )
    yield roo
    roo.close()


@pytest.fixture
def anonymous_client(backend: FakeBackend):
    """Client without a token."""
    roo = create_client(
        transport=httpx.WSGITransport(app=backend.app),
        base_url=CONFIG.base_url,
    )
    yield roo
    roo.close()


# =============================================================================
# PYTEST HOOKS
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "smoke: Quick smoke tests for critical paths")
    config.addinivalue_line("markers", "auth: Authentication and token handling tests")
    config.addinivalue_line("markers", "transport: HTTP facade and error mapping tests")
    config.addinivalue_line("markers", "products: Product catalogue tests")
    config.addinivalue_line("markers", "inventory: Inventory and batch tests")
    config.addinivalue_line("markers", "drivers: Lorry driver tests")
    config.addinivalue_line("markers", "normalize: Payload normalization tests")
    config.addinivalue_line("markers", "query: Query string construction tests")
    config.addinivalue_line("markers", "filters: Client-side filtering tests")
    config.addinivalue_line("markers", "status: Stock and expiry classification tests")
    config.addinivalue_line("markers", "concurrent: Concurrency tests")
    config.addinivalue_line("markers", "cli: Command line tests")
