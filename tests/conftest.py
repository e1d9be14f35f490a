"""Global test configuration and fixtures.

Fixture Scoping Strategy:
- function: HTTP handlers, clients, transports (need fresh state per test)

HTTP traffic never leaves the process: every client is built on
``httpx.MockTransport`` with a recording handler, so tests can assert on the
exact request that would have been sent to Mandrill.
"""

import json
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest
from hypothesis import HealthCheck, settings

from mandrill_transport.external.mandrill import MandrillApiTransport
from mandrill_transport.infrastructure.config import get_settings
from mandrill_transport.infrastructure.events import EventDispatcher


TEST_API_KEY = "test_mandrill_key_12345"

# The autouse settings-cache fixture is safe to share across generated examples
settings.register_profile("mandrill", suppress_health_check=[HealthCheck.function_scoped_fixture])
settings.load_profile("mandrill")


class RecordingHandler:
    """MockTransport handler that records requests and replays one outcome.

    A fresh ``httpx.Response`` is built for every request so the same handler
    can serve any number of sends.
    """

    def __init__(
        self,
        status_code: int = 200,
        json_body: Any = None,
        content: bytes | None = None,
        error: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        self.json_body = json_body
        self.content = content
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_payload(self) -> dict[str, Any]:
        """Decoded JSON body of the last request."""
        return json.loads(self.last_request.content)


# ============================================================================
# Function-Scoped Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None]:
    """Reset the cached Settings so env changes made by a test stay local."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def handler() -> RecordingHandler:
    """Handler answering 200 with a typical Mandrill success body."""
    return RecordingHandler(
        status_code=200,
        json_body=[{"email": "recipient@example.com", "status": "sent", "_id": "abc123"}],
    )


@pytest.fixture
def make_client() -> Generator[Callable[[RecordingHandler], httpx.Client]]:
    """Factory for httpx clients backed by a recording handler.

    Clients are closed after the test.
    """
    clients: list[httpx.Client] = []

    def _make(recording_handler: RecordingHandler) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(recording_handler))
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def mock_logger() -> MagicMock:
    """Stand-in for a structlog logger."""
    return MagicMock()


@pytest.fixture
def dispatcher() -> EventDispatcher:
    return EventDispatcher()


@pytest.fixture
def transport(
    handler: RecordingHandler,
    make_client: Callable[[RecordingHandler], httpx.Client],
    dispatcher: EventDispatcher,
    mock_logger: MagicMock,
) -> MandrillApiTransport:
    """Mandrill transport wired to the default recording handler."""
    return MandrillApiTransport(
        TEST_API_KEY,
        client=make_client(handler),
        dispatcher=dispatcher,
        logger=mock_logger,
    )
