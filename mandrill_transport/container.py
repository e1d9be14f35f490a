"""Dependency injection container configuration."""

from collections.abc import Iterator

import httpx
from dependency_injector import containers, providers

from mandrill_transport.external.mandrill import MandrillApiTransport
from mandrill_transport.infrastructure.config import get_settings
from mandrill_transport.infrastructure.events import EventDispatcher
from mandrill_transport.infrastructure.logging.config import get_logger


def init_http_client(timeout: float) -> Iterator[httpx.Client]:
    """Yield the shared HTTP client and close it on ``shutdown_resources()``."""
    client = httpx.Client(timeout=timeout)
    try:
        yield client
    finally:
        client.close()


class Container(containers.DeclarativeContainer):
    """Transport dependency injection container.

    The HTTP client is a resource: call ``container.shutdown_resources()``
    when the host application stops to release its connections.
    """

    # Configuration
    config = providers.Singleton(get_settings)

    # Infrastructure
    http_client = providers.Resource(
        init_http_client,
        timeout=config.provided.http_timeout,
    )
    event_dispatcher = providers.Singleton(EventDispatcher)
    logger = providers.Callable(get_logger, "mandrill_transport")

    # External Services
    mailer_transport = providers.Singleton(
        MandrillApiTransport,
        key=config.provided.mandrill_api_key,
        client=http_client,
        dispatcher=event_dispatcher,
        logger=logger,
    )
