"""Base class for transports that talk to an HTTP API.

Owns the collaborators every API transport needs (HTTP client, event
dispatcher, logger) and the send lifecycle around the provider call:
envelope resolution, the pre-send event, and logging of the outcome.
"""

from abc import abstractmethod
from types import TracebackType
from typing import Any

import httpx

from mandrill_transport.domain.models import Envelope, Message, SentMessage
from mandrill_transport.external.interfaces import ITransport
from mandrill_transport.infrastructure.config import get_settings
from mandrill_transport.infrastructure.events import EventDispatcher, MessageEvent
from mandrill_transport.infrastructure.logging.config import get_logger


class AbstractApiTransport(ITransport):
    """Send lifecycle shared by HTTP API transports.

    Subclasses implement :meth:`_do_send_api`, which receives a resolved
    envelope and performs exactly one request.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        dispatcher: EventDispatcher | None = None,
        logger: Any | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            client: HTTP client; a client with the configured timeout is
                created (and owned) when omitted
            dispatcher: Event dispatcher; a fresh one when omitted
            logger: Structured logger; the module logger when omitted
        """
        self._owns_client = client is None
        self.client = client if client is not None else self._create_client()
        self.dispatcher = dispatcher if dispatcher is not None else EventDispatcher()
        self.logger = logger if logger is not None else get_logger(__name__)

    @staticmethod
    def _create_client() -> httpx.Client:
        return httpx.Client(timeout=get_settings().http_timeout)

    def send(self, message: Message, envelope: Envelope | None = None) -> SentMessage:
        """Send a message through the provider API.

        Args:
            message: Message to deliver
            envelope: Sender and recipients; derived from the message when omitted

        Returns:
            SentMessage describing the accepted message

        Raises:
            LogicError: If no envelope was given and none can be derived
            TransportException: If the provider call failed
        """
        if envelope is None:
            envelope = Envelope.from_message(message)

        event = self.dispatcher.dispatch(MessageEvent(message, envelope))
        envelope = event.envelope

        self.logger.debug(
            "email_sending",
            transport=str(self),
            recipients=len(envelope.recipients),
            attachments=len(message.attachments),
        )

        try:
            sent = self._do_send_api(message, envelope)
        except Exception as e:
            self.logger.error(
                "email_send_failed",
                transport=str(self),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        self.logger.info(
            "email_sent",
            transport=str(self),
            recipients=len(envelope.recipients),
            message_ids=sent.message_ids,
        )
        return sent

    @abstractmethod
    def _do_send_api(self, message: Message, envelope: Envelope) -> SentMessage:
        """Perform the provider request for a resolved envelope."""

    def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "AbstractApiTransport":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
