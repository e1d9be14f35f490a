"""External service interface definitions.

This module defines the abstract transport interface, keeping callers
provider-agnostic and making it easy to swap in test doubles.
"""

from abc import ABC, abstractmethod

from mandrill_transport.domain.models import Envelope, Message, SentMessage


class ITransport(ABC):
    """Abstract interface for outbound email transports.

    Defines the contract for handing an already-assembled message to a
    delivery provider (Mandrill, SMTP relay, etc.).
    """

    @abstractmethod
    def send(self, message: Message, envelope: Envelope | None = None) -> SentMessage:
        """Send a message.

        Args:
            message: Message to deliver
            envelope: Sender and recipients to deliver to; derived from the
                message headers when omitted

        Returns:
            Outcome of the send

        Raises:
            TransportException: If the provider rejected the message or
                could not be reached
        """

    @abstractmethod
    def close(self) -> None:
        """Release resources held by the transport."""
