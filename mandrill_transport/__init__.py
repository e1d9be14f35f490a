"""Mandrill transactional-email API transport."""

from mandrill_transport.domain.exceptions import (
    InvalidArgumentError,
    LogicError,
    MailerException,
    TransportException,
)
from mandrill_transport.domain.models import (
    Address,
    Attachment,
    Envelope,
    Header,
    Message,
    NamedAddress,
    SentMessage,
)
from mandrill_transport.external.mandrill import MandrillApiTransport
from mandrill_transport.infrastructure.events import EventDispatcher, MessageEvent


__version__ = "0.1.0"

__all__ = [
    "Address",
    "Attachment",
    "Envelope",
    "EventDispatcher",
    "Header",
    "InvalidArgumentError",
    "LogicError",
    "MailerException",
    "MandrillApiTransport",
    "Message",
    "MessageEvent",
    "NamedAddress",
    "SentMessage",
    "TransportException",
]
