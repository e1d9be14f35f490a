"""Email message model consumed by transports.

This module defines immutable Pydantic models for an already-assembled email:
addresses, headers, attachments, the message itself and the delivery envelope.
Transports never mutate these objects; each send works on a snapshot.
"""

import base64
import mimetypes
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from mandrill_transport.domain.exceptions import LogicError


# "Display Name <user@example.com>", display name optionally quoted
_NAMED_ADDRESS_RE = re.compile(r"^\s*(?P<name>.*?)\s*<(?P<address>[^<>]+)>\s*$")


class Address(BaseModel):
    """Plain email address without a display name.

    Addresses compare by value. Recipient classification only ever looks at
    ``address``, so a plain and a named address with the same email match.
    """

    model_config = ConfigDict(frozen=True)

    address: EmailStr = Field(..., description="Email address (must be valid email format)")

    @field_validator("address", mode="before")
    @classmethod
    def reject_display_form(cls, v: Any) -> Any:
        """Refuse "Name <email>" so the display name is never dropped silently."""
        if isinstance(v, str) and ("<" in v or ">" in v):
            raise ValueError(f"Use Address.create() to parse a display-name address: {v!r}")
        return v

    @property
    def has_name(self) -> bool:
        """Whether this address carries a display name."""
        return False

    @classmethod
    def create(cls, value: "str | Address") -> "Address":
        """Build an address from a string or return an existing one.

        Args:
            value: ``"user@example.com"``, ``"Name <user@example.com>"`` or an Address

        Returns:
            Address, or NamedAddress when a display name is present

        Example:
            >>> Address.create("Alice <alice@example.com>").name
            'Alice'
            >>> Address.create("bob@example.com").has_name
            False
        """
        if isinstance(value, Address):
            return value

        match = _NAMED_ADDRESS_RE.match(value)
        if match:
            name = match.group("name").strip().strip('"')
            address = match.group("address").strip()
            if name:
                return NamedAddress(address=address, name=name)
            return Address(address=address)
        return Address(address=value.strip())

    @classmethod
    def create_many(cls, values: Any) -> tuple["Address", ...]:
        """Coerce a single value or an iterable of values into addresses."""
        if values is None:
            return ()
        if isinstance(values, (str, Address)):
            values = [values]
        return tuple(cls.create(value) for value in values)

    def __str__(self) -> str:
        return self.address


class NamedAddress(Address):
    """Email address paired with a human-readable display name."""

    name: str = Field(..., description="Display name shown by mail clients")

    @property
    def has_name(self) -> bool:
        """Whether this address carries a display name."""
        return True

    def __str__(self) -> str:
        return f"{self.name} <{self.address}>"


class Header(BaseModel):
    """Single custom header line. Names keep the case they were given."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    value: str = ""

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject header names that would break the header line."""
        if ":" in v or any(ord(c) < 33 or ord(c) > 126 for c in v):
            raise ValueError(f"Invalid header name: {v!r}")
        return v

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: str) -> str:
        """Reject line breaks, which would inject extra header lines."""
        if "\r" in v or "\n" in v:
            raise ValueError(f"Invalid header value: {v!r}")
        return v

    def __str__(self) -> str:
        return f"{self.name}: {self.value}"


class Attachment(BaseModel):
    """File attached to a message, either downloadable or rendered inline."""

    model_config = ConfigDict(frozen=True)

    content: bytes = Field(..., repr=False)
    content_type: str = "application/octet-stream"
    filename: str | None = None
    disposition: Literal["attachment", "inline"] = "attachment"

    @property
    def is_inline(self) -> bool:
        """Whether the attachment is meant to be embedded in the body."""
        return self.disposition == "inline"

    @property
    def encoded_content(self) -> str:
        """Return the content as base64 text."""
        return base64.b64encode(self.content).decode("ascii")

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        content_type: str | None = None,
        inline: bool = False,
        filename: str | None = None,
    ) -> "Attachment":
        """Read an attachment from disk.

        Args:
            path: File to read
            content_type: Declared type; guessed from the file extension when omitted
            inline: Embed the file instead of offering it as a download
            filename: Name to expose; defaults to the file's base name

        Returns:
            Attachment holding the file's bytes
        """
        path = Path(path)
        if content_type is None:
            content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(
            content=path.read_bytes(),
            content_type=content_type,
            filename=filename or path.name,
            disposition="inline" if inline else "attachment",
        )


class Message(BaseModel):
    """Already-assembled email message.

    Address lists accept strings (``"Name <user@example.com>"``) as well as
    Address instances. Everything is stored as tuples so the message stays
    immutable for the duration of a send.
    """

    model_config = ConfigDict(frozen=True)

    subject: str = ""
    html: str | None = None
    text: str | None = None
    from_: tuple[Address, ...] = ()
    sender: Address | None = None
    to: tuple[Address, ...] = ()
    cc: tuple[Address, ...] = ()
    bcc: tuple[Address, ...] = ()
    headers: tuple[Header, ...] = ()
    attachments: tuple[Attachment, ...] = ()

    @field_validator("from_", "to", "cc", "bcc", mode="before")
    @classmethod
    def _coerce_addresses(cls, v: Any) -> tuple[Address, ...]:
        """Coerce strings and single addresses into a tuple of addresses."""
        return Address.create_many(v)

    @field_validator("sender", mode="before")
    @classmethod
    def _coerce_sender(cls, v: Any) -> Address | None:
        if v is None:
            return None
        return Address.create(v)

    @field_validator("headers", mode="before")
    @classmethod
    def _coerce_headers(cls, v: Any) -> Any:
        """Accept ``(name, value)`` pairs next to Header instances."""
        if v is None:
            return ()
        return tuple(
            Header(name=item[0], value=str(item[1])) if isinstance(item, tuple) else item
            for item in v
        )


class Envelope(BaseModel):
    """Resolved sender and recipients used for delivery.

    The envelope is distinct from the message's display headers: a message
    can list someone in ``bcc`` who must never show up in ``to``.
    """

    model_config = ConfigDict(frozen=True)

    sender: Address
    recipients: tuple[Address, ...]

    @field_validator("sender", mode="before")
    @classmethod
    def _coerce_sender(cls, v: Any) -> Any:
        return Address.create(v) if isinstance(v, str) else v

    @field_validator("recipients", mode="before")
    @classmethod
    def _coerce_recipients(cls, v: Any) -> tuple[Address, ...]:
        return Address.create_many(v)

    @field_validator("recipients")
    @classmethod
    def validate_recipients(cls, v: tuple[Address, ...]) -> tuple[Address, ...]:
        """An envelope must have at least one recipient."""
        if not v:
            raise ValueError("An envelope must have at least one recipient.")
        return v

    @classmethod
    def from_message(cls, message: Message) -> "Envelope":
        """Derive the envelope from a message's own headers.

        The sender is the ``sender`` address when set, otherwise the first
        ``from`` address. Recipients are to, cc and bcc in that order.

        Args:
            message: Message to derive the envelope from

        Returns:
            Envelope for the message

        Raises:
            LogicError: If the message has no sender or no recipients
        """
        sender = message.sender or (message.from_[0] if message.from_ else None)
        if sender is None:
            raise LogicError("Unable to determine the sender of the message.")

        recipients = message.to + message.cc + message.bcc
        if not recipients:
            raise LogicError('An email must have a "To", "Cc", or "Bcc" header.')

        return cls(sender=sender, recipients=recipients)


class SentMessage(BaseModel):
    """Outcome of a successful send.

    ``results`` holds the provider's per-recipient status objects when the
    success response could be parsed, and is empty otherwise.
    """

    model_config = ConfigDict(frozen=True)

    message: Message
    envelope: Envelope
    results: tuple[dict[str, Any], ...] = ()

    @property
    def message_ids(self) -> list[str]:
        """Provider message IDs, one per accepted recipient."""
        return [result["_id"] for result in self.results if "_id" in result]
