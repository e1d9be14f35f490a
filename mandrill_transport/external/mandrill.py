"""Mandrill transactional-email API transport.

Translates a :class:`~mandrill_transport.domain.models.Message` into the JSON
body expected by ``messages/send.json``, performs a single POST and maps the
API's error shape onto :class:`TransportException`.
"""

from typing import Any, cast

import httpx

from mandrill_transport.domain.exceptions import InvalidArgumentError, TransportException
from mandrill_transport.domain.models import Envelope, Message, NamedAddress, SentMessage
from mandrill_transport.external.base_transport import AbstractApiTransport
from mandrill_transport.infrastructure.constants import HttpDefaults, MandrillApi, RecipientType
from mandrill_transport.infrastructure.events import EventDispatcher


class MandrillApiTransport(AbstractApiTransport):
    """Sends messages through the Mandrill HTTP API.

    The transport holds no per-send state: the same instance can be reused
    for any number of sends, sharing the HTTP client's connection pool.

    Example:
        >>> transport = MandrillApiTransport("md-api-key")  # doctest: +SKIP
        >>> transport.send(message)  # doctest: +SKIP
    """

    def __init__(
        self,
        key: str,
        client: httpx.Client | None = None,
        dispatcher: EventDispatcher | None = None,
        logger: Any | None = None,
    ) -> None:
        """Initialize Mandrill transport.

        Args:
            key: Mandrill API key
            client: HTTP client (see AbstractApiTransport)
            dispatcher: Event dispatcher (see AbstractApiTransport)
            logger: Structured logger (see AbstractApiTransport)

        Raises:
            InvalidArgumentError: If the API key is empty
        """
        if not key or not key.strip():
            raise InvalidArgumentError("A Mandrill API key is required.")
        self._key = key

        super().__init__(client=client, dispatcher=dispatcher, logger=logger)

    def __str__(self) -> str:
        return f"{MandrillApi.SCHEME}://{MandrillApi.HOST}"

    def _do_send_api(self, message: Message, envelope: Envelope) -> SentMessage:
        """POST the payload and check the outcome.

        Raises:
            TransportException: On any status other than 200, or when the
                request could not be completed
        """
        try:
            response = self.client.post(
                MandrillApi.ENDPOINT,
                json=self.get_payload(message, envelope),
            )
        except httpx.HTTPError as e:
            raise TransportException(
                f"Could not reach the remote Mandrill server: {e}",
                details={"error_type": type(e).__name__},
            ) from e

        result = self._parse_body(response)

        if response.status_code != HttpDefaults.SUCCESS_STATUS:
            error = result if isinstance(result, dict) else {}
            details = {"status_code": response.status_code, "response": error}
            if error.get("status") == MandrillApi.ERROR_STATUS:
                raise TransportException(
                    "Unable to send an email: {} (code {}).".format(
                        _format_field(error.get("message")), _format_field(error.get("code"))
                    ),
                    details=details,
                    status_code=response.status_code,
                )

            raise TransportException(
                f"Unable to send an email (code {_format_field(error.get('code'))}).",
                details=details,
                status_code=response.status_code,
            )

        results: tuple[dict[str, Any], ...] = ()
        if isinstance(result, list):
            results = tuple(item for item in result if isinstance(item, dict))
        return SentMessage(message=message, envelope=envelope, results=results)

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        """Decode the response body as JSON, or None if it cannot be decoded."""
        try:
            return response.json()
        except (ValueError, RecursionError):
            return None

    def get_payload(self, message: Message, envelope: Envelope) -> dict[str, Any]:
        """Build the ``messages/send.json`` request body.

        Args:
            message: Message to send
            envelope: Resolved sender and recipients

        Returns:
            JSON-serializable payload, including the API key
        """
        payload: dict[str, Any] = {
            "key": self._key,
            "message": {
                "html": message.html,
                "text": message.text,
                "subject": message.subject,
                "from_email": envelope.sender.address,
                "to": self.get_recipients(message, envelope),
            },
        }
        body = payload["message"]

        if envelope.sender.has_name:
            body["from_name"] = cast(NamedAddress, envelope.sender).name

        for attachment in message.attachments:
            record = {
                "content": attachment.encoded_content,
                "type": attachment.content_type,
            }
            if attachment.filename:
                record["name"] = attachment.filename

            if attachment.is_inline:
                body.setdefault("images", []).append(record)
            else:
                body.setdefault("attachments", []).append(record)

        for header in message.headers:
            if header.name.lower() in MandrillApi.BYPASSED_HEADERS:
                continue
            body.setdefault("headers", []).append(f"{header.name}: {header.value}")

        return payload

    def get_recipients(self, message: Message, envelope: Envelope) -> list[dict[str, str]]:
        """Tag each envelope recipient with its role.

        Addresses listed in the message's bcc are ``bcc``, otherwise those in
        its cc are ``cc``, everyone else is ``to``. An address in both bcc
        and cc is ``bcc``. Only addresses are compared, never display names.
        """
        bcc = {address.address for address in message.bcc}
        cc = {address.address for address in message.cc}

        recipients = []
        for recipient in envelope.recipients:
            recipient_type = RecipientType.TO
            if recipient.address in bcc:
                recipient_type = RecipientType.BCC
            elif recipient.address in cc:
                recipient_type = RecipientType.CC

            entry = {"email": recipient.address, "type": recipient_type}
            if recipient.has_name:
                entry["name"] = cast(NamedAddress, recipient).name
            recipients.append(entry)

        return recipients


def _format_field(value: Any) -> str:
    # Missing fields render as empty text in error messages
    return "" if value is None else str(value)
