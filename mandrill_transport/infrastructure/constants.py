"""Provider constants and limits."""


class MandrillApi:
    """Mandrill HTTP API endpoints and wire-format constants."""

    ENDPOINT = "https://mandrillapp.com/api/1.0/messages/send.json"
    HOST = "mandrillapp.com"
    SCHEME = "mandrill+api"

    # Headers Mandrill builds itself from the payload fields
    BYPASSED_HEADERS = frozenset({"from", "to", "cc", "bcc", "subject", "content-type"})

    ERROR_STATUS = "error"


class RecipientType:
    """Recipient roles understood by the ``message.to`` payload field."""

    TO = "to"
    CC = "cc"
    BCC = "bcc"


class HttpDefaults:
    """Default HTTP client settings."""

    DEFAULT_TIMEOUT = 10.0  # Seconds, applied to connect/read/write/pool
    SUCCESS_STATUS = 200  # Mandrill answers 200 for accepted messages, nothing else counts
