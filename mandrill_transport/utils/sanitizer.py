"""Redaction of secrets in log events.

Mandrill authenticates with a ``key`` field inside the JSON body, so a body or
settings object bound to a logger would leak the API key. The structlog
pipeline runs every event through :func:`sanitize_dict` before rendering.
"""

from typing import Any


REDACTED = "***REDACTED***"

# Substrings that mark a key as sensitive, compared after normalization
SENSITIVE_PATTERNS = {
    "password",
    "secret",
    "api_key",
    "apikey",
    "token",
    "authorization",
    "auth",
    "credentials",
    "x-api-key",
    "mandrill_key",
    "http.request.body",
    "http.response.body",
    "payload",
}

# Too short to match as substrings ("keyword", "monkey"), so matched exactly
EXACT_SENSITIVE_KEYS = {"key"}


def _normalize(key: str) -> str:
    return key.lower().replace("-", "_").replace(".", "_").replace(" ", "_")


def is_sensitive_key(key: str, patterns: set[str] | None = None) -> bool:
    """Check whether a key names a secret.

    Args:
        key: Key to check; case and ``-``/``.``/space separators are ignored
        patterns: Substring patterns to use instead of SENSITIVE_PATTERNS

    Returns:
        True if the key must be redacted

    Example:
        >>> is_sensitive_key("API-Key")
        True
        >>> is_sensitive_key("key")
        True
        >>> is_sensitive_key("recipients")
        False
    """
    normalized = _normalize(key)
    if normalized in EXACT_SENSITIVE_KEYS:
        return True
    return any(_normalize(pattern) in normalized for pattern in patterns or SENSITIVE_PATTERNS)


def sanitize_value(key: str, value: Any, patterns: set[str] | None = None) -> Any:
    """Return REDACTED for a sensitive key, the value otherwise.

    Example:
        >>> sanitize_value("authorization", "Bearer abc")
        '***REDACTED***'
    """
    return REDACTED if is_sensitive_key(key, patterns) else value


def _sanitize_item(item: Any, patterns: set[str] | None) -> Any:
    if isinstance(item, dict):
        return sanitize_dict(item, patterns, recursive=True)
    if isinstance(item, list):
        return [_sanitize_item(element, patterns) for element in item]
    if isinstance(item, tuple):
        return tuple(_sanitize_item(element, patterns) for element in item)
    return item


def sanitize_dict(
    data: dict[str, Any],
    patterns: set[str] | None = None,
    recursive: bool = True,
) -> dict[str, Any]:
    """Copy a dictionary with sensitive values redacted.

    Args:
        data: Dictionary to sanitize; left unmodified
        patterns: Substring patterns to use instead of SENSITIVE_PATTERNS
        recursive: Also descend into nested dicts, lists and tuples

    Returns:
        New dictionary

    Example:
        >>> sanitize_dict({"key": "md-123", "subject": "Hi"})
        {'key': '***REDACTED***', 'subject': 'Hi'}
    """
    sanitized: dict[str, Any] = {}
    for key, value in data.items():
        if is_sensitive_key(key, patterns):
            sanitized[key] = REDACTED
        elif recursive:
            sanitized[key] = _sanitize_item(value, patterns)
        else:
            sanitized[key] = value
    return sanitized
