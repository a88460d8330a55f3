"""Input parsing and log sanitisation helpers."""

from __future__ import annotations

import re

_REDACTED = "***"

_SENSITIVE_PATTERNS = [
    # user:password@ in URLs
    (re.compile(r"(?P<scheme>[a-zA-Z][a-zA-Z0-9+.-]*://)[^/\s:@]+:[^/\s@]+@"), r"\g<scheme>" + _REDACTED + "@"),
    # Authorization: Basic xxx / Bearer xxx
    (re.compile(r"(?i)(authorization['\"]?\s*[:=]\s*['\"]?)(basic|bearer)\s+[A-Za-z0-9+/=._-]+"), r"\1\2 " + _REDACTED),
    # password=xxx, mirth_password: xxx
    (re.compile(r"(?i)(\w*password['\"]?\s*[:=]\s*['\"]?)[^\s'\",;&]+"), r"\1" + _REDACTED),
]


def sanitize_log_message(message: str) -> str:
    """Redact credentials from a log message."""
    for pattern, replacement in _SENSITIVE_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


def parse_listen_address(address: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address.

    An empty host (``":9141"``) binds all interfaces. IPv6 hosts may be
    bracketed (``"[::1]:9141"``).

    Raises:
        ValueError: The address has no port or the port is out of range.
    """
    host, sep, port_text = address.strip().rpartition(":")
    if not sep:
        raise ValueError(f"Listen address {address!r} must be host:port")
    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"Invalid port in listen address {address!r}") from None
    if not 0 < port < 65536:
        raise ValueError(f"Port out of range in listen address {address!r}")

    host = host.strip("[]") or "0.0.0.0"
    return host, port
