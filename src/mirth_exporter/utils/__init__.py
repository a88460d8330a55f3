"""Exporter utility modules."""

from mirth_exporter.utils.validation import parse_listen_address, sanitize_log_message

__all__ = [
    "parse_listen_address",
    "sanitize_log_message",
]
