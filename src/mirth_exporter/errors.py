"""Exception hierarchy for the Mirth exporter.

Every failure of a collection cycle is one of these. They are caught at the
collector boundary and turned into ``mirth_up = 0`` plus a log line.
"""

from __future__ import annotations

from typing import Any, Optional


class MirthExporterError(Exception):
    """Base exception for the exporter."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        extra = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({extra})"


class TransportError(MirthExporterError):
    """The request could not be built, sent, or its body fully read."""

    def __init__(self, message: str, path: str = "", **details: Any):
        super().__init__(message, {"path": path, **details} if path else details)
        self.path = path


class DecodeError(MirthExporterError):
    """A response body is not the expected XML document."""

    def __init__(self, message: str, path: str = "", **details: Any):
        super().__init__(message, {"path": path, **details} if path else details)
        self.path = path
