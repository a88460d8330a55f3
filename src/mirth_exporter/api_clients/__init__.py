"""API client integrations."""

from .mirth_client import (
    CHANNEL_STATISTICS_API,
    CHANNEL_STATUSES_API,
    SERVER_VERSION_API,
    MirthClient,
)

__all__ = [
    "MirthClient",
    "CHANNEL_STATUSES_API",
    "CHANNEL_STATISTICS_API",
    "SERVER_VERSION_API",
]
