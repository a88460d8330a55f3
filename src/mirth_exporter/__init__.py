"""Mirth Channel Exporter - Prometheus metrics for Mirth Connect channels."""

__version__ = "0.2.0"

from .config import Settings, get_settings
from .errors import DecodeError, MirthExporterError, TransportError
from .api_clients import MirthClient
from .metrics import (
    CollectionResult,
    MirthCollector,
    Observation,
    assemble,
    default_registry,
)

__all__ = [
    "Settings",
    "get_settings",
    "MirthExporterError",
    "TransportError",
    "DecodeError",
    "MirthClient",
    "MirthCollector",
    "CollectionResult",
    "Observation",
    "assemble",
    "default_registry",
]
