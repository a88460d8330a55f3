"""Metrics collection and assembly.

Fetches channel statuses and statistics from Mirth, correlates them by
channel id and exposes the result as Prometheus metric families.
"""

from .models import (
    ChannelStatistics,
    ChannelStatus,
    CollectionResult,
    MetricKind,
    Observation,
    StatisticsEntry,
)
from .decoder import (
    decode_channel_statistics,
    decode_channel_statuses,
    decode_version,
)
from .assembler import STATUS_METRICS, assemble, pick_metric
from .registry import (
    MetricDescriptor,
    MetricRegistry,
    default_registry,
    linear_buckets,
)
from .collector import VERSION_ERROR, MirthCollector

__all__ = [
    # Models
    "ChannelStatistics",
    "ChannelStatus",
    "CollectionResult",
    "MetricKind",
    "Observation",
    "StatisticsEntry",
    # Decoding
    "decode_channel_statistics",
    "decode_channel_statuses",
    "decode_version",
    # Correlation
    "STATUS_METRICS",
    "assemble",
    "pick_metric",
    # Registry
    "MetricDescriptor",
    "MetricRegistry",
    "default_registry",
    "linear_buckets",
    # Collector
    "VERSION_ERROR",
    "MirthCollector",
]
