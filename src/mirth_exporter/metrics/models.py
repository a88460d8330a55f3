"""Records produced by one collection cycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class MetricKind(str, Enum):
    """Prometheus metric type of an observation."""

    GAUGE = "gauge"
    COUNTER = "counter"
    UNTYPED = "untyped"
    HISTOGRAM = "histogram"


@dataclass
class StatisticsEntry:
    """One ``<entry>`` of a dashboard status statistics map."""

    status: str
    count: float = 0.0


@dataclass
class ChannelStatus:
    """A ``<dashboardStatus>`` record from ``/api/channels/statuses``.

    ``state`` is kept verbatim; the engine may report values beyond
    STARTED/STOPPED/PAUSED/UNKNOWN.
    """

    channel_id: str
    name: str
    state: str
    deployed_revision_delta: float = 0.0
    current_statistics: list[StatisticsEntry] = field(default_factory=list)
    lifetime_statistics: list[StatisticsEntry] = field(default_factory=list)


@dataclass
class ChannelStatistics:
    """A ``<channelStatistics>`` record from ``/api/channels/statistics``."""

    channel_id: str
    server_id: str = ""
    received: float = 0.0
    sent: float = 0.0
    error: float = 0.0
    filtered: float = 0.0
    queued: float = 0.0


@dataclass
class Observation:
    """A single metric sample ready for exposition.

    ``kind`` is what the assembler meant to emit. The exposed metric type
    comes from the matching registry descriptor, so every sample of one
    family shares a type.
    """

    metric_name: str
    value: float
    labels: dict[str, str] = field(default_factory=dict)
    kind: MetricKind = MetricKind.GAUGE


@dataclass
class CollectionResult:
    """Outcome of one scrape-triggered collection cycle."""

    available: bool
    observations: list[Observation] = field(default_factory=list)
    version_label: str = ""
    duration_seconds: float = 0.0

    @classmethod
    def failed(cls, duration_seconds: float = 0.0) -> CollectionResult:
        return cls(available=False, duration_seconds=duration_seconds)
