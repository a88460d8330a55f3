"""Metric descriptors exposed by the exporter.

The registry is built once at startup and handed to the collector. It is
immutable, so concurrent scrapes can read it without locking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from mirth_exporter.metrics import assembler
from mirth_exporter.metrics.models import MetricKind

DEFAULT_NAMESPACE = "mirth"

UP = "up"
INFO = "info"
REQUEST_DURATION = "request_duration"


def linear_buckets(start: float, width: float, count: int) -> tuple[float, ...]:
    """Histogram upper bounds ``start, start + width, ...`` (``count`` of them)."""
    if count < 1:
        raise ValueError("count must be at least 1")
    return tuple(round(start + width * i, 10) for i in range(count))


@dataclass(frozen=True)
class MetricDescriptor:
    """Name, help text, type and label schema of one metric."""

    name: str
    help: str
    kind: MetricKind = MetricKind.GAUGE
    label_names: tuple[str, ...] = ()
    buckets: tuple[float, ...] = ()


@dataclass(frozen=True)
class MetricRegistry:
    """Immutable set of metric descriptors under one namespace."""

    namespace: str = DEFAULT_NAMESPACE
    descriptors: tuple[MetricDescriptor, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        names = [d.name for d in self.descriptors]
        duplicates = {n for n in names if names.count(n) > 1}
        if duplicates:
            raise ValueError(f"Duplicate metric descriptors: {sorted(duplicates)}")

    def __iter__(self) -> Iterator[MetricDescriptor]:
        return iter(self.descriptors)

    def get(self, name: str) -> Optional[MetricDescriptor]:
        for descriptor in self.descriptors:
            if descriptor.name == name:
                return descriptor
        return None

    def fqname(self, name: str) -> str:
        """Fully qualified metric name, e.g. ``mirth_channel_status``."""
        return "_".join(part for part in (self.namespace, name) if part)


def default_registry(namespace: str = DEFAULT_NAMESPACE) -> MetricRegistry:
    """Descriptors for every metric the exporter can emit."""
    channel = ("channel",)
    return MetricRegistry(
        namespace=namespace,
        descriptors=(
            MetricDescriptor(UP, "Was the last Mirth query successful."),
            MetricDescriptor(
                assembler.CHANNEL_STATUS,
                "Status of all deployed channels",
                label_names=("channel", "status"),
            ),
            MetricDescriptor(
                assembler.UNDEPLOYED_REVISIONS,
                "How many revisions of the channel are not yet deployed.",
                label_names=channel,
            ),
            MetricDescriptor(
                assembler.MESSAGES_RECEIVED,
                "How many messages have been received (per channel).",
                label_names=channel,
            ),
            MetricDescriptor(
                assembler.MESSAGES_FILTERED,
                "How many messages have been filtered (per channel).",
                label_names=channel,
            ),
            MetricDescriptor(
                assembler.MESSAGES_QUEUED,
                "How many messages are currently queued (per channel).",
                label_names=channel,
            ),
            MetricDescriptor(
                assembler.MESSAGES_SENT,
                "How many messages have been sent (per channel).",
                label_names=channel,
            ),
            MetricDescriptor(
                assembler.MESSAGES_ERRORED,
                "How many messages have errored (per channel).",
                label_names=channel,
            ),
            MetricDescriptor(
                INFO,
                "Version of the Mirth server.",
                label_names=("version",),
            ),
            MetricDescriptor(
                REQUEST_DURATION,
                "Histogram for the runtime of the metric pull from Mirth.",
                kind=MetricKind.HISTOGRAM,
                buckets=linear_buckets(0.1, 0.1, 20),
            ),
        ),
    )
