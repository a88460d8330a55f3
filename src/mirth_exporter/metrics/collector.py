"""Scrape-driven collection of Mirth channel metrics.

Every call to :meth:`MirthCollector.collect` performs one full cycle against
the Mirth API. There is no background polling and no retry. Status and
statistics are both required; if either cannot be fetched or decoded the
cycle fails and only ``mirth_up 0`` is exposed. The server version is best
effort and degrades to the label ``"error"``.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, Iterator, Optional, Protocol, TypeVar

from prometheus_client import Histogram
from prometheus_client.core import (
    CounterMetricFamily,
    GaugeMetricFamily,
    UnknownMetricFamily,
)
from prometheus_client.metrics_core import Metric
from prometheus_client.registry import Collector

from mirth_exporter.api_clients.mirth_client import (
    CHANNEL_STATISTICS_API,
    CHANNEL_STATUSES_API,
    SERVER_VERSION_API,
)
from mirth_exporter.errors import DecodeError, MirthExporterError, TransportError
from mirth_exporter.metrics.assembler import assemble
from mirth_exporter.metrics.decoder import (
    decode_channel_statistics,
    decode_channel_statuses,
    decode_version,
)
from mirth_exporter.metrics.models import CollectionResult, MetricKind, Observation
from mirth_exporter.metrics.registry import (
    INFO,
    REQUEST_DURATION,
    UP,
    MetricDescriptor,
    MetricRegistry,
    default_registry,
)

logger = logging.getLogger(__name__)

VERSION_ERROR = "error"

T = TypeVar("T")


class Fetcher(Protocol):
    """Anything that can GET a path from the Mirth API."""

    def fetch(self, path: str) -> bytes: ...


class MirthCollector(Collector):
    """Prometheus collector that queries Mirth on every scrape.

    Args:
        client: Remote client used for all three endpoints.
        registry: Metric descriptors; built once and shared read-only.
    """

    def __init__(self, client: Fetcher, registry: Optional[MetricRegistry] = None):
        self.client = client
        self.registry = registry or default_registry()
        self._duration = self._build_histogram()

    def _build_histogram(self) -> Optional[Histogram]:
        descriptor = self.registry.get(REQUEST_DURATION)
        if descriptor is None:
            return None
        # Owned by this collector rather than a global registry, exposed via collect().
        return Histogram(
            self.registry.fqname(descriptor.name),
            descriptor.help,
            buckets=descriptor.buckets or Histogram.DEFAULT_BUCKETS,
            registry=None,
        )

    # ------------------------------------------------------------------
    # Collection cycle
    # ------------------------------------------------------------------

    def _load(self, path: str, decode: Callable[[bytes, str], T]) -> T:
        body = self.client.fetch(path)
        return decode(body, path)

    def _load_version(self) -> str:
        try:
            return decode_version(self.client.fetch(SERVER_VERSION_API))
        except MirthExporterError as e:
            logger.warning("Could not read Mirth server version: %s", e)
            return VERSION_ERROR

    def _observe_duration(self, start: float) -> float:
        duration = time.perf_counter() - start
        if self._duration is not None:
            self._duration.observe(duration)
        return duration

    def run_cycle(self) -> CollectionResult:
        """Fetch, decode and correlate one snapshot of the Mirth server."""
        start = time.perf_counter()
        try:
            statuses = self._load(CHANNEL_STATUSES_API, decode_channel_statuses)
            statistics = self._load(CHANNEL_STATISTICS_API, decode_channel_statistics)
            observations = assemble(statuses, statistics)
        except (TransportError, DecodeError) as e:
            duration = self._observe_duration(start)
            logger.warning(
                "Mirth scrape failed: %s",
                e,
                extra={"path": getattr(e, "path", ""), "duration_ms": round(duration * 1000, 1)},
            )
            return CollectionResult.failed(duration)

        duration = self._observe_duration(start)
        version = self._load_version()

        logger.info(
            "Endpoint scraped",
            extra={
                "channel_count": len(statuses),
                "duration_ms": round(duration * 1000, 1),
            },
        )
        return CollectionResult(
            available=True,
            observations=observations,
            version_label=version,
            duration_seconds=duration,
        )

    # ------------------------------------------------------------------
    # Exposition
    # ------------------------------------------------------------------

    def _family(self, descriptor: MetricDescriptor) -> Metric:
        """Empty family typed by the descriptor, whatever the observations say."""
        name = self.registry.fqname(descriptor.name)
        labels = list(descriptor.label_names)
        if descriptor.kind == MetricKind.COUNTER:
            return CounterMetricFamily(name, descriptor.help, labels=labels)
        if descriptor.kind == MetricKind.UNTYPED:
            return UnknownMetricFamily(name, descriptor.help, labels=labels)
        return GaugeMetricFamily(name, descriptor.help, labels=labels)

    def _channel_families(self, observations: Iterable[Observation]) -> list[Metric]:
        families: dict[str, tuple[MetricDescriptor, Metric]] = {}
        for observation in observations:
            entry = families.get(observation.metric_name)
            if entry is None:
                descriptor = self.registry.get(observation.metric_name)
                if descriptor is None:
                    logger.debug("No descriptor for %s, dropped", observation.metric_name)
                    continue
                entry = (descriptor, self._family(descriptor))
                families[observation.metric_name] = entry
            descriptor, family = entry
            family.add_metric(
                [observation.labels.get(n, "") for n in descriptor.label_names],
                observation.value,
            )

        # Registry order keeps the exposition stable between scrapes.
        return [
            families[d.name][1] for d in self.registry if d.name in families
        ]

    def build_families(self, result: CollectionResult) -> Iterator[Metric]:
        """Turn a cycle result into Prometheus metric families."""
        up = self.registry.get(UP)
        if up is not None:
            family = self._family(up)
            family.add_metric([], 1.0 if result.available else 0.0)
            yield family

        if not result.available:
            return

        yield from self._channel_families(result.observations)

        info = self.registry.get(INFO)
        if info is not None:
            family = self._family(info)
            family.add_metric([result.version_label], 1.0)
            yield family

        if self._duration is not None:
            yield from self._duration.collect()

    def describe(self) -> Iterator[Metric]:
        """Families without samples, so registration never calls Mirth."""
        for descriptor in self.registry:
            if descriptor.kind == MetricKind.HISTOGRAM:
                if self._duration is not None:
                    yield from self._duration.describe()
                continue
            yield self._family(descriptor)

    def collect(self) -> Iterator[Metric]:
        yield from self.build_families(self.run_cycle())
