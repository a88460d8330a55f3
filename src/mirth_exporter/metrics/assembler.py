"""Correlate channel statuses with channel statistics into observations."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from mirth_exporter.metrics.models import (
    ChannelStatistics,
    ChannelStatus,
    MetricKind,
    Observation,
)

CHANNEL_STATUS = "channel_status"
UNDEPLOYED_REVISIONS = "undeployed_revisions"
MESSAGES_RECEIVED = "messages_received_total"
MESSAGES_FILTERED = "messages_filtered_total"
MESSAGES_SENT = "messages_sent_total"
MESSAGES_ERRORED = "messages_errored_total"
MESSAGES_QUEUED = "messages_queued"

# Engine status label -> metric name. Labels not listed here (QUEUED included,
# queue depth comes from the statistics endpoint) produce no observation.
STATUS_METRICS: Mapping[str, str] = MappingProxyType(
    {
        "RECEIVED": MESSAGES_RECEIVED,
        "FILTERED": MESSAGES_FILTERED,
        "SENT": MESSAGES_SENT,
        "ERROR": MESSAGES_ERRORED,
    }
)


def pick_metric(status: str) -> Optional[str]:
    """Metric name for an engine status label, or None if it is not tracked."""
    return STATUS_METRICS.get(status)


def index_statistics(
    statistics: Iterable[ChannelStatistics],
) -> dict[str, ChannelStatistics]:
    """Map channel id to statistics; a repeated id overwrites the earlier one."""
    return {stats.channel_id: stats for stats in statistics}


def assemble(
    statuses: Iterable[ChannelStatus],
    statistics: Iterable[ChannelStatistics],
) -> list[Observation]:
    """Build the per-channel observations for one cycle.

    The status list decides which channels exist and what they are called.
    Channels are emitted in the order the engine returned them. Statistics for
    channel ids that are not in ``statuses`` are ignored, and a channel with no
    statistics record reports a queue depth of 0.
    """
    by_channel_id = index_statistics(statistics)
    observations: list[Observation] = []

    for channel in statuses:
        observations.append(
            Observation(
                CHANNEL_STATUS,
                1.0,
                {"channel": channel.name, "status": channel.state},
            )
        )
        observations.append(
            Observation(
                UNDEPLOYED_REVISIONS,
                channel.deployed_revision_delta,
                {"channel": channel.name},
            )
        )

        for entry in channel.current_statistics:
            metric_name = pick_metric(entry.status)
            if metric_name is None:
                continue
            observations.append(
                Observation(
                    metric_name,
                    entry.count,
                    {"channel": channel.name},
                    MetricKind.GAUGE,
                )
            )

        stats = by_channel_id.get(channel.channel_id)
        observations.append(
            Observation(
                MESSAGES_QUEUED,
                stats.queued if stats is not None else 0.0,
                {"channel": channel.name},
            )
        )

    return observations
