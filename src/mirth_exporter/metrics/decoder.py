"""Decoders for Mirth Connect REST API responses.

The statuses and statistics endpoints answer with XStream-serialised XML::

    <list>
      <dashboardStatus>
        <channelId>101af57f-f26c-40d3-86a3-309e74b93512</channelId>
        <name>Send-Email-Notification</name>
        <state>STARTED</state>
        <deployedRevisionDelta>0</deployedRevisionDelta>
        <statistics class="linked-hash-map">
          <entry>
            <com.mirth.connect.donkey.model.message.Status>RECEIVED</com.mirth.connect.donkey.model.message.Status>
            <long>70681</long>
          </entry>
        </statistics>
      </dashboardStatus>
    </list>

The root must be ``<list>``. String fields are kept exactly as sent, since
they become label values. Unknown elements are ignored and a missing or
malformed number inside a record reads as ``0.0`` so that one bad field never
drops the rest of the document.
"""

from __future__ import annotations

import logging
from typing import Optional
from xml.etree.ElementTree import Element, ParseError

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import fromstring

from mirth_exporter.errors import DecodeError
from mirth_exporter.metrics.models import (
    ChannelStatistics,
    ChannelStatus,
    StatisticsEntry,
)

logger = logging.getLogger(__name__)

ROOT_TAG = "list"
STATUS_TAG = "dashboardStatus"
STATISTICS_TAG = "channelStatistics"
ENTRY_STATUS_TAG = "com.mirth.connect.donkey.model.message.Status"
ENTRY_COUNT_TAG = "long"


def _parse_root(body: bytes, path: str = "") -> Element:
    try:
        root = fromstring(body)
    except (ParseError, DefusedXmlException) as e:
        raise DecodeError(f"Response is not valid XML: {e}", path=path) from e

    if root.tag != ROOT_TAG:
        raise DecodeError(
            f"Expected <{ROOT_TAG}> root element, got <{root.tag}>", path=path
        )
    return root


def _text(element: Element, tag: str) -> str:
    child = element.find(tag)
    if child is None or child.text is None:
        return ""
    return child.text


def _number(element: Element, tag: str) -> float:
    raw = _text(element, tag).strip()
    if not raw:
        return 0.0
    try:
        return float(raw)
    except ValueError:
        logger.debug("Non-numeric <%s> value %r, using 0", tag, raw)
        return 0.0


def _entries(container: Optional[Element]) -> list[StatisticsEntry]:
    if container is None:
        return []
    return [
        StatisticsEntry(
            status=_text(entry, ENTRY_STATUS_TAG),
            count=_number(entry, ENTRY_COUNT_TAG),
        )
        for entry in container.findall("entry")
    ]


def decode_channel_statuses(body: bytes, path: str = "") -> list[ChannelStatus]:
    """Decode the ``/api/channels/statuses`` document."""
    root = _parse_root(body, path)
    return [
        ChannelStatus(
            channel_id=_text(record, "channelId"),
            name=_text(record, "name"),
            state=_text(record, "state"),
            deployed_revision_delta=_number(record, "deployedRevisionDelta"),
            current_statistics=_entries(record.find("statistics")),
            lifetime_statistics=_entries(record.find("lifetimeStatistics")),
        )
        for record in root.findall(STATUS_TAG)
    ]


def decode_channel_statistics(
    body: bytes, path: str = ""
) -> list[ChannelStatistics]:
    """Decode the ``/api/channels/statistics`` document."""
    root = _parse_root(body, path)
    return [
        ChannelStatistics(
            channel_id=_text(record, "channelId"),
            server_id=_text(record, "serverId"),
            received=_number(record, "received"),
            sent=_number(record, "sent"),
            error=_number(record, "error"),
            filtered=_number(record, "filtered"),
            queued=_number(record, "queued"),
        )
        for record in root.findall(STATISTICS_TAG)
    ]


def decode_version(body: bytes) -> str:
    """The version endpoint returns plain text."""
    return body.decode("utf-8", errors="replace").strip()
