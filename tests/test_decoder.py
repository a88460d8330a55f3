"""Tests for Mirth response decoding."""

import sys

import pytest

sys.path.insert(0, "src")

from payloads import as_list, channel_statistics, dashboard_status, status_entry
from mirth_exporter.errors import DecodeError
from mirth_exporter.metrics.decoder import (
    decode_channel_statistics,
    decode_channel_statuses,
    decode_version,
)


class TestDecodeChannelStatuses:
    """Tests for the /api/channels/statuses document."""

    def test_decodes_record(self):
        """All fields of a dashboard status are read."""
        body = as_list(
            dashboard_status(
                "101af57f-f26c-40d3-86a3-309e74b93512",
                "Send-Email-Notification",
                "PAUSED",
                delta="3",
                entries=status_entry("RECEIVED", 70681) + status_entry("ERROR", 3542),
            )
        )
        (channel,) = decode_channel_statuses(body)
        assert channel.channel_id == "101af57f-f26c-40d3-86a3-309e74b93512"
        assert channel.name == "Send-Email-Notification"
        assert channel.state == "PAUSED"
        assert channel.deployed_revision_delta == 3.0
        assert [(e.status, e.count) for e in channel.current_statistics] == [
            ("RECEIVED", 70681.0),
            ("ERROR", 3542.0),
        ]

    def test_preserves_document_order(self):
        """Records come back in the order the server sent them."""
        body = as_list(
            dashboard_status("c2", "Zulu"),
            dashboard_status("c1", "Alpha"),
            dashboard_status("c3", "Mike"),
        )
        assert [c.name for c in decode_channel_statuses(body)] == ["Zulu", "Alpha", "Mike"]

    def test_unknown_state_kept_verbatim(self):
        """States outside the usual set are not rewritten."""
        body = as_list(dashboard_status("c1", "Foo", "UNDEPLOYING"))
        assert decode_channel_statuses(body)[0].state == "UNDEPLOYING"

    def test_string_fields_not_trimmed(self):
        """Names, states and status labels keep the whitespace Mirth sent."""
        body = as_list(
            dashboard_status(
                " c1", " Foo ", "STARTED ", entries=status_entry(" RECEIVED", " 5 ")
            )
        )
        channel = decode_channel_statuses(body)[0]
        assert (channel.channel_id, channel.name, channel.state) == (" c1", " Foo ", "STARTED ")
        assert channel.current_statistics[0].status == " RECEIVED"
        assert channel.current_statistics[0].count == 5.0

    def test_lifetime_statistics_decoded_separately(self):
        """Lifetime statistics do not leak into current statistics."""
        lifetime = f"<lifetimeStatistics>{status_entry('RECEIVED', 100)}</lifetimeStatistics>"
        body = as_list(
            dashboard_status("c1", "Foo", entries=status_entry("RECEIVED", 1), extra=lifetime)
        )
        channel = decode_channel_statuses(body)[0]
        assert [e.count for e in channel.current_statistics] == [1.0]
        assert [e.count for e in channel.lifetime_statistics] == [100.0]

    def test_unknown_elements_ignored(self):
        """Extra child elements do not break decoding."""
        extra = "<metaDataId>0</metaDataId><childStatuses/><tags><string>x</string></tags>"
        body = as_list(dashboard_status("c1", "Foo", extra=extra))
        assert decode_channel_statuses(body)[0].name == "Foo"

    def test_missing_numeric_field_defaults_to_zero(self):
        """A record without deployedRevisionDelta still decodes."""
        body = (
            b"<list><dashboardStatus><channelId>c1</channelId>"
            b"<name>Foo</name><state>STARTED</state></dashboardStatus></list>"
        )
        channel = decode_channel_statuses(body)[0]
        assert channel.deployed_revision_delta == 0.0
        assert channel.current_statistics == []

    def test_malformed_count_defaults_to_zero(self):
        """A non-numeric count reads as 0 without dropping the entry."""
        body = as_list(dashboard_status("c1", "Foo", entries=status_entry("SENT", "lots")))
        entry = decode_channel_statuses(body)[0].current_statistics[0]
        assert entry.status == "SENT"
        assert entry.count == 0.0

    def test_empty_list(self):
        """A server without channels yields no records."""
        assert decode_channel_statuses(b"<list/>") == []

    def test_wrong_root_raises(self):
        """A document whose root is not <list> is rejected."""
        with pytest.raises(DecodeError) as exc_info:
            decode_channel_statuses(b"<map><entry/></map>", path="/api/channels/statuses")
        assert exc_info.value.path == "/api/channels/statuses"

    def test_html_error_page_raises(self):
        """An authentication error page is a decode error."""
        with pytest.raises(DecodeError):
            decode_channel_statuses(b"<html><body>401 Unauthorized</body></html>")

    def test_not_xml_raises(self):
        """Unparseable bodies are rejected."""
        with pytest.raises(DecodeError):
            decode_channel_statuses(b"Unauthorized")

    def test_empty_body_raises(self):
        """An empty body is not a document."""
        with pytest.raises(DecodeError):
            decode_channel_statuses(b"")


class TestDecodeChannelStatistics:
    """Tests for the /api/channels/statistics document."""

    def test_decodes_record(self):
        """All counters are read as floats."""
        body = as_list(channel_statistics("c1", queued="7", received="39"))
        (stats,) = decode_channel_statistics(body)
        assert stats.channel_id == "c1"
        assert stats.server_id == "6d555cac-1671-481f-abae-7e1e791eb2d5"
        assert stats.received == 39.0
        assert stats.queued == 7.0
        assert stats.filtered == 0.0

    def test_missing_queued_defaults_to_zero(self):
        """Missing counters decode as 0."""
        body = b"<list><channelStatistics><channelId>c1</channelId></channelStatistics></list>"
        stats = decode_channel_statistics(body)[0]
        assert stats.queued == 0.0
        assert stats.sent == 0.0

    def test_wrong_root_raises(self):
        """The statistics endpoint must also answer with <list>."""
        with pytest.raises(DecodeError):
            decode_channel_statistics(b"<channelStatistics/>")


class TestDecodeVersion:
    """Tests for the plain-text version endpoint."""

    def test_trims_whitespace(self):
        assert decode_version(b"  3.9.0\n") == "3.9.0"

    def test_passes_text_through(self):
        assert decode_version(b"4.5.2") == "4.5.2"
