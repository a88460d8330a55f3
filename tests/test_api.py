"""Tests for the exporter HTTP surface."""

import sys
from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, "src")

from conftest import FakeMirthClient
from mirth_exporter.api import create_app
from mirth_exporter.api_clients import MirthClient
from mirth_exporter.config import Settings
from mirth_exporter.metrics import MirthCollector


@pytest.fixture
def settings():
    return Settings(
        mirth_endpoint="https://mirth.test:8443",
        mirth_username="admin",
        mirth_password="s3cret",
    )


@pytest.fixture
def client(settings, healthy_client):
    """Test client backed by a fake Mirth server."""
    app = create_app(settings, MirthCollector(healthy_client))
    return TestClient(app)


class TestLandingPage:
    """Tests for GET /."""

    def test_links_metrics_path(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "<title>Mirth Channel Exporter</title>" in response.text
        assert "<a href='/metrics'>Metrics</a>" in response.text

    def test_custom_metrics_path(self, healthy_client):
        settings = Settings(mirth_endpoint="https://mirth.test", metrics_path="/mirth-scrape")
        client = TestClient(create_app(settings, MirthCollector(healthy_client)))
        assert "<a href='/mirth-scrape'>" in client.get("/").text
        assert client.get("/mirth-scrape").status_code == 200
        assert client.get("/metrics").status_code == 404


class TestMetricsEndpoint:
    """Tests for GET <metrics path>."""

    def test_exposition(self, client):
        response = client.get("/metrics")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        body = response.text
        assert "mirth_up 1.0" in body
        assert 'mirth_channel_status{channel="Foo",status="STARTED"} 1.0' in body
        assert 'mirth_messages_received_total{channel="Foo"} 5.0' in body
        assert 'mirth_info{version="3.9.0"} 1.0' in body

    def test_mirth_down(self, settings):
        app = create_app(settings, MirthCollector(FakeMirthClient()))
        body = TestClient(app).get("/metrics").text
        assert "mirth_up 0.0" in body
        assert "mirth_channel_status{" not in body
        assert "mirth_info{" not in body

    def test_scrape_triggers_collection(self, client, healthy_client):
        """Startup does not call Mirth; each scrape does."""
        assert healthy_client.calls == []
        client.get("/metrics")
        client.get("/metrics")
        assert len(healthy_client.calls) == 6

    def test_concurrent_scrapes(self, client):
        """Simultaneous scrapes each produce a complete result."""
        with ThreadPoolExecutor(max_workers=4) as pool:
            responses = list(pool.map(lambda _: client.get("/metrics"), range(8)))
        assert all(r.status_code == 200 for r in responses)
        assert all('mirth_messages_queued{channel="Foo"} 2.0' in r.text for r in responses)


class TestLifespan:
    """Tests for startup and shutdown."""

    def test_owned_client_closed(self, settings, restore_root_logger):
        app = create_app(settings)
        mirth_client = app.state.collector.client
        assert isinstance(mirth_client, MirthClient)

        with TestClient(app) as client:
            assert client.get("/").status_code == 200
        assert mirth_client._client.is_closed
