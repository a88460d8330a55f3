"""Mirth Connect REST API client."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from mirth_exporter.config import Settings, get_settings
from mirth_exporter.errors import TransportError

logger = logging.getLogger(__name__)

CHANNEL_STATUSES_API = "/api/channels/statuses"
CHANNEL_STATISTICS_API = "/api/channels/statistics"
SERVER_VERSION_API = "/api/server/version"

# Mirth rejects API calls without this header (CSRF guard).
CALLER_HEADERS = {"X-Requested-With": "OpenAPI"}

DEFAULT_TIMEOUT = 10.0


class MirthClient:
    """Authenticated GET access to a Mirth Connect server.

    Endpoint and credentials are fixed at construction. The underlying
    ``httpx.Client`` is thread-safe, so one instance serves concurrent
    scrapes.

    Certificate verification is off by default because Mirth ships with a
    self-signed certificate.

    The HTTP status code is not used to decide success: any response body is
    returned to the caller, and a 401 or 500 page surfaces later as a decode
    failure.
    """

    def __init__(
        self,
        endpoint: str,
        username: str = "",
        password: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        verify: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._endpoint = endpoint.rstrip("/")
        self._username = username
        self._client = httpx.Client(
            auth=httpx.BasicAuth(username, password),
            headers=CALLER_HEADERS,
            timeout=timeout,
            verify=verify,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> MirthClient:
        """Build a client from application settings."""
        settings = settings or get_settings()
        return cls(
            endpoint=settings.mirth_endpoint,
            username=settings.mirth_username,
            password=settings.mirth_password,
            timeout=settings.request_timeout,
            verify=settings.verify_tls,
        )

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def username(self) -> str:
        return self._username

    def url_for(self, path: str) -> str:
        return f"{self._endpoint}{path}"

    def fetch(self, path: str) -> bytes:
        """GET ``path`` below the endpoint and return the raw body.

        Raises:
            TransportError: The request could not be built or sent, or the
                body could not be read.
        """
        url = self.url_for(path)
        try:
            response = self._client.get(url)
        except httpx.InvalidURL as e:
            raise TransportError(f"Invalid request URL: {e}", path=path) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"{type(e).__name__}: {e}", path=path
            ) from e

        if response.is_error:
            logger.warning("GET %s returned HTTP %d", path, response.status_code)
        else:
            logger.debug("GET %s returned HTTP %d", path, response.status_code)
        return response.content

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> MirthClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
