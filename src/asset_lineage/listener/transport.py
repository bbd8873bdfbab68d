"""Lineage event transport implementations.

Transports hand serialized lineage events to the out channel. All of them
implement the LineageTransport protocol. Delivery is synchronous: a
transport that cannot hand off a payload raises, and the publisher turns
that into a DeliveryError for the notification being dispatched.
"""

from __future__ import annotations

import threading
from urllib.parse import urlparse

import httpx
import structlog

logger = structlog.get_logger(__name__)

_ALLOWED_URL_SCHEMES = frozenset({"http", "https"})


def validate_endpoint_url(url: str) -> None:
    """Check that an endpoint URL is http(s) and names a host.

    Raises:
        ValueError: If the scheme is unsupported or the host is missing.
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_URL_SCHEMES:
        raise ValueError(
            f"URL scheme must be one of {sorted(_ALLOWED_URL_SCHEMES)}, got: {parsed.scheme!r}"
        )
    if not parsed.netloc:
        raise ValueError(f"Invalid URL: missing host in {url!r}")


class NoOpLineageTransport:
    """Transport that discards all payloads.

    Useful for environments where lineage publishing is disabled.
    """

    def send(self, payload: str) -> None:
        """Discard the payload."""

    def close(self) -> None:
        """No-op close."""


class ConsoleLineageTransport:
    """Transport that logs payloads via structlog.

    Useful for local development and debugging.
    """

    def __init__(self) -> None:
        self._log: structlog.stdlib.BoundLogger = structlog.get_logger(
            "asset_lineage.console"
        )

    def send(self, payload: str) -> None:
        """Log the payload.

        Args:
            payload: Serialized lineage event.
        """
        self._log.info("lineage_event", payload=payload, payload_bytes=len(payload))

    def close(self) -> None:
        """No-op close."""


class InMemoryLineageTransport:
    """Transport that keeps every payload in memory.

    Used for offline replay and tests. Safe to share between threads.
    """

    def __init__(self) -> None:
        self._payloads: list[str] = []
        self._lock = threading.Lock()
        self._closed = False

    @property
    def payloads(self) -> list[str]:
        """Return a copy of the payloads sent so far, in send order."""
        with self._lock:
            return list(self._payloads)

    def send(self, payload: str) -> None:
        """Record the payload.

        Raises:
            RuntimeError: If the transport has been closed.
        """
        with self._lock:
            if self._closed:
                raise RuntimeError("Transport is closed")
            self._payloads.append(payload)

    def close(self) -> None:
        """Stop accepting payloads."""
        with self._lock:
            self._closed = True


class HttpLineageTransport:
    """Transport that POSTs each payload to an HTTP endpoint.

    Each send() blocks until the endpoint answers. Connection failures and
    non-2xx responses raise, so lost events are never silent.

    Args:
        url: HTTP endpoint URL for lineage events.
        timeout: HTTP request timeout in seconds.
        api_key: Optional API key sent as a bearer token.
        client: Optional preconfigured httpx.Client (mainly for tests).
    """

    def __init__(
        self,
        url: str,
        timeout: float = 5.0,
        api_key: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize HTTP transport.

        Raises:
            ValueError: If URL is invalid or uses unsupported scheme.
        """
        validate_endpoint_url(url)

        self._url = url
        self._api_key = api_key
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    def _sanitized_url(self) -> str:
        """Return URL without query string or credentials for safe logging."""
        parsed = urlparse(self._url)
        host = parsed.hostname or ""
        if parsed.port:
            host += f":{parsed.port}"
        return f"{parsed.scheme}://{host}{parsed.path}"

    def send(self, payload: str) -> None:
        """POST the payload and wait for the response.

        Args:
            payload: Serialized lineage event.

        Raises:
            httpx.HTTPError: If the request fails or the endpoint answers non-2xx.
        """
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            response = self._client.post(self._url, content=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError:
            logger.error("lineage_http_post_failed", url=self._sanitized_url())
            raise

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()


__all__ = [
    "ConsoleLineageTransport",
    "HttpLineageTransport",
    "InMemoryLineageTransport",
    "NoOpLineageTransport",
    "validate_endpoint_url",
]
