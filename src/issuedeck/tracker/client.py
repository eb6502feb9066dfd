"""HTTP client for the Jira REST API."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from ..core.config import TrackerSettings
from ..core.interfaces import TrackerClient

LOGGER = logging.getLogger(__name__)


class TrackerError(RuntimeError):
    """Raised when the tracker rejects a request or cannot be reached."""


class TransientTrackerError(TrackerError):
    """Tracker failure worth retrying: transport errors and 5xx responses."""


class JiraClient(TrackerClient):
    """Thin wrapper around :class:`httpx.Client` with request logging."""

    def __init__(
        self,
        settings: TrackerSettings,
        logger: logging.Logger | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Create a client for ``https://{settings.domain}`` using basic auth."""
        self._logger = logger or LOGGER
        self._client = httpx.Client(
            base_url=f"https://{settings.domain}",
            auth=(settings.username, settings.password),
            headers={"Accept": "application/json"},
            timeout=settings.timeout_seconds,
            transport=transport,
            event_hooks={
                "request": [self._log_request],
                "response": [self._log_response],
            },
        )

    # Context manager helpers -------------------------------------------------
    def __enter__(self) -> JiraClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    # Public API ---------------------------------------------------------------
    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Perform a GET request and return the decoded JSON body."""
        try:
            response = self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            msg = f"GET {path} returned HTTP {status}"
            if status >= 500:
                raise TransientTrackerError(msg) from exc
            raise TrackerError(msg) from exc
        except httpx.HTTPError as exc:
            msg = f"GET {path} failed: {exc}"
            raise TransientTrackerError(msg) from exc

        try:
            return response.json()
        except ValueError as exc:
            msg = f"GET {path} returned invalid JSON"
            raise TrackerError(msg) from exc

    def close(self) -> None:
        """Release pooled connections."""
        self._client.close()

    def _log_request(self, request: httpx.Request) -> None:
        self._logger.debug("%s %s", request.method, request.url)

    def _log_response(self, response: httpx.Response) -> None:
        self._logger.debug(
            "%s from %s %s",
            response.status_code,
            response.request.method,
            response.request.url,
        )


__all__ = ["JiraClient", "TrackerError", "TransientTrackerError"]
