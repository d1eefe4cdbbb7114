# src/taskboard/api/transport.py

"""HTTP transport for the board server.

One `requests.Session` per transport, JSON in and out. Every failure surfaces as
NetworkFailure so callers deal with a single error type:
- connection errors / timeouts -> status=None
- non-2xx responses           -> status + response body as detail
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from ..core.errors import NetworkFailure

logger = logging.getLogger(__name__)


class HttpTransport:
    def __init__(
        self,
        base_url: str,
        *,
        session: requests.Session | None = None,
        timeout: float = 15.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings, *, session: requests.Session | None = None) -> "HttpTransport":
        return cls(
            str(getattr(settings, "api_base_url", "http://localhost:3000")),
            session=session,
            timeout=float(getattr(settings, "request_timeout_seconds", 15.0)),
        )

    def close(self) -> None:
        self.session.close()

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json", "Accept": "application/json"}

    def request(self, path: str, method: str = "GET", body: dict[str, Any] | None = None) -> Any:
        """Send one request; returns decoded JSON or None for non-JSON (empty) replies."""
        method = method.upper()
        url = f"{self.base_url}{path}"

        try:
            response = self.session.request(
                method,
                url,
                json=body,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("%s %s network error: %s", method, path, exc)
            raise NetworkFailure(str(exc), method=method, path=path) from exc

        logger.debug("%s %s -> %s", method, path, response.status_code)

        if not response.ok:
            detail = response.text or ""
            raise NetworkFailure(
                detail,
                status=response.status_code,
                reason=response.reason or "",
                method=method,
                path=path,
            )

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            return None

        try:
            return response.json()
        except requests.exceptions.JSONDecodeError as exc:
            raise NetworkFailure(
                f"Invalid JSON in response: {exc}",
                status=response.status_code,
                reason=response.reason or "",
                method=method,
                path=path,
            ) from exc
