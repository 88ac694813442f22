from __future__ import annotations

import asyncio
from typing import Any, Optional, Protocol

import requests

from routeguard.errors import RetrievalError


class PermissionsTransport(Protocol):
    """
    Fetches a permissions document from a source identifier (usually a URL).

    Implementations raise `RetrievalError` on any non-success response or transport
    failure.
    """

    async def get(self, url: str) -> Any:
        """Return the decoded permissions document."""


class RequestsTransport(PermissionsTransport):
    """
    `requests`-based transport.

    Notes:
    - Credentials travel with the session (cookies, or `auth` when given).
    - The blocking call runs in a worker thread so the event loop is not held.
    """

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        auth: Any = None,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout
        self.auth = auth

    def _get_sync(self, url: str) -> Any:
        try:
            r = self.session.get(
                url,
                headers={"Accept": "application/json"},
                auth=self.auth,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RetrievalError(url, f"{type(e).__name__}: {e}") from e

        if not 200 <= r.status_code < 300:
            # Body may echo user data; keep the error to the status line.
            raise RetrievalError(url, str(r.reason or ""), status_code=r.status_code)

        ctype = (r.headers.get("Content-Type") or "").lower()
        if "json" in ctype:
            try:
                return r.json()
            except ValueError as e:
                raise RetrievalError(url, "Invalid JSON body", status_code=r.status_code) from e
        return r.text

    async def get(self, url: str) -> Any:
        return await asyncio.to_thread(self._get_sync, url)
