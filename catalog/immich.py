"""Immich API client -- reachability checks and filename lookups.

Endpoints:
  GET  /api/server/ping       reachability + API key check
  GET  /api/server/version    {"major", "minor", "patch"}
  POST /api/search/metadata   {"originalFileName": ...} -> {"assets": {"total": N, ...}}

A file counts as synced when at least one asset carries the same original
filename. Matching is by filename only: two unrelated files sharing a name
are indistinguishable.
"""

from __future__ import annotations

import httpx
from loguru import logger

from processor.models import SyncStatus

PLACEHOLDER_SERVER = "http://your-immich-server:2283"


class ImmichClient:
    """Blocking client, one request per call, no retries."""

    def __init__(
        self,
        server: str,
        api_key: str,
        timeout: float = 30.0,
        connect_timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.server = server.rstrip("/")
        self._client = httpx.Client(
            base_url=self.server,
            headers={"x-api-key": api_key, "Accept": "application/json"},
            timeout=httpx.Timeout(timeout, connect=connect_timeout),
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def ping(self) -> int:
        """HTTP status of the ping endpoint. Raises httpx.HTTPError if unreachable."""
        resp = self._client.get("/api/server/ping")
        return resp.status_code

    def server_version(self) -> str:
        try:
            resp = self._client.get("/api/server/version")
            data = resp.json() if resp.status_code == 200 else {}
        except (httpx.HTTPError, ValueError):
            return "unknown"
        if not isinstance(data, dict) or "major" not in data:
            return "unknown"
        return f"{data.get('major')}.{data.get('minor')}.{data.get('patch')}"

    def search_by_filename(self, filename: str) -> int:
        """Number of assets whose original filename equals ``filename``.

        Raises httpx.HTTPError on transport errors or non-2xx responses and
        ValueError on an empty or malformed body.
        """
        resp = self._client.post(
            "/api/search/metadata",
            json={"originalFileName": filename},
        )
        resp.raise_for_status()
        if not resp.content.strip():
            raise ValueError("empty response")

        data = resp.json()
        if not isinstance(data, dict):
            raise ValueError(f"unexpected payload type {type(data).__name__}")
        assets = data.get("assets") or {}
        if not isinstance(assets, dict):
            raise ValueError("unexpected 'assets' value")
        total = assets.get("total", 0)
        if isinstance(total, bool) or not isinstance(total, int):
            raise ValueError(f"unexpected total {total!r}")
        return total

    def sync_status(self, filename: str) -> SyncStatus:
        logger.debug(f"[immich] querying: {filename}")
        try:
            total = self.search_by_filename(filename)
        except (httpx.HTTPError, ValueError) as e:
            logger.debug(f"[immich]   query failed for {filename}: {e}")
            return SyncStatus.QUERY_FAILED

        if total > 0:
            logger.debug(f"[immich]   found {total} matching asset(s)")
            return SyncStatus.SYNCED
        logger.debug("[immich]   no matching asset")
        return SyncStatus.NOT_SYNCED

    def __repr__(self):
        return f"ImmichClient({self.server})"
