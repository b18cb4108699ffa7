"""
Remote Snapshot Source - per-code payloads over HTTP.

GET {base_url}/{code} returns one IndividualSnapshot.
"""

import logging
from typing import Optional

import httpx

from config import config
from errors import DecodeFailureError
from models import IndividualSnapshot, decode_individual_snapshot
from .base import SnapshotSource, SnapshotResult

logger = logging.getLogger(__name__)


# Module-level connection pool for HTTP connection reuse
_async_client: Optional[httpx.AsyncClient] = None
_sync_client: Optional[httpx.Client] = None


def get_async_client() -> httpx.AsyncClient:
    """Get or create the shared async HTTP client with connection pooling."""
    global _async_client
    if _async_client is None or _async_client.is_closed:
        _async_client = httpx.AsyncClient(
            timeout=config.http_timeout,
            limits=httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
                keepalive_expiry=30.0
            )
        )
    return _async_client


def get_sync_client() -> httpx.Client:
    """Get or create the shared sync HTTP client with connection pooling."""
    global _sync_client
    if _sync_client is None or _sync_client.is_closed:
        _sync_client = httpx.Client(
            timeout=config.http_timeout,
            limits=httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
                keepalive_expiry=30.0
            )
        )
    return _sync_client


class RemoteSnapshotSource(SnapshotSource):
    """Data source for the per-code snapshot endpoint."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        async_client: Optional[httpx.AsyncClient] = None,
        sync_client: Optional[httpx.Client] = None
    ):
        self._base_url = (base_url or config.data_base_url).rstrip('/')
        self._async_client = async_client
        self._sync_client = sync_client

    @property
    def name(self) -> str:
        return "Remote"

    def supports(self, code: str) -> bool:
        """Any non-empty code can be requested; this is the catch-all source."""
        return bool(code)

    def url_for(self, code: str) -> str:
        return f"{self._base_url}/{code}"

    async def fetch(self, code: str) -> SnapshotResult:
        """Fetch a snapshot from the remote endpoint."""
        client = self._async_client or get_async_client()
        try:
            response = await client.get(self.url_for(code))
        except httpx.TimeoutException:
            return self._failure(code, f"Timeout fetching {code}")
        except httpx.HTTPError as e:
            return self._failure(code, f"Error fetching {code}: {e}")
        return self._parse(code, response)

    def fetch_sync(self, code: str) -> SnapshotResult:
        """Synchronous version using the httpx sync client."""
        client = self._sync_client or get_sync_client()
        try:
            response = client.get(self.url_for(code))
        except httpx.TimeoutException:
            return self._failure(code, f"Timeout fetching {code}")
        except httpx.HTTPError as e:
            return self._failure(code, f"Error fetching {code}: {e}")
        return self._parse(code, response)

    def _parse(self, code: str, response: httpx.Response) -> SnapshotResult:
        # Check HTTP status codes BEFORE decoding
        if response.status_code == 404:
            return self._failure(code, f"No data published for {code} (404)")
        if response.status_code == 429:
            return self._failure(code, f"Rate limit exceeded (429) fetching {code}")
        if response.status_code >= 500:
            return self._failure(code, f"Server error ({response.status_code}) fetching {code}")
        if response.status_code != 200:
            return self._failure(code, f"Unexpected status {response.status_code} fetching {code}")

        try:
            isnap: IndividualSnapshot = decode_individual_snapshot(response.content)
        except DecodeFailureError as e:
            return self._failure(code, f"Could not decode snapshot for {code}: {e}")

        return SnapshotResult(code=code, snapshot=isnap.snapshot, time=isnap.time, source=self.name)

    def _failure(self, code: str, error: str) -> SnapshotResult:
        logger.warning(f"[Remote] {error}")
        return SnapshotResult(code=code, source=self.name, error=error)
