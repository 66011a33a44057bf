"""HTTP blob store for public buckets and storage emulators."""

from __future__ import annotations

from urllib.parse import quote

import httpx

from .exceptions import ErrorCodes, FlagStoreError
from .storage import BlobStore


class HttpBlobStore(BlobStore):
    """Reads ``GET {base_url}/{bucket}/{name}`` with httpx.

    Gzip content encoding is undone by httpx, so the object may be stored
    compressed or not.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 10.0,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._headers = dict(headers or {})

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers,
            timeout=self._timeout,
        )

    async def read(self, bucket: str, name: str) -> bytes:
        path = f"/{quote(bucket)}/{quote(name, safe='/')}"
        try:
            async with self._make_client() as client:
                resp = await client.get(path)
        except httpx.TransportError as e:
            raise FlagStoreError(
                code=ErrorCodes.CONNECTION_ERROR,
                message=f"Storage unreachable reading {bucket}/{name}: {e}",
                cause=e,
            ) from e

        if resp.status_code == 404:
            raise FlagStoreError(
                code=ErrorCodes.READ_ERROR,
                message=f"Object not found: {bucket}/{name}",
            )
        if not resp.is_success:
            raise FlagStoreError(
                code=ErrorCodes.READ_ERROR,
                message=f"Failed to read {bucket}/{name}: HTTP {resp.status_code}",
            )
        return resp.content
