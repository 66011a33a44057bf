"""Google Cloud Storage backed blob store."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Callable

import google.auth.exceptions
import requests
from google.api_core import exceptions as api_exceptions
from google.cloud import storage

from .exceptions import ErrorCodes, FlagStoreError
from .storage import BlobStore


class GcsBlobStore(BlobStore):
    """Reads objects with google-cloud-storage.

    A client is created for each read and closed before returning, so no
    connection outlives a single load. The blocking download runs in a worker
    thread.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 10.0,
        client_factory: Callable[[], storage.Client] | None = None,
    ) -> None:
        self._timeout = timeout_seconds
        self._client_factory = client_factory or storage.Client

    async def read(self, bucket: str, name: str) -> bytes:
        return await asyncio.to_thread(self._read_sync, bucket, name)

    def _read_sync(self, bucket: str, name: str) -> bytes:
        try:
            client = self._client_factory()
        except Exception as e:
            raise FlagStoreError(
                code=ErrorCodes.CONNECTION_ERROR,
                message=f"Failed to create storage client: {e}",
                cause=e,
            ) from e

        with contextlib.closing(client):
            try:
                blob = client.bucket(bucket).blob(name)
                # raw_download=False lets gzip-transcoded objects arrive decompressed;
                # retry=None keeps it to a single attempt per load
                return blob.download_as_bytes(
                    raw_download=False, timeout=self._timeout, retry=None
                )
            except (
                requests.exceptions.ConnectionError,
                requests.exceptions.Timeout,
                google.auth.exceptions.TransportError,
            ) as e:
                raise FlagStoreError(
                    code=ErrorCodes.CONNECTION_ERROR,
                    message=f"Storage unreachable reading gs://{bucket}/{name}: {e}",
                    cause=e,
                ) from e
            except api_exceptions.NotFound as e:
                raise FlagStoreError(
                    code=ErrorCodes.READ_ERROR,
                    message=f"Object not found: gs://{bucket}/{name}",
                    cause=e,
                ) from e
            except api_exceptions.GoogleAPIError as e:
                raise FlagStoreError(
                    code=ErrorCodes.READ_ERROR,
                    message=f"Failed to read gs://{bucket}/{name}: {e}",
                    cause=e,
                ) from e
