"""GcsBlobStore tests with a mocked storage client."""

from unittest.mock import MagicMock

import google.auth.exceptions
import pytest
import requests
from google.api_core import exceptions as api_exceptions

from market_flags import ErrorCodes, FlagStoreError
from market_flags.gcs import GcsBlobStore


def make_client(download: object) -> MagicMock:
    client = MagicMock()
    blob = client.bucket.return_value.blob.return_value
    if isinstance(download, BaseException):
        blob.download_as_bytes.side_effect = download
    else:
        blob.download_as_bytes.return_value = download
    return client


async def test_read_success_closes_client() -> None:
    """A single download attempt without retries, then the client is closed."""
    client = make_client(b'{"featureFlags": []}')
    store = GcsBlobStore(timeout_seconds=3.0, client_factory=lambda: client)

    data = await store.read("flags-bucket", "flags.json")

    assert data == b'{"featureFlags": []}'
    client.bucket.assert_called_once_with("flags-bucket")
    client.bucket.return_value.blob.assert_called_once_with("flags.json")
    client.bucket.return_value.blob.return_value.download_as_bytes.assert_called_once_with(
        raw_download=False, timeout=3.0, retry=None
    )
    client.close.assert_called_once()


async def test_client_construction_failure_is_connection_error() -> None:
    """Missing credentials surface as CONNECTION_ERROR."""

    def factory() -> MagicMock:
        raise google.auth.exceptions.DefaultCredentialsError("no credentials")

    store = GcsBlobStore(client_factory=factory)
    with pytest.raises(FlagStoreError) as exc_info:
        await store.read("flags-bucket", "flags.json")
    assert exc_info.value.code == ErrorCodes.CONNECTION_ERROR


async def test_missing_object_is_read_error_and_closes_client() -> None:
    """A missing object is READ_ERROR and the client is still closed."""
    client = make_client(api_exceptions.NotFound("no such object"))
    store = GcsBlobStore(client_factory=lambda: client)
    with pytest.raises(FlagStoreError) as exc_info:
        await store.read("flags-bucket", "flags.json")
    assert exc_info.value.code == ErrorCodes.READ_ERROR
    assert "gs://flags-bucket/flags.json" in str(exc_info.value)
    client.close.assert_called_once()


async def test_api_error_is_read_error() -> None:
    """Other API errors are READ_ERROR."""
    client = make_client(api_exceptions.Forbidden("denied"))
    store = GcsBlobStore(client_factory=lambda: client)
    with pytest.raises(FlagStoreError) as exc_info:
        await store.read("flags-bucket", "flags.json")
    assert exc_info.value.code == ErrorCodes.READ_ERROR


async def test_network_failure_is_connection_error() -> None:
    """A refused connection is CONNECTION_ERROR."""
    client = make_client(requests.exceptions.ConnectionError("refused"))
    store = GcsBlobStore(client_factory=lambda: client)
    with pytest.raises(FlagStoreError) as exc_info:
        await store.read("flags-bucket", "flags.json")
    assert exc_info.value.code == ErrorCodes.CONNECTION_ERROR
    client.close.assert_called_once()


async def test_download_timeout_is_connection_error() -> None:
    """A download timeout is CONNECTION_ERROR and the client is closed."""
    client = make_client(requests.exceptions.Timeout("read timed out"))
    store = GcsBlobStore(timeout_seconds=0.5, client_factory=lambda: client)
    with pytest.raises(FlagStoreError) as exc_info:
        await store.read("flags-bucket", "flags.json")
    assert exc_info.value.code == ErrorCodes.CONNECTION_ERROR
    assert "gs://flags-bucket/flags.json" in str(exc_info.value)
    client.close.assert_called_once()
