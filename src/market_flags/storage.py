"""Blob store abstraction for the flag dataset."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .exceptions import ErrorCodes, FlagStoreError


class BlobStore(ABC):
    """Read-only access to objects in a bucket."""

    @abstractmethod
    async def read(self, bucket: str, name: str) -> bytes:
        """Return the full contents of ``bucket/name``.

        Raises:
            FlagStoreError: CONNECTION_ERROR when the store is unreachable,
                READ_ERROR when the object cannot be opened or streamed.
        """


class InMemoryBlobStore(BlobStore):
    """In-memory blob store for testing."""

    def __init__(self) -> None:
        self._objects: dict[tuple[str, str], bytes] = {}
        self._failure: str | None = None
        self.read_count = 0

    def put(self, bucket: str, name: str, data: bytes | str) -> None:
        """Store an object."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._objects[(bucket, name)] = data

    def fail_with(self, code: str | None) -> None:
        """Make subsequent reads fail with ``code``; ``None`` clears it."""
        self._failure = code

    async def read(self, bucket: str, name: str) -> bytes:
        self.read_count += 1
        if self._failure is not None:
            raise FlagStoreError(self._failure, f"Simulated failure reading {bucket}/{name}")
        data = self._objects.get((bucket, name))
        if data is None:
            raise FlagStoreError(ErrorCodes.READ_ERROR, f"Object not found: {bucket}/{name}")
        return data
