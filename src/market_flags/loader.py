"""Flag dataset loader."""

from __future__ import annotations

import asyncio
import time

import structlog
from pydantic import ValidationError

from .exceptions import ErrorCodes, FlagStoreError
from .metrics import flag_store_load_duration_seconds
from .models import FlagSet
from .storage import BlobStore

logger = structlog.stdlib.get_logger(__name__)


class FlagStoreLoader:
    """Fetches the flag dataset object and decodes it into a FlagSet.

    Every call to ``load`` performs a fresh fetch; nothing is cached.
    """

    def __init__(
        self,
        store: BlobStore,
        bucket: str,
        object_name: str,
        *,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._store = store
        self._bucket = bucket
        self._object_name = object_name
        self._timeout = timeout_seconds

    @property
    def location(self) -> str:
        return f"{self._bucket}/{self._object_name}"

    async def load(self) -> FlagSet:
        """Fetch and decode the dataset.

        Raises:
            FlagStoreError: CONNECTION_ERROR, READ_ERROR or DECODE_ERROR.
        """
        started = time.perf_counter()
        try:
            data = await self._fetch()
            flag_set = self._decode(data)
        finally:
            flag_store_load_duration_seconds.record(time.perf_counter() - started)

        logger.debug(
            "flag dataset loaded",
            location=self.location,
            size_bytes=len(data),
            flag_count=len(flag_set.feature_flags),
        )
        return flag_set

    async def _fetch(self) -> bytes:
        try:
            return await asyncio.wait_for(
                self._store.read(self._bucket, self._object_name),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            raise FlagStoreError(
                code=ErrorCodes.CONNECTION_ERROR,
                message=f"Timed out after {self._timeout}s reading {self.location}",
                cause=e,
            ) from e

    def _decode(self, data: bytes) -> FlagSet:
        try:
            return FlagSet.from_json(data)
        except ValidationError as e:
            raise FlagStoreError(
                code=ErrorCodes.DECODE_ERROR,
                message=f"Invalid flag dataset in {self.location}: {e}",
                cause=e,
            ) from e
