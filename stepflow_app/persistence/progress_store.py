"""Progress persistence gateway."""

import asyncio
import json
from typing import Optional, Union

from ..logging.config import get_persistence_logger
from ..state.models import PERSISTENCE_FAILURE, PersistenceFailure, ProgressRecord
from .backends import KeyValueBackend

DEFAULT_STORAGE_KEY = "userProgress"

LoadResult = Union[ProgressRecord, PersistenceFailure, None]


class ProgressGateway:
    """
    Async load/save/delete of the single progress record.

    Every call waits the configured delay first, so the status screen the
    engine shows alongside it finishes at about the same time. Backend
    exceptions never escape: they are logged and returned as the
    PERSISTENCE_FAILURE sentinel.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        key: str = DEFAULT_STORAGE_KEY,
        delay_ms: int = 2000
    ):
        self.backend = backend
        self.key = key
        self.delay_ms = delay_ms
        self.logger = get_persistence_logger(__name__).bind(storage_key=key)

    async def _delay(self) -> None:
        await asyncio.sleep(self.delay_ms / 1000)

    async def load(self) -> LoadResult:
        """
        Load the progress record.

        Returns:
            ProgressRecord if one is stored, None if absent,
            PERSISTENCE_FAILURE if the backend could not be read
        """
        await self._delay()
        try:
            raw = await asyncio.to_thread(self.backend.get, self.key)
        except Exception as e:
            self.logger.error("Failed to load progress", operation="load", error=str(e))
            return PERSISTENCE_FAILURE

        if not raw:
            self.logger.info("No progress stored")
            return None

        try:
            payload = json.loads(raw)
        except (ValueError, RecursionError):
            self.logger.warning("Stored progress is not decodable JSON, keeping raw value")
            payload = raw

        self.logger.info("Progress loaded")
        return ProgressRecord(payload=payload)

    async def save(self, record: Optional[ProgressRecord] = None) -> Optional[PersistenceFailure]:
        """
        Save the progress record (the default completion record if none given).

        Returns:
            None on success, PERSISTENCE_FAILURE otherwise
        """
        record = record or ProgressRecord.create()
        await self._delay()
        try:
            value = json.dumps(record.payload)
            await asyncio.to_thread(self.backend.set, self.key, value)
        except Exception as e:
            self.logger.error("Failed to save progress", operation="save", error=str(e))
            return PERSISTENCE_FAILURE

        self.logger.info("Progress saved")
        return None

    async def delete(self) -> Optional[PersistenceFailure]:
        """
        Delete the progress record.

        Returns:
            None on success, PERSISTENCE_FAILURE otherwise
        """
        await self._delay()
        try:
            await asyncio.to_thread(self.backend.remove, self.key)
        except Exception as e:
            self.logger.error("Failed to delete progress", operation="delete", error=str(e))
            return PERSISTENCE_FAILURE

        self.logger.info("Progress deleted")
        return None
