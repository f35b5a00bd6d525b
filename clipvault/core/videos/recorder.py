"""
Video metadata recorder.

Records what was uploaded (storage key, display name, size, notes) in the
relational store and lists it back. The store does the real work: it
assigns ids and timestamps and orders the listing.

Repository calls are blocking SDK calls, so they run in a worker thread
to keep one slow query from stalling every other request.
"""

import asyncio
import logging
from typing import Protocol

from ..errors import BackendError, InvalidRequestError
from .models import NewVideo, VideoRecord

logger = logging.getLogger(__name__)


class VideoStore(Protocol):
    """Persistence operations the recorder needs."""

    def insert(self, video: NewVideo) -> VideoRecord:
        """Insert one row and return it as stored."""
        ...

    def list_all(self) -> list[VideoRecord]:
        """Every row, newest uploaded_at first."""
        ...


class MetadataRecorder:
    """
    Creates and lists VideoRecords.

    Neither operation looks at object storage, so a record can point at a
    key whose upload never happened.
    """

    def __init__(self, store: VideoStore) -> None:
        self._store = store

    async def create(self, video: NewVideo) -> VideoRecord:
        if not video.is_complete:
            raise InvalidRequestError("filename and original_name are required")

        try:
            record = await asyncio.to_thread(self._store.insert, video)
        except Exception as e:
            logger.error(
                "Error saving video metadata",
                extra={"storage_key": video.filename, "error": str(e)}
            )
            raise BackendError("Failed to save video metadata") from e

        logger.info(
            "Recorded video",
            extra={"storage_key": record.filename, "original_name": record.original_name}
        )

        return record

    async def list_all(self) -> list[VideoRecord]:
        # Whole table on every call; volume is expected to stay small.
        try:
            return await asyncio.to_thread(self._store.list_all)
        except Exception as e:
            logger.error("Error fetching videos", extra={"error": str(e)})
            raise BackendError("Failed to fetch videos") from e
