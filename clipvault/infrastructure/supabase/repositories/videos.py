"""
Supabase repository for video metadata.

The repository:
1. Translates between VideoRecord and table rows
2. Encapsulates all queries against the videos table
3. Wraps SDK failures in DatabaseError

The application code never builds a query itself.
"""

from dataclasses import dataclass
from typing import Protocol

from clipvault.core.videos.models import NewVideo, VideoRecord


class SupabaseClient(Protocol):
    """
    The slice of supabase.Client this repository uses.

    Using a protocol means tests can provide a mock without
    talking to a real Supabase project.
    """

    def table(self, table_name: str): ...


@dataclass(frozen=True)
class SupabaseConfig:
    """Configuration for the Supabase connection."""
    url: str
    key: str
    table: str = "videos"


class DatabaseError(Exception):
    """Raised when a Supabase query fails."""
    pass


class VideoRepository:
    """
    Repository for video metadata persistence.

    - insert: store one new row, return it as the database assigned it
    - list_all: every row, newest upload first
    """

    def __init__(self, client: SupabaseClient, table: str = "videos") -> None:
        self._client = client
        self._table = table

    def insert(self, video: NewVideo) -> VideoRecord:
        try:
            # Supabase returns the inserted representation by default
            response = self._client.table(self._table).insert(video.to_row()).execute()
        except Exception as e:
            raise DatabaseError(f"Insert failed: {e}") from e

        if not response.data:
            raise DatabaseError("Insert returned no rows")

        return VideoRecord.from_row(response.data[0])

    def list_all(self) -> list[VideoRecord]:
        try:
            response = (
                self._client.table(self._table)
                .select("*")
                .order("uploaded_at", desc=True)
                .execute()
            )
        except Exception as e:
            raise DatabaseError(f"Select failed: {e}") from e

        return [VideoRecord.from_row(row) for row in response.data or []]
