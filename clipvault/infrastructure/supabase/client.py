"""
Supabase client management.

Provides the client factory for the managed Postgres store, plus an
in-memory mock for local development.

Most code never touches this module directly - it goes through
VideoRepository which handles the translation between domain models
and table rows.
"""

import itertools
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from .repositories.videos import DatabaseError, SupabaseClient, SupabaseConfig

logger = logging.getLogger(__name__)


def get_supabase_client(config: SupabaseConfig) -> SupabaseClient:
    """
    Create a Supabase client.

    supabase-py talks to PostgREST over HTTP, so there is no connection
    to hold open; one client can serve every request.
    """
    from supabase import create_client

    try:
        client = create_client(config.url, config.key)
    except Exception as e:
        logger.error(
            "Supabase client creation failed",
            extra={"error": str(e), "url": config.url}
        )
        raise DatabaseError(f"Client creation failed: {e}") from e

    logger.info("Initialized Supabase client", extra={"url": config.url})

    return client


# ---------------------------------------------------------------------------
# Mock Client for Local Development
# ---------------------------------------------------------------------------

@dataclass
class MockResponse:
    """Mirrors the .data attribute of a postgrest APIResponse."""
    data: list[dict[str, Any]] = field(default_factory=list)


class MockTableQuery:
    """
    Mock query builder for a single table.

    Implements just enough of the postgrest builder chain
    (insert / select / order / execute) for VideoRepository.
    """

    def __init__(self, rows: list[dict[str, Any]], ids: itertools.count) -> None:
        self._rows = rows
        self._ids = ids
        self._pending_insert: Optional[list[dict[str, Any]]] = None
        self._order: Optional[tuple[str, bool]] = None

    def insert(self, json: Any) -> "MockTableQuery":
        self._pending_insert = json if isinstance(json, list) else [json]
        return self

    def select(self, *columns: str) -> "MockTableQuery":
        return self

    def order(self, column: str, *, desc: bool = False) -> "MockTableQuery":
        self._order = (column, desc)
        return self

    def execute(self) -> MockResponse:
        if self._pending_insert is not None:
            inserted = []
            for row in self._pending_insert:
                stored = {
                    **row,
                    "id": next(self._ids),
                    "uploaded_at": datetime.now(timezone.utc).isoformat(),
                }
                self._rows.append(stored)
                inserted.append(dict(stored))
            return MockResponse(data=inserted)

        rows = [dict(row) for row in self._rows]
        if self._order:
            column, desc = self._order
            # id breaks ties between rows inserted within the same microsecond
            rows.sort(key=lambda r: (r.get(column) or "", r["id"]), reverse=desc)
        return MockResponse(data=rows)


class MockSupabaseClient:
    """
    Mock Supabase client for local development.

    Stores rows in memory. The store assigns id and uploaded_at the way
    the real table defaults do.

    Not suitable for production, but perfect for:
    - Local development
    - Unit tests
    - CI/CD environments
    """

    def __init__(self) -> None:
        # In-memory storage: {table_name: [row_dict, ...]}
        self._tables: dict[str, list[dict[str, Any]]] = {}
        self._ids = itertools.count(1)

        logger.info("Initialized mock Supabase client (in-memory)")

    def table(self, table_name: str) -> MockTableQuery:
        return MockTableQuery(self._tables.setdefault(table_name, []), self._ids)

    # Helper methods for testing
    def _rows(self, table_name: str = "videos") -> list[dict[str, Any]]:
        """Rows currently stored in a table (for test assertions)."""
        return list(self._tables.get(table_name, []))


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_supabase_client(
    config: Optional[SupabaseConfig] = None,
    mock_mode: bool = False,
) -> SupabaseClient:
    """
    Create Supabase client based on configuration.

    Args:
        config: Supabase configuration (required if not mock_mode)
        mock_mode: If True, return mock client for testing

    Returns:
        SupabaseClient implementation (real or mock)
    """
    if mock_mode:
        return MockSupabaseClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return get_supabase_client(config)
