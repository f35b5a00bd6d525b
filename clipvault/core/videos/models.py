"""
Domain models for uploaded videos.

These models have no dependencies on FastAPI, boto3 or Supabase. A
VideoRecord keeps the row exactly as the database returned it; the
typed attributes are read from it, never written back.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union
from uuid import uuid4


def build_storage_key(filename: str) -> str:
    """
    Build a collision-free object key for an upload.

    A fresh UUID4 (36 characters) is prepended to the caller's filename:
    "3f0c...-a.mp4". Uniqueness is probabilistic; nothing in the store
    enforces it.
    """
    return f"{uuid4()}-{filename}"


@dataclass(frozen=True)
class UploadGrant:
    """A presigned PUT URL plus the key the caller must send back with metadata."""
    upload_url: str
    storage_key: str


@dataclass(frozen=True)
class DownloadGrant:
    """A presigned GET URL for one object."""
    download_url: str
    storage_key: str


@dataclass
class NewVideo:
    """Caller-supplied metadata for a video that is about to be recorded."""
    filename: Optional[str] = None
    original_name: Optional[str] = None
    file_size: Optional[int] = None
    description: Optional[str] = None
    event_name: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.filename) and bool(self.original_name)

    def to_row(self) -> dict[str, Any]:
        """Columns sent on insert. uploaded_at and id are assigned by the store."""
        return {
            "filename": self.filename,
            "original_name": self.original_name,
            "file_size": self.file_size,
            "description": self.description,
            "event_name": self.event_name,
        }


@dataclass(frozen=True)
class VideoRecord:
    """
    One stored video's metadata.

    Records are never updated or deleted by this service. `row` is what
    the store returned, including columns this code doesn't know about
    and uploaded_at in the store's own text format; clients get it
    unchanged.
    """
    filename: str
    original_name: str
    uploaded_at: Any = None
    id: Optional[Union[int, str]] = None
    file_size: Optional[int] = None
    description: Optional[str] = None
    event_name: Optional[str] = None
    row: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "VideoRecord":
        """Wrap a database row (Supabase returns dicts) without reformatting it."""
        return cls(
            id=row.get("id"),
            filename=row.get("filename"),
            original_name=row.get("original_name"),
            file_size=row.get("file_size"),
            description=row.get("description"),
            event_name=row.get("event_name"),
            uploaded_at=row.get("uploaded_at"),
            row=dict(row),
        )

    def to_dict(self) -> dict[str, Any]:
        """The stored row, as returned to clients."""
        return dict(self.row)
