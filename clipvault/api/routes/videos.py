"""
Video metadata endpoints.

Listing is public so the gallery page can render without a password.
Recording a new video requires the access password.
"""

from typing import Any, Optional

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, Field

from ...core.videos.models import NewVideo
from ..dependencies import MetadataRecorderDep, RequireAccessPassword

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class VideoCreateRequest(BaseModel):
    """
    Metadata sent after a successful upload.

    Numbers are accepted for the text fields and stored as strings.
    """
    model_config = ConfigDict(coerce_numbers_to_str=True)

    filename: Optional[str] = Field(None, description="Storage key returned by /upload-url")
    original_name: Optional[str] = Field(None, description="Display name")
    file_size: Optional[int] = Field(None, description="Size in bytes")
    description: Optional[str] = None
    event_name: Optional[str] = Field(None, description="Event the clip was filmed at")

    def to_new_video(self) -> NewVideo:
        return NewVideo(
            filename=self.filename,
            original_name=self.original_name,
            file_size=self.file_size,
            description=self.description,
            event_name=self.event_name,
        )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/videos",
    response_model=dict[str, Any],
    status_code=status.HTTP_200_OK,
    summary="Record an uploaded video",
    dependencies=[RequireAccessPassword],
)
async def create_video(
    recorder: MetadataRecorderDep,
    payload: Optional[VideoCreateRequest] = None,
) -> dict[str, Any]:
    payload = payload or VideoCreateRequest()

    record = await recorder.create(payload.to_new_video())

    return record.to_dict()


@router.get(
    "/videos",
    response_model=list[dict[str, Any]],
    status_code=status.HTTP_200_OK,
    summary="List all videos",
    description="Every recorded video, most recently uploaded first. No pagination.",
)
async def list_videos(recorder: MetadataRecorderDep) -> list[dict[str, Any]]:
    records = await recorder.list_all()

    return [record.to_dict() for record in records]
