"""
Presigned URL endpoints.

The browser uploads straight to B2 with the URL from /upload-url, then
reports the returned filename to POST /videos. Downloads work the same
way through /download-url/{filename}. Both routes need the access
password.
"""

from typing import Optional

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, Field

from ..dependencies import RequireAccessPassword, UrlBrokerDep

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class UploadUrlRequest(BaseModel):
    """Fields are optional here so missing ones produce our own 400 message."""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    filename: Optional[str] = Field(None, description="Original file name, e.g. a.mp4")
    content_type: Optional[str] = Field(
        None,
        alias="contentType",
        description="MIME type the client will send with the PUT",
    )


class UploadUrlResponse(BaseModel):
    """Presigned PUT URL and the storage key to record afterwards."""
    model_config = ConfigDict(populate_by_name=True)

    upload_url: str = Field(alias="uploadUrl", description="Presigned PUT URL, valid for one hour")
    filename: str = Field(description="Generated storage key: <uuid>-<original filename>")


class DownloadUrlResponse(BaseModel):
    """Presigned GET URL."""
    model_config = ConfigDict(populate_by_name=True)

    download_url: str = Field(alias="downloadUrl", description="Presigned GET URL, valid for one hour")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/upload-url",
    response_model=UploadUrlResponse,
    status_code=status.HTTP_200_OK,
    summary="Get a presigned upload URL",
    dependencies=[RequireAccessPassword],
)
async def create_upload_url(
    broker: UrlBrokerDep,
    payload: Optional[UploadUrlRequest] = None,
) -> UploadUrlResponse:
    payload = payload or UploadUrlRequest()

    grant = await broker.issue_upload_grant(payload.filename, payload.content_type)

    return UploadUrlResponse(upload_url=grant.upload_url, filename=grant.storage_key)


@router.get(
    "/download-url/{filename}",
    response_model=DownloadUrlResponse,
    status_code=status.HTTP_200_OK,
    summary="Get a presigned download URL",
    description="Does not check that the object exists; a missing key fails when the URL is used.",
    dependencies=[RequireAccessPassword],
)
async def create_download_url(
    filename: str,
    broker: UrlBrokerDep,
) -> DownloadUrlResponse:
    grant = await broker.issue_download_grant(filename)

    return DownloadUrlResponse(download_url=grant.download_url)
