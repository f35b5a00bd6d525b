"""
Presigned URL broker.

Clients upload and download video bytes directly against object storage;
this service only hands out short-lived signed URLs. The broker validates
input, picks the storage key and asks a signer for the URL. It doesn't
know whether the signer is boto3 or an in-memory fake.
"""

import logging
from typing import Protocol

from ..errors import BackendError, InvalidRequestError
from .models import DownloadGrant, UploadGrant, build_storage_key

logger = logging.getLogger(__name__)


DEFAULT_EXPIRY_SECONDS = 3600


class UrlSigner(Protocol):
    """Anything that can presign single PUT and GET requests for one key."""

    async def generate_upload_url(
        self,
        storage_path: str,
        content_type: str,
        expiry_seconds: int = DEFAULT_EXPIRY_SECONDS,
    ) -> str:
        ...

    async def generate_download_url(
        self,
        storage_path: str,
        expiry_seconds: int = DEFAULT_EXPIRY_SECONDS,
    ) -> str:
        ...


class UrlBroker:
    """
    Issues upload and download grants.

    Every grant is valid for expiry_seconds from issuance and carries no
    authentication beyond its signature. Download grants are issued
    without checking that the object exists.
    """

    def __init__(
        self,
        signer: UrlSigner,
        expiry_seconds: int = DEFAULT_EXPIRY_SECONDS,
    ) -> None:
        self._signer = signer
        self._expiry_seconds = expiry_seconds

    async def issue_upload_grant(
        self,
        filename: str | None,
        content_type: str | None,
    ) -> UploadGrant:
        if not filename or not content_type:
            raise InvalidRequestError("filename and contentType are required")

        storage_key = build_storage_key(filename)

        try:
            upload_url = await self._signer.generate_upload_url(
                storage_key,
                content_type,
                expiry_seconds=self._expiry_seconds,
            )
        except Exception as e:
            logger.error(
                "Error generating upload URL",
                extra={"storage_key": storage_key, "error": str(e)}
            )
            raise BackendError("Failed to generate upload URL") from e

        logger.debug(
            "Issued upload grant",
            extra={"storage_key": storage_key, "content_type": content_type}
        )

        return UploadGrant(upload_url=upload_url, storage_key=storage_key)

    async def issue_download_grant(self, storage_key: str | None) -> DownloadGrant:
        if not storage_key:
            raise InvalidRequestError("filename is required")

        try:
            download_url = await self._signer.generate_download_url(
                storage_key,
                expiry_seconds=self._expiry_seconds,
            )
        except Exception as e:
            logger.error(
                "Error generating download URL",
                extra={"storage_key": storage_key, "error": str(e)}
            )
            raise BackendError("Failed to generate download URL") from e

        logger.debug("Issued download grant", extra={"storage_key": storage_key})

        return DownloadGrant(download_url=download_url, storage_key=storage_key)
