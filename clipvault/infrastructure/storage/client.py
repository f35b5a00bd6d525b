"""
Object storage URL signing for uploaded videos.

Supports Backblaze B2 through its S3-compatible API, with a mock mode for
local development. Video bytes never pass through this service: clients
PUT and GET directly against the bucket using presigned URLs.

Mock mode hands out fake URLs from memory, enabling API testing without
a B2 account.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol
from urllib.parse import quote

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


@dataclass(frozen=True)
class StorageConfig:
    """
    Configuration for B2/S3-compatible storage.

    endpoint_url must be a full URL (https://s3.<region>.backblazeb2.com).
    """
    access_key_id: str
    secret_access_key: str
    bucket_name: str
    endpoint_url: str
    region: str


class StorageClient(Protocol):
    """
    Protocol for presigning object storage requests.

    Using a protocol means tests can provide mocks and we can
    swap storage backends without changing dependent code.
    """

    async def generate_upload_url(
        self,
        storage_path: str,
        content_type: str,
        expiry_seconds: int = 3600,
    ) -> str:
        """Generate a temporary URL allowing one PUT of content_type."""
        ...

    async def generate_download_url(
        self,
        storage_path: str,
        expiry_seconds: int = 3600,
    ) -> str:
        """Generate a temporary download URL."""
        ...


class B2StorageClient:
    """
    Backblaze B2 object storage client.

    Uses boto3 because B2 is S3-compatible. Signing happens locally from
    the key pair, so none of these methods make a network call.
    """

    def __init__(self, config: StorageConfig) -> None:
        import boto3
        from botocore.config import Config

        self._config = config

        # B2 only accepts v4 signatures
        boto_config = Config(
            signature_version='s3v4',
            s3={'addressing_style': 'path'},
        )

        self._s3_client = boto3.client(
            's3',
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            region_name=config.region,
            config=boto_config,
        )

        logger.info(
            "Initialized B2 storage client",
            extra={
                "bucket": config.bucket_name,
                "endpoint": config.endpoint_url,
            }
        )

    async def generate_upload_url(
        self,
        storage_path: str,
        content_type: str,
        expiry_seconds: int = 3600,
    ) -> str:
        """
        Generate a presigned PUT URL.

        ContentType is part of the signature, so the client must send the
        same Content-Type header when uploading.
        """
        try:
            return self._s3_client.generate_presigned_url(
                'put_object',
                Params={
                    'Bucket': self._config.bucket_name,
                    'Key': storage_path,
                    'ContentType': content_type,
                },
                ExpiresIn=expiry_seconds,
            )

        except Exception as e:
            raise StorageError(f"Presigned upload URL generation failed: {e}") from e

    async def generate_download_url(
        self,
        storage_path: str,
        expiry_seconds: int = 3600,
    ) -> str:
        """Generate a presigned GET URL. The object is not checked for existence."""
        try:
            return self._s3_client.generate_presigned_url(
                'get_object',
                Params={
                    'Bucket': self._config.bucket_name,
                    'Key': storage_path,
                },
                ExpiresIn=expiry_seconds,
            )

        except Exception as e:
            raise StorageError(f"Presigned download URL generation failed: {e}") from e


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

class MockStorageClient:
    """
    In-memory stand-in for B2 presigning.

    Returns URLs that look like presigned ones but point nowhere, and
    remembers every grant it issued so tests can assert on them.
    """

    def __init__(self, bucket_name: str = "mock-bucket") -> None:
        self._bucket_name = bucket_name
        # (method, storage_path, expiry_seconds) for every URL issued
        self.issued: list[tuple[str, str, int]] = []
        logger.info("Initialized mock storage client (in-memory)")

    async def generate_upload_url(
        self,
        storage_path: str,
        content_type: str,
        expiry_seconds: int = 3600,
    ) -> str:
        self.issued.append(("PUT", storage_path, expiry_seconds))
        return self._build_url(storage_path, "PUT", expiry_seconds)

    async def generate_download_url(
        self,
        storage_path: str,
        expiry_seconds: int = 3600,
    ) -> str:
        self.issued.append(("GET", storage_path, expiry_seconds))
        return self._build_url(storage_path, "GET", expiry_seconds)

    def _build_url(self, storage_path: str, method: str, expiry_seconds: int) -> str:
        return (
            f"https://mock-storage.local/{self._bucket_name}/{quote(storage_path)}"
            f"?X-Mock-Method={method}&X-Amz-Expires={expiry_seconds}"
        )


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    config: Optional[StorageConfig] = None,
    mock_mode: bool = False,
) -> StorageClient:
    """
    Create storage client based on configuration.

    Args:
        config: Storage configuration (required if not mock_mode)
        mock_mode: If True, return mock client for testing

    Returns:
        StorageClient implementation (B2 or Mock)
    """
    if mock_mode:
        return MockStorageClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return B2StorageClient(config)
