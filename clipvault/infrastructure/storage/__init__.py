"""
Object storage integration for presigned video URLs.

Supports Backblaze B2 (or any S3-compatible store) via boto3.
Includes mock mode for local development without credentials.
"""

from .client import (
    B2StorageClient,
    MockStorageClient,
    StorageClient,
    StorageConfig,
    StorageError,
    create_storage_client,
)

__all__ = [
    "B2StorageClient",
    "MockStorageClient",
    "StorageClient",
    "StorageConfig",
    "StorageError",
    "create_storage_client",
]
