"""
FastAPI dependency injection.

Dependencies provide configuration, clients and services to route
handlers, so routes never build their own and tests can swap any of
them through app.dependency_overrides.

The access gate lives here too: protected routes declare
verify_access_password in their dependencies list.
"""

import logging
import secrets
from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Security
from fastapi.security import APIKeyHeader, APIKeyQuery

from ..config.settings import Settings, get_settings
from ..core.errors import AuthenticationError
from ..core.videos.broker import UrlBroker
from ..core.videos.recorder import MetadataRecorder
from ..infrastructure.storage.client import StorageClient, StorageConfig, create_storage_client
from ..infrastructure.supabase.client import create_supabase_client
from ..infrastructure.supabase.repositories.videos import SupabaseConfig, VideoRepository

logger = logging.getLogger(__name__)

ACCESS_PASSWORD_HEADER = "x-access-password"
ACCESS_PASSWORD_QUERY = "password"

access_password_header = APIKeyHeader(name=ACCESS_PASSWORD_HEADER, auto_error=False)
access_password_query = APIKeyQuery(name=ACCESS_PASSWORD_QUERY, auto_error=False)


# ---------------------------------------------------------------------------
# Access Gate
# ---------------------------------------------------------------------------

async def verify_access_password(
    settings: Annotated[Settings, Depends(get_settings)],
    header_password: Optional[str] = Security(access_password_header),
    query_password: Optional[str] = Security(access_password_query),
) -> None:
    """
    Reject the request unless it carries the shared access password.

    The header wins over the query parameter. An unset ACCESS_PASSWORD
    matches nothing, so a misconfigured deployment fails closed.
    """
    supplied = header_password or query_password
    expected = settings.access_password

    if not supplied or not expected or not secrets.compare_digest(
        supplied.encode("utf-8"), expected.encode("utf-8")
    ):
        logger.warning(
            "Rejected request with invalid access password",
            extra={"password_supplied": bool(supplied)}
        )
        raise AuthenticationError("Invalid password")


# ---------------------------------------------------------------------------
# Client Dependencies
# ---------------------------------------------------------------------------

# Clients are cached per Settings value: one boto3/Supabase client per process,
# and in mock mode the in-memory data persists across requests.

@lru_cache()
def _storage_client_for(settings: Settings) -> StorageClient:
    if settings.storage_mock_mode:
        return create_storage_client(mock_mode=True)

    config = StorageConfig(
        access_key_id=settings.b2_key_id,
        secret_access_key=settings.b2_application_key,
        bucket_name=settings.b2_bucket_name,
        endpoint_url=settings.b2_endpoint_url,
        region=settings.b2_region,
    )
    return create_storage_client(config=config)


@lru_cache()
def _video_repository_for(settings: Settings) -> VideoRepository:
    if settings.database_mock_mode:
        client = create_supabase_client(mock_mode=True)
    else:
        config = SupabaseConfig(
            url=settings.supabase_url,
            key=settings.supabase_key,
            table=settings.supabase_table,
        )
        client = create_supabase_client(config=config)

    return VideoRepository(client, table=settings.supabase_table)


def get_storage_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> StorageClient:
    """Provide the B2 signer, or the mock signer in storage mock mode."""
    return _storage_client_for(settings)


def get_video_repository(
    settings: Annotated[Settings, Depends(get_settings)],
) -> VideoRepository:
    """Provide the videos repository, backed by Supabase or the in-memory mock."""
    return _video_repository_for(settings)


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_url_broker(
    settings: Annotated[Settings, Depends(get_settings)],
    storage: Annotated[StorageClient, Depends(get_storage_client)],
) -> UrlBroker:
    return UrlBroker(storage, expiry_seconds=settings.presign_expiry_seconds)


def get_metadata_recorder(
    repository: Annotated[VideoRepository, Depends(get_video_repository)],
) -> MetadataRecorder:
    return MetadataRecorder(repository)


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
RequireAccessPassword = Depends(verify_access_password)
UrlBrokerDep = Annotated[UrlBroker, Depends(get_url_broker)]
MetadataRecorderDep = Annotated[MetadataRecorder, Depends(get_metadata_recorder)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
