"""
Shared fixtures.

API tests run against a fresh app whose settings, signer and repository
are replaced through dependency overrides, so nothing talks to B2 or
Supabase and no state leaks between tests.
"""

import pytest
from fastapi.testclient import TestClient

from clipvault.api.dependencies import get_storage_client, get_video_repository
from clipvault.config.settings import Settings, get_settings
from clipvault.infrastructure.storage.client import MockStorageClient
from clipvault.infrastructure.supabase.client import MockSupabaseClient
from clipvault.infrastructure.supabase.repositories.videos import VideoRepository
from clipvault.main import create_app

ACCESS_PASSWORD = "kendama-club"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        access_password=ACCESS_PASSWORD,
        storage_mock_mode=True,
        database_mock_mode=True,
    )


@pytest.fixture
def storage() -> MockStorageClient:
    return MockStorageClient()


@pytest.fixture
def supabase() -> MockSupabaseClient:
    return MockSupabaseClient()


@pytest.fixture
def app(settings, storage, supabase):
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_storage_client] = lambda: storage
    app.dependency_overrides[get_video_repository] = lambda: VideoRepository(supabase)
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"x-access-password": ACCESS_PASSWORD}
