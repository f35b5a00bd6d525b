"""
Unit tests for the B2 signer, the Supabase repository and configuration.

B2 presigning is computed locally by botocore from the key pair, so
these tests exercise the real client without network access.
"""

import asyncio
import logging
from urllib.parse import parse_qs, urlparse

import pytest
from pydantic import ValidationError

from clipvault.api.dependencies import verify_access_password
from clipvault.config.settings import DEFAULT_CORS_ORIGINS, Settings
from clipvault.core.errors import AuthenticationError
from clipvault.core.videos.models import NewVideo
from clipvault.infrastructure.storage.client import (
    B2StorageClient,
    MockStorageClient,
    StorageConfig,
    StorageError,
    create_storage_client,
)
from clipvault.infrastructure.supabase.client import MockSupabaseClient, create_supabase_client
from clipvault.infrastructure.supabase.repositories.videos import DatabaseError, VideoRepository


B2_CONFIG = StorageConfig(
    access_key_id="004a1b2c3d4e5f60000000001",
    secret_access_key="K004notARealSecretKeyValue",
    bucket_name="club-videos",
    endpoint_url="https://s3.us-west-004.backblazeb2.com",
    region="us-west-004",
)


# ---------------------------------------------------------------------------
# Storage Client Tests
# ---------------------------------------------------------------------------

class ExplodingS3:
    def generate_presigned_url(self, *args, **kwargs):
        raise ValueError("Invalid bucket name")


class TestB2StorageClient:
    """Tests for presigned URL generation against B2."""

    def test_upload_url_is_path_style_sigv4(self):
        client = B2StorageClient(B2_CONFIG)

        url = asyncio.run(client.generate_upload_url("abc-a.mp4", "video/mp4"))
        parsed = urlparse(url)
        query = parse_qs(parsed.query)

        assert parsed.scheme == "https"
        assert parsed.netloc == "s3.us-west-004.backblazeb2.com"
        assert parsed.path == "/club-videos/abc-a.mp4"
        assert query["X-Amz-Algorithm"] == ["AWS4-HMAC-SHA256"]
        assert query["X-Amz-Expires"] == ["3600"]
        assert "us-west-004" in query["X-Amz-Credential"][0]
        assert "X-Amz-Signature" in query

    def test_download_url_signs_get_for_key(self):
        client = B2StorageClient(B2_CONFIG)

        url = asyncio.run(client.generate_download_url("abc-a.mp4", expiry_seconds=120))
        parsed = urlparse(url)

        assert parsed.path == "/club-videos/abc-a.mp4"
        assert parse_qs(parsed.query)["X-Amz-Expires"] == ["120"]

    def test_upload_and_download_signatures_differ(self):
        """A PUT grant cannot be replayed as a GET and vice versa."""
        client = B2StorageClient(B2_CONFIG)

        put_url = asyncio.run(client.generate_upload_url("abc-a.mp4", "video/mp4"))
        get_url = asyncio.run(client.generate_download_url("abc-a.mp4"))

        put_sig = parse_qs(urlparse(put_url).query)["X-Amz-Signature"]
        get_sig = parse_qs(urlparse(get_url).query)["X-Amz-Signature"]
        assert put_sig != get_sig

    def test_signing_failure_raises_without_logging(self, caplog):
        """The client only raises; the broker logs the failure once."""
        client = B2StorageClient(B2_CONFIG)
        client._s3_client = ExplodingS3()

        with caplog.at_level(logging.ERROR):
            with pytest.raises(StorageError, match="upload URL generation failed"):
                asyncio.run(client.generate_upload_url("abc-a.mp4", "video/mp4"))
            with pytest.raises(StorageError, match="download URL generation failed"):
                asyncio.run(client.generate_download_url("abc-a.mp4"))

        assert caplog.records == []


class TestCreateStorageClient:
    """Tests for the storage factory."""

    def test_mock_mode_needs_no_config(self):
        assert isinstance(create_storage_client(mock_mode=True), MockStorageClient)

    def test_real_mode_requires_config(self):
        with pytest.raises(ValueError, match="config is required"):
            create_storage_client()

    def test_real_mode_builds_b2_client(self):
        assert isinstance(create_storage_client(config=B2_CONFIG), B2StorageClient)


# ---------------------------------------------------------------------------
# Supabase Repository Tests
# ---------------------------------------------------------------------------

class BrokenTable:
    def insert(self, json):
        return self

    def select(self, *columns):
        return self

    def order(self, column, *, desc=False):
        return self

    def execute(self):
        raise RuntimeError("relation \"videos\" does not exist")


class BrokenClient:
    def table(self, table_name):
        return BrokenTable()


class TestVideoRepository:
    """Tests for the Supabase-backed repository."""

    def test_insert_assigns_id_and_timestamp(self):
        database = MockSupabaseClient()
        repo = VideoRepository(database)

        record = repo.insert(NewVideo(filename="k-a.mp4", original_name="a.mp4"))

        assert record.id == 1
        assert record.uploaded_at
        assert record.to_dict() == database._rows()[0]
        assert database._rows()[0]["filename"] == "k-a.mp4"

    def test_uses_configured_table(self):
        database = MockSupabaseClient()
        repo = VideoRepository(database, table="clips")

        repo.insert(NewVideo(filename="k-a.mp4", original_name="a.mp4"))

        assert database._rows("videos") == []
        assert len(database._rows("clips")) == 1
        assert len(repo.list_all()) == 1

    def test_query_failures_raise_database_error(self, caplog):
        repo = VideoRepository(BrokenClient())

        with caplog.at_level(logging.ERROR):
            with pytest.raises(DatabaseError, match="Insert failed"):
                repo.insert(NewVideo(filename="k-a.mp4", original_name="a.mp4"))
            with pytest.raises(DatabaseError, match="Select failed"):
                repo.list_all()

        # the recorder logs these; the repository only raises
        assert caplog.records == []

    def test_factory_requires_config_outside_mock_mode(self):
        assert isinstance(create_supabase_client(mock_mode=True), MockSupabaseClient)
        with pytest.raises(ValueError, match="config is required"):
            create_supabase_client()


# ---------------------------------------------------------------------------
# Settings Tests
# ---------------------------------------------------------------------------

class TestSettings:
    """Tests for configuration parsing and validation."""

    def test_bare_b2_host_gets_https(self):
        settings = Settings(_env_file=None, b2_endpoint="s3.us-west-004.backblazeb2.com")
        assert settings.b2_endpoint_url == "https://s3.us-west-004.backblazeb2.com"

    def test_full_b2_url_is_kept(self):
        settings = Settings(_env_file=None, b2_endpoint="http://localhost:9000")
        assert settings.b2_endpoint_url == "http://localhost:9000"

    def test_default_cors_origins(self):
        origins = Settings(_env_file=None, cors_origins=DEFAULT_CORS_ORIGINS).cors_origins_list
        assert "https://kendama.club" in origins
        assert "http://localhost:5173" in origins

    def test_production_suppresses_local_listener(self):
        assert Settings(_env_file=None, app_env="development").serves_locally
        assert not Settings(_env_file=None, app_env="production").serves_locally

    def test_missing_fields_respect_mock_modes(self):
        settings = Settings(
            _env_file=None,
            access_password="",
            b2_endpoint="",
            supabase_url="",
            storage_mock_mode=True,
            database_mock_mode=False,
        )
        missing = settings.validate_required_fields()

        assert "ACCESS_PASSWORD" in missing
        assert "SUPABASE_URL" in missing
        assert "B2_ENDPOINT" not in missing

    def test_settings_are_immutable(self):
        settings = Settings(_env_file=None, access_password="secret")

        with pytest.raises(ValidationError):
            settings.access_password = "changed"


# ---------------------------------------------------------------------------
# Access Gate Tests
# ---------------------------------------------------------------------------

class TestAccessGate:
    """Tests for the shared-password check."""

    def _check(self, expected, header=None, query=None):
        settings = Settings(_env_file=None, access_password=expected)
        return asyncio.run(verify_access_password(settings, header, query))

    def test_header_password_accepted(self):
        assert self._check("secret", header="secret") is None

    def test_query_password_accepted(self):
        assert self._check("secret", query="secret") is None

    def test_wrong_or_missing_password_rejected(self):
        with pytest.raises(AuthenticationError, match="Invalid password"):
            self._check("secret", header="guess")
        with pytest.raises(AuthenticationError):
            self._check("secret")

    def test_unconfigured_password_rejects_everything(self):
        """An empty ACCESS_PASSWORD must not let empty credentials through."""
        with pytest.raises(AuthenticationError):
            self._check("", header="")
        with pytest.raises(AuthenticationError):
            self._check("", header="anything")
