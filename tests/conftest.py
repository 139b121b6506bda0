"""Shared fixtures for the freee-cli test suite."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import httpx
import pytest

from freee_cli.config import Config, Settings
from freee_cli.models.auth import TokenRecord
from freee_cli.storage import CredentialStore


@pytest.fixture
def fake_settings(tmp_path) -> Settings:
    return Settings(
        client_id="test-client-id",
        client_secret="test-client-secret",
        callback_port=0,
        api_base_url="https://api.test.freee.local",
        token_endpoint="https://accounts.test.freee.local/public_api/token",
        authorization_endpoint="https://accounts.test.freee.local/public_api/authorize",
        config_dir=str(tmp_path / "freee-cli"),
    )


@pytest.fixture
def fake_config(fake_settings) -> Config:
    return Config(settings=fake_settings)


@pytest.fixture
def store(fake_config) -> CredentialStore:
    return CredentialStore(fake_config.config_dir)


@pytest.fixture
def valid_token() -> TokenRecord:
    return TokenRecord(
        access_token="access-valid",
        refresh_token="refresh-valid",
        expires_at=datetime.now(timezone.utc) + timedelta(hours=6),
    )


@pytest.fixture
def mock_client():
    """MagicMock standing in for FreeeClient."""
    client = MagicMock()
    client.get = MagicMock()
    client.post = MagicMock()
    client.put = MagicMock()
    client.delete = MagicMock()
    client.close = MagicMock()
    return client


def make_response(
    status_code: int = 200,
    json_data=None,
    content: bytes | None = None,
    headers: dict[str, str] | None = None,
    url: str = "https://api.test.freee.local/api/1/test",
) -> httpx.Response:
    """Build a real httpx.Response for a fake request."""
    request = httpx.Request("GET", url)
    if json_data is not None:
        return httpx.Response(status_code, json=json_data, headers=headers, request=request)
    return httpx.Response(status_code, content=content or b"", headers=headers, request=request)
