"""Configuration management for freee CLI.

Loads OAuth client credentials and endpoints from the environment (and an
optional .env file in the working directory).
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field


DEFAULT_CONFIG_DIR = Path.home() / ".freee-cli"


class Settings(BaseModel):
    """Application settings loaded from environment variables."""
    client_id: str = Field(default="", description="freee OAuth client ID")
    client_secret: str = Field(default="", description="freee OAuth client secret")
    callback_port: int = Field(default=8089, description="Port of the local OAuth redirect listener")
    authorization_endpoint: str = "https://accounts.secure.freee.co.jp/public_api/authorize"
    token_endpoint: str = "https://accounts.secure.freee.co.jp/public_api/token"
    api_base_url: str = "https://api.freee.co.jp"
    config_dir: str = Field(default=str(DEFAULT_CONFIG_DIR), description="Directory for token and app config")


class Config(BaseModel):
    """Full application configuration."""
    settings: Settings

    @property
    def redirect_uri(self) -> str:
        return f"http://localhost:{self.settings.callback_port}/callback"

    @property
    def config_dir(self) -> Path:
        return Path(self.settings.config_dir).expanduser()

    @property
    def has_client_credentials(self) -> bool:
        return bool(self.settings.client_id and self.settings.client_secret)


def _env(*keys: str, default: str = "") -> str:
    """Try multiple env var names, return the first one found."""
    for key in keys:
        val = os.environ.get(key, "")
        if val:
            return val.strip().strip('"')
    return default


def _load_settings() -> Settings:
    """Load settings from environment variables.

    Supports both FREEE_* and the bare CLIENT_ID / CLIENT_SECRET names.
    """
    defaults = Settings()
    return Settings(
        client_id=_env("FREEE_CLIENT_ID", "CLIENT_ID"),
        client_secret=_env("FREEE_CLIENT_SECRET", "CLIENT_SECRET"),
        callback_port=int(_env("FREEE_CALLBACK_PORT", default=str(defaults.callback_port))),
        api_base_url=_env("FREEE_API_BASE_URL", default=defaults.api_base_url),
        config_dir=_env("FREEE_CLI_CONFIG_DIR", default=defaults.config_dir),
    )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load and cache the full application configuration."""
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Config(settings=_load_settings())
