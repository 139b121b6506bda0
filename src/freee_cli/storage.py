"""Local persistence for the OAuth token and app config.

Both live as flat JSON objects under the config directory
(``~/.freee-cli`` by default). A missing file means "not configured yet".
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from freee_cli.models.auth import AppConfig, TokenRecord
from freee_cli.utils.errors import CompanyNotSelected

logger = logging.getLogger(__name__)

TOKEN_FILE = "token.json"
CONFIG_FILE = "config.json"


class CredentialStore:
    """Reads and writes ``token.json`` and ``config.json``."""

    def __init__(self, config_dir: str | Path) -> None:
        self._dir = Path(config_dir)
        self._token_file = self._dir / TOKEN_FILE
        self._config_file = self._dir / CONFIG_FILE

    @property
    def token_path(self) -> Path:
        return self._token_file

    @property
    def config_path(self) -> Path:
        return self._config_file

    # ── token ─────────────────────────────────────────────────────────

    def load_token(self) -> TokenRecord | None:
        data = self._read(self._token_file)
        if data is None:
            return None
        try:
            return TokenRecord(**data)
        except ValidationError:
            logger.warning(f"Ignoring malformed token file at {self._token_file}")
            return None

    def save_token(self, token: TokenRecord) -> None:
        self._write(self._token_file, token.model_dump(mode="json"), private=True)

    def delete_token(self) -> bool:
        """Remove the token file. Returns False if there was nothing to remove."""
        if not self._token_file.exists():
            return False
        self._token_file.unlink()
        return True

    # ── app config ────────────────────────────────────────────────────

    def load_app_config(self) -> AppConfig:
        data = self._read(self._config_file)
        if data is None:
            return AppConfig()
        try:
            return AppConfig(**data)
        except ValidationError:
            logger.warning(f"Ignoring malformed app config at {self._config_file}")
            return AppConfig()

    def save_app_config(self, app_config: AppConfig) -> None:
        self._write(self._config_file, app_config.model_dump(mode="json"))

    # ── file helpers ──────────────────────────────────────────────────

    def _read(self, path: Path) -> dict[str, Any] | None:
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring unreadable JSON at {path}")
            return None
        return data if isinstance(data, dict) else None

    def _write(self, path: Path, data: dict[str, Any], private: bool = False) -> None:
        """Write JSON atomically: temp file in the same directory, then rename."""
        self._dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._dir, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            if private:
                os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def resolve_company_id(store: CredentialStore, company_id: int | None = None) -> int:
    """Return the explicit company id, else the selected one from app config.

    Raises:
        CompanyNotSelected: If neither is available.
    """
    if company_id is not None:
        return company_id
    selected = store.load_app_config().company_id
    if selected is None:
        raise CompanyNotSelected(
            "No company selected. Use --company-id or `freee companies set <id>`."
        )
    return selected
