"""Options and helpers shared by the command groups."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer

from freee_cli.config import get_config
from freee_cli.storage import CredentialStore, resolve_company_id
from freee_cli.utils.errors import handle_error
from freee_cli.utils.output import OutputFormat

CompanyOption = Annotated[
    int | None,
    typer.Option("--company-id", "-c", help="Company ID (defaults to `freee companies set`)"),
]
OutputOption = Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show request details")]
LimitOption = Annotated[int, typer.Option("--limit", help="Number of records to fetch")]
OffsetOption = Annotated[int, typer.Option("--offset", help="Offset for paging")]


def default_store() -> CredentialStore:
    return CredentialStore(get_config().config_dir)


def fail(error: Exception) -> NoReturn:
    handle_error(error)
    raise typer.Exit(1)


def require_company(company_id: int | None) -> int:
    """Resolve the company scope, exiting with code 1 if none is selected."""
    try:
        return resolve_company_id(default_store(), company_id)
    except RuntimeError as e:
        fail(e)


def load_json_file(path: Path) -> dict[str, Any]:
    """Read a JSON object used as a request body."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"Could not read JSON from {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return data
