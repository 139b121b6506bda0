"""CLI commands for memo tags."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from freee_cli.client import FreeeClient, build_client
from freee_cli.commands.common import CompanyOption, OutputOption, VerboseOption, fail, require_company
from freee_cli.services.resources import TagService
from freee_cli.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="tags", help="Manage memo tags.")

COLUMNS = ["id", "name", "shortcut1", "shortcut2"]

Shortcut1Option = Annotated[str | None, typer.Option("--shortcut1", help="Shortcut 1")]
Shortcut2Option = Annotated[str | None, typer.Option("--shortcut2", help="Shortcut 2")]


def _build_client(verbose: bool = False) -> tuple[FreeeClient, TagService]:
    client = build_client(verbose)
    return client, TagService(client)


@app.command("list")
def list_tags(
    company_id: CompanyOption = None,
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """List memo tags."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        print_output(service.list(company), output, columns=COLUMNS, title="Tags")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("create")
def create_tag(
    name: Annotated[str, typer.Option("--name", help="Tag name")],
    shortcut1: Shortcut1Option = None,
    shortcut2: Shortcut2Option = None,
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Create a memo tag."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        tag = service.create(company, {"name": name, "shortcut1": shortcut1, "shortcut2": shortcut2})
        console.print(f"Tag created (ID: {tag.get('id')})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("update")
def update_tag(
    tag_id: Annotated[int, typer.Argument(help="Tag ID")],
    name: Annotated[str | None, typer.Option("--name", help="Tag name")] = None,
    shortcut1: Shortcut1Option = None,
    shortcut2: Shortcut2Option = None,
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Update a memo tag."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        service.update(company, tag_id, {"name": name, "shortcut1": shortcut1, "shortcut2": shortcut2})
        console.print(f"Tag updated (ID: {tag_id})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("delete")
def delete_tag(
    tag_id: Annotated[int, typer.Argument(help="Tag ID")],
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Delete a memo tag."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        service.delete(company, tag_id)
        console.print(f"Tag deleted (ID: {tag_id})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()
