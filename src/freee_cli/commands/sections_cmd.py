"""CLI commands for sections (departments)."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from freee_cli.client import FreeeClient, build_client
from freee_cli.commands.common import CompanyOption, OutputOption, VerboseOption, fail, require_company
from freee_cli.services.resources import SectionService
from freee_cli.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="sections", help="Manage sections (departments).")

COLUMNS = ["id", "name", "long_name", "shortcut1"]

LongNameOption = Annotated[str | None, typer.Option("--long-name", help="Formal name")]
Shortcut1Option = Annotated[str | None, typer.Option("--shortcut1", help="Shortcut 1")]
Shortcut2Option = Annotated[str | None, typer.Option("--shortcut2", help="Shortcut 2")]
ParentOption = Annotated[int | None, typer.Option("--parent-id", help="Parent section ID")]


def _build_client(verbose: bool = False) -> tuple[FreeeClient, SectionService]:
    client = build_client(verbose)
    return client, SectionService(client)


@app.command("list")
def list_sections(
    company_id: CompanyOption = None,
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """List sections."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        sections = service.list(company)
        print_output(sections, output, columns=COLUMNS, title="Sections")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("create")
def create_section(
    name: Annotated[str, typer.Option("--name", help="Section name")],
    long_name: LongNameOption = None,
    shortcut1: Shortcut1Option = None,
    shortcut2: Shortcut2Option = None,
    parent_id: ParentOption = None,
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Create a section."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        section = service.create(company, {
            "name": name,
            "long_name": long_name,
            "shortcut1": shortcut1,
            "shortcut2": shortcut2,
            "parent_id": parent_id,
        })
        console.print(f"Section created (ID: {section.get('id')})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("update")
def update_section(
    section_id: Annotated[int, typer.Argument(help="Section ID")],
    name: Annotated[str | None, typer.Option("--name", help="Section name")] = None,
    long_name: LongNameOption = None,
    shortcut1: Shortcut1Option = None,
    shortcut2: Shortcut2Option = None,
    parent_id: ParentOption = None,
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Update a section."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        service.update(company, section_id, {
            "name": name,
            "long_name": long_name,
            "shortcut1": shortcut1,
            "shortcut2": shortcut2,
            "parent_id": parent_id,
        })
        console.print(f"Section updated (ID: {section_id})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("delete")
def delete_section(
    section_id: Annotated[int, typer.Argument(help="Section ID")],
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Delete a section."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        service.delete(company, section_id)
        console.print(f"Section deleted (ID: {section_id})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()
