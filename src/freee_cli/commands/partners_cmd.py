"""CLI commands for partners (customers and suppliers)."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from freee_cli.client import FreeeClient, build_client
from freee_cli.commands.common import (
    CompanyOption,
    LimitOption,
    OffsetOption,
    OutputOption,
    VerboseOption,
    fail,
    require_company,
)
from freee_cli.services.resources import PartnerService
from freee_cli.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="partners", help="Manage partners.")

COLUMNS = ["id", "name", "code", "shortcut1"]

NameOption = Annotated[str | None, typer.Option("--name", help="Partner name")]
CodeOption = Annotated[str | None, typer.Option("--code", help="Partner code")]
Shortcut1Option = Annotated[str | None, typer.Option("--shortcut1", help="Shortcut 1")]
Shortcut2Option = Annotated[str | None, typer.Option("--shortcut2", help="Shortcut 2")]


def _build_client(verbose: bool = False) -> tuple[FreeeClient, PartnerService]:
    client = build_client(verbose)
    return client, PartnerService(client)


@app.command("list")
def list_partners(
    keyword: Annotated[str | None, typer.Option("--keyword", help="Keyword search")] = None,
    limit: LimitOption = 50,
    offset: OffsetOption = 0,
    company_id: CompanyOption = None,
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """List partners."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        partners = service.list(company, keyword=keyword, limit=limit, offset=offset)
        print_output(partners, output, columns=COLUMNS, title="Partners")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("get")
def get_partner(
    partner_id: Annotated[int, typer.Argument(help="Partner ID")],
    company_id: CompanyOption = None,
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """Show a partner."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        partner = service.get(company, partner_id)
        address = partner.get("address_attributes") or {}
        if address.get("zipcode"):
            partner["address"] = " ".join(
                str(part) for part in (
                    address.get("zipcode"), address.get("prefecture_code"), address.get("street_name1"),
                ) if part not in (None, "")
            )
        print_output(
            partner, output,
            columns=COLUMNS + ["shortcut2", "address"] if output != OutputFormat.JSON else None,
            title=f"Partner {partner_id}",
        )
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("create")
def create_partner(
    name: Annotated[str, typer.Option("--name", help="Partner name")],
    code: CodeOption = None,
    shortcut1: Shortcut1Option = None,
    shortcut2: Shortcut2Option = None,
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Create a partner."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        partner = service.create(
            company, {"name": name, "code": code, "shortcut1": shortcut1, "shortcut2": shortcut2}
        )
        console.print(f"Partner created (ID: {partner.get('id')})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("update")
def update_partner(
    partner_id: Annotated[int, typer.Argument(help="Partner ID")],
    name: NameOption = None,
    code: CodeOption = None,
    shortcut1: Shortcut1Option = None,
    shortcut2: Shortcut2Option = None,
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Update a partner."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        service.update(
            company, partner_id,
            {"name": name, "code": code, "shortcut1": shortcut1, "shortcut2": shortcut2},
        )
        console.print(f"Partner updated (ID: {partner_id})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("delete")
def delete_partner(
    partner_id: Annotated[int, typer.Argument(help="Partner ID")],
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Delete a partner."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        service.delete(company, partner_id)
        console.print(f"Partner deleted (ID: {partner_id})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()
