"""CLI commands for company selection."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from freee_cli.client import FreeeClient, build_client
from freee_cli.commands.common import OutputOption, VerboseOption, default_store, fail
from freee_cli.services.resources import CompanyService
from freee_cli.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="companies", help="List companies and select the default one.")

COLUMNS = ["id", "display_name", "role"]
LABELS = {"id": "ID", "display_name": "Company", "role": "Role"}


def _build_client(verbose: bool = False) -> tuple[FreeeClient, CompanyService]:
    client = build_client(verbose)
    return client, CompanyService(client)


@app.command("list")
def list_companies(
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """List the companies you can access."""
    client, service = _build_client(verbose)
    try:
        companies = service.list()
        print_output(companies, output, columns=COLUMNS, title="Companies", labels=LABELS)
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("get")
def get_company(
    company_id: Annotated[int, typer.Argument(help="Company ID")],
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """Show a company's details."""
    client, service = _build_client(verbose)
    try:
        company = service.get(company_id)
        print_output(company, output, columns=["id", "display_name", "name", "role"], title="Company", labels=LABELS)
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("set")
def set_company(
    company_id: Annotated[int, typer.Argument(help="Company ID to use by default")],
) -> None:
    """Set the default company used by every resource command."""
    store = default_store()
    app_config = store.load_app_config()
    app_config.company_id = company_id
    store.save_app_config(app_config)
    console.print(f"Default company set to {company_id}.")


@app.command("current")
def current_company(output: OutputOption = OutputFormat.TABLE) -> None:
    """Show the default company."""
    company_id = default_store().load_app_config().company_id
    if company_id is None:
        console.print("[dim]No default company set. Use `freee companies set <id>`.[/dim]")
        return
    print_output({"company_id": company_id}, output, title="Default Company")
