"""CLI commands for account items (chart of accounts)."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from freee_cli.client import FreeeClient, build_client
from freee_cli.commands.common import CompanyOption, OutputOption, VerboseOption, fail, require_company
from freee_cli.services.resources import AccountItemService
from freee_cli.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="account-items", help="Manage account items.")

COLUMNS = ["id", "name", "shortcut", "tax_code"]
DETAIL_COLUMNS = COLUMNS + ["group_name", "corresponding_income_name", "corresponding_expense_name"]


def _build_client(verbose: bool = False) -> tuple[FreeeClient, AccountItemService]:
    client = build_client(verbose)
    return client, AccountItemService(client)


@app.command("list")
def list_account_items(
    keyword: Annotated[str | None, typer.Option("--keyword", help="Keyword search")] = None,
    company_id: CompanyOption = None,
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """List account items."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        items = service.list(company, keyword=keyword)
        print_output(items, output, columns=COLUMNS, title="Account Items")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("get")
def get_account_item(
    item_id: Annotated[int, typer.Argument(help="Account item ID")],
    company_id: CompanyOption = None,
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """Show an account item."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        item = service.get(company, item_id)
        print_output(item, output, columns=DETAIL_COLUMNS, title=f"Account Item {item_id}")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("create")
def create_account_item(
    name: Annotated[str, typer.Option("--name", help="Account item name")],
    tax_code: Annotated[int, typer.Option("--tax-code", help="Tax code")],
    group_name: Annotated[str, typer.Option("--group-name", help="Financial statement group name")],
    shortcut: Annotated[str | None, typer.Option("--shortcut", help="Shortcut")] = None,
    account_category: Annotated[
        str | None, typer.Option("--account-category", help="assets, liabilities, equity, income or expense")
    ] = None,
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Create an account item."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        item = service.create(company, {
            "name": name,
            "tax_code": tax_code,
            "group_name": group_name,
            "shortcut": shortcut,
            "account_category": account_category,
        })
        console.print(f"Account item created (ID: {item.get('id')})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("update")
def update_account_item(
    item_id: Annotated[int, typer.Argument(help="Account item ID")],
    name: Annotated[str | None, typer.Option("--name", help="Account item name")] = None,
    tax_code: Annotated[int | None, typer.Option("--tax-code", help="Tax code")] = None,
    shortcut: Annotated[str | None, typer.Option("--shortcut", help="Shortcut")] = None,
    group_name: Annotated[str | None, typer.Option("--group-name", help="Financial statement group name")] = None,
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Update an account item."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        service.update(company, item_id, {
            "name": name, "tax_code": tax_code, "shortcut": shortcut, "group_name": group_name,
        })
        console.print(f"Account item updated (ID: {item_id})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("delete")
def delete_account_item(
    item_id: Annotated[int, typer.Argument(help="Account item ID")],
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Delete an account item."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        service.delete(company, item_id)
        console.print(f"Account item deleted (ID: {item_id})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()
