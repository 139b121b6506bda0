"""CLI commands for walletables (bank accounts, credit cards, cash)."""

from __future__ import annotations

from enum import Enum
from typing import Annotated

import typer
from rich.console import Console

from freee_cli.client import FreeeClient, build_client
from freee_cli.commands.common import CompanyOption, OutputOption, VerboseOption, fail, require_company
from freee_cli.services.resources import WalletableService
from freee_cli.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="walletables", help="Manage bank accounts, credit cards and cash wallets.")

COLUMNS = ["id", "name", "type", "bank_id", "walletable_balance", "last_balance"]


class WalletableType(str, Enum):
    BANK_ACCOUNT = "bank_account"
    CREDIT_CARD = "credit_card"
    WALLET = "wallet"


TypeArgument = Annotated[WalletableType, typer.Argument(help="Walletable type")]
IdArgument = Annotated[int, typer.Argument(help="Walletable ID")]


def _build_client(verbose: bool = False) -> tuple[FreeeClient, WalletableService]:
    client = build_client(verbose)
    return client, WalletableService(client)


@app.command("list")
def list_walletables(
    walletable_type: Annotated[WalletableType | None, typer.Option("--type", help="Filter by type")] = None,
    company_id: CompanyOption = None,
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """List walletables."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        walletables = service.list(company, type=walletable_type.value if walletable_type else None)
        print_output(walletables, output, columns=COLUMNS, title="Walletables")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("get")
def get_walletable(
    walletable_type: TypeArgument,
    walletable_id: IdArgument,
    company_id: CompanyOption = None,
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """Show a walletable."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        walletable = service.get_typed(company, walletable_type.value, walletable_id)
        print_output(walletable, output, columns=COLUMNS, title=f"Walletable {walletable_id}")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("create")
def create_walletable(
    name: Annotated[str, typer.Option("--name", help="Walletable name")],
    walletable_type: Annotated[WalletableType, typer.Option("--type", help="Walletable type")],
    bank_id: Annotated[int | None, typer.Option("--bank-id", help="Bank service ID (bank accounts and cards)")] = None,
    group_name: Annotated[str | None, typer.Option("--group-name", help="Financial statement group name")] = None,
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Create a walletable."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        walletable = service.create(company, {
            "name": name,
            "type": walletable_type.value,
            "bank_id": bank_id,
            "group_name": group_name,
        })
        console.print(f"Walletable created (ID: {walletable.get('id')})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("update")
def update_walletable(
    walletable_type: TypeArgument,
    walletable_id: IdArgument,
    name: Annotated[str | None, typer.Option("--name", help="Walletable name")] = None,
    group_name: Annotated[str | None, typer.Option("--group-name", help="Financial statement group name")] = None,
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Update a walletable."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        service.update_typed(company, walletable_type.value, walletable_id, {"name": name, "group_name": group_name})
        console.print(f"Walletable updated (ID: {walletable_id})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("delete")
def delete_walletable(
    walletable_type: TypeArgument,
    walletable_id: IdArgument,
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Delete a walletable."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        service.delete_typed(company, walletable_type.value, walletable_id)
        console.print(f"Walletable deleted (ID: {walletable_id})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()
