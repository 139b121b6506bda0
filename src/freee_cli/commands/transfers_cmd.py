"""CLI commands for transfers between walletables."""

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
from freee_cli.services.resources import TransferService
from freee_cli.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="transfers", help="Manage transfers between accounts.")

COLUMNS = [
    "id", "date", "amount", "from_walletable_type", "from_walletable_id",
    "to_walletable_type", "to_walletable_id", "description",
]
WALLETABLE_TYPES = "bank_account, credit_card or wallet"


def _build_client(verbose: bool = False) -> tuple[FreeeClient, TransferService]:
    client = build_client(verbose)
    return client, TransferService(client)


@app.command("list")
def list_transfers(
    start_date: Annotated[str | None, typer.Option("--start-date", help="From date (YYYY-MM-DD)")] = None,
    end_date: Annotated[str | None, typer.Option("--end-date", help="To date (YYYY-MM-DD)")] = None,
    limit: LimitOption = 20,
    offset: OffsetOption = 0,
    company_id: CompanyOption = None,
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """List transfers."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        transfers = service.list(
            company, start_date=start_date, end_date=end_date, limit=limit, offset=offset,
        )
        print_output(transfers, output, columns=COLUMNS, title="Transfers")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("get")
def get_transfer(
    transfer_id: Annotated[int, typer.Argument(help="Transfer ID")],
    company_id: CompanyOption = None,
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """Show a transfer."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        transfer = service.get(company, transfer_id)
        print_output(transfer, output, columns=COLUMNS, title=f"Transfer {transfer_id}")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("create")
def create_transfer(
    date: Annotated[str, typer.Option("--date", help="Date (YYYY-MM-DD)")],
    amount: Annotated[int, typer.Option("--amount", help="Amount")],
    from_walletable_type: Annotated[str, typer.Option("--from-walletable-type", help=WALLETABLE_TYPES)],
    from_walletable_id: Annotated[int, typer.Option("--from-walletable-id", help="Source walletable ID")],
    to_walletable_type: Annotated[str, typer.Option("--to-walletable-type", help=WALLETABLE_TYPES)],
    to_walletable_id: Annotated[int, typer.Option("--to-walletable-id", help="Destination walletable ID")],
    description: Annotated[str | None, typer.Option("--description", help="Description")] = None,
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Create a transfer."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        transfer = service.create(company, {
            "date": date,
            "amount": amount,
            "from_walletable_type": from_walletable_type,
            "from_walletable_id": from_walletable_id,
            "to_walletable_type": to_walletable_type,
            "to_walletable_id": to_walletable_id,
            "description": description,
        })
        console.print(f"Transfer created (ID: {transfer.get('id')})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("update")
def update_transfer(
    transfer_id: Annotated[int, typer.Argument(help="Transfer ID")],
    date: Annotated[str | None, typer.Option("--date", help="Date (YYYY-MM-DD)")] = None,
    amount: Annotated[int | None, typer.Option("--amount", help="Amount")] = None,
    from_walletable_type: Annotated[str | None, typer.Option("--from-walletable-type", help=WALLETABLE_TYPES)] = None,
    from_walletable_id: Annotated[int | None, typer.Option("--from-walletable-id", help="Source walletable ID")] = None,
    to_walletable_type: Annotated[str | None, typer.Option("--to-walletable-type", help=WALLETABLE_TYPES)] = None,
    to_walletable_id: Annotated[int | None, typer.Option("--to-walletable-id", help="Destination walletable ID")] = None,
    description: Annotated[str | None, typer.Option("--description", help="Description")] = None,
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Update a transfer."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        service.update(company, transfer_id, {
            "date": date,
            "amount": amount,
            "from_walletable_type": from_walletable_type,
            "from_walletable_id": from_walletable_id,
            "to_walletable_type": to_walletable_type,
            "to_walletable_id": to_walletable_id,
            "description": description,
        })
        console.print(f"Transfer updated (ID: {transfer_id})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("delete")
def delete_transfer(
    transfer_id: Annotated[int, typer.Argument(help="Transfer ID")],
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Delete a transfer."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        service.delete(company, transfer_id)
        console.print(f"Transfer deleted (ID: {transfer_id})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()
