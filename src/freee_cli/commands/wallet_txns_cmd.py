"""CLI commands for wallet transactions (bank / card statement lines)."""

from __future__ import annotations

from typing import Annotated, Any

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
from freee_cli.services.resources import WalletTxnService
from freee_cli.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="wallet-txns", help="Manage wallet transactions.")

COLUMNS = ["id", "date", "entry_side", "amount", "balance", "description", "walletable_id", "state"]


def _with_state(txn: dict[str, Any]) -> dict[str, Any]:
    txn["state"] = "settled" if txn.get("status") == 1 else "unsettled"
    return txn


def _build_client(verbose: bool = False) -> tuple[FreeeClient, WalletTxnService]:
    client = build_client(verbose)
    return client, WalletTxnService(client)


@app.command("list")
def list_wallet_txns(
    walletable_id: Annotated[int | None, typer.Option("--walletable-id", help="Walletable ID")] = None,
    walletable_type: Annotated[
        str | None, typer.Option("--walletable-type", help="bank_account, credit_card or wallet")
    ] = None,
    start_date: Annotated[str | None, typer.Option("--start-date", help="From date (YYYY-MM-DD)")] = None,
    end_date: Annotated[str | None, typer.Option("--end-date", help="To date (YYYY-MM-DD)")] = None,
    entry_side: Annotated[str | None, typer.Option("--entry-side", help="income or expense")] = None,
    limit: LimitOption = 20,
    offset: OffsetOption = 0,
    company_id: CompanyOption = None,
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """List wallet transactions."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        txns = service.list(
            company,
            walletable_id=walletable_id,
            walletable_type=walletable_type,
            start_date=start_date,
            end_date=end_date,
            entry_side=entry_side,
            limit=limit,
            offset=offset,
        )
        print_output([_with_state(t) for t in txns], output, columns=COLUMNS, title="Wallet Transactions")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("get")
def get_wallet_txn(
    txn_id: Annotated[int, typer.Argument(help="Wallet transaction ID")],
    company_id: CompanyOption = None,
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """Show a wallet transaction."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        txn = _with_state(service.get(company, txn_id))
        print_output(txn, output, columns=COLUMNS + ["walletable_type"], title=f"Wallet Transaction {txn_id}")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("create")
def create_wallet_txn(
    walletable_type: Annotated[str, typer.Option("--walletable-type", help="bank_account, credit_card or wallet")],
    walletable_id: Annotated[int, typer.Option("--walletable-id", help="Walletable ID")],
    date: Annotated[str, typer.Option("--date", help="Date (YYYY-MM-DD)")],
    entry_side: Annotated[str, typer.Option("--entry-side", help="income or expense")],
    amount: Annotated[int, typer.Option("--amount", help="Amount")],
    description: Annotated[str | None, typer.Option("--description", help="Description")] = None,
    balance: Annotated[int | None, typer.Option("--balance", help="Balance after the transaction")] = None,
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Create a wallet transaction."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        txn = service.create(company, {
            "walletable_type": walletable_type,
            "walletable_id": walletable_id,
            "date": date,
            "entry_side": entry_side,
            "amount": amount,
            "description": description,
            "balance": balance,
        })
        console.print(f"Wallet transaction created (ID: {txn.get('id')})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("delete")
def delete_wallet_txn(
    txn_id: Annotated[int, typer.Argument(help="Wallet transaction ID")],
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Delete a wallet transaction."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        service.delete(company, txn_id)
        console.print(f"Wallet transaction deleted (ID: {txn_id})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()
