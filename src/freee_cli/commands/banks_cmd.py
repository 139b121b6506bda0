"""CLI commands for the catalogue of connectable banks and card services."""

from __future__ import annotations

from typing import Annotated

import typer

from freee_cli.client import FreeeClient, build_client
from freee_cli.commands.common import LimitOption, OffsetOption, OutputOption, VerboseOption, fail
from freee_cli.services.resources import BankService
from freee_cli.utils.output import OutputFormat, print_output

app = typer.Typer(name="banks", help="Browse connectable bank and card services.")

COLUMNS = ["id", "name", "name_kana", "type"]


def _build_client(verbose: bool = False) -> tuple[FreeeClient, BankService]:
    client = build_client(verbose)
    return client, BankService(client)


@app.command("list")
def list_banks(
    limit: LimitOption = 20,
    offset: OffsetOption = 0,
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """List connectable services."""
    client, service = _build_client(verbose)
    try:
        print_output(service.list(limit=limit, offset=offset), output, columns=COLUMNS, title="Banks")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("get")
def get_bank(
    bank_id: Annotated[int, typer.Argument(help="Bank service ID")],
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """Show a connectable service."""
    client, service = _build_client(verbose)
    try:
        print_output(service.get(bank_id), output, columns=COLUMNS, title=f"Bank {bank_id}")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()
