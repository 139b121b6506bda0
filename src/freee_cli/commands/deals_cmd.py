"""CLI commands for deals (income / expense transactions)."""

from __future__ import annotations

from pathlib import Path
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
    load_json_file,
    require_company,
)
from freee_cli.services.resources import DealService
from freee_cli.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="deals", help="Manage deals (income and expense transactions).")

COLUMNS = ["id", "issue_date", "type", "amount", "status", "partner_id"]
DETAIL_COLUMNS = ["account_item_id", "tax_code", "amount", "description"]


def _build_client(verbose: bool = False) -> tuple[FreeeClient, DealService]:
    client = build_client(verbose)
    return client, DealService(client)


@app.command("list")
def list_deals(
    partner_code: Annotated[str | None, typer.Option("--partner", help="Filter by partner code")] = None,
    status: Annotated[str | None, typer.Option("--status", help="settled or unsettled")] = None,
    start_date: Annotated[str | None, typer.Option("--start-date", help="Issue date from (YYYY-MM-DD)")] = None,
    end_date: Annotated[str | None, typer.Option("--end-date", help="Issue date to (YYYY-MM-DD)")] = None,
    limit: LimitOption = 20,
    offset: OffsetOption = 0,
    company_id: CompanyOption = None,
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """List deals."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        deals = service.list(
            company,
            partner_code=partner_code,
            status=status,
            start_issue_date=start_date,
            end_issue_date=end_date,
            limit=limit,
            offset=offset,
        )
        print_output(deals, output, columns=COLUMNS, title="Deals")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("get")
def get_deal(
    deal_id: Annotated[int, typer.Argument(help="Deal ID")],
    company_id: CompanyOption = None,
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """Show a deal with its detail lines."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        deal = service.get(company, deal_id)
        if output == OutputFormat.JSON:
            print_output(deal, output)
            return
        print_output(deal, output, columns=COLUMNS, title=f"Deal {deal_id}")
        details = deal.get("details") or []
        if details:
            print_output(details, output, columns=DETAIL_COLUMNS, title="Details")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("create")
def create_deal(
    deal_type: Annotated[str | None, typer.Option("--type", help="income or expense")] = None,
    issue_date: Annotated[str | None, typer.Option("--issue-date", help="Issue date (YYYY-MM-DD)")] = None,
    amount: Annotated[int | None, typer.Option("--amount", help="Amount")] = None,
    account_item_id: Annotated[int | None, typer.Option("--account-item-id", help="Account item ID")] = None,
    tax_code: Annotated[int | None, typer.Option("--tax-code", help="Tax code")] = None,
    partner_id: Annotated[int | None, typer.Option("--partner-id", help="Partner ID")] = None,
    description: Annotated[str | None, typer.Option("--description", help="Line description")] = None,
    from_json: Annotated[Path | None, typer.Option("--from-json", help="Read the request body from a JSON file")] = None,
    company_id: CompanyOption = None,
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """Create a deal from options or a JSON file."""
    company = require_company(company_id)
    try:
        if from_json:
            fields = load_json_file(from_json)
        else:
            missing = [
                name for name, value in [
                    ("--type", deal_type), ("--issue-date", issue_date), ("--amount", amount),
                    ("--account-item-id", account_item_id), ("--tax-code", tax_code),
                ] if value is None
            ]
            if missing:
                raise ValueError(f"Missing required options: {', '.join(missing)}")
            fields = {
                "issue_date": issue_date,
                "type": deal_type,
                "partner_id": partner_id,
                "details": [{
                    "account_item_id": account_item_id,
                    "tax_code": tax_code,
                    "amount": amount,
                    "description": description or "",
                }],
            }
    except ValueError as e:
        fail(e)

    client, service = _build_client(verbose)
    try:
        deal = service.create(company, fields)
        console.print(f"Deal created (ID: {deal.get('id')})")
        print_output(deal, output, columns=COLUMNS, title="Deal Created")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("update")
def update_deal(
    deal_id: Annotated[int, typer.Argument(help="Deal ID")],
    deal_type: Annotated[str | None, typer.Option("--type", help="income or expense")] = None,
    issue_date: Annotated[str | None, typer.Option("--issue-date", help="Issue date (YYYY-MM-DD)")] = None,
    from_json: Annotated[Path | None, typer.Option("--from-json", help="Read the request body from a JSON file")] = None,
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Update a deal."""
    company = require_company(company_id)
    try:
        fields: dict[str, Any] = (
            load_json_file(from_json) if from_json else {"type": deal_type, "issue_date": issue_date}
        )
        if not any(value is not None for value in fields.values()):
            raise ValueError("Nothing to update: pass --type, --issue-date or --from-json")
    except ValueError as e:
        fail(e)

    client, service = _build_client(verbose)
    try:
        service.update(company, deal_id, fields)
        console.print(f"Deal updated (ID: {deal_id})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()


@app.command("delete")
def delete_deal(
    deal_id: Annotated[int, typer.Argument(help="Deal ID")],
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Delete a deal."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        service.delete(company, deal_id)
        console.print(f"Deal deleted (ID: {deal_id})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()
