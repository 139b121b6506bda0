"""CLI commands for trial balance reports."""

from __future__ import annotations

from enum import Enum
from typing import Annotated

import typer

from freee_cli.client import FreeeClient, build_client
from freee_cli.commands.common import CompanyOption, OutputOption, VerboseOption, fail, require_company
from freee_cli.services.resources import TrialBalanceService
from freee_cli.utils.output import OutputFormat, print_output

app = typer.Typer(name="trial-balance", help="Trial balance reports.")

COLUMNS = [
    "account_item_name", "account_category_name", "opening_balance",
    "debit_amount", "credit_amount", "closing_balance",
]


class ReportType(str, Enum):
    PL = "pl"
    BS = "bs"


def _build_client(verbose: bool = False) -> tuple[FreeeClient, TrialBalanceService]:
    client = build_client(verbose)
    return client, TrialBalanceService(client)


@app.command("get")
def get_trial_balance(
    report_type: Annotated[ReportType, typer.Option("--type", help="pl (profit & loss) or bs (balance sheet)")] = ReportType.PL,
    fiscal_year: Annotated[int | None, typer.Option("--fiscal-year", help="Fiscal year")] = None,
    start_month: Annotated[int | None, typer.Option("--start-month", min=1, max=12, help="Start month")] = None,
    end_month: Annotated[int | None, typer.Option("--end-month", min=1, max=12, help="End month")] = None,
    company_id: CompanyOption = None,
    output: OutputOption = OutputFormat.TABLE,
    verbose: VerboseOption = False,
) -> None:
    """Show the trial balance."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        balances = service.get(
            company,
            report_type=report_type.value,
            fiscal_year=fiscal_year,
            start_month=start_month,
            end_month=end_month,
        )
        print_output(balances, output, columns=COLUMNS, title=f"Trial Balance ({report_type.value.upper()})")
    except RuntimeError as e:
        fail(e)
    finally:
        client.close()
