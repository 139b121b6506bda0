"""freee CLI — entry point.

Command-line client for the freee accounting API: OAuth login,
company-scoped bookkeeping resources, and journal book exports.
"""

from __future__ import annotations

import logging

import typer

from freee_cli.commands.auth_cmd import app as auth_app
from freee_cli.commands.companies_cmd import app as companies_app
from freee_cli.commands.deals_cmd import app as deals_app
from freee_cli.commands.partners_cmd import app as partners_app
from freee_cli.commands.account_items_cmd import app as account_items_app
from freee_cli.commands.transfers_cmd import app as transfers_app
from freee_cli.commands.wallet_txns_cmd import app as wallet_txns_app
from freee_cli.commands.walletables_cmd import app as walletables_app
from freee_cli.commands.sections_cmd import app as sections_app
from freee_cli.commands.tags_cmd import app as tags_app
from freee_cli.commands.banks_cmd import app as banks_app
from freee_cli.commands.journals_cmd import app as journals_app
from freee_cli.commands.trial_balance_cmd import app as trial_balance_app

app = typer.Typer(
    name="freee",
    help="CLI tool for the freee accounting API.",
    no_args_is_help=True,
)

# Register command groups
app.add_typer(auth_app, name="auth")
app.add_typer(companies_app, name="companies")
app.add_typer(deals_app, name="deals")
app.add_typer(partners_app, name="partners")
app.add_typer(account_items_app, name="account-items")
app.add_typer(transfers_app, name="transfers")
app.add_typer(wallet_txns_app, name="wallet-txns")
app.add_typer(walletables_app, name="walletables")
app.add_typer(sections_app, name="sections")
app.add_typer(tags_app, name="tags")
app.add_typer(banks_app, name="banks")
app.add_typer(journals_app, name="journals")
app.add_typer(trial_balance_app, name="trial-balance")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """freee CLI — accounting data from the command line."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


if __name__ == "__main__":
    app()
