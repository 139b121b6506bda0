"""CLI commands for authentication management."""

from __future__ import annotations

import webbrowser
from typing import Annotated

import typer
from rich.console import Console

from freee_cli.auth import AuthManager
from freee_cli.commands.common import OutputOption, default_store, fail
from freee_cli.config import get_config
from freee_cli.oauth import AUTHORIZATION_TIMEOUT, AuthorizationFlow
from freee_cli.utils.errors import MissingCredentials
from freee_cli.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="auth", help="Manage authentication tokens.")


@app.command()
def login(
    timeout: Annotated[float, typer.Option("--timeout", help="Seconds to wait for the browser callback")] = AUTHORIZATION_TIMEOUT,
    no_browser: Annotated[bool, typer.Option("--no-browser", help="Print the URL instead of opening a browser")] = False,
) -> None:
    """Log in to freee with the OAuth authorization-code flow."""
    config = get_config()
    if not config.has_client_credentials:
        fail(MissingCredentials("FREEE_CLIENT_ID and FREEE_CLIENT_SECRET are not set."))

    flow = AuthorizationFlow(config, default_store())
    try:
        auth_url = flow.build_authorization_url()
        console.print("Opening the freee authorization page in your browser...")
        console.print(f"URL: {auth_url}")
        if no_browser or not webbrowser.open(auth_url):
            console.print("[dim]Open the URL above manually if no browser appeared.[/dim]")

        console.print("Waiting for the authorization callback...", style="yellow")
        code = flow.await_authorization_code(timeout=timeout)
        console.print("Authorization code received. Fetching token...")
        flow.exchange_code_for_token(code)
        console.print("[green]Login successful.[/green]")
    except RuntimeError as e:
        fail(e)
    finally:
        flow.close()


@app.command()
def logout() -> None:
    """Delete the stored token."""
    if default_store().delete_token():
        console.print("Logged out.")
    else:
        console.print("[dim]No stored token; already logged out.[/dim]")


@app.command()
def status(output: OutputOption = OutputFormat.TABLE) -> None:
    """Show current token status."""
    auth = AuthManager(get_config(), default_store())
    try:
        token_status = auth.get_status()
    finally:
        auth.close()

    if not token_status.has_token:
        state = "not logged in"
    elif token_status.is_expired:
        state = "expired (refreshed automatically on next request)"
    elif token_status.refresh_due:
        state = "expiring (refreshed automatically on next request)"
    else:
        state = "valid"
    result = {
        "status": state,
        "has_token": token_status.has_token,
        "is_expired": token_status.is_expired,
        "refresh_due": token_status.refresh_due,
        "expires_at": token_status.expires_at.isoformat() if token_status.expires_at else "N/A",
        "seconds_remaining": token_status.seconds_remaining or 0,
    }
    print_output(result, output, title="Token Status")


@app.command()
def refresh(output: OutputOption = OutputFormat.TABLE) -> None:
    """Force refresh the access token."""
    auth = AuthManager(get_config(), default_store())
    try:
        console.print("Refreshing access token...", style="yellow")
        token = auth.refresh()
        result = {
            "status": "refreshed",
            "expires_at": token.expires_at.isoformat(),
            "seconds_remaining": auth.get_status().seconds_remaining,
        }
        print_output(result, output, title="Token Refreshed")
    except RuntimeError as e:
        fail(e)
    finally:
        auth.close()
