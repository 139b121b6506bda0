"""Error taxonomy and structured error output for the CLI boundary."""

from __future__ import annotations

import json
import sys
from typing import Any

from rich.console import Console

console = Console(stderr=True)

LOGIN_HINT = "Run `freee auth login` to authenticate again"


class FreeeCliError(RuntimeError):
    """Base class for errors surfaced to the user with exit code 1."""
    code = "RUNTIME_ERROR"


class AuthorizationDenied(FreeeCliError):
    code = "AUTHORIZATION_DENIED"


class ListenerStartFailed(FreeeCliError):
    code = "LISTENER_START_FAILED"


class AuthorizationTimeout(FreeeCliError):
    code = "AUTHORIZATION_TIMEOUT"


class TokenExchangeFailed(FreeeCliError):
    code = "TOKEN_EXCHANGE_FAILED"


class NoRefreshToken(FreeeCliError):
    code = "NO_REFRESH_TOKEN"


class RefreshFailed(FreeeCliError):
    code = "REFRESH_FAILED"


class ExportTimeout(FreeeCliError):
    code = "EXPORT_TIMEOUT"


class ExportWriteFailed(FreeeCliError):
    code = "EXPORT_WRITE_FAILED"


class MissingCredentials(FreeeCliError):
    code = "MISSING_CREDENTIALS"


class CompanyNotSelected(FreeeCliError):
    code = "COMPANY_NOT_SELECTED"


class ApiRequestFailed(FreeeCliError):
    """Non-2xx response from the resource API."""
    code = "API_ERROR"

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"API error (HTTP {status_code}): {detail}")
        self.status_code = status_code
        self.detail = detail


# Actionable hints keyed by exception type
_TYPE_HINTS: dict[type[Exception], str] = {
    AuthorizationDenied: "Authorization was cancelled in the browser — run `freee auth login` again",
    ListenerStartFailed: "Another process is using the callback port — free it or set FREEE_CALLBACK_PORT",
    AuthorizationTimeout: "Complete the browser sign-in within the time limit, or pass --timeout",
    TokenExchangeFailed: "Check FREEE_CLIENT_ID / FREEE_CLIENT_SECRET and the app's redirect URI",
    NoRefreshToken: LOGIN_HINT,
    RefreshFailed: LOGIN_HINT,
    ExportTimeout: "The export is still running on the server — try again later",
    ExportWriteFailed: "Check that --output-file is a writable file path, not a directory",
    MissingCredentials: "Set FREEE_CLIENT_ID and FREEE_CLIENT_SECRET in your environment or .env file",
    CompanyNotSelected: "Pass --company-id or run `freee companies set <id>`",
}

# Hints keyed by error substring, for errors without a dedicated type
_ERROR_HINTS: list[tuple[str, str]] = [
    ("HTTP 401", LOGIN_HINT),
    ("HTTP 403", "The selected company may not allow this operation — check your role"),
    ("HTTP 404", "The specified resource does not exist — verify the ID and company"),
    ("HTTP 429", "Rate limited — wait a moment and retry"),
    ("timeout", "Request timed out — try again or check network connectivity"),
    ("connection", "Connection error — check network connectivity"),
]


def _get_hint(error: Exception) -> str | None:
    """Match an error to an actionable hint."""
    for error_type, hint in _TYPE_HINTS.items():
        if isinstance(error, error_type):
            return hint
    lower = str(error).lower()
    for pattern, hint in _ERROR_HINTS:
        if pattern.lower() in lower:
            return hint
    return None


def _get_code(error: Exception) -> str:
    if isinstance(error, ApiRequestFailed):
        if error.status_code == 401:
            return "AUTH_ERROR"
        if error.status_code == 404:
            return "NOT_FOUND"
        if error.status_code == 429:
            return "RATE_LIMITED"
        return error.code
    if isinstance(error, FreeeCliError):
        return error.code
    message = str(error).lower()
    if "timeout" in message:
        return "TIMEOUT"
    if "connection" in message:
        return "CONNECTION_ERROR"
    return "RUNTIME_ERROR"


def response_error_detail(response: Any) -> str:
    """Pull the most useful error message out of a freee error payload."""
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if not isinstance(payload, dict):
        return response.text

    messages: list[str] = []
    for err in payload.get("errors") or []:
        found = err.get("messages", [])
        messages.extend(found if isinstance(found, list) else [str(found)])
    if messages:
        return "; ".join(messages)
    return payload.get("error_description") or payload.get("message") or payload.get("error") or response.text


def handle_error(error: Exception) -> None:
    """Handle an error with structured output to stdout and human-readable output to stderr.

    Outputs a JSON error object to stdout for scripts:
    {"error": true, "code": "API_ERROR", "message": "...", "hint": "..."}
    """
    message = str(error)
    hint = _get_hint(error)

    error_obj: dict[str, object] = {
        "error": True,
        "code": _get_code(error),
        "message": message,
    }
    if hint:
        error_obj["hint"] = hint

    json.dump(error_obj, sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")

    console.print(f"[red]Error:[/red] {message}")
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
