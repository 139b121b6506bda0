"""OAuth2 authorization-code flow for the freee API.

1. Build the authorization URL and send the user to it
2. Catch the redirect on a short-lived local listener
3. Exchange the code for a token record and persist it
"""

from __future__ import annotations

import logging
import queue
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any
from urllib.parse import parse_qs, urlencode, urlparse

import httpx
from pydantic import ValidationError

from freee_cli.auth import utcnow
from freee_cli.config import Config
from freee_cli.models.auth import TokenRecord, TokenResponse
from freee_cli.storage import CredentialStore
from freee_cli.utils.errors import (
    AuthorizationDenied,
    AuthorizationTimeout,
    ListenerStartFailed,
    TokenExchangeFailed,
    response_error_detail,
)

logger = logging.getLogger(__name__)

CALLBACK_PATH = "/callback"
AUTHORIZATION_TIMEOUT = 120.0

SUCCESS_HTML = """<!DOCTYPE html>
<html><head><meta charset="utf-8"><title>freee CLI</title></head>
<body><h1>Authorization successful</h1>
<p>You can close this window and return to the terminal.</p></body></html>
"""

ERROR_HTML = """<!DOCTYPE html>
<html><head><meta charset="utf-8"><title>freee CLI</title></head>
<body><h1>Authorization failed</h1>
<p>Please close this window and check the terminal.</p></body></html>
"""


class _CallbackHandler(BaseHTTPRequestHandler):
    """Handles the provider redirect on CALLBACK_PATH."""

    server: _CallbackServer

    def do_GET(self) -> None:  # noqa: N802
        url = urlparse(self.path)
        if url.path != CALLBACK_PATH:
            self._respond(404, "Not found", content_type="text/plain; charset=utf-8")
            return

        params = parse_qs(url.query)
        error = params.get("error", [None])[0]
        code = params.get("code", [None])[0]

        if error:
            self._respond(400, ERROR_HTML)
            self.server.report(("error", error))
        elif code:
            self._respond(200, SUCCESS_HTML)
            self.server.report(("code", code))
        else:
            self._respond(400, "Missing code", content_type="text/plain; charset=utf-8")

    def _respond(self, status: int, body: str, content_type: str = "text/html; charset=utf-8") -> None:
        payload = body.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        logger.debug("callback: " + format, *args)


class _CallbackServer(HTTPServer):
    """HTTP server holding a single-slot outcome queue."""

    def __init__(self, address: tuple[str, int]) -> None:
        super().__init__(address, _CallbackHandler)
        self.outcomes: queue.Queue[tuple[str, str]] = queue.Queue(maxsize=1)

    def report(self, outcome: tuple[str, str]) -> None:
        # Only the first outcome counts
        try:
            self.outcomes.put_nowait(outcome)
        except queue.Full:
            logger.debug(f"Ignoring extra callback outcome: {outcome[0]}")


class CallbackListener:
    """Single-shot local listener for the OAuth redirect.

    Usage:
        with CallbackListener(port=8089) as listener:
            code = listener.wait(timeout=120)

    The listener stops accepting connections when the block exits,
    whatever the outcome.
    """

    def __init__(self, port: int, host: str = "localhost") -> None:
        self.host = host
        self._requested_port = port
        self._server: _CallbackServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def port(self) -> int:
        if self._server is None:
            return self._requested_port
        return self._server.server_address[1]

    def start(self) -> None:
        try:
            self._server = _CallbackServer((self.host, self._requested_port))
        except OSError as e:
            raise ListenerStartFailed(
                f"Failed to start callback server on port {self._requested_port}: {e}"
            ) from e
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        logger.info(f"Callback listener started on {self.host}:{self.port}")

    def wait(self, timeout: float = AUTHORIZATION_TIMEOUT) -> str:
        """Block until the first callback arrives or the timeout fires.

        Raises:
            AuthorizationDenied: The provider redirected with ?error=.
            AuthorizationTimeout: Nothing arrived within *timeout* seconds.
        """
        if self._server is None:
            raise RuntimeError("Callback listener is not running")
        try:
            kind, value = self._server.outcomes.get(timeout=timeout)
        except queue.Empty:
            raise AuthorizationTimeout(
                f"Authorization timed out ({timeout:g} seconds)"
            ) from None
        if kind == "error":
            raise AuthorizationDenied(f"Authorization error: {value}")
        return value

    def close(self) -> None:
        if self._server is not None:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
        if self._thread is not None:
            self._thread.join(timeout=1)
            self._thread = None
        logger.info("Callback listener stopped")

    def __enter__(self) -> CallbackListener:
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class AuthorizationFlow:
    """Drives the three-legged OAuth2 exchange against freee."""

    def __init__(self, config: Config, store: CredentialStore) -> None:
        self._config = config
        self._store = store
        self._http = httpx.Client(timeout=30.0)

    def build_authorization_url(self) -> str:
        """Authorization URL that forces explicit company selection."""
        params = {
            "client_id": self._config.settings.client_id,
            "redirect_uri": self._config.redirect_uri,
            "response_type": "code",
            "prompt": "select_company",
        }
        return f"{self._config.settings.authorization_endpoint}?{urlencode(params)}"

    def await_authorization_code(self, timeout: float = AUTHORIZATION_TIMEOUT) -> str:
        """Run the local listener until the redirect delivers a code."""
        with CallbackListener(self._config.settings.callback_port) as listener:
            return listener.wait(timeout)

    def exchange_code_for_token(self, code: str) -> TokenRecord:
        """Exchange an authorization code for tokens and persist them.

        Raises:
            TokenExchangeFailed: On any non-200 reply from the token endpoint.
        """
        issued_at = utcnow()
        try:
            response = self._http.post(
                self._config.settings.token_endpoint,
                data={
                    "grant_type": "authorization_code",
                    "client_id": self._config.settings.client_id,
                    "client_secret": self._config.settings.client_secret,
                    "code": code,
                    "redirect_uri": self._config.redirect_uri,
                },
            )
        except httpx.HTTPError as e:
            raise TokenExchangeFailed(f"Token exchange failed: {e}") from e

        if response.status_code != 200:
            raise TokenExchangeFailed(
                f"Token exchange failed (HTTP {response.status_code}): {response_error_detail(response)}"
            )

        try:
            payload = TokenResponse(**response.json())
        except (ValueError, ValidationError) as e:
            raise TokenExchangeFailed(f"Token exchange returned an unexpected payload: {e}") from e

        token = TokenRecord.from_response(payload, issued_at)
        self._store.save_token(token)
        return token

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()
