"""Authenticated HTTP client for the freee API.

Attaches a valid bearer token to every request, refreshes and replays once
on 401, and retries transport errors, 429 and 5xx with backoff.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

import httpx

from freee_cli.auth import AuthManager
from freee_cli.config import Config, get_config
from freee_cli.storage import CredentialStore
from freee_cli.utils.errors import ApiRequestFailed, response_error_detail

logger = logging.getLogger(__name__)


def send_with_refresh(
    send: Callable[[], httpx.Response],
    refresh: Callable[[], object],
) -> httpx.Response:
    """Send once; on 401 refresh and send exactly once more.

    The second response is returned whatever its status, so a request is
    never replayed twice. Errors raised by *refresh* propagate.
    """
    response = send()
    if response.status_code != 401:
        return response
    logger.warning("Got 401, refreshing token and retrying once...")
    refresh()
    return send()


class FreeeClient:
    """HTTP client for the freee API with token and retry handling."""

    def __init__(
        self,
        config: Config,
        auth: AuthManager,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        verbose: bool = False,
    ) -> None:
        self._config = config
        self._auth = auth
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._verbose = verbose
        self._http = httpx.Client(timeout=60.0)

    @property
    def auth(self) -> AuthManager:
        return self._auth

    def request(
        self,
        method: str,
        path: str,
        *,
        body: dict[str, Any] | list | None = None,
        params: dict[str, Any] | None = None,
        accept: str | None = None,
    ) -> httpx.Response:
        """Make an authenticated API request.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE).
            path: API path (e.g. "/api/1/deals") or an absolute URL.
            body: JSON request body.
            params: Query parameters.
            accept: Override Accept header.

        Returns:
            The httpx.Response object (always 2xx/3xx).

        Raises:
            ApiRequestFailed: On any other status after retries.
            NoRefreshToken, RefreshFailed: When no valid token can be obtained.
        """
        url = path if path.startswith(("http://", "https://")) else self._config.settings.api_base_url + path

        def send() -> httpx.Response:
            return self._send(method, url, body=body, params=params, accept=accept)

        response = send_with_refresh(send, self._auth.refresh)

        if response.status_code >= 400:
            raise ApiRequestFailed(response.status_code, response_error_detail(response))
        return response

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Convenience method for GET requests."""
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Convenience method for POST requests."""
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> httpx.Response:
        """Convenience method for PUT requests."""
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        """Convenience method for DELETE requests."""
        return self.request("DELETE", path, **kwargs)

    def _send(
        self,
        method: str,
        url: str,
        *,
        body: dict[str, Any] | list | None,
        params: dict[str, Any] | None,
        accept: str | None,
    ) -> httpx.Response:
        """One logical send: fresh auth header, transport/429/5xx retries."""
        for attempt in range(1, self._max_retries + 1):
            headers = self._build_headers(accept)

            if self._verbose:
                logger.info(f"[Attempt {attempt}/{self._max_retries}] {method} {url}")
                if body:
                    logger.info(f"Body: {body}")

            try:
                response = self._http.request(
                    method=method,
                    url=url,
                    headers=headers,
                    json=body,
                    params=params,
                )
            except httpx.HTTPError as e:
                if attempt == self._max_retries:
                    raise RuntimeError(f"Request failed after {self._max_retries} attempts: {e}") from e
                wait = self._backoff(attempt)
                logger.warning(f"HTTP error: {e}. Retrying in {wait:.1f}s...")
                time.sleep(wait)
                continue

            if self._verbose:
                logger.info(f"Response: {response.status_code}")

            if response.status_code == 429 and attempt < self._max_retries:
                wait = self._backoff(attempt)
                logger.warning(f"Rate limited (429). Waiting {wait:.1f}s...")
                time.sleep(wait)
                continue

            if 500 <= response.status_code < 600 and attempt < self._max_retries:
                wait = self._backoff(attempt)
                logger.warning(f"Server error ({response.status_code}). Waiting {wait:.1f}s...")
                time.sleep(wait)
                continue

            return response

        raise RuntimeError(f"Request to {url} failed after {self._max_retries} attempts")

    def _build_headers(self, accept: str | None = None) -> dict[str, str]:
        """Build request headers with a currently valid bearer token."""
        token = self._auth.access_token()
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        if accept:
            headers["Accept"] = accept
        return headers

    def _backoff(self, attempt: int) -> float:
        """Calculate exponential backoff delay."""
        return self._retry_delay * (2 ** (attempt - 1))

    def close(self) -> None:
        """Close the underlying HTTP clients."""
        self._http.close()
        self._auth.close()


def build_client(verbose: bool = False) -> FreeeClient:
    """Construct the process-wide client with its token manager."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    config = get_config()
    store = CredentialStore(config.config_dir)
    auth = AuthManager(config, store)
    return FreeeClient(config, auth, verbose=verbose)
