"""Tests for utils/errors.py — error codes, hints, structured output."""
import json

import pytest

from conftest import make_response
from freee_cli.utils.errors import (
    ApiRequestFailed,
    AuthorizationTimeout,
    CompanyNotSelected,
    ExportTimeout,
    FreeeCliError,
    NoRefreshToken,
    _get_code,
    _get_hint,
    handle_error,
    response_error_detail,
)


# ── Taxonomy ─────────────────────────────────────────────────────────

@pytest.mark.parametrize("error_type", [AuthorizationTimeout, NoRefreshToken, ExportTimeout, CompanyNotSelected])
def test_errors_are_runtime_errors(error_type):
    assert issubclass(error_type, FreeeCliError)
    assert issubclass(error_type, RuntimeError)


def test_api_error_message():
    error = ApiRequestFailed(404, "not found")
    assert str(error) == "API error (HTTP 404): not found"
    assert error.status_code == 404


# ── Codes ────────────────────────────────────────────────────────────

def test_code_for_typed_error():
    assert _get_code(ExportTimeout("slow")) == "EXPORT_TIMEOUT"


@pytest.mark.parametrize("status,code", [(401, "AUTH_ERROR"), (404, "NOT_FOUND"), (429, "RATE_LIMITED"), (400, "API_ERROR")])
def test_code_for_api_status(status, code):
    assert _get_code(ApiRequestFailed(status, "x")) == code


def test_code_for_plain_runtime_error():
    assert _get_code(RuntimeError("Connection refused")) == "CONNECTION_ERROR"
    assert _get_code(RuntimeError("something")) == "RUNTIME_ERROR"


# ── Hints ────────────────────────────────────────────────────────────

def test_hint_for_missing_refresh_token():
    assert "freee auth login" in _get_hint(NoRefreshToken("x"))


def test_hint_for_double_401():
    assert "freee auth login" in _get_hint(ApiRequestFailed(401, "Unauthorized"))


def test_hint_for_company():
    assert "companies set" in _get_hint(CompanyNotSelected("x"))


def test_hint_no_match():
    assert _get_hint(RuntimeError("some random error")) is None


# ── response_error_detail ────────────────────────────────────────────

def test_detail_from_freee_errors():
    response = make_response(400, json_data={
        "status_code": 400,
        "errors": [{"type": "validation", "messages": ["issue_date is invalid", "amount is required"]}],
    })
    assert response_error_detail(response) == "issue_date is invalid; amount is required"


def test_detail_from_oauth_error():
    response = make_response(401, json_data={"error": "invalid_grant", "error_description": "expired"})
    assert response_error_detail(response) == "expired"


def test_detail_from_text():
    assert response_error_detail(make_response(502, content=b"Bad Gateway")) == "Bad Gateway"


# ── handle_error ─────────────────────────────────────────────────────

def test_handle_error_writes_json(capsys):
    handle_error(ExportTimeout("Journal export timed out"))
    out = json.loads(capsys.readouterr().out)
    assert out["error"] is True
    assert out["code"] == "EXPORT_TIMEOUT"
    assert out["message"] == "Journal export timed out"
    assert "hint" in out


def test_handle_error_without_hint(capsys):
    handle_error(RuntimeError("weird"))
    out = json.loads(capsys.readouterr().out)
    assert "hint" not in out
