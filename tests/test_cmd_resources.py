"""CLI tests for company-scoped resource command groups."""
import json
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from conftest import make_response
from freee_cli.commands import (
    companies_cmd,
    deals_cmd,
    sections_cmd,
    tags_cmd,
    trial_balance_cmd,
    wallet_txns_cmd,
    walletables_cmd,
)
from freee_cli.main import app as root_app
from freee_cli.models.auth import AppConfig
from freee_cli.services.resources import DealService
from freee_cli.utils.errors import ApiRequestFailed

runner = CliRunner()


def _mock_build(mock_service):
    return MagicMock(), mock_service


# ── Company scope ────────────────────────────────────────────────────

@pytest.mark.parametrize("module,args", [
    (deals_cmd, ["deals", "list"]),
    (sections_cmd, ["sections", "list"]),
    (tags_cmd, ["tags", "delete", "5"]),
    (wallet_txns_cmd, ["wallet-txns", "list"]),
    (trial_balance_cmd, ["trial-balance", "get"]),
])
def test_missing_company_exits_before_any_request(store, module, args):
    with patch("freee_cli.commands.common.default_store", return_value=store), \
         patch.object(module, "_build_client") as build:
        result = runner.invoke(root_app, args)

    assert result.exit_code == 1
    assert json.loads(result.stdout)["code"] == "COMPANY_NOT_SELECTED"
    build.assert_not_called()


def test_explicit_company_overrides_selected(store):
    store.save_app_config(AppConfig(company_id=1))
    svc = MagicMock()
    svc.list.return_value = []

    with patch("freee_cli.commands.common.default_store", return_value=store), \
         patch.object(deals_cmd, "_build_client", return_value=_mock_build(svc)):
        result = runner.invoke(deals_cmd.app, ["list", "--company-id", "2", "--output", "json"])

    assert result.exit_code == 0
    assert svc.list.call_args[0][0] == 2


# ── companies ────────────────────────────────────────────────────────

def test_companies_set_and_current(store):
    with patch("freee_cli.commands.companies_cmd.default_store", return_value=store):
        assert runner.invoke(companies_cmd.app, ["set", "777"]).exit_code == 0
        result = runner.invoke(companies_cmd.app, ["current", "--output", "json"])

    assert json.loads(result.stdout) == {"company_id": 777}
    assert store.load_app_config().company_id == 777


def test_companies_list_json():
    svc = MagicMock()
    svc.list.return_value = [{"id": 1, "display_name": "Acme", "role": "admin"}]

    with patch.object(companies_cmd, "_build_client", return_value=_mock_build(svc)):
        result = runner.invoke(companies_cmd.app, ["list", "--output", "json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)[0]["display_name"] == "Acme"


# ── deals ────────────────────────────────────────────────────────────

def test_deals_list_maps_filters(store):
    svc = MagicMock()
    svc.list.return_value = [{"id": 1, "issue_date": "2025-01-05", "amount": 1000}]

    with patch("freee_cli.commands.common.default_store", return_value=store), \
         patch.object(deals_cmd, "_build_client", return_value=_mock_build(svc)):
        result = runner.invoke(deals_cmd.app, [
            "list", "-c", "10", "--partner", "P01", "--start-date", "2025-01-01",
            "--limit", "5", "--output", "csv",
        ])

    assert result.exit_code == 0
    kwargs = svc.list.call_args[1]
    assert kwargs["partner_code"] == "P01"
    assert kwargs["start_issue_date"] == "2025-01-01"
    assert kwargs["limit"] == 5
    assert result.stdout.startswith("id,issue_date,type,amount,status,partner_id")


def test_deals_create_requires_fields(store):
    with patch("freee_cli.commands.common.default_store", return_value=store), \
         patch.object(deals_cmd, "_build_client") as build:
        result = runner.invoke(deals_cmd.app, ["create", "-c", "10", "--type", "expense"])

    assert result.exit_code == 1
    assert "--issue-date" in json.loads(result.stdout)["message"]
    build.assert_not_called()


def test_deals_create_builds_detail(store):
    svc = MagicMock()
    svc.create.return_value = {"id": 99}

    with patch("freee_cli.commands.common.default_store", return_value=store), \
         patch.object(deals_cmd, "_build_client", return_value=_mock_build(svc)):
        result = runner.invoke(deals_cmd.app, [
            "create", "-c", "10", "--type", "expense", "--issue-date", "2025-02-01",
            "--amount", "5500", "--account-item-id", "101", "--tax-code", "136",
            "--output", "json",
        ])

    assert result.exit_code == 0
    company, fields = svc.create.call_args[0]
    assert company == 10
    assert fields["details"] == [
        {"account_item_id": 101, "tax_code": 136, "amount": 5500, "description": ""},
    ]


def test_deals_create_from_json(store, tmp_path):
    body = tmp_path / "deal.json"
    body.write_text(json.dumps({"type": "income", "issue_date": "2025-02-01", "details": []}))
    svc = MagicMock()
    svc.create.return_value = {"id": 1}

    with patch("freee_cli.commands.common.default_store", return_value=store), \
         patch.object(deals_cmd, "_build_client", return_value=_mock_build(svc)):
        result = runner.invoke(deals_cmd.app, ["create", "-c", "10", "--from-json", str(body)])

    assert result.exit_code == 0
    assert svc.create.call_args[0][1]["type"] == "income"


def test_deals_api_error(store):
    svc = MagicMock()
    svc.delete.side_effect = ApiRequestFailed(404, "deal not found")
    client = MagicMock()

    with patch("freee_cli.commands.common.default_store", return_value=store), \
         patch.object(deals_cmd, "_build_client", return_value=(client, svc)):
        result = runner.invoke(deals_cmd.app, ["delete", "5", "-c", "10"])

    assert result.exit_code == 1
    assert json.loads(result.stdout)["code"] == "NOT_FOUND"
    client.close.assert_called_once()


# ── walletables / trial balance ──────────────────────────────────────

def test_walletables_get_typed(store):
    svc = MagicMock()
    svc.get_typed.return_value = {"id": 4, "name": "Main", "type": "bank_account"}

    with patch("freee_cli.commands.common.default_store", return_value=store), \
         patch.object(walletables_cmd, "_build_client", return_value=_mock_build(svc)):
        result = runner.invoke(walletables_cmd.app, ["get", "bank_account", "4", "-c", "10", "--output", "json"])

    assert result.exit_code == 0
    svc.get_typed.assert_called_once_with(10, "bank_account", 4)


def test_trial_balance_bs(store):
    svc = MagicMock()
    svc.get.return_value = [{"account_item_name": "Cash", "closing_balance": 100}]

    with patch("freee_cli.commands.common.default_store", return_value=store), \
         patch.object(trial_balance_cmd, "_build_client", return_value=_mock_build(svc)):
        result = runner.invoke(root_app, [
            "trial-balance", "get", "-c", "10", "--type", "bs", "--fiscal-year", "2025", "--output", "json",
        ])

    assert result.exit_code == 0
    assert svc.get.call_args[1]["report_type"] == "bs"
    assert svc.get.call_args[1]["fiscal_year"] == 2025


# ── root app ─────────────────────────────────────────────────────────

def test_root_help_lists_groups():
    result = runner.invoke(root_app, ["--help"])
    assert result.exit_code == 0
    for group in ["auth", "companies", "deals", "journals", "trial-balance", "wallet-txns"]:
        assert group in result.stdout


# ── Malformed responses and empty updates ────────────────────────────

def test_deals_list_html_body_exits_1(store, mock_client):
    mock_client.get.return_value = make_response(200, content=b"<html>maintenance</html>")

    with patch("freee_cli.commands.common.default_store", return_value=store), \
         patch.object(deals_cmd, "_build_client", return_value=(mock_client, DealService(mock_client))):
        result = runner.invoke(deals_cmd.app, ["list", "--company-id", "1"])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "non-JSON" in json.loads(result.stdout)["message"]
    mock_client.close.assert_called_once()


def test_deals_update_without_fields(store):
    with patch("freee_cli.commands.common.default_store", return_value=store), \
         patch.object(deals_cmd, "_build_client") as build:
        result = runner.invoke(deals_cmd.app, ["update", "5", "-c", "10"])

    assert result.exit_code == 1
    assert "Nothing to update" in json.loads(result.stdout)["message"]
    build.assert_not_called()


def test_deals_update_sends_given_fields(store):
    svc = MagicMock()

    with patch("freee_cli.commands.common.default_store", return_value=store), \
         patch.object(deals_cmd, "_build_client", return_value=_mock_build(svc)):
        result = runner.invoke(deals_cmd.app, ["update", "5", "-c", "10", "--issue-date", "2025-03-01"])

    assert result.exit_code == 0
    svc.update.assert_called_once_with(10, 5, {"type": None, "issue_date": "2025-03-01"})
