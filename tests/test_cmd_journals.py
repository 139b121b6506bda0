"""CLI tests for journals command group."""
import json
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from conftest import make_response
from freee_cli.main import app
from freee_cli.models.auth import AppConfig
from freee_cli.services.journals import JournalExportService
from freee_cli.utils.errors import ExportTimeout

runner = CliRunner()


def _mock_build(mock_service):
    return MagicMock(), mock_service


def test_download_uses_selected_company(store, tmp_path):
    store.save_app_config(AppConfig(company_id=321))
    svc = MagicMock()
    target = tmp_path / "j.csv"

    with patch("freee_cli.commands.common.default_store", return_value=store), \
         patch("freee_cli.commands.journals_cmd._build_client", return_value=_mock_build(svc)):
        result = runner.invoke(app, [
            "journals", "download", "--start-date", "2025-01-01", "--end-date", "2025-03-31",
            "--download-type", "pdf", "--output-file", str(target),
        ])

    assert result.exit_code == 0
    svc.download.assert_called_once_with(
        321,
        start_date="2025-01-01",
        end_date="2025-03-31",
        download_type="pdf",
        output_path=target,
    )
    svc.close.assert_called_once()


def test_download_without_company_builds_nothing(store):
    with patch("freee_cli.commands.common.default_store", return_value=store), \
         patch("freee_cli.commands.journals_cmd._build_client") as build:
        result = runner.invoke(app, ["journals", "download", "--start-date", "2025-01-01", "--end-date", "2025-01-31"])

    assert result.exit_code == 1
    assert json.loads(result.stdout)["code"] == "COMPANY_NOT_SELECTED"
    build.assert_not_called()


def test_download_timeout_exits_1(store):
    svc = MagicMock()
    svc.download.side_effect = ExportTimeout("Journal export timed out after 60 polls")
    client = MagicMock()

    with patch("freee_cli.commands.common.default_store", return_value=store), \
         patch("freee_cli.commands.journals_cmd._build_client", return_value=(client, svc)):
        result = runner.invoke(app, [
            "journals", "download", "-c", "1", "--start-date", "2025-01-01", "--end-date", "2025-01-31",
        ])

    assert result.exit_code == 1
    assert json.loads(result.stdout)["code"] == "EXPORT_TIMEOUT"
    client.close.assert_called_once()
    svc.close.assert_called_once()


def test_download_requires_dates():
    result = runner.invoke(app, ["journals", "download", "-c", "1"])
    assert result.exit_code != 0


def test_download_to_directory_exits_1(store, mock_client, tmp_path):
    mock_client.get.return_value = make_response(200, content=b"date,amount\n")
    svc = JournalExportService(mock_client, sleep=MagicMock())

    with patch("freee_cli.commands.common.default_store", return_value=store), \
         patch("freee_cli.commands.journals_cmd._build_client", return_value=(mock_client, svc)):
        result = runner.invoke(app, [
            "journals", "download", "-c", "1", "--start-date", "2025-01-01", "--end-date", "2025-01-31",
            "--output-file", str(tmp_path),
        ])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert json.loads(result.stdout)["code"] == "EXPORT_WRITE_FAILED"
