"""Tests for services/journals.py — submit, poll, download."""
from unittest.mock import MagicMock

import httpx
import pytest

from conftest import make_response
from freee_cli.services.journals import (
    MAX_POLLS,
    POLL_INTERVAL,
    JournalExportService,
    PendingExportJob,
    default_output_path,
)
from freee_cli.utils.errors import ApiRequestFailed, ExportTimeout, ExportWriteFailed

STATUS_URL = "https://api.test.freee.local/api/1/journals/reports/42/status"
FILE_URL = "https://files.test.freee.local/journals/42.csv"


@pytest.fixture
def sleep():
    return MagicMock()


@pytest.fixture
def service(mock_client, sleep):
    svc = JournalExportService(mock_client, sleep=sleep)
    svc._http = MagicMock()
    return svc


def _accepted():
    return make_response(202, json_data={"journals": {"status": "pending"}}, headers={"Location": STATUS_URL})


def test_defaults():
    assert POLL_INTERVAL == 2.0
    assert MAX_POLLS == 60


def test_default_output_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert default_output_path("2025-01-01", "2025-03-31", "csv") == tmp_path / "journals_2025-01-01_2025-03-31.csv"
    assert default_output_path("2025-01-01", "2025-03-31", "pdf").suffix == ".pdf"
    assert default_output_path("2025-01-01", "2025-03-31", "yayoi").suffix == ".csv"


def test_pending_job_starts_unpolled():
    job = PendingExportJob(status_url=STATUS_URL)
    assert job.polls == 0
    assert job.download_url is None


# ── Direct result ────────────────────────────────────────────────────

def test_direct_body_written_without_polling(service, mock_client, sleep, tmp_path):
    mock_client.get.return_value = make_response(200, content=b"date,amount\n2025-01-05,1000\n")
    target = tmp_path / "out" / "journals.csv"

    path = service.download(1, "2025-01-01", "2025-01-31", output_path=target)

    assert path == target
    assert target.read_bytes() == b"date,amount\n2025-01-05,1000\n"
    assert mock_client.get.call_count == 1
    sleep.assert_not_called()
    service._http.get.assert_not_called()


def test_submit_params(service, mock_client, tmp_path):
    mock_client.get.return_value = make_response(200, content=b"x")

    service.download(99, "2025-04-01", "2025-04-30", download_type="generic", output_path=tmp_path / "j.csv")

    args, kwargs = mock_client.get.call_args
    assert args[0] == "/api/1/journals"
    assert kwargs["params"] == {
        "company_id": 99,
        "download_type": "generic",
        "start_date": "2025-04-01",
        "end_date": "2025-04-30",
    }


def test_direct_non_200_without_location_fails(service, mock_client, tmp_path):
    mock_client.get.return_value = make_response(204)

    with pytest.raises(ApiRequestFailed):
        service.download(1, "2025-01-01", "2025-01-31", output_path=tmp_path / "j.csv")
    assert not (tmp_path / "j.csv").exists()


# ── Polling ──────────────────────────────────────────────────────────

def test_polls_until_ready_then_downloads(service, mock_client, sleep, tmp_path):
    mock_client.get.side_effect = [
        _accepted(),
        make_response(202),
        make_response(202),
        make_response(202),
        make_response(200, json_data={"journals": {"id": 42, "status": "uploaded", "url": FILE_URL}}),
    ]
    service._http.get.return_value = make_response(200, content=b"csv-bytes", url=FILE_URL)
    target = tmp_path / "journals.csv"

    service.download(1, "2025-01-01", "2025-01-31", output_path=target)

    assert mock_client.get.call_count == 5
    assert [c[0][0] for c in mock_client.get.call_args_list[1:]] == [STATUS_URL] * 4
    assert sleep.call_count == 4
    sleep.assert_called_with(POLL_INTERVAL)
    service._http.get.assert_called_once_with(FILE_URL)
    assert target.read_bytes() == b"csv-bytes"


def test_poll_accepts_top_level_url(service, mock_client, tmp_path):
    mock_client.get.side_effect = [_accepted(), make_response(200, json_data={"url": FILE_URL})]
    service._http.get.return_value = make_response(200, content=b"pdf", url=FILE_URL)

    service.download(1, "2025-01-01", "2025-01-31", download_type="pdf", output_path=tmp_path / "j.pdf")
    service._http.get.assert_called_once_with(FILE_URL)


def test_poll_200_without_url_keeps_polling(service, mock_client, tmp_path):
    mock_client.get.side_effect = [
        _accepted(),
        make_response(200, json_data={"journals": {"status": "enqueued"}}),
        make_response(200, json_data={"journals": {"url": FILE_URL}}),
    ]
    service._http.get.return_value = make_response(200, content=b"ok", url=FILE_URL)

    service.download(1, "2025-01-01", "2025-01-31", output_path=tmp_path / "j.csv")
    assert mock_client.get.call_count == 3


def test_timeout_after_max_polls(service, mock_client, sleep, tmp_path):
    mock_client.get.side_effect = [_accepted()] + [make_response(202)] * MAX_POLLS
    target = tmp_path / "j.csv"

    with pytest.raises(ExportTimeout):
        service.download(1, "2025-01-01", "2025-01-31", output_path=target)

    assert mock_client.get.call_count == 1 + MAX_POLLS
    assert sleep.call_count == MAX_POLLS
    service._http.get.assert_not_called()
    assert not target.exists()


def test_custom_poll_budget(mock_client, sleep, tmp_path):
    svc = JournalExportService(mock_client, poll_interval=0.5, max_polls=3, sleep=sleep)
    svc._http = MagicMock()
    mock_client.get.side_effect = [_accepted()] + [make_response(202)] * 3

    with pytest.raises(ExportTimeout, match="3 polls"):
        svc.download(1, "2025-01-01", "2025-01-31", output_path=tmp_path / "j.csv")
    sleep.assert_called_with(0.5)


def test_poll_error_propagates(service, mock_client, tmp_path):
    mock_client.get.side_effect = [_accepted(), ApiRequestFailed(404, "job not found")]

    with pytest.raises(ApiRequestFailed):
        service.download(1, "2025-01-01", "2025-01-31", output_path=tmp_path / "j.csv")


# ── Artifact download ────────────────────────────────────────────────

def test_artifact_http_error(service, mock_client, tmp_path):
    mock_client.get.side_effect = [_accepted(), make_response(200, json_data={"url": FILE_URL})]
    service._http.get.return_value = make_response(403, content=b"denied", url=FILE_URL)

    with pytest.raises(ApiRequestFailed, match="HTTP 403"):
        service.download(1, "2025-01-01", "2025-01-31", output_path=tmp_path / "j.csv")


def test_artifact_transport_error(service, mock_client, tmp_path):
    mock_client.get.side_effect = [_accepted(), make_response(200, json_data={"url": FILE_URL})]
    service._http.get.side_effect = httpx.ReadTimeout("slow")

    with pytest.raises(RuntimeError, match="download failed"):
        service.download(1, "2025-01-01", "2025-01-31", output_path=tmp_path / "j.csv")


# ── Writing the file ─────────────────────────────────────────────────

def test_output_path_is_directory(service, mock_client, tmp_path):
    mock_client.get.return_value = make_response(200, content=b"date,amount\n")

    with pytest.raises(ExportWriteFailed, match="Could not write journals"):
        service.download(1, "2025-01-01", "2025-01-31", output_path=tmp_path)
