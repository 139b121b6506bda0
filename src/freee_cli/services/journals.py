"""Journal export service: request a job, poll it, download the file."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Callable

import httpx
from pydantic import BaseModel
from rich.console import Console

from freee_cli.client import FreeeClient
from freee_cli.utils.errors import ApiRequestFailed, ExportTimeout, ExportWriteFailed

console = Console(stderr=True)
logger = logging.getLogger(__name__)

POLL_INTERVAL = 2.0
MAX_POLLS = 60


class PendingExportJob(BaseModel):
    """Per-invocation state of a server-side export job."""
    status_url: str
    polls: int = 0
    download_url: str | None = None


def default_output_path(start_date: str, end_date: str, download_type: str) -> Path:
    ext = "pdf" if download_type == "pdf" else "csv"
    return Path.cwd() / f"journals_{start_date}_{end_date}.{ext}"


def _extract_download_url(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return None
    journals = payload.get("journals")
    if isinstance(journals, dict) and journals.get("url"):
        return journals["url"]
    return payload.get("url")


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


class JournalExportService:
    """Downloads the journal book, waiting on the async export if needed."""

    def __init__(
        self,
        client: FreeeClient,
        poll_interval: float = POLL_INTERVAL,
        max_polls: int = MAX_POLLS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self._poll_interval = poll_interval
        self._max_polls = max_polls
        self._sleep = sleep
        self._http = httpx.Client(timeout=120.0, follow_redirects=True)

    def download(
        self,
        company_id: int,
        start_date: str,
        end_date: str,
        download_type: str = "csv",
        output_path: str | Path | None = None,
    ) -> Path:
        """Export journals for a date range and write them to disk.

        Returns:
            The path the file was written to.

        Raises:
            ExportTimeout: The job did not finish within the poll budget.
            ApiRequestFailed: The submit or a poll request failed.
            ExportWriteFailed: The file could not be written to *output_path*.
        """
        target = Path(output_path) if output_path else default_output_path(start_date, end_date, download_type)

        console.print("Requesting journal export...")
        response = self._client.get(
            "/api/1/journals",
            params={
                "company_id": company_id,
                "download_type": download_type,
                "start_date": start_date,
                "end_date": end_date,
            },
        )

        status_url = response.headers.get("location")
        if not status_url:
            if response.status_code != 200:
                raise ApiRequestFailed(
                    response.status_code,
                    "Export returned neither a file nor a status location",
                )
            return self._write(target, response.content)

        job = PendingExportJob(status_url=status_url)
        console.print("Waiting for the export to be prepared...")
        self._poll(job)

        console.print("Downloading...")
        return self._write(target, self._fetch_artifact(job.download_url))  # type: ignore[arg-type]

    def _poll(self, job: PendingExportJob) -> PendingExportJob:
        """Poll the status location until a download URL appears."""
        while job.polls < self._max_polls:
            self._sleep(self._poll_interval)
            job.polls += 1
            response = self._client.get(job.status_url)

            if response.status_code == 202:
                logger.info(f"Export still processing (poll {job.polls}/{self._max_polls})")
                continue

            url = _extract_download_url(_json_or_none(response)) if response.status_code == 200 else None
            if url:
                job.download_url = url
                return job

        raise ExportTimeout(
            f"Journal export timed out after {self._max_polls} polls "
            f"({self._max_polls * self._poll_interval:g}s)"
        )

    def _fetch_artifact(self, url: str) -> bytes:
        try:
            response = self._http.get(url)
        except httpx.HTTPError as e:
            raise RuntimeError(f"Export download failed: {e}") from e
        if response.status_code >= 400:
            raise ApiRequestFailed(response.status_code, "Export download failed")
        return response.content

    def _write(self, target: Path, content: bytes) -> Path:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            raise ExportWriteFailed(f"Could not write journals to {target}: {e}") from e
        console.print(f"Journals saved: {target}")
        return target

    def close(self) -> None:
        self._http.close()
