"""CLI commands for the journal book export."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from freee_cli.client import FreeeClient, build_client
from freee_cli.commands.common import CompanyOption, VerboseOption, fail, require_company
from freee_cli.services.journals import JournalExportService

app = typer.Typer(name="journals", help="Export the journal book.")


class DownloadType(str, Enum):
    CSV = "csv"
    PDF = "pdf"
    YAYOI = "yayoi"
    GENERIC = "generic"


def _build_client(verbose: bool = False) -> tuple[FreeeClient, JournalExportService]:
    client = build_client(verbose)
    return client, JournalExportService(client)


@app.command("download")
def download_journals(
    start_date: Annotated[str, typer.Option("--start-date", help="Start date (YYYY-MM-DD)")],
    end_date: Annotated[str, typer.Option("--end-date", help="End date (YYYY-MM-DD)")],
    download_type: Annotated[DownloadType, typer.Option("--download-type", help="File format")] = DownloadType.CSV,
    output_file: Annotated[Path | None, typer.Option("--output-file", "-f", help="Where to save the file")] = None,
    company_id: CompanyOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Download the journal book, waiting for the server-side export."""
    company = require_company(company_id)
    client, service = _build_client(verbose)
    try:
        service.download(
            company,
            start_date=start_date,
            end_date=end_date,
            download_type=download_type.value,
            output_path=output_file,
        )
    except RuntimeError as e:
        fail(e)
    finally:
        service.close()
        client.close()
