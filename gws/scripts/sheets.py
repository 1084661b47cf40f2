"""
gws-sheets — read-only Google Sheets & Drive helper.

Usage:
    gws-sheets files [count] [name...]            List Drive files
    gws-sheets read <spreadsheet_id> [range]      Read spreadsheet data
    gws-sheets info <spreadsheet_id>              Spreadsheet metadata
    gws-sheets search <query> [count]             Search Drive by name or content
"""
from __future__ import annotations

import sys
from typing import NamedTuple

from ..base import HelperScript
from ..dispatch import Arg, Capability, Command, Domain, positive_int
from ..drive_client import DriveClient
from ..google_factory import GoogleServiceFactory
from ..models import DriveFileRef, SheetRange, SpreadsheetInfo
from ..sheets_client import SheetsClient


class FileStore(NamedTuple):
    drive: DriveClient
    sheets: SheetsClient


def list_files(store: FileStore, count: int, name_filter: str) -> list[DriveFileRef]:
    return store.drive.list_files(count, name_filter)


def search_files(store: FileStore, query: str, count: int) -> list[DriveFileRef]:
    return store.drive.search_files(query, count)


def read_sheet(store: FileStore, spreadsheet_id: str, range_name: str) -> SheetRange:
    return store.sheets.read_range(spreadsheet_id, range_name or None)


def sheet_info(store: FileStore, spreadsheet_id: str) -> SpreadsheetInfo:
    return store.sheets.get_info(spreadsheet_id)


COUNT = Arg("count", 10, positive_int)

SHEETS = Domain(
    prog="gws-sheets",
    title="Sheets & Drive Helper - Read Only",
    capabilities=frozenset({Capability.READ}),
    commands=(
        Command(
            "files", Capability.READ, list_files,
            args=(COUNT, Arg("name", "", rest=True)),
            summary="List recently modified Drive files",
        ),
        Command(
            "read", Capability.READ, read_sheet,
            args=(Arg("spreadsheet_id"), Arg("range", "")),
            summary="Read a range, or the whole first sheet",
            usage_notes=('range example: "Sheet1!A1:D10"',),
        ),
        Command(
            "info", Capability.READ, sheet_info,
            args=(Arg("spreadsheet_id"),),
            summary="Spreadsheet metadata and sheet tabs",
        ),
        Command(
            "search", Capability.READ, search_files,
            args=(Arg("query"), COUNT),
            summary="Search Drive by file name or content",
        ),
    ),
    examples=(
        "files 10",
        'search "budget"',
        "info 1BxiMVs0XRA5nFMdKvBdBZjgmUUqptlbs74OgVE2upms",
        "read 1BxiMVs0XRA5nFMdKvBdBZjgmUUqptlbs74OgVE2upms",
        'read 1BxiMVs0XRA5nFMdKvBdBZjgmUUqptlbs74OgVE2upms "Sheet1!A1:D10"',
    ),
)


class SheetsHelper(HelperScript):
    """Sheets & Drive Helper - list and search Drive, read spreadsheets."""

    domain = SHEETS

    def make_client(self, factory: GoogleServiceFactory) -> FileStore:
        return FileStore(drive=DriveClient(factory), sheets=SheetsClient(factory))


def main() -> None:
    sys.exit(SheetsHelper.main())


if __name__ == "__main__":
    main()
