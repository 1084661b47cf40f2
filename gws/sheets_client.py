"""
SheetsClient — read-only wrapper around the Google Sheets API v4 service.

Reads a range (or the whole first sheet) and reports spreadsheet metadata.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from .google_factory import GoogleServiceFactory
from .models import SheetRange, SheetTab, SpreadsheetInfo

logger = logging.getLogger(__name__)


def parse_spreadsheet(raw: dict, spreadsheet_id: str = "") -> SpreadsheetInfo:
    props = raw.get("properties", {})
    tabs = []
    for sheet in raw.get("sheets", []):
        sp = sheet.get("properties", {})
        grid = sp.get("gridProperties", {})
        tabs.append(
            SheetTab(
                title=sp.get("title", ""),
                sheet_id=sp.get("sheetId"),
                index=sp.get("index"),
                row_count=grid.get("rowCount"),
                column_count=grid.get("columnCount"),
            )
        )
    return SpreadsheetInfo(
        spreadsheet_id=raw.get("spreadsheetId", spreadsheet_id),
        title=props.get("title", ""),
        locale=props.get("locale", ""),
        time_zone=props.get("timeZone", ""),
        url=raw.get("spreadsheetUrl", ""),
        sheets=tabs,
    )


def parse_value_range(raw: dict, spreadsheet_id: str) -> SheetRange:
    return SheetRange(
        spreadsheet_id=spreadsheet_id,
        range=raw.get("range", ""),
        values=raw.get("values", []),
    )


class SheetsClient:
    """
    Read-only Google Sheets access.

    Usage:
        factory = GoogleServiceFactory()
        sheets  = SheetsClient(factory)

        data = sheets.read_range("spreadsheet_id", "Sheet1!A1:D10")
        info = sheets.get_info("spreadsheet_id")
    """

    def __init__(self, factory: GoogleServiceFactory) -> None:
        self._factory = factory
        self._svc = factory.sheets

    def _execute(self, request: Any) -> dict:
        return self._factory.execute(request)

    # ── Read ──────────────────────────────────────────────────────────────────

    def read_range(self, spreadsheet_id: str, range_name: Optional[str] = None) -> SheetRange:
        """
        Return the cell values of range_name (A1 notation, e.g. "Sheet1!A1:D10").

        Without a range, the first sheet by declared order is read whole and the
        result also carries the spreadsheet title and every sheet name.
        """
        if range_name:
            raw = self._execute(
                self._svc.spreadsheets().values().get(
                    spreadsheetId=spreadsheet_id, range=range_name
                )
            )
            return parse_value_range(raw, spreadsheet_id)

        info = self.get_info(spreadsheet_id)
        names = info.sheet_names
        if not names:
            return SheetRange(
                spreadsheet_id=spreadsheet_id,
                range="",
                spreadsheet_title=info.title,
                sheet="",
                available_sheets=[],
            )
        first = names[0]
        raw = self._execute(
            self._svc.spreadsheets().values().get(
                spreadsheetId=spreadsheet_id, range=_quote_sheet_name(first)
            )
        )
        result = parse_value_range(raw, spreadsheet_id)
        result.spreadsheet_title = info.title
        result.sheet = first
        result.available_sheets = names
        logger.debug("Read %d row(s) from %s", result.row_count, first)
        return result

    # ── Metadata ──────────────────────────────────────────────────────────────

    def get_info(self, spreadsheet_id: str) -> SpreadsheetInfo:
        """Spreadsheet title, locale, time zone, URL and sheet tabs."""
        raw = self._execute(self._svc.spreadsheets().get(spreadsheetId=spreadsheet_id))
        return parse_spreadsheet(raw, spreadsheet_id)


def _quote_sheet_name(name: str) -> str:
    """Quoted A1 reference for a whole sheet (Q1 -> 'Q1', never the cell Q1)."""
    return "'" + name.replace("'", "''") + "'"
