"""
gws — Google Workspace command-line helpers.

Package structure:
    gws.base             — HelperScript abstract class (logging, timing, CLI)
    gws.dispatch         — Capability, Command, Domain (closed command tables)
    gws.errors           — HelperError hierarchy
    gws.models           — Typed projections (Gmail, Calendar, Drive, Sheets)
    gws.google_auth      — refresh-token credentials from the environment
    gws.google_factory   — GoogleServiceFactory (single credential, lazy services)
    gws.fanout           — concurrent detail fetches with ordered join
    gws.timewindow       — day/week boundaries for calendar queries
    gws.gmail_client     — GmailClient (read-only)
    gws.calendar_client  — CalendarClient (read + create/patch, no delete)
    gws.drive_client     — DriveClient (read-only)
    gws.sheets_client    — SheetsClient (read-only)
    gws.scripts          — gws-gmail, gws-calendar, gws-sheets, gws-auth
"""

__version__ = "0.1.0"
