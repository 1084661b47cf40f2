"""
GmailClient — read-only wrapper around the Gmail API v1 service.

All methods return gws.models projections rather than raw API dicts. Listing
calls fetch per-message metadata concurrently (gws.fanout) and keep the order
the API returned.
"""
from __future__ import annotations

import base64
import logging
from typing import Any, Optional

from .fanout import fan_out
from .google_factory import GoogleServiceFactory
from .models import Label, MessageFull, MessageSummary, ThreadSummary

logger = logging.getLogger(__name__)

HTML_TAG = "[HTML] "
HTML_PREVIEW_CHARS = 2000
SUMMARY_HEADERS = ["From", "Subject", "Date"]


# ── Parsing helpers ───────────────────────────────────────────────────────────

def decode_base64url(data: str) -> str:
    """Decode Gmail's URL-safe base64 (padding optional)."""
    if not data:
        return ""
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded).decode("utf-8", errors="replace")


def _find_part_text(payload: dict, mime_type: str) -> str:
    """Depth-first search for the first non-empty part of the given MIME type."""
    if payload.get("mimeType") == mime_type:
        text = decode_base64url(payload.get("body", {}).get("data", ""))
        if text:
            return text
    for part in payload.get("parts", []) or []:
        text = _find_part_text(part, mime_type)
        if text:
            return text
    return ""


def extract_body(payload: Optional[dict]) -> str:
    """
    Return the message text: text/plain anywhere in the MIME tree wins; otherwise
    the first text/html part, truncated and tagged with "[HTML] ".
    """
    if not payload:
        return ""
    text = _find_part_text(payload, "text/plain")
    if text:
        return text
    html = _find_part_text(payload, "text/html")
    if html:
        return HTML_TAG + html[:HTML_PREVIEW_CHARS]
    return ""


def _headers(raw: dict) -> dict[str, str]:
    """Lower-cased {name: value} for a message's headers (first occurrence wins)."""
    result: dict[str, str] = {}
    for h in (raw.get("payload") or {}).get("headers", []) or []:
        result.setdefault(h.get("name", "").lower(), h.get("value", ""))
    return result


def _field(raw: dict, headers: dict[str, str], name: str) -> str:
    """A header value, falling back to an already-projected top-level key."""
    if name in headers:
        return headers[name]
    return raw.get(name) or ""


def parse_message_summary(raw: dict) -> MessageSummary:
    """Convert a metadata-format message into a MessageSummary."""
    headers = _headers(raw)
    return MessageSummary(
        message_id=raw.get("id", ""),
        thread_id=raw.get("threadId", ""),
        sender=_field(raw, headers, "from"),
        subject=_field(raw, headers, "subject"),
        date=_field(raw, headers, "date"),
        snippet=raw.get("snippet") or "",
    )


def parse_message(raw: dict) -> MessageFull:
    """Convert a full-format message into a MessageFull with a decoded body."""
    headers = _headers(raw)
    payload = raw.get("payload")
    return MessageFull(
        message_id=raw.get("id", ""),
        thread_id=raw.get("threadId", ""),
        sender=_field(raw, headers, "from"),
        recipients=_field(raw, headers, "to"),
        subject=_field(raw, headers, "subject"),
        date=_field(raw, headers, "date"),
        snippet=raw.get("snippet") or "",
        labels=list(raw.get("labelIds", raw.get("labels")) or []),
        body=extract_body(payload) if payload else raw.get("body") or "",
    )


def parse_thread_summary(raw: dict) -> ThreadSummary:
    """Summarise a metadata-format thread by its first message."""
    messages = raw.get("messages")
    if messages is None:
        return ThreadSummary(
            thread_id=raw.get("threadId") or raw.get("id", ""),
            message_count=raw.get("messageCount", 0),
            sender=raw.get("from") or "",
            subject=raw.get("subject") or "",
            date=raw.get("date") or "",
            snippet=raw.get("snippet") or "",
        )
    first = messages[0] if messages else {}
    headers = _headers(first)
    return ThreadSummary(
        thread_id=raw.get("id", ""),
        message_count=len(messages),
        sender=headers.get("from", ""),
        subject=headers.get("subject", ""),
        date=headers.get("date", ""),
        snippet=first.get("snippet") or "",
    )


def parse_label(raw: dict) -> Label:
    return Label(
        label_id=raw.get("id", ""),
        name=raw.get("name", ""),
        label_type=raw.get("type", ""),
    )


# ── Client class ──────────────────────────────────────────────────────────────

class GmailClient:
    """
    Read-only Gmail operations.

    Instantiate with a GoogleServiceFactory so credentials are shared:
        factory = GoogleServiceFactory()
        client  = GmailClient(factory)
    """

    def __init__(self, factory: GoogleServiceFactory) -> None:
        self._factory = factory
        self._svc = factory.gmail

    def _execute(self, request: Any) -> dict:
        return self._factory.execute(request)

    # ── Search / listing ──────────────────────────────────────────────────────

    def list_messages(self, max_results: int = 10, query: str = "") -> list[MessageSummary]:
        """
        List recent messages, optionally filtered by a Gmail query string.

        Common query examples:
            "is:unread"
            "from:boss@company.com"
            "subject:invoice after:2026/01/01"
        """
        kwargs: dict = dict(userId="me", maxResults=max_results)
        if query:
            kwargs["q"] = query
        resp = self._execute(self._svc.users().messages().list(**kwargs))
        refs = [m["id"] for m in resp.get("messages", [])]
        logger.debug("messages.list returned %d id(s) for %r", len(refs), query)

        raws = fan_out(self._get_metadata, refs, describe=lambda mid: f"message {mid}")
        return [parse_message_summary(r) for r in raws]

    def search(self, query: str, max_results: int = 10) -> list[MessageSummary]:
        """Search messages using a Gmail query string."""
        return self.list_messages(max_results=max_results, query=query)

    def list_threads(self, query: str, max_results: int = 10) -> list[ThreadSummary]:
        """List threads matching a query, summarised by each thread's first message."""
        kwargs: dict = dict(userId="me", maxResults=max_results)
        if query:
            kwargs["q"] = query
        resp = self._execute(self._svc.users().threads().list(**kwargs))
        refs = [t["id"] for t in resp.get("threads", [])]

        raws = fan_out(self._get_thread_metadata, refs, describe=lambda tid: f"thread {tid}")
        return [parse_thread_summary(r) for r in raws]

    # ── Single message ────────────────────────────────────────────────────────

    def get_message(self, message_id: str) -> MessageFull:
        """Fetch a single Gmail message by ID with its decoded body."""
        raw = self._execute(
            self._svc.users().messages().get(userId="me", id=message_id, format="full")
        )
        message = parse_message(raw)
        if message.is_html_fallback:
            logger.debug("Message %s has no text/plain part; using HTML", message_id)
        return message

    # ── Labels ────────────────────────────────────────────────────────────────

    def list_labels(self) -> list[Label]:
        """Return every label in the mailbox, in API order."""
        resp = self._execute(self._svc.users().labels().list(userId="me"))
        return [parse_label(lbl) for lbl in resp.get("labels", [])]

    # ── Internal ──────────────────────────────────────────────────────────────

    def _get_metadata(self, message_id: str) -> dict:
        return self._execute(
            self._svc.users().messages().get(
                userId="me",
                id=message_id,
                format="metadata",
                metadataHeaders=SUMMARY_HEADERS,
            )
        )

    def _get_thread_metadata(self, thread_id: str) -> dict:
        return self._execute(
            self._svc.users().threads().get(
                userId="me",
                id=thread_id,
                format="metadata",
                metadataHeaders=SUMMARY_HEADERS,
            )
        )
