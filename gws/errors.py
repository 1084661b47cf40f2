"""
Exception hierarchy for the helper scripts.

Every failure a helper can report derives from HelperError. HelperScript.main()
is the single place these are turned into a stderr message and exit status 1.
"""
from __future__ import annotations

from typing import Optional

from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError


class HelperError(Exception):
    """Base class for every error a helper script reports to the user."""

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class ConfigError(HelperError):
    """Required configuration (OAuth credentials) is missing."""


class UsageError(HelperError):
    """Unknown command or missing/invalid argument. Message is the usage text."""


class PayloadError(HelperError):
    """A JSON payload could not be read or parsed."""


class RemoteError(HelperError):
    """The Google API rejected or could not service a call."""

    def __init__(
        self,
        message: str,
        hint: Optional[str] = None,
        status: Optional[int] = None,
    ) -> None:
        super().__init__(message, hint)
        self.status = status

    @classmethod
    def from_exception(cls, exc: Exception) -> "RemoteError":
        """Wrap an HttpError / RefreshError, attaching a remediation hint where one is known."""
        if isinstance(exc, HttpError):
            status = exc.resp.status if exc.resp is not None else None
            reason = _http_reason(exc)
            return cls(reason, hint=_hint_for(status, reason), status=status)
        if isinstance(exc, RefreshError):
            # RefreshError carries (message, response_body)
            message = str(exc.args[0]) if exc.args else str(exc)
            return cls(message, hint=_hint_for(401, message), status=401)
        return cls(str(exc))


class AggregationError(RemoteError):
    """One of the concurrent per-item fetches failed; the whole listing fails."""

    def __init__(self, ref: str, cause: BaseException) -> None:
        base = (
            RemoteError.from_exception(cause)
            if isinstance(cause, Exception)
            else RemoteError(str(cause))
        )
        super().__init__(
            f"Failed to fetch {ref}: {base.message}",
            hint=base.hint,
            status=base.status,
        )
        self.ref = ref


# ── Hints ─────────────────────────────────────────────────────────────────────

_HINT_REAUTH = (
    "The refresh token is expired or revoked. Mint a new one and update "
    "GOOGLE_REFRESH_TOKEN."
)
_HINT_SCOPE = (
    "The refresh token was granted without the OAuth scope this command needs. "
    "Re-authorize with the required scope."
)
_HINT_API_DISABLED = (
    "The API is not enabled for this Google Cloud project. Enable it in the "
    "Cloud Console (APIs & Services > Library)."
)
_HINT_NOT_FOUND = "Check the ID; the resource does not exist or is not shared with you."


def _http_reason(exc: HttpError) -> str:
    reason = getattr(exc, "reason", None)
    if not reason:
        reason = exc._get_reason()
    return str(reason).strip() or str(exc)


def _hint_for(status: Optional[int], reason: str) -> Optional[str]:
    text = reason.lower()
    if status == 401 or "invalid_grant" in text:
        return _HINT_REAUTH
    if status == 403:
        if "insufficient" in text and "scope" in text:
            return _HINT_SCOPE
        if "has not been used" in text or "is disabled" in text or "accessnotconfigured" in text:
            return _HINT_API_DISABLED
    if status == 404:
        return _HINT_NOT_FOUND
    return None
