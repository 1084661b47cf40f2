"""
Google OAuth2 helper for refresh-token credentials.

The three credential values come from the environment. An optional dotenv file
(GWS_ENV_FILE, default ~/.config/gws/.env) is loaded first; variables already
set in the environment take precedence over the file.

Usage:
    from gws.google_auth import get_credentials
    creds = get_credentials()
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from .errors import ConfigError

logger = logging.getLogger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"

CREDENTIAL_VARS: tuple[str, ...] = (
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "GOOGLE_REFRESH_TOKEN",
)

DEFAULT_ENV_FILE = "~/.config/gws/.env"


def load_env_file() -> None:
    """Load the optional dotenv file without overriding the real environment."""
    env_file = Path(os.environ.get("GWS_ENV_FILE", DEFAULT_ENV_FILE)).expanduser()
    if env_file.is_file():
        load_dotenv(env_file, override=False)
        logger.debug("Loaded environment from %s", env_file)


def read_credential_env(environ: Optional[Mapping[str, str]] = None) -> tuple[str, str, str]:
    """
    Return (client_id, client_secret, refresh_token).

    Raises ConfigError naming every missing variable.
    """
    if environ is None:
        load_env_file()
        environ = os.environ
    values = tuple(environ.get(name, "").strip() for name in CREDENTIAL_VARS)
    missing = [name for name, value in zip(CREDENTIAL_VARS, values) if not value]
    if missing:
        raise ConfigError(
            "Missing Google OAuth credentials. Set "
            + ", ".join(missing)
            + " environment variables."
        )
    client_id, client_secret, refresh_token = values
    return client_id, client_secret, refresh_token


def get_credentials(environ: Optional[Mapping[str, str]] = None) -> Credentials:
    """
    Build refresh-token credentials. No network call is made here; the access
    token is minted by refresh_credentials() or on first authorized request.
    """
    client_id, client_secret, refresh_token = read_credential_env(environ)
    return Credentials(
        token=None,
        refresh_token=refresh_token,
        client_id=client_id,
        client_secret=client_secret,
        token_uri=TOKEN_URI,
    )


def refresh_credentials(creds: Credentials) -> Credentials:
    """Mint a fresh access token if the current one is missing or expired."""
    if not creds.valid:
        creds.refresh(Request())
        logger.debug("Access token refreshed")
    return creds
