"""
gws-auth — check that the configured refresh token can mint an access token.

Reads GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET and GOOGLE_REFRESH_TOKEN (see
gws.google_auth), refreshes once and reports the result. Makes no API calls.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from google.auth.exceptions import GoogleAuthError

from ..errors import HelperError, RemoteError
from ..google_auth import get_credentials, refresh_credentials


def check(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="gws-auth", description="Test Google OAuth2 refresh-token credentials."
    )
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        creds = get_credentials()
        try:
            refresh_credentials(creds)
        except GoogleAuthError as exc:
            raise RemoteError.from_exception(exc) from exc
    except HelperError as exc:
        print(f"Auth test failed: {exc.message}", file=sys.stderr)
        if exc.hint:
            print(f"Hint: {exc.hint}", file=sys.stderr)
        return 1

    print("Google OAuth2 token refresh successful.")
    print("Token type:", "Bearer" if creds.token else "unknown")
    return 0


def main() -> None:
    sys.exit(check())


if __name__ == "__main__":
    main()
