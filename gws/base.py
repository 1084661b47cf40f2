"""
HelperScript — abstract base class for the command-line helpers.

Provides:
  - Rotating file logger + stderr handler, scoped to $GWS_LOG_DIR/<script>.log
    (stdout is reserved for the JSON result)
  - Command resolution against the subclass's Domain before any credentials load
  - main() classmethod: strips --debug, runs one command, prints JSON, returns
    the process exit status
  - Automatic elapsed-time logging

Subclass usage:
    class MyHelper(HelperScript):
        domain = MY_DOMAIN

        def make_client(self, factory):
            return MyClient(factory)

    def main() -> None:
        sys.exit(MyHelper.main())
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
from abc import ABC, abstractmethod
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, ClassVar, Optional, Sequence

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from .dispatch import Domain, Invocation
from .errors import HelperError, RemoteError, UsageError
from .google_factory import GoogleServiceFactory

DEFAULT_LOG_DIR = "~/.cache/gws/logs"
PACKAGE_LOGGER = "gws"

_REMOTE_FAILURES = (HttpError, GoogleAuthError, httplib2.HttpLib2Error, OSError)


def log_dir() -> Path:
    return Path(os.environ.get("GWS_LOG_DIR", DEFAULT_LOG_DIR)).expanduser()


def to_jsonable(result: Any) -> Any:
    """Projection objects → plain dicts/lists, recursively."""
    if hasattr(result, "to_dict"):
        return result.to_dict()
    if isinstance(result, (list, tuple)):
        return [to_jsonable(item) for item in result]
    return result


def render(result: Any, empty_message: Optional[str] = None) -> str:
    """Text written to stdout for a successful command."""
    if empty_message and isinstance(result, list) and not result:
        return empty_message
    return json.dumps(to_jsonable(result), indent=2, default=str, ensure_ascii=False)


class HelperScript(ABC):
    """Abstract base for the gws-* helpers: one command per process."""

    domain: ClassVar[Domain]

    def __init__(
        self,
        log_level: int = logging.INFO,
        factory: Optional[GoogleServiceFactory] = None,
    ) -> None:
        # Derive script name from the concrete class name (lowercased)
        self.script_name: str = type(self).__name__.lower()
        self.logger: logging.Logger = self._setup_logger(log_level)
        self._factory = factory

    # ── Logging ───────────────────────────────────────────────────────────────

    def _setup_logger(self, log_level: int) -> logging.Logger:
        """
        Configure the package logger so that client modules log too:
          - $GWS_LOG_DIR/<script_name>.log  (rotating, max 2 MB × 5 backups)
          - stderr, warnings and above unless log_level is DEBUG
        """
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.setLevel(log_level)
        logger = logging.getLogger(f"{PACKAGE_LOGGER}.{self.script_name}")
        stderr_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING

        # main() may run more than once per process: reuse the handlers, refresh the stderr level
        if package_logger.handlers:
            for handler in package_logger.handlers:
                if not isinstance(handler, logging.FileHandler):
                    handler.setLevel(stderr_level)
            return logger

        fmt = logging.Formatter(
            "%(asctime)s [%(levelname)-8s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        directory = log_dir()
        directory.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            directory / f"{self.script_name}.log",
            maxBytes=2_000_000,   # 2 MB per file
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(fmt)

        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(fmt)
        stream_handler.setLevel(stderr_level)

        package_logger.addHandler(file_handler)
        package_logger.addHandler(stream_handler)
        return logger

    # ── Abstract interface ────────────────────────────────────────────────────

    @abstractmethod
    def make_client(self, factory: GoogleServiceFactory) -> Any:
        """Build the client object that this domain's command handlers receive."""

    # ── Execution ─────────────────────────────────────────────────────────────

    def resolve(self, argv: Sequence[str]) -> Invocation:
        """Pick and bind the command; raises UsageError / PayloadError."""
        return self.domain.resolve(argv)

    def run(self, invocation: Invocation) -> Any:
        """Execute a resolved command; remote failures become RemoteError."""
        factory = self._factory or GoogleServiceFactory()
        self.logger.info(
            "%s %s (%s)",
            self.domain.prog,
            invocation.command.name,
            invocation.command.capability.value,
        )
        try:
            client = self.make_client(factory)
            return invocation.run(client)
        except HelperError:
            raise
        except _REMOTE_FAILURES as exc:
            raise RemoteError.from_exception(exc) from exc

    # ── CLI entrypoint ────────────────────────────────────────────────────────

    @classmethod
    def main(
        cls,
        argv: Optional[Sequence[str]] = None,
        factory: Optional[GoogleServiceFactory] = None,
    ) -> int:
        """
        Standard CLI entrypoint. Wire up as:
            def main() -> None:
                sys.exit(MyHelper.main())

        Returns 0 after printing the result to stdout, 1 after printing an
        error or usage text to stderr.
        """
        parser = argparse.ArgumentParser(prog=cls.domain.prog, add_help=False)
        parser.add_argument(
            "--debug", action="store_true", help="Enable DEBUG-level logging"
        )
        # parse_known_args leaves the command words (and "-") in order
        args, words = parser.parse_known_args(sys.argv[1:] if argv is None else list(argv))

        log_level = logging.DEBUG if args.debug else logging.INFO
        script = cls(log_level=log_level, factory=factory)

        t0 = time.monotonic()
        try:
            invocation = script.resolve(words)
            result = script.run(invocation)
        except UsageError as exc:
            print(exc.message, file=sys.stderr)
            return 1
        except HelperError as exc:
            elapsed = time.monotonic() - t0
            script.logger.info("Failed after %.2fs: %s", elapsed, exc.message)
            print(f"Error: {exc.message}", file=sys.stderr)
            if exc.hint:
                print(f"Hint: {exc.hint}", file=sys.stderr)
            return 1
        except Exception:
            elapsed = time.monotonic() - t0
            script.logger.exception("%s failed after %.2fs", cls.domain.prog, elapsed)
            return 1

        elapsed = time.monotonic() - t0
        script.logger.info("Completed in %.2fs", elapsed)
        print(render(result, invocation.command.empty_message))
        return 0
