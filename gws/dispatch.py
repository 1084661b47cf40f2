"""
Capability-scoped command tables.

Each helper exposes a Domain: a closed tuple of Commands, each tagged with the
Capability it needs. A Domain only accepts commands whose capability it permits,
so a read-only domain cannot carry a write command. Capability has no delete
member and no table defines a delete command.

Resolving argv against a Domain selects one Command and binds its positional
arguments (required, defaulted, converted) before any client is built, so usage
and payload errors never reach the network.
"""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from .errors import PayloadError, UsageError

STDIN_MARKER = "-"


class Capability(Enum):
    READ = "read"
    WRITE = "write"


class _Required:
    def __repr__(self) -> str:
        return "REQUIRED"


REQUIRED: Any = _Required()


# ── Argument converters ───────────────────────────────────────────────────────

def positive_int(value: str) -> int:
    """Parse a result count; ValueError is reported as a usage error."""
    number = int(value)
    if number < 1:
        raise ValueError(f"must be a positive integer, got {value!r}")
    return number


def load_payload(source: str) -> dict:
    """
    Read a JSON object from a file path, or from stdin when source is "-".

    Raises PayloadError for unreadable files, malformed JSON or a non-object document.
    """
    if source == STDIN_MARKER:
        text = sys.stdin.read()
        origin = "stdin"
    else:
        try:
            text = Path(source).read_text(encoding="utf-8")
        except OSError as exc:
            raise PayloadError(f"Cannot read {source}: {exc.strerror or exc}") from exc
        origin = source

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise PayloadError(f"Invalid JSON in {origin}: {exc}") from exc
    if not isinstance(payload, dict):
        raise PayloadError(f"Expected a JSON object in {origin}, got {type(payload).__name__}")
    return payload


# ── Command tables ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Arg:
    """
    One positional argument.

    rest=True joins every remaining argv word with spaces (unquoted queries).
    """

    name: str
    default: Any = REQUIRED
    convert: Callable[[str], Any] = str
    rest: bool = False

    @property
    def required(self) -> bool:
        return self.default is REQUIRED

    @property
    def placeholder(self) -> str:
        return f"<{self.name}>" if self.required else f"[{self.name}]"


@dataclass(frozen=True)
class Command:
    """
    A single operation: name, capability, handler and its positional arguments.

    handler is called as handler(client, *bound_args).
    """

    name: str
    capability: Capability
    handler: Callable[..., Any]
    args: tuple[Arg, ...] = ()
    summary: str = ""
    empty_message: Optional[str] = None
    usage_notes: tuple[str, ...] = ()

    def signature(self) -> str:
        return " ".join([self.name] + [a.placeholder for a in self.args])

    def usage(self, prog: str) -> str:
        lines = [f"Usage: {prog} {self.signature()}"]
        lines.extend(f"  {note}" for note in self.usage_notes)
        return "\n".join(lines)

    def bind(self, argv: Sequence[str], prog: str) -> list[Any]:
        """Map argv words onto this command's arguments; raise UsageError if invalid."""
        values: list[Any] = []
        for i, arg in enumerate(self.args):
            if arg.rest:
                raw = " ".join(argv[i:]).strip() if len(argv) > i else ""
            else:
                raw = argv[i] if i < len(argv) else ""

            if raw == "":
                if arg.required:
                    raise UsageError(self.usage(prog))
                values.append(arg.default)
                continue

            try:
                values.append(arg.convert(raw))
            except ValueError as exc:
                raise UsageError(f"{self.usage(prog)}\n  {arg.name}: {exc}") from exc
        return values


@dataclass(frozen=True)
class Invocation:
    """A resolved command with its bound arguments, ready to run against a client."""

    command: Command
    values: tuple[Any, ...]

    def run(self, client: Any) -> Any:
        return self.command.handler(client, *self.values)


@dataclass(frozen=True)
class Domain:
    """The closed set of commands one helper exposes, and the capabilities it permits."""

    prog: str
    title: str
    capabilities: frozenset[Capability]
    commands: tuple[Command, ...]
    examples: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for cmd in self.commands:
            if cmd.capability not in self.capabilities:
                raise ValueError(
                    f"{self.prog}: command {cmd.name!r} needs {cmd.capability.value} "
                    f"capability, which this domain does not permit"
                )
            if cmd.name in seen:
                raise ValueError(f"{self.prog}: duplicate command {cmd.name!r}")
            seen.add(cmd.name)

    @property
    def command_names(self) -> list[str]:
        return [cmd.name for cmd in self.commands]

    def lookup(self, name: Optional[str]) -> Optional[Command]:
        for cmd in self.commands:
            if cmd.name == name:
                return cmd
        return None

    def usage(self) -> str:
        lines = [self.title, "Commands: " + ", ".join(self.command_names)]
        width = max(len(cmd.signature()) for cmd in self.commands)
        for cmd in self.commands:
            lines.append(f"  {cmd.signature().ljust(width)}  {cmd.summary}".rstrip())
        if self.examples:
            lines.append("Examples:")
            lines.extend(f"  {self.prog} {ex}" for ex in self.examples)
        return "\n".join(lines)

    def resolve(self, argv: Sequence[str]) -> Invocation:
        """Select the command named by argv[0] and bind the rest of argv to it."""
        token = argv[0] if argv else None
        cmd = self.lookup(token)
        if cmd is None:
            raise UsageError(self.usage())
        return Invocation(cmd, tuple(cmd.bind(list(argv[1:]), self.prog)))
