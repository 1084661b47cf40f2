"""
gws-gmail — read-only Gmail helper.

Usage:
    gws-gmail list [count] [query...]     List recent messages
    gws-gmail read <message_id>           Read a specific message
    gws-gmail search <query> [count]      Search messages
    gws-gmail labels                      List all labels
    gws-gmail threads <query> [count]     List threads matching query

Every command is read-only; the refresh token only needs the gmail.readonly scope.
"""
from __future__ import annotations

import sys

from ..base import HelperScript
from ..dispatch import Arg, Capability, Command, Domain, positive_int
from ..gmail_client import GmailClient
from ..google_factory import GoogleServiceFactory

COUNT = Arg("count", 10, positive_int)

GMAIL = Domain(
    prog="gws-gmail",
    title="Gmail Helper - Read Only",
    capabilities=frozenset({Capability.READ}),
    commands=(
        Command(
            "list", Capability.READ, GmailClient.list_messages,
            args=(COUNT, Arg("query", "", rest=True)),
            summary="List recent messages",
            empty_message="No messages found.",
        ),
        Command(
            "read", Capability.READ, GmailClient.get_message,
            args=(Arg("message_id"),),
            summary="Read a specific message",
        ),
        Command(
            "search", Capability.READ, GmailClient.search,
            args=(Arg("query"), COUNT),
            summary="Search messages",
            empty_message="No messages found.",
        ),
        Command(
            "labels", Capability.READ, GmailClient.list_labels,
            summary="List all labels",
        ),
        Command(
            "threads", Capability.READ, GmailClient.list_threads,
            args=(Arg("query"), COUNT),
            summary="List threads matching query",
            empty_message="No threads found.",
        ),
    ),
    examples=(
        "list 5",
        "read 18dc1234abcd",
        'search "from:boss@company.com" 10',
        "labels",
        'threads "subject:meeting" 5',
    ),
)


class GmailHelper(HelperScript):
    """Gmail Helper - read-only access to messages, threads and labels."""

    domain = GMAIL

    def make_client(self, factory: GoogleServiceFactory) -> GmailClient:
        return GmailClient(factory)


def main() -> None:
    sys.exit(GmailHelper.main())


if __name__ == "__main__":
    main()
