"""trello-cli: CLI tool for managing Trello boards, lists and cards."""

from trello_cli.client import TrelloClient
from trello_cli.config import VERSION, Credentials
from trello_cli.exceptions import (
    AmbiguousError,
    CliError,
    FetchError,
    NoScopeMatchError,
    NotFoundError,
    ResolveError,
    SetupError,
)

__all__ = [
    "VERSION",
    "AmbiguousError",
    "CliError",
    "Credentials",
    "FetchError",
    "NoScopeMatchError",
    "NotFoundError",
    "ResolveError",
    "SetupError",
    "TrelloClient",
]
