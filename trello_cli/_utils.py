"""
Shared pure-utility functions for trello-cli.

These helpers have no business logic and no side effects.
"""

import re

from trello_cli.exceptions import CliError


def format_comment_date(iso_date):
    """Render "2020-03-09T19:41:51.396Z" as "2020-03-09 19:41" (UTC as sent).
    Strings too short to hold a minute are returned unchanged."""
    if not iso_date or len(iso_date) < 16:
        return iso_date
    return f"{iso_date[:10]} {iso_date[11:16]}"


def compile_pattern(pattern):
    """Compile a case-insensitive card-name pattern. Raises CliError on bad regex."""
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise CliError(f"[ERROR] Invalid regex pattern '{pattern}': {e}") from e
