"""Output formatting package for trello-cli.

Re-exports all public names so consumers can do:
    from trello_cli.formatters import format_find_table
"""

from trello_cli.formatters._boards import (
    format_boards_table,
    format_list_cards_table,
    format_lists_table,
)
from trello_cli.formatters._cards import (
    format_card_detail,
    format_find_table,
)
from trello_cli.formatters._core import (
    mutation_response,
    output,
    pretty_print,
)
from trello_cli.formatters._table import (
    _CONTROL_RE,
    _sanitize_str,
    _tsv,
    sanitize_field,
)

__all__ = [
    "_CONTROL_RE",
    "_sanitize_str",
    "_tsv",
    "format_boards_table",
    "format_card_detail",
    "format_find_table",
    "format_list_cards_table",
    "format_lists_table",
    "mutation_response",
    "output",
    "pretty_print",
    "sanitize_field",
]
