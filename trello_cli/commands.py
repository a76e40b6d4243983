"""
Command implementations for trello-cli.
Each cmd_*() function receives an argparse.Namespace and handles one CLI command.

Business logic lives in client.py (TrelloClient). These thin wrappers
handle argparse -> keyword args, format selection, and formatter dispatch.
"""

from trello_cli.client import TrelloClient
from trello_cli.exceptions import CliError
from trello_cli.formatters import (
    format_boards_table,
    format_card_detail,
    format_find_table,
    format_list_cards_table,
    format_lists_table,
    mutation_response,
    output,
)


def _get_client():
    """Build a client from the environment / config file (raises SetupError)."""
    return TrelloClient()


def _named(result, key="card_id"):
    name = result.get("name")
    return f"'{name}' ({result[key]})" if name else str(result.get(key) or "")


# ---------------------------------------------------------------------------
# Read commands
# ---------------------------------------------------------------------------


def cmd_board_ls(ns):
    output(_get_client().list_boards(), format_boards_table, ns.format)


def cmd_list_ls(ns):
    output(_get_client().list_lists(board=ns.board), format_lists_table, ns.format)


def cmd_list_cards(ns):
    result = _get_client().list_cards(ns.list, board=ns.board)
    output(result, format_list_cards_table, ns.format)


def cmd_card_show(ns):
    card = _get_client().show_card(ns.card, board=ns.board, include_comments=ns.comments)
    output(card, format_card_detail, ns.format)


def cmd_card_find(ns):
    cards = _get_client().find_cards(ns.pattern, board=ns.board, list_name=ns.list)
    output(cards, format_find_table, ns.format)


# ---------------------------------------------------------------------------
# Mutation commands
# ---------------------------------------------------------------------------


def cmd_list_move(ns):
    result = _get_client().move_list(ns.list, ns.position, board=ns.board)
    mutation_response(
        "Moved list", _named(result, "list_id"), f"position {result['pos']}", result, ns.format
    )


def cmd_card_move(ns):
    result = _get_client().move_card(ns.card, ns.position, board=ns.board)
    mutation_response("Moved card", _named(result), f"position {result['pos']}", result, ns.format)


def cmd_card_create(ns):
    result = _get_client().create_card(
        ns.list,
        ns.name,
        description=ns.description,
        position=ns.position,
        board=ns.board,
    )
    mutation_response("Created card", _named(result), f"position {result['pos']}", result, ns.format)


def cmd_card_update(ns):
    result = _get_client().update_description(ns.card, ns.description, board=ns.board)
    mutation_response("Updated description", _named(result), data=result, fmt=ns.format)


def cmd_card_label(ns):
    client = _get_client()
    if ns.clear:
        result = client.remove_label(ns.card, ns.label, board=ns.board)
        action = "Removed label" if result["changed"] else "Label not applied"
    else:
        result = client.apply_label(ns.card, ns.label, board=ns.board)
        action = "Applied label" if result["changed"] else "Label already applied"
    mutation_response(action, _named(result), f"label '{result['label']}'", result, ns.format)


def cmd_card_archive(ns):
    result = _get_client().archive_card(ns.card, board=ns.board)
    action = "Archived" if result["changed"] else "Already archived"
    mutation_response(action, _named(result), data=result, fmt=ns.format)


def cmd_card_restore(ns):
    result = _get_client().restore_card(ns.card, board=ns.board)
    action = "Restored" if result["changed"] else "Not archived"
    mutation_response(action, _named(result), data=result, fmt=ns.format)


def cmd_card_comment(ns):
    result = _get_client().add_comment(ns.card, ns.text, board=ns.board)
    mutation_response("Commented on", result["card_id"], data=result, fmt=ns.format)


def cmd_card_delete(ns):
    if not ns.confirm:
        raise CliError(
            "[ERROR] Permanent deletion requires --confirm flag.\n"
            f"Did you mean: trello card archive {ns.card}"
        )
    result = _get_client().delete_card(ns.card, board=ns.board)
    mutation_response("Deleted card", _named(result), data=result, fmt=ns.format)
