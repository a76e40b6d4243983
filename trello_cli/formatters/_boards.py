"""Formatters for boards, lists and list contents."""

from trello_cli.formatters._table import _tsv


def format_boards_table(boards):
    """Accepts list of dicts from TrelloClient.list_boards()."""
    if not boards:
        return "No boards found."
    return _tsv(["ID", "Name"], [(b["id"], b["name"]) for b in boards])


def format_lists_table(lists):
    """Accepts list of dicts from TrelloClient.list_lists()."""
    if not lists:
        return "No lists found."
    rows = [(lst["id"], lst["board"], lst["rank"], lst["name"]) for lst in lists]
    return _tsv(["ID", "Board", "Rank", "Name"], rows)


def format_list_cards_table(result):
    """Accepts the dict from TrelloClient.list_cards()."""
    cards = result.get("cards", [])
    if not cards:
        return f"No cards in list '{result['list']['name']}'."
    return _tsv(["ID", "Rank", "Title"], [(c["id"], c["rank"], c["name"]) for c in cards])
