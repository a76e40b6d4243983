"""Read tools: boards, lists, cards and search (5 tools)."""

from __future__ import annotations

from trello_cli.mcp_server._core import _call, _finalize_tool_result


def list_boards() -> dict:
    """List the member's open boards.

    Returns:
        Dict with data: list of {id, name}.
    """
    return _finalize_tool_result(_call("list_boards"))


def list_lists(board: str | None = None) -> dict:
    """List open lists with their 1-based rank on each board.

    Args:
        board: Board id or name fragment. All boards when omitted.
    """
    return _finalize_tool_result(_call("list_lists", board=board))


def list_cards(list_ref: str, board: str | None = None) -> dict:
    """List the cards of one list in display order (rank 1 = top).

    Args:
        list_ref: List id (24 hex chars) or name fragment.
        board: Board id or name fragment narrowing the list lookup.
    """
    return _finalize_tool_result(_call("list_cards", list_ref=list_ref, board=board))


def show_card(card_ref: str, board: str | None = None, include_comments: bool = False) -> dict:
    """Get one card with board, list, labels and description.

    Args:
        card_ref: Card id or name fragment.
        include_comments: Also return every comment, oldest first.
    """
    return _finalize_tool_result(
        _call("show_card", card_ref=card_ref, board=board, include_comments=include_comments)
    )


def find_cards(pattern: str, board: str | None = None, list_name: str | None = None) -> dict:
    """Find cards whose title matches a regex (case-insensitive).

    Args:
        pattern: Regular expression searched within card titles.
        list_name: Keep only cards in lists whose name contains this text.
    """
    return _finalize_tool_result(
        _call("find_cards", pattern=pattern, board=board, list_name=list_name)
    )


def register(mcp):
    """Register all read tools with the FastMCP instance."""
    mcp.tool()(list_boards)
    mcp.tool()(list_lists)
    mcp.tool()(list_cards)
    mcp.tool()(show_card)
    mcp.tool()(find_cards)
