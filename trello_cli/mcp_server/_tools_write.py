"""Mutation tools: move, create, archive, comment (6 tools)."""

from __future__ import annotations

from trello_cli.mcp_server._core import _call, _finalize_tool_result


def move_card(card_ref: str, position: str, board: str | None = None) -> dict:
    """Move a card within its list.

    Args:
        card_ref: Card id or name fragment.
        position: "top", "bottom", a 1-based rank among the other cards,
            or a raw Trello pos value.
    """
    return _finalize_tool_result(
        _call("move_card", card_ref=card_ref, position=position, board=board)
    )


def move_list(list_ref: str, position: str, board: str | None = None) -> dict:
    """Move a list within its board. Same position rules as move_card."""
    return _finalize_tool_result(
        _call("move_list", list_ref=list_ref, position=position, board=board)
    )


def create_card(
    list_ref: str,
    name: str,
    description: str | None = None,
    position: str = "bottom",
    board: str | None = None,
) -> dict:
    """Create a card in a list.

    Returns:
        Dict with card_id, name, list_id, pos.
    """
    return _finalize_tool_result(
        _call(
            "create_card",
            list_ref=list_ref,
            name=name,
            description=description,
            position=position,
            board=board,
        )
    )


def archive_card(card_ref: str, board: str | None = None) -> dict:
    """Archive a card (reversible with restore_card)."""
    return _finalize_tool_result(_call("archive_card", card_ref=card_ref, board=board))


def restore_card(card_ref: str, board: str | None = None) -> dict:
    """Unarchive a card."""
    return _finalize_tool_result(_call("restore_card", card_ref=card_ref, board=board))


def add_comment(card_ref: str, text: str, board: str | None = None) -> dict:
    """Add a comment to a card."""
    return _finalize_tool_result(_call("add_comment", card_ref=card_ref, text=text, board=board))


def register(mcp):
    """Register all mutation tools with the FastMCP instance."""
    mcp.tool()(move_card)
    mcp.tool()(move_list)
    mcp.tool()(create_card)
    mcp.tool()(archive_card)
    mcp.tool()(restore_card)
    mcp.tool()(add_comment)
