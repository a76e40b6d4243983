"""MCP server exposing TrelloClient methods as tools.

Package structure:
  __init__.py       FastMCP init, register() calls, re-exports
  __main__.py       ``python -m trello_cli.mcp_server`` entry point
  _core.py          Client caching, _call dispatcher, response contract
  _tools_read.py    5 board/list/card query tools
  _tools_write.py   6 mutation tools

Run: python -m trello_cli.mcp_server
Requires: pip install .[mcp]
"""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from trello_cli.mcp_server import _tools_read, _tools_write

mcp = FastMCP(
    "trello",
    instructions=(
        "Trello board/list/card tools. "
        "Boards, lists and cards accept a 24-char id or a name fragment; a fragment "
        "must match exactly one item, otherwise the error lists every match. "
        "Pass board= to narrow lookups. "
        "Positions: 'top', 'bottom', a 1-based rank, or a raw pos value."
    ),
)

for _mod in [_tools_read, _tools_write]:
    _mod.register(mcp)

# ---------------------------------------------------------------------------
# Re-exports (tests import via mcp_mod.xxx)
# ---------------------------------------------------------------------------

from trello_cli.mcp_server._core import (  # noqa: E402, F401
    _ALLOWED_METHODS,
    _call,
    _contract_error,
    _finalize_tool_result,
    _get_client,
)
from trello_cli.mcp_server._tools_read import (  # noqa: E402, F401
    find_cards,
    list_boards,
    list_cards,
    list_lists,
    show_card,
)
from trello_cli.mcp_server._tools_write import (  # noqa: E402, F401
    add_comment,
    archive_card,
    create_card,
    move_card,
    move_list,
    restore_card,
)


def main():
    """Run the MCP server (stdio transport)."""
    mcp.run()
