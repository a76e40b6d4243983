"""Tests for MCP server tool wrappers.

Mocks at TrelloClient level. Verifies each tool calls the correct
client method and that errors are converted to contract dicts.
"""

import pytest

mcp_mod = pytest.importorskip("trello_cli.mcp_server", reason="mcp package not installed")

import importlib  # noqa: E402
from unittest.mock import MagicMock, patch  # noqa: E402

from trello_cli.exceptions import AmbiguousError, CliError, SetupError  # noqa: E402

_core = importlib.import_module("trello_cli.mcp_server._core")


@pytest.fixture(autouse=True)
def _reset_client_cache():
    """Reset the cached TrelloClient between tests."""
    _core._client = None
    yield
    _core._client = None


def _mock_client(**method_returns):
    client = MagicMock()
    for name, val in method_returns.items():
        getattr(client, name).return_value = val
    return client


class TestReadTools:
    @patch("trello_cli.mcp_server._core.TrelloClient")
    def test_list_boards_wraps_list(self, MockClient):
        MockClient.return_value = _mock_client(list_boards=[{"id": "b1", "name": "Work"}])
        result = mcp_mod.list_boards()
        assert result["ok"] is True
        assert result["data"] == [{"id": "b1", "name": "Work"}]

    @patch("trello_cli.mcp_server._core.TrelloClient")
    def test_show_card_forwards_args(self, MockClient):
        client = _mock_client(show_card={"id": "c1", "name": "Fix"})
        MockClient.return_value = client
        result = mcp_mod.show_card("Fix", board="Work", include_comments=True)
        client.show_card.assert_called_once_with(
            card_ref="Fix", board="Work", include_comments=True
        )
        assert result["name"] == "Fix"
        assert result["ok"] is True

    @patch("trello_cli.mcp_server._core.TrelloClient")
    def test_find_cards(self, MockClient):
        client = _mock_client(find_cards=[])
        MockClient.return_value = client
        mcp_mod.find_cards("^bug", list_name="Doing")
        client.find_cards.assert_called_once_with(pattern="^bug", board=None, list_name="Doing")

    @patch("trello_cli.mcp_server._core.TrelloClient")
    def test_client_is_cached(self, MockClient):
        MockClient.return_value = _mock_client(list_boards=[])
        mcp_mod.list_boards()
        mcp_mod.list_boards()
        assert MockClient.call_count == 1


class TestWriteTools:
    @patch("trello_cli.mcp_server._core.TrelloClient")
    def test_move_card(self, MockClient):
        client = _mock_client(move_card={"ok": True, "card_id": "c1", "pos": "15"})
        MockClient.return_value = client
        result = mcp_mod.move_card("c1", "2")
        client.move_card.assert_called_once_with(card_ref="c1", position="2", board=None)
        assert result["pos"] == "15"

    @patch("trello_cli.mcp_server._core.TrelloClient")
    def test_create_card_defaults_to_bottom(self, MockClient):
        client = _mock_client(create_card={"ok": True})
        MockClient.return_value = client
        mcp_mod.create_card("To Do", "New")
        assert client.create_card.call_args.kwargs["position"] == "bottom"


class TestErrors:
    @patch("trello_cli.mcp_server._core.TrelloClient")
    def test_setup_error(self, MockClient):
        MockClient.side_effect = SetupError("[SETUP_NEEDED] no creds")
        result = mcp_mod.list_boards()
        assert result["ok"] is False
        assert result["type"] == "setup"

    @patch("trello_cli.mcp_server._core.TrelloClient")
    def test_resolve_error(self, MockClient):
        client = MagicMock()
        client.move_list.side_effect = AmbiguousError("todo", ["Todo (board: A)"])
        MockClient.return_value = client
        result = mcp_mod.move_list("todo", "1")
        assert result["type"] == "resolve"
        assert "Todo (board: A)" in result["error"]

    @patch("trello_cli.mcp_server._core.TrelloClient")
    def test_cli_error(self, MockClient):
        client = MagicMock()
        client.add_comment.side_effect = CliError("[ERROR] Comment text is required.")
        MockClient.return_value = client
        result = mcp_mod.add_comment("c1", "")
        assert result == {
            "ok": False,
            "schema_version": "1.0",
            "type": "error",
            "error": "[ERROR] Comment text is required.",
        }

    def test_unknown_method_rejected(self):
        result = _core._call("delete_card", card_ref="c1")
        assert result["ok"] is False
        assert "Unknown method" in result["error"]

    def test_all_tools_allowed(self):
        for name in ("list_boards", "move_card", "move_list", "restore_card", "archive_card"):
            assert name in _core._ALLOWED_METHODS
