"""Core helpers: client caching, _call dispatcher, response contract."""

from __future__ import annotations

from trello_cli.client import TrelloClient
from trello_cli.config import CONTRACT_SCHEMA_VERSION
from trello_cli.exceptions import CliError, ResolveError, SetupError

_client: TrelloClient | None = None


def _get_client() -> TrelloClient:
    """Return a cached TrelloClient, creating one on first use."""
    global _client
    if _client is None:
        _client = TrelloClient()
    return _client


def _contract_error(message: str, error_type: str = "error") -> dict:
    """Return a stable MCP error envelope."""
    return {
        "ok": False,
        "schema_version": CONTRACT_SCHEMA_VERSION,
        "type": error_type,
        "error": message,
    }


def _finalize_tool_result(result):
    """Wrap list results and stamp dicts with ok/schema_version."""
    if isinstance(result, dict):
        out = dict(result)
        out.setdefault("ok", True)
        out.setdefault("schema_version", CONTRACT_SCHEMA_VERSION)
        return out
    return {"ok": True, "schema_version": CONTRACT_SCHEMA_VERSION, "data": result}


_ALLOWED_METHODS = {
    "list_boards",
    "list_lists",
    "list_cards",
    "show_card",
    "find_cards",
    "move_card",
    "move_list",
    "create_card",
    "archive_card",
    "restore_card",
    "add_comment",
}


def _call(method_name: str, **kwargs):
    """Call a TrelloClient method, converting exceptions to error dicts."""
    if method_name not in _ALLOWED_METHODS:
        return _contract_error(f"Unknown method: {method_name}", "error")
    try:
        client = _get_client()
        return getattr(client, method_name)(**kwargs)
    except SetupError as e:
        return _contract_error(str(e), "setup")
    except ResolveError as e:
        return _contract_error(str(e), "resolve")
    except CliError as e:
        return _contract_error(str(e), "error")
    except Exception as e:
        return _contract_error(f"Unexpected error: {e}", "error")
