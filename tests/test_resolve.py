"""Tests for resolve.py: id detection and name-to-id resolution."""

from types import SimpleNamespace

import pytest

from trello_cli.exceptions import AmbiguousError, NoScopeMatchError, NotFoundError
from trello_cli.models import NamedItem
from trello_cli.resolve import (
    BOARD_HINT,
    collect_named_items,
    filter_by_name,
    find_unique_match,
    looks_like_id,
    resolve_reference,
    resolve_scopes,
)

BOARD_ID = "5f0c" + "0" * 20


def _ns(id_, name):
    return SimpleNamespace(id=id_, name=name)


class _CountingStub:
    """Resolver collaborators that record every call."""

    def __init__(self, scopes, candidates):
        self.scopes = scopes
        self.candidates = candidates
        self.calls = []

    def list_scopes(self):
        self.calls.append("list_scopes")
        return self.scopes

    def get_scope(self, scope_id):
        self.calls.append(("get_scope", scope_id))
        return next(s for s in self.scopes if s.id == scope_id)

    def list_candidates(self, scope):
        self.calls.append(("list_candidates", scope.id))
        return self.candidates.get(scope.id, [])

    def resolve(self, raw, scope_filter=None):
        return resolve_reference(
            raw,
            scope_filter,
            list_scopes=self.list_scopes,
            get_scope=self.get_scope,
            list_candidates=self.list_candidates,
        )


# ---------------------------------------------------------------------------
# looks_like_id
# ---------------------------------------------------------------------------


class TestLooksLikeId:
    def test_lowercase_hex(self):
        assert looks_like_id("5f0c1a2b3c4d5e6f7a8b9c0d") is True

    def test_uppercase_hex(self):
        assert looks_like_id("5F0C1A2B3C4D5E6F7A8B9C0D") is True

    def test_wrong_length(self):
        assert looks_like_id("5f0c1a2b3c4d5e6f7a8b9c0") is False
        assert looks_like_id("5f0c1a2b3c4d5e6f7a8b9c0d0") is False

    def test_non_hex_char(self):
        assert looks_like_id("5f0c1a2b3c4d5e6f7a8b9c0g") is False

    def test_name(self):
        assert looks_like_id("In Progress") is False


# ---------------------------------------------------------------------------
# find_unique_match
# ---------------------------------------------------------------------------


class TestFindUniqueMatch:
    def _items(self):
        return [
            NamedItem("id1", "Fix login bug", "Work"),
            NamedItem("id2", "Login page redesign", "Design"),
            NamedItem("id3", "Write docs", "Work"),
        ]

    def test_unique_substring_ignores_case(self):
        assert find_unique_match(self._items(), "DOCS") == "id3"

    def test_no_match(self):
        with pytest.raises(NotFoundError) as exc_info:
            find_unique_match(self._items(), "deploy")
        assert str(exc_info.value) == "[ERROR] No matches found for 'deploy'"

    def test_multiple_matches_lists_all_with_context(self):
        with pytest.raises(AmbiguousError) as exc_info:
            find_unique_match(self._items(), "login")
        msg = str(exc_info.value)
        assert "Multiple matches found for 'login'" in msg
        assert "Fix login bug (board: Work)" in msg
        assert "Login page redesign (board: Design)" in msg
        assert BOARD_HINT in msg
        assert exc_info.value.matches == [
            "Fix login bug (board: Work)",
            "Login page redesign (board: Design)",
        ]

    def test_exact_name_still_ambiguous_with_longer_match(self):
        items = [NamedItem("a", "Bug", "X"), NamedItem("b", "Bug triage", "X")]
        with pytest.raises(AmbiguousError):
            find_unique_match(items, "bug")

    def test_filter_by_name_empty_query_keeps_all(self):
        assert len(filter_by_name(self._items(), "")) == 3


# ---------------------------------------------------------------------------
# resolve_scopes
# ---------------------------------------------------------------------------


class TestResolveScopes:
    def test_no_filter_returns_all(self):
        stub = _CountingStub([_ns("b1", "Work"), _ns("b2", "Home")], {})
        scopes = resolve_scopes(None, list_scopes=stub.list_scopes, get_scope=stub.get_scope)
        assert [s.id for s in scopes] == ["b1", "b2"]

    def test_no_filter_no_scopes(self):
        with pytest.raises(NoScopeMatchError) as exc_info:
            resolve_scopes(None, list_scopes=lambda: [], get_scope=None)
        assert str(exc_info.value) == "[ERROR] No boards found"

    def test_name_filter_keeps_every_match(self):
        stub = _CountingStub([_ns("b1", "Work"), _ns("b2", "Homework"), _ns("b3", "Fun")], {})
        scopes = resolve_scopes("work", list_scopes=stub.list_scopes, get_scope=stub.get_scope)
        assert [s.id for s in scopes] == ["b1", "b2"]

    def test_name_filter_without_match(self):
        stub = _CountingStub([_ns("b1", "Work")], {})
        with pytest.raises(NoScopeMatchError) as exc_info:
            resolve_scopes("garden", list_scopes=stub.list_scopes, get_scope=stub.get_scope)
        assert str(exc_info.value) == "[ERROR] No boards matching 'garden' found"

    def test_id_filter_fetches_only_that_scope(self):
        stub = _CountingStub([_ns(BOARD_ID, "Work")], {})
        scopes = resolve_scopes(BOARD_ID, list_scopes=stub.list_scopes, get_scope=stub.get_scope)
        assert [s.id for s in scopes] == [BOARD_ID]
        assert stub.calls == [("get_scope", BOARD_ID)]


# ---------------------------------------------------------------------------
# resolve_reference
# ---------------------------------------------------------------------------


class TestResolveReference:
    def test_id_fast_path_makes_no_calls(self):
        stub = _CountingStub([_ns("b1", "Work")], {"b1": [_ns("l1", "Todo")]})
        raw = "5f0c1a2b3c4d5e6f7a8b9c0d"
        assert stub.resolve(raw) == raw
        assert stub.resolve(raw, "Work") == raw
        assert stub.calls == []

    def test_unique_name_across_boards(self):
        stub = _CountingStub(
            [_ns("b1", "Work"), _ns("b2", "Home")],
            {"b1": [_ns("l1", "Todo"), _ns("l2", "Done")], "b2": [_ns("l3", "Groceries")]},
        )
        assert stub.resolve("groc") == "l3"
        assert stub.calls == [
            "list_scopes",
            ("list_candidates", "b1"),
            ("list_candidates", "b2"),
        ]

    def test_same_name_on_two_boards_is_ambiguous(self):
        stub = _CountingStub(
            [_ns("b1", "Work"), _ns("b2", "Home")],
            {"b1": [_ns("l1", "Todo")], "b2": [_ns("l2", "Todo")]},
        )
        with pytest.raises(AmbiguousError) as exc_info:
            stub.resolve("todo")
        msg = str(exc_info.value)
        assert "Todo (board: Work)" in msg
        assert "Todo (board: Home)" in msg

    def test_board_filter_disambiguates(self):
        stub = _CountingStub(
            [_ns("b1", "Work"), _ns("b2", "Home")],
            {"b1": [_ns("l1", "Todo")], "b2": [_ns("l2", "Todo")]},
        )
        assert stub.resolve("todo", "home") == "l2"
        assert ("list_candidates", "b1") not in stub.calls

    def test_unmatched_board_filter_reported_before_candidates(self):
        stub = _CountingStub([_ns("b1", "Work")], {"b1": [_ns("l1", "Todo")]})
        with pytest.raises(NoScopeMatchError):
            stub.resolve("todo", "garden")
        assert stub.calls == ["list_scopes"]

    def test_not_found(self):
        stub = _CountingStub([_ns("b1", "Work")], {"b1": [_ns("l1", "Todo")]})
        with pytest.raises(NotFoundError):
            stub.resolve("blocked")

    def test_collect_named_items_tags_scope_name(self):
        items = collect_named_items(
            [_ns("b1", "Work")], lambda scope: [_ns("c1", "Card"), _ns("c2", "Other")]
        )
        assert items == [NamedItem("c1", "Card", "Work"), NamedItem("c2", "Other", "Work")]
