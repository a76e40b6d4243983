"""Tests for formatters: tab-separated tables, card detail, output dispatch."""

import json

from trello_cli import config
from trello_cli.formatters import (
    format_boards_table,
    format_card_detail,
    format_find_table,
    format_list_cards_table,
    format_lists_table,
    mutation_response,
    output,
    sanitize_field,
)


class TestSanitizeField:
    def test_breaks_become_spaces(self):
        assert sanitize_field("a\tb\nc\r\nd") == "a b c  d"

    def test_strips_ansi_and_control(self):
        assert sanitize_field("\x1b[31mred\x1b[0m\x07") == "red"

    def test_none_and_numbers(self):
        assert sanitize_field(None) == ""
        assert sanitize_field(3) == "3"


class TestTables:
    def test_find_table(self):
        rows = [{"id": "c1", "board": "Work", "list": "To Do", "title": "Fix\tlogin\nbug"}]
        assert format_find_table(rows) == "ID\tBoard\tList\tTitle\nc1\tWork\tTo Do\tFix login bug"

    def test_find_table_empty(self):
        assert format_find_table([]) == "No matching cards found."

    def test_boards_table(self):
        out = format_boards_table([{"id": "b1", "name": "Work"}])
        assert out.splitlines() == ["ID\tName", "b1\tWork"]

    def test_lists_table(self):
        out = format_lists_table(
            [{"id": "l1", "name": "To Do", "board": "Work", "board_id": "b1", "rank": 1, "pos": 5}]
        )
        assert out.splitlines()[1] == "l1\tWork\t1\tTo Do"

    def test_list_cards_table_empty(self):
        result = {"list": {"id": "l1", "name": "To Do", "board_id": "b1"}, "cards": []}
        assert format_list_cards_table(result) == "No cards in list 'To Do'."


class TestCardDetail:
    def _card(self, **overrides):
        card = {
            "id": "c1",
            "name": "Fix login",
            "board": "Work",
            "list": "To Do",
            "labels": [
                {"name": "Bug", "color": "red"},
                {"name": "", "color": "green"},
                {"name": "Docs", "color": None},
            ],
            "description": "line one\nline two",
            "archived": False,
        }
        card.update(overrides)
        return card

    def test_header_and_labels(self):
        out = format_card_detail(self._card())
        assert "Card:     Fix login" in out
        assert "Board:    Work" in out
        assert "Labels:   Bug (red), (green), Docs" in out
        assert "  line two" in out
        assert "Comments" not in out

    def test_empty_description_and_archived(self):
        out = format_card_detail(self._card(description="", labels=[], archived=True))
        assert "Description: (empty)" in out
        assert "Labels:   -" in out
        assert "Status:   archived" in out

    def test_comments(self):
        comments = [{"date": "2024-01-02 09:30", "author": "ann", "text": "first\nsecond"}]
        out = format_card_detail(self._card(comments=comments))
        assert "Comments (1):" in out
        assert "  [2024-01-02 09:30] ann:" in out
        assert "    second" in out


class TestOutput:
    def test_json_default(self, capsys):
        output({"name": "Café"})
        assert json.loads(capsys.readouterr().out) == {"name": "Café"}

    def test_table_uses_formatter(self, capsys):
        output([{"id": "b1", "name": "Work"}], format_boards_table, "table")
        assert capsys.readouterr().out == "ID\tName\nb1\tWork\n"


class TestMutationResponse:
    def test_json_prints_result(self, capsys):
        mutation_response("Moved card", "c1", data={"ok": True, "pos": "15"}, fmt="json")
        assert json.loads(capsys.readouterr().out) == {"ok": True, "pos": "15"}

    def test_table_summary(self, capsys):
        mutation_response("Moved card", "'A' (c1)", "position 15", {"ok": True}, "table")
        assert capsys.readouterr().out == "OK: Moved card: 'A' (c1): position 15\n"

    def test_table_dry_run_lists_requests(self, capsys):
        data = {
            "ok": True,
            "dry_run": True,
            "requests": [{"method": "PUT", "path": "/cards/c1", "body": {"pos": "top"}}],
        }
        mutation_response("Moved card", "c1", data=data, fmt="table")
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "DRY RUN: Moved card: c1"
        assert lines[1] == '  would send PUT /cards/c1 {"pos": "top"}'

    def test_quiet_suppresses_text(self, capsys, monkeypatch):
        monkeypatch.setattr(config, "RUNTIME_QUIET", True)
        mutation_response("Archived", "c1", data={"ok": True}, fmt="table")
        assert capsys.readouterr().out == ""
