"""Tests for models.py: typed payload parsing and request bodies."""

import pytest

from trello_cli.exceptions import FetchError
from trello_cli.models import Board, Card, CardCreate, Comment, Label, TrelloList, expect_list


class TestCard:
    def test_from_api(self):
        card = Card.from_api(
            {
                "id": "c1",
                "name": "Card",
                "idBoard": "b1",
                "idList": "l1",
                "pos": 16384,
                "desc": None,
                "idLabels": ["x"],
                "closed": True,
            }
        )
        assert card.pos == 16384.0
        assert card.desc == ""
        assert card.id_labels == ("x",)
        assert card.closed is True

    def test_missing_field(self):
        with pytest.raises(FetchError, match="field 'idList' expected str, got NoneType"):
            Card.from_api({"id": "c1", "name": "n", "idBoard": "b1", "pos": 1})

    def test_bool_is_not_a_position(self):
        with pytest.raises(FetchError, match="expected number"):
            TrelloList.from_api({"id": "l", "name": "n", "idBoard": "b", "pos": True})

    def test_not_an_object(self):
        with pytest.raises(FetchError, match="expected JSON object, got list"):
            Board.from_api([])


class TestOthers:
    def test_expect_list(self):
        assert expect_list([1], "x") == [1]
        with pytest.raises(FetchError, match="Malformed lists payload: expected JSON array"):
            expect_list({"a": 1}, "lists")

    def test_label_allows_missing_name_and_color(self):
        label = Label.from_api({"id": "a", "name": None, "color": None})
        assert label.name == ""
        assert label.color is None

    def test_comment_prefers_full_name(self):
        comment = Comment.from_api(
            {
                "id": "m1",
                "date": "2024-01-02T03:04:05.000Z",
                "data": {"text": "hi"},
                "memberCreator": {"fullName": "Ann Lee", "username": "ann"},
            }
        )
        assert comment.author == "Ann Lee"
        assert comment.text == "hi"

    def test_card_create_body(self):
        assert CardCreate("n", "l1", "top").to_body() == {"name": "n", "pos": "top", "idList": "l1"}
        assert CardCreate("n", "l1", "7", desc="").to_body()["desc"] == ""
