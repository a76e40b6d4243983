"""
Typed snapshots of Trello API payloads.

Every from_api() constructor raises FetchError on a malformed payload so
callers only ever see complete entities.
"""

from __future__ import annotations

from dataclasses import dataclass

from trello_cli.exceptions import FetchError


def _require(data, key, kind, context):
    value = data.get(key)
    if not isinstance(value, kind) or (isinstance(value, bool) and kind is not bool):
        raise FetchError(
            f"[ERROR] Malformed {context} payload: field '{key}' "
            f"expected {kind.__name__ if isinstance(kind, type) else 'number'}, "
            f"got {type(value).__name__}."
        )
    return value


def _object(value, context):
    if isinstance(value, dict):
        return value
    raise FetchError(
        f"[ERROR] Malformed {context} payload: expected JSON object, got {type(value).__name__}."
    )


def expect_list(value, context):
    """Ensure a collection endpoint returned a JSON array."""
    if isinstance(value, list):
        return value
    raise FetchError(
        f"[ERROR] Malformed {context} payload: expected JSON array, got {type(value).__name__}."
    )


@dataclass(frozen=True)
class Board:
    id: str
    name: str

    @classmethod
    def from_api(cls, value):
        data = _object(value, "board")
        return cls(id=_require(data, "id", str, "board"), name=_require(data, "name", str, "board"))

    def to_dict(self):
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class Card:
    id: str
    name: str
    id_board: str
    id_list: str
    pos: float
    desc: str = ""
    id_labels: tuple[str, ...] = ()
    closed: bool = False

    @classmethod
    def from_api(cls, value):
        data = _object(value, "card")
        labels = data.get("idLabels") or []
        return cls(
            id=_require(data, "id", str, "card"),
            name=_require(data, "name", str, "card"),
            id_board=_require(data, "idBoard", str, "card"),
            id_list=_require(data, "idList", str, "card"),
            pos=float(_require(data, "pos", (int, float), "card")),
            desc=data.get("desc") or "",
            id_labels=tuple(labels),
            closed=bool(data.get("closed", False)),
        )


@dataclass(frozen=True)
class TrelloList:
    id: str
    name: str
    id_board: str
    pos: float
    closed: bool = False

    @classmethod
    def from_api(cls, value):
        data = _object(value, "list")
        return cls(
            id=_require(data, "id", str, "list"),
            name=_require(data, "name", str, "list"),
            id_board=_require(data, "idBoard", str, "list"),
            pos=float(_require(data, "pos", (int, float), "list")),
            closed=bool(data.get("closed", False)),
        )


@dataclass(frozen=True)
class Label:
    id: str
    name: str
    color: str | None = None

    @classmethod
    def from_api(cls, value):
        data = _object(value, "label")
        return cls(
            id=_require(data, "id", str, "label"),
            name=data.get("name") or "",
            color=data.get("color"),
        )


@dataclass(frozen=True)
class Comment:
    """A commentCard action."""

    id: str
    date: str
    text: str
    author: str

    @classmethod
    def from_api(cls, value):
        data = _object(value, "comment")
        member = _object(data.get("memberCreator"), "comment author")
        author = member.get("fullName") or _require(member, "username", str, "comment author")
        return cls(
            id=_require(data, "id", str, "comment"),
            date=_require(data, "date", str, "comment"),
            text=(data.get("data") or {}).get("text") or "",
            author=author,
        )


@dataclass(frozen=True)
class NamedItem:
    """Resolver working record: a candidate plus the context shown on ambiguity."""

    id: str
    name: str
    context: str = ""


@dataclass(frozen=True)
class CardCreate:
    """Request body for POST /cards."""

    name: str
    id_list: str
    pos: str
    desc: str | None = None

    def to_body(self):
        body = {"name": self.name, "pos": self.pos, "idList": self.id_list}
        if self.desc is not None:
            body["desc"] = self.desc
        return body
