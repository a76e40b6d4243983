"""
TrelloClient: public Python API for managing Trello boards, lists and cards.

Single entry point for the CLI and the MCP server.
All public methods return flat dicts suitable for JSON serialization.
"""

from __future__ import annotations

from typing import Any

from trello_cli import config
from trello_cli._utils import compile_pattern, format_comment_date
from trello_cli.api import TrelloApi, warn
from trello_cli.config import load_credentials
from trello_cli.exceptions import CliError
from trello_cli.models import (
    Board,
    Card,
    CardCreate,
    Comment,
    Label,
    NamedItem,
    TrelloList,
    expect_list,
)
from trello_cli.positions import resolve_position, sort_siblings
from trello_cli.resolve import (
    find_unique_match,
    looks_like_id,
    resolve_reference,
    resolve_scopes,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _find_label(labels, label_name):
    """Find a board label by exact name, ignoring case."""
    wanted = label_name.lower()
    for label in labels:
        if label.name.lower() == wanted:
            return label
    available = sorted({label.name for label in labels if label.name})
    hint = f" Available: {', '.join(available)}" if available else ""
    raise CliError(f"[ERROR] Label '{label_name}' not found on board.{hint}")


def _card_row(card, board_name, list_name):
    return {"id": card.id, "board": board_name, "list": list_name, "title": card.name}


def _comment_row(comment):
    return {
        "date": format_comment_date(comment.date),
        "author": comment.author,
        "text": comment.text,
    }


# ---------------------------------------------------------------------------
# TrelloClient
# ---------------------------------------------------------------------------


class TrelloClient:
    """Public API surface for Trello boards, lists and cards.

    Card and list arguments accept either a 24-char id or a name fragment;
    the optional ``board`` argument narrows name lookups. Raises
    CliError subclasses (FetchError, NotFoundError, AmbiguousError,
    NoScopeMatchError, SetupError) on failure.
    """

    def __init__(self, credentials=None, *, api=None, source=None, config_path=None):
        """Initialize the client.

        Args:
            credentials: Explicit Credentials. Loaded from ``source`` (the
                process environment by default) and the config file when omitted.
            api: Pre-built fetch capability; mainly for tests.
        """
        if api is None:
            if credentials is None:
                credentials = load_credentials(source, config_path)
            api = TrelloApi(credentials)
        self.api = api
        self._previews: list[dict[str, Any]] = []

    def _result(self, fields):
        """Finish a mutation result, attaching dry-run previews when set."""
        result = {"ok": True, **fields, "dry_run": config.RUNTIME_DRY_RUN}
        if config.RUNTIME_DRY_RUN:
            result["requests"] = self._previews
            self._previews = []
        return result

    # -------------------------------------------------------------------
    # Fetch helpers (typed snapshots)
    # -------------------------------------------------------------------

    def _get_card(self, card_id) -> Card:
        return Card.from_api(self.api.get(f"/cards/{card_id}"))

    def _get_list(self, list_id) -> TrelloList:
        return TrelloList.from_api(self.api.get(f"/lists/{list_id}"))

    def _get_board(self, board_id) -> Board:
        return Board.from_api(self.api.get(f"/boards/{board_id}"))

    def _member_boards(self) -> list[Board]:
        raw = expect_list(self.api.get("/members/me/boards?filter=open"), "boards")
        return [Board.from_api(b) for b in raw]

    def _board_lists(self, board_id) -> list[TrelloList]:
        raw = expect_list(self.api.get(f"/boards/{board_id}/lists"), "lists")
        return [TrelloList.from_api(lst) for lst in raw]

    def _board_cards(self, board_id) -> list[Card]:
        raw = expect_list(self.api.get(f"/boards/{board_id}/cards"), "cards")
        return [Card.from_api(c) for c in raw]

    def _board_closed_cards(self, board_id) -> list[Card]:
        raw = expect_list(self.api.get(f"/boards/{board_id}/cards/closed"), "cards")
        return [Card.from_api(c) for c in raw]

    def _list_cards(self, list_id) -> list[Card]:
        raw = expect_list(self.api.get(f"/lists/{list_id}/cards"), "cards")
        return [Card.from_api(c) for c in raw]

    def _board_labels(self, board_id) -> list[Label]:
        raw = expect_list(self.api.get(f"/boards/{board_id}/labels"), "labels")
        return [Label.from_api(lbl) for lbl in raw]

    def _card_comments(self, card_id) -> list[Comment]:
        """All comments on a card, newest first (API order).

        Pages with ``before=<last id>`` until a page comes back short.
        """
        comments: list[Comment] = []
        limit = config.COMMENTS_PAGE_LIMIT
        before = None
        while True:
            path = f"/cards/{card_id}/actions?filter=commentCard&limit={limit}"
            if before:
                path += f"&before={before}"
            batch = [Comment.from_api(a) for a in expect_list(self.api.get(path), "comments")]
            if not batch:
                break
            before = batch[-1].id
            comments.extend(batch)
            if len(batch) < limit:
                break
        return comments

    def _scopes(self, board=None) -> list[Board]:
        return resolve_scopes(
            board,
            list_scopes=self._member_boards,
            get_scope=self._get_board,
        )

    def _mutate(self, method, path, body=None):
        """Send a mutating request.

        Under --dry-run nothing is sent: the request is queued as a preview
        for _result() and None is returned.
        """
        if config.RUNTIME_DRY_RUN:
            self._previews.append({"method": method, "path": path, "body": body})
            return None
        if method == "DELETE":
            self.api.delete(path)
            return None
        if method == "POST":
            return self.api.post(path, body)
        return self.api.put(path, body)

    # -------------------------------------------------------------------
    # Name resolution
    # -------------------------------------------------------------------

    def resolve_board(self, board: str) -> str:
        """Resolve a board id or name fragment to a board id."""
        if looks_like_id(board):
            return board
        items = [NamedItem(id=b.id, name=b.name, context=b.id) for b in self._member_boards()]
        return find_unique_match(
            items, board, context_label="id", hint="Use the board id to disambiguate."
        )

    def resolve_list(self, list_ref: str, board: str | None = None) -> str:
        """Resolve a list id or name fragment (optionally within ``board``)."""
        return resolve_reference(
            list_ref,
            board,
            list_scopes=self._member_boards,
            get_scope=self._get_board,
            list_candidates=lambda b: self._board_lists(b.id),
        )

    def resolve_card(self, card_ref: str, board: str | None = None, *, archived=False) -> str:
        """Resolve a card id or name fragment (optionally within ``board``).

        Names are looked up among open cards, or among archived cards
        when ``archived`` is set.
        """
        fetch = self._board_closed_cards if archived else self._board_cards
        return resolve_reference(
            card_ref,
            board,
            list_scopes=self._member_boards,
            get_scope=self._get_board,
            list_candidates=lambda b: fetch(b.id),
        )

    # -------------------------------------------------------------------
    # Read commands
    # -------------------------------------------------------------------

    def list_boards(self) -> list[dict[str, Any]]:
        """List the member's open boards.

        Returns:
            list of dicts with id, name.
        """
        return [b.to_dict() for b in self._member_boards()]

    def list_lists(self, *, board: str | None = None) -> list[dict[str, Any]]:
        """List open lists across boards, in board order.

        Args:
            board: Board id or name fragment (all boards when omitted).

        Returns:
            list of dicts with id, name, board, board_id, rank (1-based), pos.
        """
        rows = []
        for b in self._scopes(board):
            for rank, lst in enumerate(sort_siblings(self._board_lists(b.id)), start=1):
                rows.append(
                    {
                        "id": lst.id,
                        "name": lst.name,
                        "board": b.name,
                        "board_id": b.id,
                        "rank": rank,
                        "pos": lst.pos,
                    }
                )
        return rows

    def list_cards(self, list_ref: str, *, board: str | None = None) -> dict[str, Any]:
        """List the open cards of one list in display order.

        Returns:
            dict with 'list' (id, name, board_id) and 'cards' (id, name,
            rank, pos, labels count).
        """
        list_id = self.resolve_list(list_ref, board)
        lst = self._get_list(list_id)
        cards = sort_siblings(self._list_cards(list_id))
        return {
            "list": {"id": lst.id, "name": lst.name, "board_id": lst.id_board},
            "cards": [
                {"id": c.id, "name": c.name, "rank": rank, "pos": c.pos}
                for rank, c in enumerate(cards, start=1)
            ],
        }

    def show_card(
        self,
        card_ref: str,
        *,
        board: str | None = None,
        include_comments: bool = False,
    ) -> dict[str, Any]:
        """Get full details for one card.

        Args:
            card_ref: Card id or name fragment.
            board: Board id or name narrowing the name lookup.
            include_comments: Also fetch every comment (oldest first).

        Returns:
            dict with id, name, board, list, labels (name/color), description,
            archived and, when requested, comments (date, author, text).
        """
        card_id = self.resolve_card(card_ref, board)
        card = self._get_card(card_id)
        board_obj = self._get_board(card.id_board)
        lst = self._get_list(card.id_list)
        labels = [
            {"name": label.name, "color": label.color}
            for label in self._board_labels(card.id_board)
            if label.id in card.id_labels
        ]
        result: dict[str, Any] = {
            "id": card.id,
            "name": card.name,
            "board": board_obj.name,
            "list": lst.name,
            "labels": labels,
            "description": card.desc,
            "archived": card.closed,
        }
        if include_comments:
            comments = self._card_comments(card.id)
            comments.reverse()
            result["comments"] = [_comment_row(c) for c in comments]
        return result

    def find_cards(
        self,
        pattern: str,
        *,
        board: str | None = None,
        list_name: str | None = None,
    ) -> list[dict[str, Any]]:
        """Find open cards whose name matches a case-insensitive regex.

        Args:
            pattern: Regular expression searched within card names.
            board: Board id or name fragment (all boards when omitted).
            list_name: Keep only cards whose list name contains this text.

        Returns:
            list of dicts with id, board, list, title.
        """
        regex = compile_pattern(pattern)
        list_filter = list_name.lower() if list_name is not None else None
        results = []
        for b in self._scopes(board):
            cards = self._board_cards(b.id)
            list_names = {lst.id: lst.name for lst in self._board_lists(b.id)}
            for card in cards:
                if not regex.search(card.name):
                    continue
                lname = list_names.get(card.id_list)
                if lname is None:
                    warn(f"Card {card.id} is in a list that is not open on '{b.name}'; skipped.")
                    continue
                if list_filter is not None and list_filter not in lname.lower():
                    continue
                results.append(_card_row(card, b.name, lname))
        return results

    # -------------------------------------------------------------------
    # Mutation commands
    # -------------------------------------------------------------------

    def update_description(
        self, card_ref: str, description: str, *, board: str | None = None
    ) -> dict[str, Any]:
        """Replace a card's description.

        Returns:
            dict with ok, card_id, name (None under --dry-run), dry_run.
        """
        card_id = self.resolve_card(card_ref, board)
        updated = self._mutate("PUT", f"/cards/{card_id}", {"desc": description})
        name = Card.from_api(updated).name if updated is not None else None
        return self._result({"card_id": card_id, "name": name})

    def _set_label(self, card_ref, label_name, board, *, present):
        card = self._get_card(self.resolve_card(card_ref, board))
        label = _find_label(self._board_labels(card.id_board), label_name)
        changed = (label.id in card.id_labels) != present
        if changed:
            if present:
                self._mutate("POST", f"/cards/{card.id}/idLabels", {"value": label.id})
            else:
                self._mutate("DELETE", f"/cards/{card.id}/idLabels/{label.id}")
        return self._result(
            {"card_id": card.id, "name": card.name, "label": label.name, "changed": changed}
        )

    def apply_label(
        self, card_ref: str, label_name: str, *, board: str | None = None
    ) -> dict[str, Any]:
        """Apply a board label (matched by name, ignoring case) to a card.

        No request is sent when the card already carries the label.
        """
        return self._set_label(card_ref, label_name, board, present=True)

    def remove_label(
        self, card_ref: str, label_name: str, *, board: str | None = None
    ) -> dict[str, Any]:
        """Remove a board label from a card; no-op when it is not applied."""
        return self._set_label(card_ref, label_name, board, present=False)

    def _set_closed(self, card_ref, board, *, closed):
        # restore looks names up among archived cards
        card = self._get_card(self.resolve_card(card_ref, board, archived=not closed))
        changed = card.closed != closed
        if changed:
            self._mutate("PUT", f"/cards/{card.id}", {"closed": closed})
        return self._result({"card_id": card.id, "name": card.name, "changed": changed})

    def archive_card(self, card_ref: str, *, board: str | None = None) -> dict[str, Any]:
        """Archive a card (reversible). No-op if already archived."""
        return self._set_closed(card_ref, board, closed=True)

    def restore_card(self, card_ref: str, *, board: str | None = None) -> dict[str, Any]:
        """Unarchive a card. No-op if it is not archived.

        A name fragment is matched against the board's archived cards.
        """
        return self._set_closed(card_ref, board, closed=False)

    def delete_card(self, card_ref: str, *, board: str | None = None) -> dict[str, Any]:
        """Permanently delete a card."""
        card = self._get_card(self.resolve_card(card_ref, board))
        self._mutate("DELETE", f"/cards/{card.id}")
        return self._result({"card_id": card.id, "name": card.name})

    def add_comment(self, card_ref: str, text: str, *, board: str | None = None) -> dict[str, Any]:
        """Add a comment to a card.

        Returns:
            dict with ok, card_id, comment_id (None under --dry-run).
        """
        if not text:
            raise CliError("[ERROR] Comment text is required.")
        card_id = self.resolve_card(card_ref, board)
        action = self._mutate("POST", f"/cards/{card_id}/actions/comments", {"text": text})
        comment_id = action.get("id") if isinstance(action, dict) else None
        return self._result({"card_id": card_id, "comment_id": comment_id})

    def create_card(
        self,
        list_ref: str,
        name: str,
        *,
        description: str | None = None,
        position: str = "bottom",
        board: str | None = None,
    ) -> dict[str, Any]:
        """Create a card in a list.

        Args:
            list_ref: List id or name fragment.
            name: Card title.
            description: Optional card description.
            position: "top", "bottom", a 1-based rank, or a raw pos value.
            board: Board id or name narrowing the list lookup.

        Returns:
            dict with ok, card_id (None under --dry-run), name, list_id, pos.
        """
        if not name.strip():
            raise CliError("[ERROR] Card name cannot be empty.")
        list_id = self.resolve_list(list_ref, board)
        pos = resolve_position(position, lambda: self._list_cards(list_id))
        body = CardCreate(name=name, id_list=list_id, pos=pos, desc=description).to_body()
        created = self._mutate("POST", "/cards", body)
        card_id = Card.from_api(created).id if created is not None else None
        return self._result({"card_id": card_id, "name": name, "list_id": list_id, "pos": pos})

    def move_card(self, card_ref: str, position: str, *, board: str | None = None) -> dict[str, Any]:
        """Move a card within its list.

        A numeric rank places the card at that 1-based position among the
        other cards of its list; "top"/"bottom" and raw values skip the
        sibling fetch entirely.

        Returns:
            dict with ok, card_id, name, position (as requested), pos (as sent).
        """
        card_id = self.resolve_card(card_ref, board)
        fetched = {}

        def _siblings():
            card = fetched["card"] = self._get_card(card_id)
            return [c for c in self._list_cards(card.id_list) if c.id != card.id]

        pos = resolve_position(position, _siblings)
        updated = self._mutate("PUT", f"/cards/{card_id}", {"pos": pos})
        if updated is not None:
            name = Card.from_api(updated).name
        else:
            name = fetched["card"].name if "card" in fetched else None
        return self._result({"card_id": card_id, "name": name, "position": position, "pos": pos})

    def move_list(self, list_ref: str, position: str, *, board: str | None = None) -> dict[str, Any]:
        """Move a list within its board (same position rules as move_card).

        Returns:
            dict with ok, list_id, name, position, pos.
        """
        list_id = self.resolve_list(list_ref, board)
        fetched = {}

        def _siblings():
            lst = fetched["list"] = self._get_list(list_id)
            return [other for other in self._board_lists(lst.id_board) if other.id != lst.id]

        pos = resolve_position(position, _siblings)
        updated = self._mutate("PUT", f"/lists/{list_id}", {"pos": pos})
        if updated is not None:
            name = TrelloList.from_api(updated).name
        else:
            name = fetched["list"].name if "list" in fetched else None
        return self._result({"list_id": list_id, "name": name, "position": position, "pos": pos})

    def whoami(self) -> dict[str, Any]:
        """Return the member the key/token belongs to (used by setup)."""
        member = self.api.get("/members/me")
        if not isinstance(member, dict):
            raise CliError("[ERROR] Unexpected /members/me response shape.")
        return {
            "id": member.get("id"),
            "username": member.get("username"),
            "full_name": member.get("fullName"),
        }
