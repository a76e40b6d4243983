"""
Name-to-id resolution for boards, lists and cards.

Trello addresses everything by 24-char hex ids; users type names. A
reference that already looks like an id is used as-is without touching
the network. Anything else is matched case-insensitively as a substring
against a freshly fetched candidate pool and must hit exactly one entry.
"""

from __future__ import annotations

from trello_cli.exceptions import AmbiguousError, NoScopeMatchError, NotFoundError
from trello_cli.models import NamedItem

ID_LENGTH = 24
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

BOARD_HINT = "Use -b/--board to disambiguate."


def looks_like_id(value: str) -> bool:
    """True for a 24-char hex string (Trello's native id shape)."""
    return len(value) == ID_LENGTH and all(c in _HEX_DIGITS for c in value)


def filter_by_name(items, query: str) -> list:
    """Keep items whose name contains *query*, ignoring case.

    An empty query keeps everything.
    """
    needle = query.lower()
    return [item for item in items if needle in item.name.lower()]


def find_unique_match(items, query: str, context_label: str = "board", hint=BOARD_HINT) -> str:
    """Return the id of the single item matching *query*.

    Raises NotFoundError on zero matches and AmbiguousError (listing every
    match with its context) on more than one. Never picks a winner.
    """
    matches = filter_by_name(items, query)
    if not matches:
        raise NotFoundError(query)
    if len(matches) == 1:
        return matches[0].id
    options = [f"{item.name} ({context_label}: {item.context})" for item in matches]
    raise AmbiguousError(query, options, hint)


def resolve_scopes(scope_filter, *, list_scopes, get_scope, scope_label="board"):
    """Return the parent entities a name lookup should search.

    An id filter fetches that single scope. A name filter keeps every scope
    whose name contains it; an empty result is a NoScopeMatchError naming
    the filter rather than a generic "no matches" later on.
    """
    if scope_filter is None:
        scopes = list(list_scopes())
        if not scopes:
            raise NoScopeMatchError(None, scope_label)
        return scopes
    if looks_like_id(scope_filter):
        return [get_scope(scope_filter)]
    scopes = filter_by_name(list_scopes(), scope_filter)
    if not scopes:
        raise NoScopeMatchError(scope_filter, scope_label)
    return scopes


def collect_named_items(scopes, list_candidates):
    """Flatten candidates of every scope into NamedItems tagged with the scope name."""
    items = []
    for scope in scopes:
        for candidate in list_candidates(scope):
            items.append(NamedItem(id=candidate.id, name=candidate.name, context=scope.name))
    return items


def resolve_reference(
    raw: str,
    scope_filter: str | None = None,
    *,
    list_scopes,
    get_scope,
    list_candidates,
    context_label: str = "board",
    hint=BOARD_HINT,
) -> str:
    """Resolve a user reference to exactly one id.

    Args:
        raw: An id or a name fragment.
        scope_filter: Optional parent id or name fragment narrowing the search.
        list_scopes: Returns every accessible parent (e.g. the member's boards).
        get_scope: Fetches one parent by id.
        list_candidates: Returns the candidates (e.g. lists) of one parent.
    """
    if looks_like_id(raw):
        return raw
    scopes = resolve_scopes(
        scope_filter,
        list_scopes=list_scopes,
        get_scope=get_scope,
        scope_label=context_label,
    )
    items = collect_named_items(scopes, list_candidates)
    return find_unique_match(items, raw, context_label=context_label, hint=hint)
