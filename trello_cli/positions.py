"""
Ordinal position targets and their translation into Trello `pos` values.

Trello orders cards within a list (and lists within a board) by a float
`pos` field and accepts "top", "bottom" or a numeric string on update.
A requested 1-based rank becomes the midpoint between the siblings that
currently sit at rank n-1 and rank n.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

TOP_LITERAL = "top"
BOTTOM_LITERAL = "bottom"


@dataclass(frozen=True)
class Top:
    pass


@dataclass(frozen=True)
class Bottom:
    pass


@dataclass(frozen=True)
class Rank:
    n: int


@dataclass(frozen=True)
class Raw:
    """A value that is neither a literal nor a rank; sent to the API verbatim."""

    value: str


PositionTarget = Top | Bottom | Rank | Raw


def parse_position(raw: str) -> PositionTarget:
    """Parse a user-supplied position string.

    Only the exact lowercase literals are recognized; "Top" is a Raw value.
    """
    if raw == TOP_LITERAL:
        return Top()
    if raw == BOTTOM_LITERAL:
        return Bottom()
    digits = raw[1:] if raw.startswith("+") else raw
    if digits.isascii() and digits.isdigit():
        return Rank(int(digits))
    return Raw(raw)


def needs_siblings(target: PositionTarget) -> bool:
    """Only a rank needs the current sibling order."""
    return isinstance(target, Rank)


def format_pos(value: float) -> str:
    """Render a float the way the API expects: shortest round-trip digits,
    no exponent, no trailing ".0" on integral values."""
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def sort_siblings(entities, exclude_id=None):
    """Return siblings ascending by pos, without the entity being acted on.

    The sort is stable, so equal pos values keep the API's order.
    """
    return sorted((e for e in entities if e.id != exclude_id), key=lambda e: e.pos)


def compute_position(siblings, target: PositionTarget) -> str:
    """Compute the wire value placing an entity at *target* among *siblings*.

    *siblings* must already be sorted ascending by pos and exclude the
    entity being moved. Out-of-range ranks saturate to "top"/"bottom".
    """
    if isinstance(target, Raw):
        return target.value
    if isinstance(target, Top):
        return TOP_LITERAL
    if isinstance(target, Bottom):
        return BOTTOM_LITERAL

    n = target.n
    if n <= 1 or not siblings:
        return TOP_LITERAL
    if n > len(siblings):
        return BOTTOM_LITERAL
    before = siblings[n - 2].pos
    after = siblings[n - 1].pos
    return format_pos((before + after) / 2.0)


def resolve_position(raw, fetch_siblings, exclude_id=None):
    """Turn a raw position string into a wire value.

    *fetch_siblings* is only called for a numeric rank; literals and raw
    values never trigger a fetch.
    """
    target = parse_position(raw)
    if not needs_siblings(target):
        return compute_position([], target)
    siblings = sort_siblings(fetch_siblings(), exclude_id=exclude_id)
    return compute_position(siblings, target)
