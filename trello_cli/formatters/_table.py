"""Low-level text rendering helpers (stdlib only)."""

import re

_CONTROL_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]|[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_FIELD_BREAK_RE = re.compile(r"[\t\r\n]")


def _sanitize_str(s):
    """Strip ANSI escape sequences and control chars from text output.
    Preserves newlines (\\n) and tabs (\\t)."""
    if not s:
        return s
    return _CONTROL_RE.sub("", str(s))


def sanitize_field(value):
    """Make a value safe for one tab-separated cell.

    Tabs, carriage returns and newlines become spaces so a card title can
    never split a row or shift columns.
    """
    if value is None:
        return ""
    return _sanitize_str(_FIELD_BREAK_RE.sub(" ", str(value)))


def _tsv(header, rows):
    """Build tab-separated lines: header first, then one line per row."""
    lines = ["\t".join(header)]
    for row in rows:
        lines.append("\t".join(sanitize_field(v) for v in row))
    return "\n".join(lines)
