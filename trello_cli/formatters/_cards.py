"""Formatters for card search results and card detail."""

from trello_cli.formatters._table import _sanitize_str, _tsv


def format_find_table(cards):
    """Format find results as "ID<TAB>Board<TAB>List<TAB>Title" lines."""
    if not cards:
        return "No matching cards found."
    rows = [(c["id"], c["board"], c["list"], c["title"]) for c in cards]
    return _tsv(["ID", "Board", "List", "Title"], rows)


def _label_text(label):
    name, color = label.get("name"), label.get("color")
    if name and color:
        return f"{name} ({color})"
    if name:
        return name
    if color:
        return f"({color})"
    return "(no color)"


def format_card_detail(card):
    """Format a single card (TrelloClient.show_card()) as a readable block."""
    lines = [
        f"Card:     {_sanitize_str(card['name'])}",
        f"ID:       {card['id']}",
        f"Board:    {_sanitize_str(card['board'])}",
        f"List:     {_sanitize_str(card['list'])}",
    ]
    if card.get("archived"):
        lines.append("Status:   archived")
    labels = card.get("labels") or []
    lines.append(f"Labels:   {', '.join(_label_text(lbl) for lbl in labels) if labels else '-'}")

    desc = card.get("description") or ""
    lines.append("")
    if desc:
        lines.append("Description:")
        for line in _sanitize_str(desc).splitlines():
            lines.append(f"  {line}")
    else:
        lines.append("Description: (empty)")

    if "comments" in card:
        comments = card["comments"]
        lines.append("")
        lines.append(f"Comments ({len(comments)}):")
        for c in comments:
            lines.append(f"  [{c['date']}] {_sanitize_str(c['author'])}:")
            for line in _sanitize_str(c["text"]).splitlines() or [""]:
                lines.append(f"    {line}")
    return "\n".join(lines)
