"""Core output dispatchers."""

import json

from trello_cli import config


def pretty_print(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def output(data, formatter=None, fmt="json"):
    """Output data in requested format."""
    if fmt == "table" and formatter:
        print(formatter(data))
    else:
        print(json.dumps(data, indent=2, ensure_ascii=False))


def mutation_response(action, target=None, details=None, data=None, fmt="json"):
    """Print a mutation confirmation.

    JSON mode prints the client result as-is. Text mode prints a one-line
    "OK: ..." summary (prefixed "DRY RUN" when nothing was sent) unless
    --quiet.
    """
    if fmt == "json":
        print(json.dumps(data if data is not None else {"ok": True}, ensure_ascii=False))
        return
    if config.RUNTIME_QUIET:
        return
    parts = [action]
    if target:
        parts.append(target)
    if details:
        parts.append(details)
    summary = ": ".join(parts)
    prefix = "DRY RUN" if data and data.get("dry_run") else "OK"
    print(f"{prefix}: {summary}")
    if data and data.get("dry_run"):
        for req in data.get("requests", []):
            body = json.dumps(req["body"], ensure_ascii=False) if req.get("body") else ""
            print(f"  would send {req['method']} {req['path']} {body}".rstrip())
