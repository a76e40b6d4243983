"""
trello-cli: CLI tool for managing Trello boards, lists and cards
"""

import argparse
import json
import sys

from trello_cli import config
from trello_cli.commands import (
    cmd_board_ls,
    cmd_card_archive,
    cmd_card_comment,
    cmd_card_create,
    cmd_card_delete,
    cmd_card_find,
    cmd_card_label,
    cmd_card_move,
    cmd_card_restore,
    cmd_card_show,
    cmd_card_update,
    cmd_list_cards,
    cmd_list_ls,
    cmd_list_move,
)
from trello_cli.exceptions import CliError
from trello_cli.setup_wizard import cmd_setup

HELP_TEXT = """\
Usage: trello <group> <command> [args...]

Global flags:
  --format table          Output as readable text instead of JSON (default: json)
  --json                  Same as --format json
  --dry-run               Preview mutations without executing them
  --quiet, -q             Suppress confirmations and warnings
  --verbose, -v           Enable HTTP request logging
  --version               Show version number

  Global flags are recognized anywhere on the line. Put free text that
  looks like a flag after --, e.g.: trello card comment <card> -- -v

Commands:
  setup                   - Interactive setup wizard (run this first!)
  version                 - Show version number
  board ls                - List your open boards
  list ls                 - List lists with their rank on each board
    -b, --board <board>     Board id or name fragment
  list cards <list>       - List the cards of one list in order
    -b, --board <board>     Board id or name fragment
  list move <list> <pos>  - Move a list within its board
    -b, --board <board>     Board id or name fragment
  card show <card>        - Show card details
    --comments              Include all comments (oldest first)
    -b, --board <board>     Board id or name fragment
  card find <pattern>     - Find cards whose title matches a regex (ignores case)
    -b, --board <board>     Board id or name fragment
    -l, --list <name>       Only lists whose name contains this text
  card create <list> <name>
                          - Create a card
    -d, --description <t>   Card description
    -p, --position <pos>    top, bottom (default), a rank, or a raw pos
    -b, --board <board>     Board id or name fragment
  card update <card> <description>
                          - Replace the card description
  card label <card> <label>
                          - Apply a board label by name
    --clear                 Remove the label instead
  card archive <card>     - Archive a card
  card restore <card>     - Unarchive a card
  card move <card> <pos>  - Move a card within its list
  card comment <card> <text>
                          - Add a comment
  card delete <card>      - Permanently delete a card
    --confirm               Required for deletion

Positions:
  top, bottom             Literal ends of the list
  <n>                     1-based rank among the other items (1 = top)
  anything else           Sent to Trello unchanged (e.g. 16384.5)

Names:
  Boards, lists and cards accept a 24-char id or a name fragment. A fragment
  must match exactly one item (ignoring case); otherwise every match is listed.
  Use -b/--board to narrow the search.
"""


# ---------------------------------------------------------------------------
# Global flag extraction (before argparse, so --format works after subcommand)
# ---------------------------------------------------------------------------


def _extract_global_flags(argv):
    """Extract global flags from argv regardless of position.

    Returns (format_str, dry_run, quiet, verbose, remaining_argv).
    Handles --version directly. Scanning stops at ``--``: it and everything
    after it are passed through untouched for argparse.
    """
    fmt = "json"
    dry_run = False
    quiet = False
    verbose = False
    remaining = []
    i = 0
    while i < len(argv):
        if argv[i] == "--":
            remaining.extend(argv[i:])
            break
        if argv[i] == "--version":
            print(f"trello-cli {config.VERSION}")
            sys.exit(0)
        elif argv[i] == "--dry-run":
            dry_run = True
        elif argv[i] in ("--quiet", "-q"):
            quiet = True
        elif argv[i] in ("--verbose", "-v"):
            verbose = True
        elif argv[i] == "--json":
            fmt = "json"
        elif argv[i] == "--format" and i + 1 < len(argv):
            fmt = argv[i + 1]
            if fmt not in ("json", "table"):
                raise CliError(f"[ERROR] Invalid format '{fmt}'. Use: json, table")
            i += 2
            continue
        else:
            remaining.append(argv[i])
        i += 1
    if quiet and verbose:
        raise CliError("[ERROR] --quiet and --verbose are mutually exclusive.")
    return fmt, dry_run, quiet, verbose, remaining


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


class _SubcommandParser(argparse.ArgumentParser):
    """Subparser that raises CliError instead of printing full help text."""

    def error(self, message):
        raise CliError(f"[ERROR] {message}")


def _add_board(p):
    p.add_argument("-b", "--board")


def build_parser():
    parser = _SubcommandParser(prog="trello", add_help=False)
    parser.add_argument("--help", "-h", action="store_true", dest="show_help")
    sub = parser.add_subparsers(dest="command", parser_class=_SubcommandParser)

    # --- setup / version ---
    sub.add_parser("setup").set_defaults(func=None)
    sub.add_parser("version").set_defaults(func=None)

    # --- board ---
    board = sub.add_parser("board").add_subparsers(dest="action", parser_class=_SubcommandParser)
    board.required = True
    board.add_parser("ls").set_defaults(func=cmd_board_ls)

    # --- list ---
    lists = sub.add_parser("list").add_subparsers(dest="action", parser_class=_SubcommandParser)
    lists.required = True

    p = lists.add_parser("ls")
    _add_board(p)
    p.set_defaults(func=cmd_list_ls)

    p = lists.add_parser("cards")
    p.add_argument("list")
    _add_board(p)
    p.set_defaults(func=cmd_list_cards)

    p = lists.add_parser("move")
    p.add_argument("list")
    p.add_argument("position")
    _add_board(p)
    p.set_defaults(func=cmd_list_move)

    # --- card ---
    card = sub.add_parser("card").add_subparsers(dest="action", parser_class=_SubcommandParser)
    card.required = True

    p = card.add_parser("show")
    p.add_argument("card")
    p.add_argument("--comments", action="store_true")
    _add_board(p)
    p.set_defaults(func=cmd_card_show)

    p = card.add_parser("find")
    p.add_argument("pattern")
    p.add_argument("-l", "--list")
    _add_board(p)
    p.set_defaults(func=cmd_card_find)

    p = card.add_parser("create")
    p.add_argument("list")
    p.add_argument("name")
    p.add_argument("-d", "--description")
    p.add_argument("-p", "--position", default="bottom")
    _add_board(p)
    p.set_defaults(func=cmd_card_create)

    p = card.add_parser("update")
    p.add_argument("card")
    p.add_argument("description")
    _add_board(p)
    p.set_defaults(func=cmd_card_update)

    p = card.add_parser("label")
    p.add_argument("card")
    p.add_argument("label")
    p.add_argument("--clear", action="store_true")
    _add_board(p)
    p.set_defaults(func=cmd_card_label)

    p = card.add_parser("archive")
    p.add_argument("card")
    _add_board(p)
    p.set_defaults(func=cmd_card_archive)

    p = card.add_parser("restore")
    p.add_argument("card")
    _add_board(p)
    p.set_defaults(func=cmd_card_restore)

    p = card.add_parser("move")
    p.add_argument("card")
    p.add_argument("position")
    _add_board(p)
    p.set_defaults(func=cmd_card_move)

    p = card.add_parser("comment")
    p.add_argument("card")
    p.add_argument("text")
    _add_board(p)
    p.set_defaults(func=cmd_card_comment)

    p = card.add_parser("delete")
    p.add_argument("card")
    p.add_argument("--confirm", action="store_true")
    _add_board(p)
    p.set_defaults(func=cmd_card_delete)

    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------


def _error_type_from_message(message):
    if message.startswith("[SETUP_NEEDED]"):
        return "setup_needed"
    if message.startswith("[ERROR]"):
        return "error"
    return "cli_error"


def _emit_cli_error(err, fmt):
    msg = str(err)
    if fmt == "json":
        payload = {
            "ok": False,
            "schema_version": config.CONTRACT_SCHEMA_VERSION,
            "error": {
                "type": _error_type_from_message(msg),
                "message": msg,
                "exit_code": getattr(err, "exit_code", 1),
            },
        }
        print(json.dumps(payload, ensure_ascii=False), file=sys.stderr)
        return
    print(msg, file=sys.stderr)


def main(argv=None):
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")

    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print(HELP_TEXT)
        sys.exit(0)

    fmt = "json"
    try:
        # Extract global flags from anywhere in argv
        fmt, dry_run, quiet, verbose, remaining_argv = _extract_global_flags(argv)
        config.RUNTIME_DRY_RUN = dry_run
        config.RUNTIME_QUIET = quiet
        config.RUNTIME_VERBOSE = verbose
        if verbose:
            config.HTTP_LOG_ENABLED = True

        if not remaining_argv:
            print(HELP_TEXT)
            sys.exit(0)

        parser = build_parser()
        ns = parser.parse_args(remaining_argv)
        ns.format = fmt  # inject global format flag

        if ns.show_help or not ns.command:
            print(HELP_TEXT)
            sys.exit(0)

        if ns.command == "version":
            print(f"trello-cli {config.VERSION}")
            sys.exit(0)

        if ns.command == "setup":
            cmd_setup()
            sys.exit(0)

        handler = getattr(ns, "func", None)
        if handler is None:
            raise CliError(f"[ERROR] Unknown command: {ns.command}")
        handler(ns)

    except CliError as e:
        _emit_cli_error(e, fmt)
        sys.exit(e.exit_code)


if __name__ == "__main__":
    main()
