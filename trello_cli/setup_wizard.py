"""
Interactive setup wizard for trello-cli.
Prompts for an API key and token, checks them against Trello, and saves them.
"""

from trello_cli import config
from trello_cli.api import _mask_token, _try_call
from trello_cli.client import TrelloClient
from trello_cli.config import Credentials, save_credentials
from trello_cli.exceptions import CliError


def _clean(value):
    """Strip whitespace and quotes left over from copy/paste."""
    return value.strip().strip('"').strip("'").strip()


def _prompt_required(label):
    while True:
        value = _clean(input(f"{label}: "))
        if value:
            return value
        print(f"  {label} cannot be empty. Try again.")


def _validate(credentials):
    """Return the member dict for these credentials, or None if Trello rejects them."""
    client = TrelloClient(credentials)
    return _try_call(client.whoami)


def _setup_done(path):
    print()
    print("=" * 50)
    print("  Setup complete!")
    print("=" * 50)
    print()
    print(f"Credentials saved to {path}")
    print("Try these commands:")
    print("  trello board ls --format table")
    print("  trello list ls --format table")
    print("  trello card find <pattern> --format table")
    print()


def cmd_setup():
    """Main setup wizard entry point."""
    print()
    print("=" * 50)
    print("  trello-cli Setup")
    print("=" * 50)
    print()

    config_path = config.default_config_path()
    existing = _try_call(config.load_credentials)
    if existing is not None:
        print("Checking if your current credentials still work...")
        member = _validate(existing)
        if member:
            print(f"  Credentials are valid! Connected as: {member.get('username') or '?'}")
            choice = input("Replace them anyway? [y/N]: ").strip().lower()
            if choice not in ("y", "yes"):
                print("Nothing changed.")
                return
        else:
            print("  Saved credentials were rejected. Let's enter new ones.")
        print()

    print("STEP 1: API key")
    print("-" * 40)
    print("  1. Open https://trello.com/power-ups/admin and create a Power-Up")
    print("  2. Open its API key page and copy the API key")
    print()
    api_key = _prompt_required("API key")
    print()

    print("STEP 2: API token")
    print("-" * 40)
    print("  On the same page, follow the Token link and allow access.")
    print()

    for attempt in range(3):
        api_token = _prompt_required("API token")
        print("  Validating...")
        member = _validate(Credentials(api_key, api_token))
        if member:
            print(f"  Token works! Connected as: {member.get('username') or '?'}")
            break
        remaining = 2 - attempt
        if remaining > 0:
            print(f"  Trello rejected key {_mask_token(api_key)} with that token.")
            print(f"  {remaining} attempt(s) left.")
        else:
            raise CliError(
                "[ERROR] Trello rejected the credentials after 3 attempts. Nothing was saved."
            )

    path = save_credentials(api_key, api_token, config_path)
    _setup_done(path)
