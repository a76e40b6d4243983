"""
trello-cli shared configuration, constants, credential loading and
module-level runtime state.
"""

from __future__ import annotations

import os
import tempfile
import tomllib
from dataclasses import dataclass
from typing import Protocol

from trello_cli.exceptions import CliError, SetupError

KEY_ENV = "TRELLO_API_KEY"
TOKEN_ENV = "TRELLO_API_TOKEN"
CONFIG_PATH_ENV = "TRELLO_CONFIG"

# ---------------------------------------------------------------------------
# Credential sources
# ---------------------------------------------------------------------------


class CredentialSource(Protocol):
    def get(self, key: str) -> str | None: ...


class EnvironCredentialSource:
    """Reads credentials from the process environment."""

    def get(self, key):
        return os.environ.get(key)


class MappingCredentialSource:
    """In-memory credential source (tests, embedding)."""

    def __init__(self, values=None):
        self._values = dict(values or {})

    def get(self, key):
        return self._values.get(key)


@dataclass(frozen=True)
class Credentials:
    api_key: str
    api_token: str


def default_config_path():
    override = os.environ.get(CONFIG_PATH_ENV)
    if override:
        return override
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(base, "trello-cli", "config.toml")


def load_credentials(source=None, config_path=None):
    """Load the key/token pair: both env values first, then the TOML file.

    A single env value is ignored; the file must then supply both fields.
    """
    source = source if source is not None else EnvironCredentialSource()
    config_path = config_path or default_config_path()

    key_env = source.get(KEY_ENV)
    token_env = source.get(TOKEN_ENV)
    if key_env and token_env:
        return Credentials(api_key=key_env, api_token=token_env)

    env_status = "only one set (both required)" if (key_env or token_env) else "not set"

    if os.path.exists(config_path):
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except OSError as e:
            raise SetupError(
                f"[SETUP_NEEDED] Failed to read config file {config_path}: "
                "permission denied or file not readable"
            ) from e
        except tomllib.TOMLDecodeError as e:
            raise SetupError(
                f"[SETUP_NEEDED] Failed to parse config file {config_path}: {e}"
            ) from e
        for field in ("api_key", "api_token"):
            value = data.get(field)
            if not isinstance(value, str) or not value:
                raise SetupError(
                    f"[SETUP_NEEDED] Config file {config_path} is missing {field} field"
                )
        return Credentials(api_key=data["api_key"], api_token=data["api_token"])

    raise SetupError(
        "[SETUP_NEEDED] Failed to load Trello credentials.\n"
        "Checked:\n"
        f"  - Environment variables {KEY_ENV} and {TOKEN_ENV}: {env_status}\n"
        f"  - Config file {config_path}: not found\n"
        "  Run: trello setup"
    )


def _toml_string(value):
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def save_credentials(api_key, api_token, config_path=None):
    """Write the config file (atomic write-then-rename, owner-only perms)."""
    config_path = config_path or default_config_path()
    if any(c in value for value in (api_key, api_token) for c in "\r\n"):
        raise CliError("[ERROR] Credentials cannot contain line breaks.")
    config_dir = os.path.dirname(config_path) or "."
    os.makedirs(config_dir, exist_ok=True)
    body = f"api_key = {_toml_string(api_key)}\napi_token = {_toml_string(api_token)}\n"
    fd, tmp_path = tempfile.mkstemp(dir=config_dir, prefix=".config_tmp_")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(body)
        os.replace(tmp_path, config_path)
    except Exception:
        try:
            os.remove(tmp_path)
        except OSError:
            pass
        raise
    # No-op on Windows.
    try:
        os.chmod(config_path, 0o600)
    except (OSError, NotImplementedError):
        pass
    return config_path


# ---------------------------------------------------------------------------
# Env helpers
# ---------------------------------------------------------------------------


def load_env():
    return {k: v for k, v in os.environ.items() if k.startswith("TRELLO_")}


def _env_bool(key, default=False):
    """Parse common boolean env formats."""
    raw = env.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(key, default):
    """Parse integer env values with fallback."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(key, default):
    """Parse float env values with fallback."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VERSION = "0.3.0"

BASE_URL = "https://api.trello.com/1"

COMMENTS_PAGE_LIMIT = 1000

CONTRACT_SCHEMA_VERSION = "1.0"

# ---------------------------------------------------------------------------
# Module-level state
# ---------------------------------------------------------------------------

env = load_env()

HTTP_TIMEOUT_SECONDS = _env_int("TRELLO_HTTP_TIMEOUT_SECONDS", 30)
HTTP_MAX_RETRIES = _env_int("TRELLO_HTTP_MAX_RETRIES", 2)
HTTP_RETRY_BASE_SECONDS = _env_float("TRELLO_HTTP_RETRY_BASE_SECONDS", 1.0)
HTTP_MAX_RESPONSE_BYTES = _env_int("TRELLO_HTTP_MAX_RESPONSE_BYTES", 5_000_000)
HTTP_LOG_ENABLED = _env_bool("TRELLO_HTTP_LOG", False)
HTTP_LOG_SAMPLE_RATE = min(1.0, max(0.0, _env_float("TRELLO_HTTP_LOG_SAMPLE_RATE", 1.0)))

RUNTIME_DRY_RUN = False
RUNTIME_QUIET = False
RUNTIME_VERBOSE = False
