"""
trello-cli exception hierarchy.

All custom exceptions live here to avoid circular imports.
"""


class CliError(Exception):
    """Exit code 1: validation, not-found, network, parse errors."""

    exit_code = 1


class SetupError(CliError):
    """Exit code 2: missing credentials, rejected key/token."""

    exit_code = 2


class FetchError(CliError):
    """Candidate data could not be obtained (network, status, payload)."""


class ResolveError(CliError):
    """A name reference could not be turned into exactly one id."""


class NotFoundError(ResolveError):
    def __init__(self, query):
        self.query = query
        super().__init__(f"[ERROR] No matches found for '{query}'")


class AmbiguousError(ResolveError):
    """More than one candidate matched; carries every match for the hint."""

    def __init__(self, query, matches, hint=None):
        self.query = query
        self.matches = list(matches)
        self.hint = hint
        message = f"[ERROR] Multiple matches found for '{query}': {', '.join(self.matches)}."
        if hint:
            message += f" {hint}"
        super().__init__(message)


class NoScopeMatchError(ResolveError):
    def __init__(self, scope_filter, scope_label="board"):
        self.scope_filter = scope_filter
        self.scope_label = scope_label
        if scope_filter is None:
            message = f"[ERROR] No {scope_label}s found"
        else:
            message = f"[ERROR] No {scope_label}s matching '{scope_filter}' found"
        super().__init__(message)


class HTTPError(Exception):
    """Raised by _http_request for HTTP errors that callers want to handle."""

    def __init__(self, code, reason, body, headers=None):
        self.code = code
        self.reason = reason
        self.body = body
        self.headers = headers or {}
