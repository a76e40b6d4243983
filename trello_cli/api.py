"""
HTTP request layer and security helpers for trello-cli.

TrelloApi is the generic fetch capability the client and resolvers sit on:
GET/PUT/POST/DELETE returning parsed JSON, or raising FetchError/SetupError.
"""

import hashlib
import json
import re
import sys
import time
import urllib.error
import urllib.parse
import urllib.request
import uuid

from trello_cli import config
from trello_cli.exceptions import CliError, FetchError, HTTPError, SetupError

_RETRYABLE_HTTP_CODES = frozenset({429, 502, 503, 504})

_SECRET_QUERY_KEYS = frozenset({"key", "token"})


# ---------------------------------------------------------------------------
# Security helpers
# ---------------------------------------------------------------------------


def _mask_token(token):
    """Show only first 6 chars of a token for safe logging."""
    return token[:6] + "..." if len(token) > 6 else token


def _sanitize_error(body, max_len=500):
    """Truncate and clean error body for safe display."""
    if not body:
        return ""
    cleaned = re.sub(r"<[^>]+>", "", body)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if len(cleaned) > max_len:
        return cleaned[:max_len] + "... [truncated]"
    return cleaned


def _try_call(fn, *args, **kwargs):
    """Call a function that might raise CliError, returning None on failure."""
    try:
        return fn(*args, **kwargs)
    except CliError:
        return None


def warn(message):
    """Print a [WARN] line to stderr unless --quiet."""
    if config.RUNTIME_QUIET:
        return
    print(f"[WARN] {message}", file=sys.stderr)


# ---------------------------------------------------------------------------
# HTTP request layer
# ---------------------------------------------------------------------------


def _sanitize_url_for_log(url):
    """Mask key/token query params in URLs before logging."""
    parsed = urllib.parse.urlsplit(url)
    if not parsed.query:
        return url
    pairs = urllib.parse.parse_qsl(parsed.query, keep_blank_values=True)
    masked = []
    for key, value in pairs:
        if key.lower() in _SECRET_QUERY_KEYS:
            masked.append((key, "***"))
        else:
            masked.append((key, value))
    safe_query = urllib.parse.urlencode(masked, doseq=True)
    return urllib.parse.urlunsplit(
        (parsed.scheme, parsed.netloc, parsed.path, safe_query, parsed.fragment)
    )


def _log_http_event(**fields):
    """Emit structured HTTP logs to stderr when enabled."""
    if not config.HTTP_LOG_ENABLED:
        return
    print("[HTTP] " + json.dumps(fields, ensure_ascii=False, sort_keys=True), file=sys.stderr)


def _is_sampled_request(request_id):
    """Decide if a request should be logged based on sample rate."""
    rate = config.HTTP_LOG_SAMPLE_RATE
    if rate <= 0:
        return False
    if rate >= 1:
        return True
    if not request_id:
        return False
    digest = hashlib.sha256(request_id.encode("utf-8")).digest()
    bucket = int.from_bytes(digest[:4], "big") / 4294967295.0
    return bucket < rate


def _error_envelope(message, status=None, request_id=None, retryable=None, detail=None):
    """Build a consistent CLI-safe HTTP error message."""
    meta = []
    if status is not None:
        meta.append(f"status={status}")
    if request_id:
        meta.append(f"request_id={request_id}")
    if retryable is not None:
        meta.append(f"retryable={'yes' if retryable else 'no'}")
    suffix = f" ({', '.join(meta)})" if meta else ""
    body = f"[ERROR] {message}{suffix}"
    if detail:
        body += f"\n{detail}"
    return body


def _parse_retry_after(headers):
    """Return Retry-After seconds from response headers, or None."""
    if not headers:
        return None
    value = headers.get("Retry-After")
    if value is None:
        return None
    try:
        secs = int(str(value).strip())
    except ValueError:
        return None
    return max(0, secs)


def _decode_body(raw, content_type):
    """Parse a response body; None when it is empty."""
    if len(raw) > config.HTTP_MAX_RESPONSE_BYTES:
        raise FetchError(
            "[ERROR] Response too large from Trello API "
            f"(>{config.HTTP_MAX_RESPONSE_BYTES} bytes)."
        )
    if not raw.strip():
        return None
    try:
        return json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        if content_type and "json" not in content_type.lower():
            raise FetchError(
                f"[ERROR] Unexpected Content-Type from server ({content_type}). "
                "This may be a proxy or network issue."
            ) from None
        raise FetchError("[ERROR] Unexpected response from Trello API (not valid JSON).") from None


def _http_request(url, data=None, headers=None, method="GET", idempotent=False):
    """Make an HTTP request with standard error handling.
    Returns parsed JSON on success (None for an empty body).
    Raises HTTPError for HTTP errors (caller handles specific codes).
    Raises FetchError on network/timeout/parse errors.

    Idempotent requests are retried on 429/5xx and network errors; every
    other outcome of the last attempt returns or raises inside the loop.
    """
    body = json.dumps(data).encode("utf-8") if data is not None else None
    headers = headers or {}
    request_id = headers.get("X-Request-Id")
    sampled = _is_sampled_request(request_id)
    safe_url = _sanitize_url_for_log(url)
    max_attempts = 1 + (max(0, config.HTTP_MAX_RETRIES) if idempotent else 0)
    timeout = max(1, config.HTTP_TIMEOUT_SECONDS)

    def log(phase, attempt, **fields):
        if sampled:
            _log_http_event(
                phase=phase,
                method=method,
                url=safe_url,
                attempt=attempt + 1,
                request_id=request_id,
                **fields,
            )

    for attempt in range(max_attempts):
        last = attempt == max_attempts - 1
        start = time.perf_counter()
        log("request", attempt, max_attempts=max_attempts, timeout_seconds=timeout)
        req = urllib.request.Request(url, data=body, headers=headers, method=method)
        try:
            with urllib.request.urlopen(req, timeout=timeout) as resp:
                content_type = resp.headers.get("Content-Type", "")
                raw = resp.read(config.HTTP_MAX_RESPONSE_BYTES + 1)
                log(
                    "response",
                    attempt,
                    status=getattr(resp, "status", 200),
                    content_type=content_type,
                    bytes=len(raw),
                    latency_ms=round((time.perf_counter() - start) * 1000, 2),
                )
                return _decode_body(raw, content_type)
        except urllib.error.HTTPError as e:
            will_retry = e.code in _RETRYABLE_HTTP_CODES and not last
            log(
                "response",
                attempt,
                status=e.code,
                will_retry=will_retry,
                latency_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            if not will_retry:
                limit = config.HTTP_MAX_RESPONSE_BYTES
                error_body = e.read(limit).decode("utf-8", errors="replace") if e.fp else ""
                raise HTTPError(e.code, e.reason, error_body, headers=e.headers) from e
            delay = _parse_retry_after(getattr(e, "headers", None))
        except (TimeoutError, urllib.error.URLError) as e:
            if isinstance(e, TimeoutError):
                message = f"Request timed out after {timeout} seconds. Is Trello API reachable?"
            else:
                message = f"Connection failed: {e.reason}"
            log("network_error", attempt, error=message, will_retry=not last)
            if last:
                raise FetchError(
                    _error_envelope(message, request_id=request_id, retryable=False)
                ) from e
            delay = None
        if delay is None:
            delay = config.HTTP_RETRY_BASE_SECONDS * (2**attempt)
        time.sleep(delay)


# ---------------------------------------------------------------------------
# Authenticated accessor
# ---------------------------------------------------------------------------


class TrelloApi:
    """Key/token authenticated access to the Trello REST API."""

    def __init__(self, credentials, base_url=None):
        self.api_key = credentials.api_key
        self.api_token = credentials.api_token
        self.base_url = base_url or config.BASE_URL

    def build_url(self, path):
        return f"{self.base_url}{path}"

    def add_auth(self, url):
        separator = "&" if "?" in url else "?"
        key = urllib.parse.quote(self.api_key, safe="")
        token = urllib.parse.quote(self.api_token, safe="")
        return f"{url}{separator}key={key}&token={token}"

    def request(self, method, path, body=None):
        url = self.add_auth(self.build_url(path))
        headers = {
            "Accept": "application/json",
            "X-Request-Id": str(uuid.uuid4()),
        }
        if body is not None:
            headers["Content-Type"] = "application/json"
        try:
            return _http_request(url, body, headers, method, idempotent=method == "GET")
        except HTTPError as e:
            if e.code == 401:
                raise SetupError(
                    "[SETUP_NEEDED] Trello rejected the API key/token "
                    f"(key {_mask_token(self.api_key)}). Run: trello setup"
                ) from e
            if e.code == 429:
                raise FetchError(
                    "[ERROR] Rate limit reached (Trello allows ~100 req/10s per token). "
                    "Wait a few seconds and retry."
                ) from e
            server_req_id = e.headers.get("X-Request-Id") if e.headers else None
            raise FetchError(
                _error_envelope(
                    f"API request failed: {method} {path}: HTTP {e.code}: {e.reason}",
                    status=e.code,
                    request_id=server_req_id,
                    retryable=e.code in _RETRYABLE_HTTP_CODES,
                    detail=_sanitize_error(e.body),
                )
            ) from e

    def get(self, path):
        return self.request("GET", path)

    def put(self, path, body):
        return self.request("PUT", path, body)

    def post(self, path, body):
        return self.request("POST", path, body)

    def delete(self, path):
        self.request("DELETE", path)
