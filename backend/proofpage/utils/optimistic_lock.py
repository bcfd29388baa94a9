from datetime import datetime, timezone
from flask import request, abort
from dateutil.parser import parse, ParserError

LOCK_HEADER = "If-Unmodified-Since"


def as_utc(ts: datetime) -> datetime:
    """Naive timestamps (SQLite) are stored as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _client_timestamp(raw):
    try:
        return as_utc(parse(raw))
    except (ParserError, OverflowError, ValueError):
        abort(400, description=f"Invalid {LOCK_HEADER} header")


def enforce_optimistic_lock(page):
    """
    Reject a page write when the page changed after the client loaded it.

    The client echoes the page's `updated_at` (ISO 8601) or an HTTP date.
    HTTP dates only carry whole seconds, so a second-precision header is
    compared against the server time truncated to the second.
    """
    raw = request.headers.get(LOCK_HEADER)
    if not raw or page.updated_at is None:
        return

    client_ts = _client_timestamp(raw)
    server_ts = as_utc(page.updated_at)

    if client_ts.microsecond == 0:
        server_ts = server_ts.replace(microsecond=0)

    if server_ts > client_ts:
        abort(409, description="This page was changed elsewhere. Reload and try again.")
