"""
Expiration and view-accounting rules.

Pure functions of a paste row and the current time; nothing here touches storage.
"""
from typing import Optional

from pastebin.models import Paste

# 9999-12-31T23:59:59.999Z, the last instant an ISO 8601 timestamp can show
MAX_EXPIRES_AT_MS = 253_402_300_799_999


def is_time_expired(paste: Paste, now_ms: int) -> bool:
    if paste.ttl_seconds is None:
        return False
    return now_ms >= paste.created_at + paste.ttl_seconds * 1000


def is_view_exhausted(paste: Paste) -> bool:
    if paste.max_views is None:
        return False
    return paste.views >= paste.max_views


def is_accessible(paste: Paste, now_ms: int) -> bool:
    """True if a fetch at ``now_ms`` may serve this paste.

    Must be evaluated on the row *before* its view is counted.
    """
    return not is_time_expired(paste, now_ms) and not is_view_exhausted(paste)


def expires_at(paste: Paste) -> Optional[int]:
    """Absolute expiry time in ms, or None for pastes without a TTL."""
    if paste.ttl_seconds is None:
        return None
    return paste.created_at + paste.ttl_seconds * 1000


def remaining_views(paste: Paste) -> Optional[int]:
    """Views left after the one just counted, or None if unlimited."""
    if paste.max_views is None:
        return None
    return max(paste.max_views - paste.views, 0)
