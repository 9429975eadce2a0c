"""
Paste store: creates pastes and serves them under the expiry rules.
"""
import logging
import secrets
from typing import Callable, Optional

from pastebin import policy
from pastebin.clock import Clock, SystemClock
from pastebin.database import Storage
from pastebin.errors import NotFound, StorageError, ValidationError
from pastebin.models import FetchedPaste, Paste

logger = logging.getLogger(__name__)

PASTE_ID_BYTES = 6  # 8 URL-safe characters


def generate_paste_id() -> str:
    """Opaque, URL-safe paste identifier."""
    return secrets.token_urlsafe(PASTE_ID_BYTES)


def _validate_limit(name: str, value) -> None:
    # bool is an int subclass but never a valid count
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer")
    if value < 1:
        raise ValidationError(f"{name} must be >= 1")


class PasteStore:
    """Paste lifecycle on top of a storage backend and a clock."""

    def __init__(
        self,
        storage: Storage,
        clock: Optional[Clock] = None,
        id_generator: Callable[[], str] = generate_paste_id,
    ):
        self.storage = storage
        self.clock = clock or SystemClock()
        self.id_generator = id_generator

    def create(
        self,
        content: str,
        ttl_seconds: Optional[int] = None,
        max_views: Optional[int] = None,
    ) -> str:
        """
        Create a new paste.

        Args:
            content: Text content, stored exactly as given
            ttl_seconds: Optional time-to-live in seconds
            max_views: Optional maximum view count

        Returns:
            The new paste ID

        Raises:
            ValidationError: If any input is invalid
            StorageError: If the paste could not be persisted
        """
        if not isinstance(content, str) or not content.strip():
            raise ValidationError("content is required and must be non-empty")
        _validate_limit("ttl_seconds", ttl_seconds)
        _validate_limit("max_views", max_views)

        now_ms = self.clock.now_ms()
        if ttl_seconds is not None and now_ms + ttl_seconds * 1000 > policy.MAX_EXPIRES_AT_MS:
            raise ValidationError("ttl_seconds is too large")

        try:
            paste_id = self.id_generator()
        except Exception as e:
            raise StorageError("Failed to generate paste id") from e

        paste = Paste(
            id=paste_id,
            content=content,
            created_at=now_ms,
            ttl_seconds=ttl_seconds,
            max_views=max_views,
            views=0,
        )
        self.storage.insert(paste)
        logger.info(f"Paste {paste_id} saved successfully")
        return paste_id

    def fetch(self, paste_id: str) -> FetchedPaste:
        """
        Fetch a paste, counting one view.

        The final permitted view still returns content, with remaining_views == 0.

        Raises:
            NotFound: If the paste is absent, expired, or out of views
            StorageError: If storage is unavailable
        """
        paste = self.storage.claim_view(paste_id, self.clock.now_ms())
        if paste is None:
            logger.debug(f"Paste {paste_id} not found or no longer accessible")
            raise NotFound()

        return FetchedPaste(
            content=paste.content,
            remaining_views=policy.remaining_views(paste),
            expires_at=policy.expires_at(paste),
        )

    def is_healthy(self) -> bool:
        """Check if storage is reachable."""
        try:
            return self.storage.ping()
        except Exception as e:
            logger.error(f"Health check failed: {e}")
        return False
