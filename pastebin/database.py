"""
Storage layer for pastes: Redis with an in-memory fallback for development.
Handles paste inserts, raw reads, atomic view claiming, and health checks.
"""
import logging
import threading
from typing import Any, Dict, List, Optional, Protocol
from redis import Redis
from redis.exceptions import ConnectionError, RedisError

from pastebin import policy
from pastebin.config import Settings
from pastebin.errors import StorageError
from pastebin.models import Paste

logger = logging.getLogger(__name__)


class Storage(Protocol):
    """Row store the paste store runs on."""

    def insert(self, paste: Paste) -> None:
        ...

    def get(self, paste_id: str) -> Optional[Paste]:
        ...

    def claim_view(self, paste_id: str, now_ms: int) -> Optional[Paste]:
        """Atomically count one view if the paste is accessible at now_ms."""
        ...

    def ping(self) -> bool:
        ...


# KEYS[1] = paste key, ARGV[1] = ttl seconds (0 for none), ARGV[2..] = field/value pairs
INSERT_SCRIPT = """
local unpack = unpack or table.unpack
if redis.call('EXISTS', KEYS[1]) == 1 then
    return 0
end
redis.call('HSET', KEYS[1], unpack(ARGV, 2))
local ttl = tonumber(ARGV[1])
if ttl > 0 then
    redis.call('EXPIRE', KEYS[1], ttl)
end
return 1
"""

# KEYS[1] = paste key, ARGV[1] = now (ms).
# Same rules as pastebin.policy.is_accessible, checked on the pre-increment row.
CLAIM_VIEW_SCRIPT = """
local raw = redis.call('HGETALL', KEYS[1])
if #raw == 0 then
    return nil
end
local row = {}
for i = 1, #raw, 2 do
    row[raw[i]] = raw[i + 1]
end
local now = tonumber(ARGV[1])
if row['ttl_seconds'] and now >= tonumber(row['created_at']) + tonumber(row['ttl_seconds']) * 1000 then
    return nil
end
if row['max_views'] and tonumber(row['views']) >= tonumber(row['max_views']) then
    return nil
end
local views = redis.call('HINCRBY', KEYS[1], 'views', 1)
return {row['content'], row['created_at'], row['ttl_seconds'] or '', row['max_views'] or '', tostring(views)}
"""


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


class InMemoryStore:
    """Simple in-memory store for development/testing (when Redis unavailable)."""

    def __init__(self):
        self.store: Dict[str, Paste] = {}
        self._locks: Dict[str, threading.Lock] = {}
        # Guards creation of rows and their locks, never a read-modify-write
        self._registry_lock = threading.Lock()

    def insert(self, paste: Paste) -> None:
        with self._registry_lock:
            if paste.id in self.store:
                raise StorageError(f"Paste id collision: {paste.id}")
            self._locks[paste.id] = threading.Lock()
            self.store[paste.id] = paste

    def get(self, paste_id: str) -> Optional[Paste]:
        return self.store.get(paste_id)

    def claim_view(self, paste_id: str, now_ms: int) -> Optional[Paste]:
        lock = self._locks.get(paste_id)
        if lock is None:
            return None

        with lock:
            paste = self.store[paste_id]
            if not policy.is_accessible(paste, now_ms):
                return None
            claimed = paste.model_copy(update={"views": paste.views + 1})
            self.store[paste_id] = claimed
            return claimed

    def ping(self) -> bool:
        """Health check."""
        return True


class RedisStorage:
    """Pastes stored as Redis hashes, one key per paste."""

    def __init__(self, redis: Redis, key_prefix: str = "paste:"):
        self.redis = redis
        self.key_prefix = key_prefix
        self._insert = redis.register_script(INSERT_SCRIPT)
        self._claim_view = redis.register_script(CLAIM_VIEW_SCRIPT)

    def _key(self, paste_id: str) -> str:
        return f"{self.key_prefix}{paste_id}"

    def insert(self, paste: Paste) -> None:
        """
        Save a paste. Fails if the id is already taken.

        Args:
            paste: New paste row (views == 0)

        Raises:
            StorageError: On id collision or Redis failure
        """
        fields: List[Any] = [
            "content", paste.content,
            "created_at", paste.created_at,
            "views", paste.views,
        ]
        if paste.ttl_seconds is not None:
            fields += ["ttl_seconds", paste.ttl_seconds]
        if paste.max_views is not None:
            fields += ["max_views", paste.max_views]

        try:
            created = self._insert(
                keys=[self._key(paste.id)],
                args=[paste.ttl_seconds or 0, *fields],
            )
        except RedisError as e:
            logger.error(f"Error saving paste {paste.id}: {e}")
            raise StorageError("Failed to save paste") from e

        if not created:
            raise StorageError(f"Paste id collision: {paste.id}")

    def get(self, paste_id: str) -> Optional[Paste]:
        try:
            data = self.redis.hgetall(self._key(paste_id))
        except RedisError as e:
            logger.error(f"Error fetching paste {paste_id}: {e}")
            raise StorageError("Failed to fetch paste") from e

        if not data:
            return None

        return Paste(
            id=paste_id,
            content=data["content"],
            created_at=int(data["created_at"]),
            ttl_seconds=_optional_int(data.get("ttl_seconds")),
            max_views=_optional_int(data.get("max_views")),
            views=int(data.get("views", 0)),
        )

    def claim_view(self, paste_id: str, now_ms: int) -> Optional[Paste]:
        """
        Count one view if the paste is still accessible (atomic).

        Args:
            paste_id: Unique paste identifier
            now_ms: Current time in ms, used for the TTL check

        Returns:
            The row after the increment, or None if absent/expired/exhausted
        """
        try:
            result = self._claim_view(keys=[self._key(paste_id)], args=[now_ms])
        except RedisError as e:
            logger.error(f"Error claiming view for {paste_id}: {e}")
            raise StorageError("Failed to fetch paste") from e

        if result is None:
            return None

        content, created_at, ttl_seconds, max_views, views = result
        return Paste(
            id=paste_id,
            content=content,
            created_at=int(created_at),
            ttl_seconds=_optional_int(ttl_seconds),
            max_views=_optional_int(max_views),
            views=int(views),
        )

    def ping(self) -> bool:
        return bool(self.redis.ping())


def connect_storage(settings: Settings) -> Storage:
    """Build the configured storage backend, falling back to memory if Redis is down."""
    if settings.STORAGE_BACKEND == "memory":
        logger.info("Using in-memory storage (STORAGE_BACKEND=memory)")
        return InMemoryStore()

    try:
        logger.info(f"Attempting to connect to Redis: {settings.REDIS_URL[:30]}...")
        redis = Redis.from_url(settings.REDIS_URL, decode_responses=True)
        redis.ping()
        logger.info("Redis connected successfully")
        return RedisStorage(redis, key_prefix=settings.REDIS_KEY_PREFIX)
    except ConnectionError as e:
        logger.error(f"ConnectionError connecting to Redis: {type(e).__name__}: {e}")
    except Exception as e:
        logger.error(f"Unexpected error connecting to Redis: {type(e).__name__}: {e}")

    logger.warning("Using in-memory fallback for development. Data will NOT persist across restarts.")
    return InMemoryStore()
