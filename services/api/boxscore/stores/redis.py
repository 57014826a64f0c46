"""Redis store for game records.

Alternate backend (STORE_BACKEND=redis). Each game is one JSON document:

    game:{src_id} -> {"src_id": ..., "league": ..., "updated_at": ..., <attributes>}

No TTL is set: staleness is decided by the freshness policy from `updated_at`,
not by key expiry.
"""

from datetime import datetime, timezone
import json
import logging
from collections.abc import Callable

from pydantic import ValidationError
import redis.asyncio as redis
from redis.exceptions import RedisError

from boxscore.schemas.games import GameRecord
from boxscore.settings import Settings
from boxscore.stores.base import StoreReadError, StoreWriteError

PREFIX_GAME = "game:"
SCAN_BATCH = 500

logger = logging.getLogger("uvicorn.error")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_redis(settings: Settings) -> redis.Redis:
    """Create the shared Redis client (connection pool)."""
    return redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )


def game_key(src_id: str) -> str:
    return f"{PREFIX_GAME}{src_id}"


class RedisGameStore:
    """GameStore over a shared Redis client."""

    def __init__(self, client: redis.Redis, clock: Callable[[], datetime] = _utcnow):
        self._redis = client
        self._clock = clock

    async def ping(self) -> None:
        """Validate connectivity early (especially for `rediss://` in production)."""
        await self._redis.ping()
        logger.info("Redis connected")

    async def get(self, src_id: str) -> GameRecord | None:
        try:
            value = await self._redis.get(game_key(src_id))
        except (RedisError, OSError) as e:
            raise StoreReadError(f"Failed to read game {src_id}: {e}") from e
        if not value:
            return None
        try:
            return GameRecord.model_validate_json(value)
        except ValidationError as e:
            raise StoreReadError(f"Stored game {src_id} is invalid: {e}") from e

    async def upsert(self, record: GameRecord) -> GameRecord:
        stored = record.model_copy(update={"updated_at": self._clock()})
        payload = json.dumps(stored.model_dump(mode="json"))
        try:
            await self._redis.set(game_key(record.src_id), payload)
        except (RedisError, OSError) as e:
            raise StoreWriteError(f"Failed to upsert game {record.src_id}: {e}") from e
        return stored

    async def clear(self) -> int:
        deleted = 0
        try:
            keys: list[str] = []
            async for key in self._redis.scan_iter(match=f"{PREFIX_GAME}*", count=SCAN_BATCH):
                keys.append(key)
                if len(keys) >= SCAN_BATCH:
                    deleted += await self._redis.delete(*keys)
                    keys = []
            if keys:
                deleted += await self._redis.delete(*keys)
        except (RedisError, OSError) as e:
            raise StoreWriteError(f"Failed to clear games: {e}") from e
        logger.info(f"Cleared {deleted} games from Redis")
        return deleted

    async def close(self) -> None:
        await self._redis.aclose()
