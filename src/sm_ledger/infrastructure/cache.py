"""Display balance cache (cache-aside, Redis).

  - Key: f"points:balance:{user_id}", short TTL
  - Read: check cache → ledger on miss → populate cache
  - Write: DB commit first, then invalidate

Only the balance *display* reads through here. Redemption always recomputes the
balance from the ledger under the per-user lock.

A reader that misses, then races a committing writer, can repopulate a stale
value after the writer's invalidate; the TTL bounds how long that lasts.
Redis being down degrades to uncached reads, it never fails the request.
"""

import logging
from collections.abc import Awaitable, Callable

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from config.settings import settings
from src.sm_common.redis_client import get_redis

logger = logging.getLogger(__name__)


class BalanceCache:
    def __init__(
        self,
        redis_factory: Callable[[], Awaitable[aioredis.Redis]] = get_redis,
        ttl_seconds: int | None = None,
    ) -> None:
        self._redis_factory = redis_factory
        self._ttl = ttl_seconds if ttl_seconds is not None else settings.BALANCE_CACHE_TTL_SECONDS

    @staticmethod
    def key(user_id: str) -> str:
        return f"points:balance:{user_id}"

    async def get(self, user_id: str) -> int | None:
        try:
            redis = await self._redis_factory()
            raw = await redis.get(self.key(user_id))
        except RedisError as exc:
            logger.warning("Balance cache read failed for %s: %s", user_id, exc)
            return None
        return int(raw) if raw is not None else None

    async def set(self, user_id: str, balance: int) -> None:
        try:
            redis = await self._redis_factory()
            await redis.set(self.key(user_id), balance, ex=self._ttl)
        except RedisError as exc:
            logger.warning("Balance cache write failed for %s: %s", user_id, exc)

    async def invalidate(self, user_id: str) -> None:
        try:
            redis = await self._redis_factory()
            await redis.delete(self.key(user_id))
        except RedisError as exc:
            logger.warning("Balance cache invalidate failed for %s: %s", user_id, exc)
