import logging
from typing import Iterable, Optional
from uuid import UUID

import redis.asyncio as redis
from redis.exceptions import RedisError

from social_api.schemas import FeedPage

logger = logging.getLogger(__name__)


class FeedCache:
    """
    Short-lived Redis cache of rendered feed pages.

    Keys are ``feed:{user_id}:{limit}:{offset}``. Writers invalidate every
    page of an affected user; like counts may lag by up to the TTL.
    Redis failures are logged and treated as cache misses.
    """

    def __init__(self, redis_client: redis.Redis, ttl: int):
        self.redis = redis_client
        self.ttl = ttl

    @staticmethod
    def key(user_id: UUID, limit: int, offset: int) -> str:
        return f"feed:{user_id}:{limit}:{offset}"

    async def get_page(self, user_id: UUID, limit: int, offset: int) -> Optional[FeedPage]:
        try:
            data = await self.redis.get(self.key(user_id, limit, offset))
        except RedisError as exc:
            logger.warning(f"Feed cache read failed for user {user_id}: {exc}")
            return None

        if not data:
            return None
        return FeedPage.model_validate_json(data)

    async def set_page(self, user_id: UUID, page: FeedPage) -> None:
        try:
            await self.redis.setex(
                self.key(user_id, page.limit, page.offset),
                self.ttl,
                page.model_dump_json(by_alias=True),
            )
        except RedisError as exc:
            logger.warning(f"Feed cache write failed for user {user_id}: {exc}")

    async def invalidate(self, user_ids: Iterable[UUID]) -> None:
        """Drop every cached page of each user in `user_ids`."""
        try:
            for user_id in user_ids:
                await self._drop_matching(f"feed:{user_id}:*")
        except RedisError as exc:
            logger.warning(f"Feed cache invalidation failed: {exc}")

    async def invalidate_all(self) -> None:
        """Drop every cached feed page, e.g. after a hashtag is renamed or deleted."""
        try:
            await self._drop_matching("feed:*")
        except RedisError as exc:
            logger.warning(f"Feed cache invalidation failed: {exc}")

    async def _drop_matching(self, pattern: str) -> None:
        keys = [key async for key in self.redis.scan_iter(match=pattern, count=100)]
        if keys:
            await self.redis.delete(*keys)
