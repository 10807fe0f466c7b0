from typing import Optional

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.config import get_settings
from social_api.database import get_db, get_redis
from social_api.services.activities import ActivityService
from social_api.services.cache import FeedCache
from social_api.services.feed import FeedService
from social_api.services.hashtags import HashtagService
from social_api.services.posts import PostService
from social_api.services.social import FollowService, LikeService
from social_api.services.users import UserService

settings = get_settings()


class Pagination:
    """limit/offset query parameters shared by every list endpoint."""

    def __init__(
        self,
        limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
        offset: int = Query(0, ge=0),
    ):
        self.limit = limit
        self.offset = offset


async def get_feed_cache() -> Optional[FeedCache]:
    """Feed cache when Redis is configured, otherwise None."""
    redis_client = get_redis()
    if redis_client is None:
        return None
    return FeedCache(redis_client, settings.FEED_CACHE_TTL)


async def get_user_service(
    db: AsyncSession = Depends(get_db),
    cache: Optional[FeedCache] = Depends(get_feed_cache),
) -> UserService:
    """Dependency for UserService."""
    return UserService(db, cache)


async def get_post_service(
    db: AsyncSession = Depends(get_db),
    cache: Optional[FeedCache] = Depends(get_feed_cache),
) -> PostService:
    """Dependency for PostService."""
    return PostService(db, cache)


async def get_feed_service(
    db: AsyncSession = Depends(get_db),
    cache: Optional[FeedCache] = Depends(get_feed_cache),
) -> FeedService:
    """Dependency for FeedService."""
    return FeedService(db, cache)


async def get_follow_service(
    db: AsyncSession = Depends(get_db),
    cache: Optional[FeedCache] = Depends(get_feed_cache),
) -> FollowService:
    """Dependency for FollowService."""
    return FollowService(db, cache)


async def get_like_service(db: AsyncSession = Depends(get_db)) -> LikeService:
    """Dependency for LikeService."""
    return LikeService(db)


async def get_hashtag_service(
    db: AsyncSession = Depends(get_db),
    cache: Optional[FeedCache] = Depends(get_feed_cache),
) -> HashtagService:
    """Dependency for HashtagService."""
    return HashtagService(db, cache)


async def get_activity_service(db: AsyncSession = Depends(get_db)) -> ActivityService:
    """Dependency for ActivityService."""
    return ActivityService(db)
