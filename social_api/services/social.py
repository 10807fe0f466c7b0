import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.exceptions import BadRequest, Conflict, NotFound, raise_for_integrity_error
from social_api.models import ActivityType, Follow, Like
from social_api.repositories import FOLLOW_RELATIONS, LIKE_RELATIONS, FollowRepository, LikeRepository
from social_api.schemas import FollowCreate, LikeCreate
from social_api.services.activities import ActivityService
from social_api.services.cache import FeedCache

logger = logging.getLogger(__name__)

ALREADY_FOLLOWING = "Already following this user"
ALREADY_LIKED = "Post already liked by this user"


class FollowService:
    """Social graph: follow and unfollow, each logged as an activity."""

    def __init__(self, db: AsyncSession, cache: Optional[FeedCache] = None):
        self.db = db
        self.cache = cache
        self.follows = FollowRepository(db)
        self.activities = ActivityService(db)

    async def list_follows(self, limit: int, offset: int) -> Tuple[List[Follow], int]:
        return await self.follows.list(limit=limit, offset=offset, options=FOLLOW_RELATIONS)

    async def get_follow(self, follow_id: UUID) -> Follow:
        follow = await self.follows.get(follow_id, options=FOLLOW_RELATIONS)
        if not follow:
            raise NotFound("Follow not found")
        return follow

    async def follow(self, data: FollowCreate) -> Follow:
        """Create a follow and its USER_FOLLOWED activity atomically."""
        if data.follower_id == data.following_id:
            raise BadRequest("Users cannot follow themselves")

        if await self.follows.find_pair(data.follower_id, data.following_id):
            raise Conflict(ALREADY_FOLLOWING)

        try:
            follow = await self.follows.create(
                follower_id=data.follower_id,
                following_id=data.following_id,
            )
            await self.activities.record(
                user_id=data.follower_id,
                activity_type=ActivityType.USER_FOLLOWED,
                target_id=data.following_id,
                metadata={"followId": str(follow.id)},
            )
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise_for_integrity_error(
                exc,
                not_found="Follower or Following user not found",
                conflict=ALREADY_FOLLOWING,
            )

        logger.info(f"User {data.follower_id} followed {data.following_id}")
        if self.cache:
            await self.cache.invalidate([data.follower_id])
        return await self.get_follow(follow.id)

    async def unfollow(self, follow_id: UUID) -> None:
        """
        Remove a follow. The USER_UNFOLLOWED activity is written before the
        follow row is deleted, both in one transaction.
        """
        follow = await self.follows.get(follow_id)
        if not follow:
            raise NotFound("Follow not found")

        await self.activities.record(
            user_id=follow.follower_id,
            activity_type=ActivityType.USER_UNFOLLOWED,
            target_id=follow.following_id,
            metadata={"followId": str(follow_id)},
        )
        affected = await self.follows.delete(follow_id)
        if affected == 0:
            # Removed by a concurrent unfollow since the lookup above
            await self.db.rollback()
            raise NotFound("Follow not found")
        await self.db.commit()

        logger.info(f"User {follow.follower_id} unfollowed {follow.following_id}")
        if self.cache:
            await self.cache.invalidate([follow.follower_id])


class LikeService:
    """Post likes, each logged as a POST_LIKED activity."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.likes = LikeRepository(db)
        self.activities = ActivityService(db)

    async def list_likes(self, limit: int, offset: int) -> Tuple[List[Like], int]:
        return await self.likes.list(limit=limit, offset=offset, options=LIKE_RELATIONS)

    async def get_like(self, like_id: UUID) -> Like:
        like = await self.likes.get(like_id, options=LIKE_RELATIONS)
        if not like:
            raise NotFound("Like not found")
        return like

    async def like(self, data: LikeCreate) -> Like:
        """Create a like and its POST_LIKED activity atomically."""
        if await self.likes.find_pair(data.user_id, data.post_id):
            raise Conflict(ALREADY_LIKED)

        try:
            like = await self.likes.create(user_id=data.user_id, post_id=data.post_id)
            await self.activities.record(
                user_id=data.user_id,
                activity_type=ActivityType.POST_LIKED,
                target_id=data.post_id,
                metadata={"likeId": str(like.id)},
            )
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise_for_integrity_error(exc, not_found="User or Post not found", conflict=ALREADY_LIKED)

        logger.info(f"User {data.user_id} liked post {data.post_id}")
        return await self.get_like(like.id)

    async def unlike(self, like_id: UUID) -> None:
        affected = await self.likes.delete(like_id)
        if affected == 0:
            raise NotFound("Like not found")
        await self.db.commit()
