import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.config import get_settings
from social_api.exceptions import NotFound, raise_for_integrity_error
from social_api.models import ActivityType, Post
from social_api.repositories import POST_RELATIONS, FollowRepository, PostRepository
from social_api.schemas import PostCreate, PostUpdate
from social_api.services.activities import ActivityService
from social_api.services.cache import FeedCache
from social_api.services.hashtags import HashtagService

settings = get_settings()
logger = logging.getLogger(__name__)


class PostService:
    """
    Post CRUD.

    Creating a post resolves its hashtags and records a POST_CREATED
    activity in the same transaction as the post itself.
    """

    def __init__(self, db: AsyncSession, cache: Optional[FeedCache] = None):
        self.db = db
        self.cache = cache
        self.posts = PostRepository(db)
        self.follows = FollowRepository(db)
        self.hashtags = HashtagService(db)
        self.activities = ActivityService(db)

    async def list_posts(self, limit: int, offset: int) -> Tuple[List[Post], int]:
        return await self.posts.list(limit=limit, offset=offset, options=POST_RELATIONS)

    async def get_post(self, post_id: UUID) -> Post:
        post = await self.posts.get(post_id, options=POST_RELATIONS)
        if not post:
            raise NotFound("Post not found")
        return post

    async def create_post(self, data: PostCreate) -> Post:
        try:
            hashtags = await self.hashtags.resolve(data.hashtags or [])
            post = await self.posts.create(
                content=data.content,
                author_id=data.author_id,
                hashtags=hashtags,
            )
            await self.activities.record(
                user_id=data.author_id,
                activity_type=ActivityType.POST_CREATED,
                target_id=post.id,
                metadata={"content": data.content[:settings.ACTIVITY_PREVIEW_LENGTH]},
            )
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise_for_integrity_error(exc, not_found="Author not found")

        logger.info(f"Created post {post.id} by {data.author_id} with {len(hashtags)} hashtags")
        await self._invalidate_follower_feeds(data.author_id)
        return await self.get_post(post.id)

    async def update_post(self, post_id: UUID, data: PostUpdate) -> Post:
        post = await self.get_post(post_id)
        await self.posts.update(post, **data.model_dump(exclude_unset=True))
        await self.db.commit()

        await self._invalidate_follower_feeds(post.author_id)
        return await self.get_post(post_id)

    async def delete_post(self, post_id: UUID) -> None:
        """Delete a post; likes and hashtag links go with it."""
        author_id = await self.posts.get_author_id(post_id)
        if author_id is None:
            raise NotFound("Post not found")

        await self.posts.delete(post_id)
        await self.db.commit()
        logger.info(f"Deleted post {post_id}")

        await self._invalidate_follower_feeds(author_id)

    async def _invalidate_follower_feeds(self, author_id: UUID) -> None:
        if not self.cache:
            return
        follower_ids = await self.follows.follower_ids(author_id)
        await self.cache.invalidate(follower_ids)
