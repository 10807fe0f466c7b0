from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from social_api.repositories import FollowRepository, HashtagRepository, PostRepository
from social_api.schemas import FeedPage, FeedPostResponse, HashtagPostPage, normalize_hashtag
from social_api.services.cache import FeedCache


class FeedService:
    """
    Read-side timelines.

    Pull-based approach (fan-out-on-read):
    1. Get all users this user follows
    2. Query their posts, newest first, paginated in the database
    3. Denormalize author, hashtags and like count per post
    """

    def __init__(self, db: AsyncSession, cache: Optional[FeedCache] = None):
        self.db = db
        self.cache = cache
        self.posts = PostRepository(db)
        self.follows = FollowRepository(db)
        self.hashtags = HashtagRepository(db)

    async def get_feed(self, user_id: UUID, limit: int, offset: int) -> FeedPage:
        if self.cache:
            cached = await self.cache.get_page(user_id, limit, offset)
            if cached is not None:
                return cached

        following_ids = await self.follows.following_ids(user_id)
        if not following_ids:
            return FeedPage(posts=[], total=0, limit=limit, offset=offset)

        posts, total = await self.posts.by_authors(following_ids, limit=limit, offset=offset)
        page = FeedPage(
            posts=[FeedPostResponse.model_validate(post) for post in posts],
            total=total,
            limit=limit,
            offset=offset,
        )

        if self.cache:
            await self.cache.set_page(user_id, page)
        return page

    async def get_by_hashtag(self, tag: str, limit: int, offset: int) -> HashtagPostPage:
        """Posts carrying `tag`; an unknown tag yields an empty page rather than an error."""
        name = normalize_hashtag(tag)
        hashtag = await self.hashtags.get_by_name(name) if name else None
        if hashtag is None:
            return HashtagPostPage(posts=[], total=0, limit=limit, offset=offset, hashtag=name)

        posts, total = await self.posts.by_hashtag(hashtag.id, limit=limit, offset=offset)
        return HashtagPostPage(
            posts=[FeedPostResponse.model_validate(post) for post in posts],
            total=total,
            limit=limit,
            offset=offset,
            hashtag=name,
        )
