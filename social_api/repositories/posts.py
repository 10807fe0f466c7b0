from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from social_api.models import Post, post_hashtags
from social_api.repositories.base import Repository

# Everything a post response needs; likes are only loaded to be counted
POST_RELATIONS = (
    selectinload(Post.author),
    selectinload(Post.hashtags),
    selectinload(Post.likes),
)


class PostRepository(Repository[Post]):
    model = Post

    async def get_author_id(self, post_id: UUID) -> Optional[UUID]:
        return await self.db.scalar(select(Post.author_id).where(Post.id == post_id))

    async def by_authors(
        self, author_ids: Sequence[UUID], limit: int, offset: int
    ) -> Tuple[List[Post], int]:
        """Posts written by any of `author_ids`, newest first."""
        return await self.list(
            Post.author_id.in_(author_ids),
            limit=limit,
            offset=offset,
            options=POST_RELATIONS,
        )

    async def by_hashtag(self, hashtag_id: UUID, limit: int, offset: int) -> Tuple[List[Post], int]:
        """Posts tagged with `hashtag_id`, paginated through the association table."""
        query = (
            select(Post)
            .join(post_hashtags, post_hashtags.c.post_id == Post.id)
            .where(post_hashtags.c.hashtag_id == hashtag_id)
        )
        return await self.paginate(query, limit=limit, offset=offset, options=POST_RELATIONS)
