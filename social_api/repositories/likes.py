from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from social_api.models import Like
from social_api.repositories.base import Repository

LIKE_RELATIONS = (selectinload(Like.user), selectinload(Like.post))


class LikeRepository(Repository[Like]):
    model = Like

    async def find_pair(self, user_id: UUID, post_id: UUID) -> Optional[Like]:
        result = await self.db.execute(
            select(Like).where(Like.user_id == user_id, Like.post_id == post_id)
        )
        return result.scalar_one_or_none()
