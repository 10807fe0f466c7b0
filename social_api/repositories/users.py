from typing import List, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from social_api.models import Follow, User
from social_api.repositories.base import Repository


class UserRepository(Repository[User]):
    model = User

    async def follower_page(self, user_id: UUID, limit: int, offset: int) -> Tuple[List[Follow], int]:
        """Follow rows pointing at `user_id`, newest first, with the follower loaded."""
        query = select(Follow).where(Follow.following_id == user_id)
        return await self.paginate(
            query,
            limit=limit,
            offset=offset,
            options=[selectinload(Follow.follower)],
            order_by=[Follow.created_at.desc()],
        )

    async def following_page(self, user_id: UUID, limit: int, offset: int) -> Tuple[List[Follow], int]:
        """Follow rows created by `user_id`, newest first, with the followed user loaded."""
        query = select(Follow).where(Follow.follower_id == user_id)
        return await self.paginate(
            query,
            limit=limit,
            offset=offset,
            options=[selectinload(Follow.following)],
            order_by=[Follow.created_at.desc()],
        )
