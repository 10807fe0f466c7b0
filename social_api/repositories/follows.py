from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from social_api.models import Follow
from social_api.repositories.base import Repository

FOLLOW_RELATIONS = (selectinload(Follow.follower), selectinload(Follow.following))


class FollowRepository(Repository[Follow]):
    model = Follow

    async def find_pair(self, follower_id: UUID, following_id: UUID) -> Optional[Follow]:
        result = await self.db.execute(
            select(Follow).where(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id,
            )
        )
        return result.scalar_one_or_none()

    async def following_ids(self, follower_id: UUID) -> List[UUID]:
        """Ids of the users `follower_id` follows."""
        result = await self.db.execute(
            select(Follow.following_id).where(Follow.follower_id == follower_id)
        )
        return list(result.scalars().all())

    async def follower_ids(self, following_id: UUID) -> List[UUID]:
        """Ids of the users following `following_id`."""
        result = await self.db.execute(
            select(Follow.follower_id).where(Follow.following_id == following_id)
        )
        return list(result.scalars().all())
