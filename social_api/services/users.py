import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.exceptions import NotFound, raise_for_integrity_error
from social_api.models import Follow, User
from social_api.repositories import FollowRepository, UserRepository
from social_api.schemas import UserCreate, UserUpdate
from social_api.services.cache import FeedCache

logger = logging.getLogger(__name__)

DUPLICATE_USER = "Username or email already exists"


class UserService:
    """User CRUD and the follower/following views of a user."""

    def __init__(self, db: AsyncSession, cache: Optional[FeedCache] = None):
        self.db = db
        self.cache = cache
        self.users = UserRepository(db)
        self.follows = FollowRepository(db)

    async def list_users(self, limit: int, offset: int) -> Tuple[List[User], int]:
        return await self.users.list(limit=limit, offset=offset)

    async def get_user(self, user_id: UUID) -> User:
        user = await self.users.get(user_id)
        if not user:
            raise NotFound("User not found")
        return user

    async def create_user(self, data: UserCreate) -> User:
        try:
            user = await self.users.create(**data.model_dump())
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise_for_integrity_error(exc, conflict=DUPLICATE_USER)

        logger.info(f"Created user {user.id} ({user.username})")
        return user

    async def update_user(self, user_id: UUID, data: UserUpdate) -> User:
        user = await self.get_user(user_id)
        try:
            await self.users.update(user, **data.model_dump(exclude_unset=True))
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise_for_integrity_error(exc, conflict=DUPLICATE_USER)

        return await self.get_user(user_id)

    async def delete_user(self, user_id: UUID) -> None:
        """Delete a user; the database cascades posts, likes, follows and activities."""
        follower_ids = await self.follows.follower_ids(user_id) if self.cache else []

        affected = await self.users.delete(user_id)
        if affected == 0:
            raise NotFound("User not found")
        await self.db.commit()
        logger.info(f"Deleted user {user_id}")

        if self.cache:
            await self.cache.invalidate([user_id, *follower_ids])

    async def get_followers(self, user_id: UUID, limit: int, offset: int) -> Tuple[List[dict], int]:
        """Users following `user_id`, each with the time the follow was made."""
        if not await self.users.exists(user_id):
            raise NotFound("User not found")

        follows, total = await self.users.follower_page(user_id, limit=limit, offset=offset)
        return [_with_followed_at(f.follower, f) for f in follows], total

    async def get_following(self, user_id: UUID, limit: int, offset: int) -> Tuple[List[dict], int]:
        """Users `user_id` follows, each with the time the follow was made."""
        if not await self.users.exists(user_id):
            raise NotFound("User not found")

        follows, total = await self.users.following_page(user_id, limit=limit, offset=offset)
        return [_with_followed_at(f.following, f) for f in follows], total


def _with_followed_at(user: User, follow: Follow) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "full_name": user.full_name,
        "bio": user.bio,
        "avatar_url": user.avatar_url,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
        "followed_at": follow.created_at,
    }
