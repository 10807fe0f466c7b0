import logging
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.exceptions import NotFound, raise_for_integrity_error
from social_api.models import Hashtag
from social_api.repositories import HashtagRepository
from social_api.schemas import HashtagCreate, HashtagUpdate, normalize_hashtag
from social_api.services.cache import FeedCache

logger = logging.getLogger(__name__)


class HashtagService:
    """Hashtag CRUD and find-or-create resolution for posts."""

    def __init__(self, db: AsyncSession, cache: Optional[FeedCache] = None):
        self.db = db
        self.cache = cache
        self.hashtags = HashtagRepository(db)

    async def resolve(self, tags: Iterable[str]) -> List[Hashtag]:
        """
        Turn raw tag strings into hashtag rows, creating missing ones.
        Tags that normalize to the same name resolve to a single row.
        """
        names = list(dict.fromkeys(normalize_hashtag(tag) for tag in tags))

        hashtags = []
        for name in names:
            if not name:
                continue
            hashtag = await self.hashtags.get_by_name(name)
            if hashtag is None:
                hashtag = await self.hashtags.insert_if_absent(name)
                logger.debug(f"Resolved new hashtag '{name}'")
            hashtags.append(hashtag)
        return hashtags

    async def list_hashtags(self, limit: int, offset: int) -> Tuple[List[Hashtag], int]:
        return await self.hashtags.list(limit=limit, offset=offset)

    async def get_hashtag(self, hashtag_id: UUID) -> Hashtag:
        hashtag = await self.hashtags.get(hashtag_id)
        if not hashtag:
            raise NotFound("Hashtag not found")
        return hashtag

    async def create_hashtag(self, data: HashtagCreate) -> Hashtag:
        try:
            hashtag = await self.hashtags.create(name=data.name)
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise_for_integrity_error(exc, conflict="Hashtag already exists")

        logger.info(f"Created hashtag {hashtag.id} '{hashtag.name}'")
        return hashtag

    async def update_hashtag(self, hashtag_id: UUID, data: HashtagUpdate) -> Hashtag:
        hashtag = await self.get_hashtag(hashtag_id)
        try:
            await self.hashtags.update(hashtag, name=data.name)
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise_for_integrity_error(exc, conflict="Hashtag already exists")

        # Cached feed pages embed hashtag names
        if self.cache:
            await self.cache.invalidate_all()
        return hashtag

    async def delete_hashtag(self, hashtag_id: UUID) -> None:
        affected = await self.hashtags.delete(hashtag_id)
        if affected == 0:
            raise NotFound("Hashtag not found")
        await self.db.commit()
        logger.info(f"Deleted hashtag {hashtag_id}")

        if self.cache:
            await self.cache.invalidate_all()
