from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from social_api.models import Hashtag
from social_api.repositories.base import Repository

# Dialects with INSERT ... ON CONFLICT DO NOTHING
_UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class HashtagRepository(Repository[Hashtag]):
    model = Hashtag

    async def get_by_name(self, name: str) -> Optional[Hashtag]:
        """Case-insensitive exact match on the hashtag name."""
        result = await self.db.execute(
            select(Hashtag).where(func.lower(Hashtag.name) == name.lower())
        )
        return result.scalar_one_or_none()

    async def insert_if_absent(self, name: str) -> Hashtag:
        """
        Insert `name` unless a row already holds it, then read the row back.
        A concurrent insert of the same name is absorbed by the unique index.
        """
        dialect = self.db.get_bind().dialect.name
        stmt = (
            _UPSERT_INSERTS[dialect](Hashtag)
            .values(id=uuid4(), name=name, created_at=datetime.utcnow())
            .on_conflict_do_nothing(index_elements=["name"])
        )
        await self.db.execute(stmt)
        return await self.get_by_name(name)
