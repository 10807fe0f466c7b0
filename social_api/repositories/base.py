from typing import Any, Generic, List, Optional, Sequence, Tuple, Type, TypeVar
from uuid import UUID

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.base import ExecutableOption

from social_api.database import Base

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """
    Generic data access for one entity.

    Relations are passed as loader options (``selectinload(...)``) so that
    nothing is lazy-loaded once the session is used from async code.
    """

    model: Type[ModelT]

    def __init__(self, db: AsyncSession):
        self.db = db

    def default_order(self) -> list:
        return [self.model.created_at.desc()]

    # ============ Reads ============

    async def list(
        self,
        *criteria: Any,
        limit: int,
        offset: int,
        options: Sequence[ExecutableOption] = (),
        order_by: Optional[Sequence[Any]] = None,
    ) -> Tuple[List[ModelT], int]:
        """Return one page of rows matching `criteria` and the total match count."""
        query = select(self.model).where(*criteria)
        return await self.paginate(query, limit=limit, offset=offset, options=options, order_by=order_by)

    async def paginate(
        self,
        query: Select,
        limit: int,
        offset: int,
        options: Sequence[ExecutableOption] = (),
        order_by: Optional[Sequence[Any]] = None,
    ) -> Tuple[List[ModelT], int]:
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
        total = await self.db.scalar(count_query)

        page_query = (
            query
            .options(*options)
            .order_by(*(order_by or self.default_order()))
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(page_query)
        return list(result.scalars().all()), total or 0

    async def get(self, id: UUID, options: Sequence[ExecutableOption] = ()) -> Optional[ModelT]:
        query = (
            select(self.model)
            .where(self.model.id == id)
            .options(*options)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def exists(self, id: UUID) -> bool:
        result = await self.db.execute(select(self.model.id).where(self.model.id == id))
        return result.first() is not None

    # ============ Writes ============

    async def create(self, **fields: Any) -> ModelT:
        instance = self.model(**fields)
        self.db.add(instance)
        await self.db.flush()
        return instance

    async def update(self, instance: ModelT, **fields: Any) -> ModelT:
        for name, value in fields.items():
            setattr(instance, name, value)
        await self.db.flush()
        return instance

    async def delete(self, id: UUID) -> int:
        """Delete by primary key and return the affected row count."""
        result = await self.db.execute(delete(self.model).where(self.model.id == id))
        return result.rowcount
