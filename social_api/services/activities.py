import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.exceptions import BadRequest, NotFound, raise_for_integrity_error
from social_api.models import Activity, ActivityType
from social_api.repositories import ACTIVITY_RELATIONS, ActivityRepository, UserRepository
from social_api.schemas import ActivityCreate

logger = logging.getLogger(__name__)


def _as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # created_at is stored as naive UTC
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class ActivityService:
    """Activity log: recording alongside other mutations, plus direct CRUD."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.activities = ActivityRepository(db)
        self.users = UserRepository(db)

    # ============ Recording ============

    async def record(
        self,
        user_id: UUID,
        activity_type: ActivityType,
        target_id: Optional[UUID] = None,
        metadata: Optional[dict] = None,
    ) -> Activity:
        """
        Append an activity to the current transaction.
        The caller commits it together with the mutation that caused it.
        """
        return await self.activities.create(
            user_id=user_id,
            activity_type=activity_type,
            target_id=target_id,
            metadata_=metadata,
        )

    # ============ CRUD ============

    async def list_activities(self, limit: int, offset: int) -> Tuple[List[Activity], int]:
        return await self.activities.list(limit=limit, offset=offset, options=ACTIVITY_RELATIONS)

    async def get_activity(self, activity_id: UUID) -> Activity:
        activity = await self.activities.get(activity_id, options=ACTIVITY_RELATIONS)
        if not activity:
            raise NotFound("Activity not found")
        return activity

    async def create_activity(self, data: ActivityCreate) -> Activity:
        try:
            activity = await self.record(
                user_id=data.user_id,
                activity_type=data.activity_type,
                target_id=data.target_id,
                metadata=data.metadata,
            )
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise_for_integrity_error(exc, not_found="User not found")

        return await self.get_activity(activity.id)

    async def delete_activity(self, activity_id: UUID) -> None:
        affected = await self.activities.delete(activity_id)
        if affected == 0:
            raise NotFound("Activity not found")
        await self.db.commit()

    # ============ Per-user Query ============

    async def user_activity(
        self,
        user_id: UUID,
        limit: int,
        offset: int,
        activity_type: Optional[ActivityType] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Tuple[List[Activity], int]:
        """
        Activities of one user, newest first.

        `start_date` and `end_date` are inclusive bounds on created_at and
        may be given independently.
        """
        if not await self.users.exists(user_id):
            raise NotFound("User not found")

        start_date = _as_naive_utc(start_date)
        end_date = _as_naive_utc(end_date)
        if start_date and end_date and start_date > end_date:
            raise BadRequest("startDate must not be after endDate")

        criteria = [Activity.user_id == user_id]
        if activity_type:
            criteria.append(Activity.activity_type == activity_type)
        if start_date:
            criteria.append(Activity.created_at >= start_date)
        if end_date:
            criteria.append(Activity.created_at <= end_date)

        return await self.activities.list(*criteria, limit=limit, offset=offset)
