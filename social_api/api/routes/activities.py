from uuid import UUID

from fastapi import APIRouter, Depends

from social_api.api.deps import Pagination, get_activity_service
from social_api.schemas import ActivityCreate, ActivityDetailPage, ActivityDetailResponse
from social_api.services.activities import ActivityService

router = APIRouter(prefix="/activities", tags=["Activities"])


@router.get("", response_model=ActivityDetailPage)
async def list_activities(
    page: Pagination = Depends(),
    activities: ActivityService = Depends(get_activity_service),
):
    items, total = await activities.list_activities(limit=page.limit, offset=page.offset)
    return ActivityDetailPage(activities=items, total=total, limit=page.limit, offset=page.offset)


@router.get("/{activity_id}", response_model=ActivityDetailResponse)
async def get_activity(activity_id: UUID, activities: ActivityService = Depends(get_activity_service)):
    return await activities.get_activity(activity_id)


@router.post("", response_model=ActivityDetailResponse, status_code=201)
async def create_activity(
    data: ActivityCreate,
    activities: ActivityService = Depends(get_activity_service),
):
    return await activities.create_activity(data)


@router.delete("/{activity_id}", status_code=204)
async def delete_activity(activity_id: UUID, activities: ActivityService = Depends(get_activity_service)):
    await activities.delete_activity(activity_id)
