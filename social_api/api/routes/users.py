from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from social_api.api.deps import Pagination, get_activity_service, get_user_service
from social_api.models import ActivityType
from social_api.schemas import (
    ActivityPage,
    FollowerPage,
    FollowingPage,
    UserCreate,
    UserPage,
    UserResponse,
    UserUpdate,
)
from social_api.services.activities import ActivityService
from social_api.services.users import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=UserPage)
async def list_users(
    page: Pagination = Depends(),
    users: UserService = Depends(get_user_service),
):
    """List users, newest first."""
    items, total = await users.list_users(limit=page.limit, offset=page.offset)
    return UserPage(users=items, total=total, limit=page.limit, offset=page.offset)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID, users: UserService = Depends(get_user_service)):
    return await users.get_user(user_id)


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(data: UserCreate, users: UserService = Depends(get_user_service)):
    """
    Create a new user.
    Username and email must be unique (409 otherwise).
    """
    return await users.create_user(data)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    users: UserService = Depends(get_user_service),
):
    return await users.update_user(user_id, data)


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: UUID, users: UserService = Depends(get_user_service)):
    """Delete a user together with their posts, likes, follows and activity."""
    await users.delete_user(user_id)


@router.get("/{user_id}/followers", response_model=FollowerPage)
async def get_followers(
    user_id: UUID,
    page: Pagination = Depends(),
    users: UserService = Depends(get_user_service),
):
    """Users following this user, with the time each follow was made."""
    items, total = await users.get_followers(user_id, limit=page.limit, offset=page.offset)
    return FollowerPage(followers=items, total=total, limit=page.limit, offset=page.offset)


@router.get("/{user_id}/following", response_model=FollowingPage)
async def get_following(
    user_id: UUID,
    page: Pagination = Depends(),
    users: UserService = Depends(get_user_service),
):
    """Users this user follows."""
    items, total = await users.get_following(user_id, limit=page.limit, offset=page.offset)
    return FollowingPage(following=items, total=total, limit=page.limit, offset=page.offset)


@router.get("/{user_id}/activity", response_model=ActivityPage)
async def get_user_activity(
    user_id: UUID,
    page: Pagination = Depends(),
    activity_type: Optional[ActivityType] = Query(None, alias="activityType"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    activities: ActivityService = Depends(get_activity_service),
):
    """
    Activity of one user, newest first.
    Optional filters: exact activityType, and inclusive startDate/endDate bounds.
    """
    items, total = await activities.user_activity(
        user_id,
        limit=page.limit,
        offset=page.offset,
        activity_type=activity_type,
        start_date=start_date,
        end_date=end_date,
    )
    return ActivityPage(activities=items, total=total, limit=page.limit, offset=page.offset)
