from uuid import UUID

from fastapi import APIRouter, Depends

from social_api.api.deps import Pagination, get_follow_service
from social_api.schemas import FollowCreate, FollowPage, FollowResponse
from social_api.services.social import FollowService

router = APIRouter(prefix="/follows", tags=["Follows"])


@router.get("", response_model=FollowPage)
async def list_follows(
    page: Pagination = Depends(),
    follows: FollowService = Depends(get_follow_service),
):
    items, total = await follows.list_follows(limit=page.limit, offset=page.offset)
    return FollowPage(follows=items, total=total, limit=page.limit, offset=page.offset)


@router.get("/{follow_id}", response_model=FollowResponse)
async def get_follow(follow_id: UUID, follows: FollowService = Depends(get_follow_service)):
    return await follows.get_follow(follow_id)


@router.post("", response_model=FollowResponse, status_code=201)
async def create_follow(data: FollowCreate, follows: FollowService = Depends(get_follow_service)):
    """Follow a user. Self-follows are rejected with 400, repeats with 409."""
    return await follows.follow(data)


@router.delete("/{follow_id}", status_code=204)
async def delete_follow(follow_id: UUID, follows: FollowService = Depends(get_follow_service)):
    """Unfollow. A USER_UNFOLLOWED activity is recorded."""
    await follows.unfollow(follow_id)
