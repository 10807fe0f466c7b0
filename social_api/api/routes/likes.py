from uuid import UUID

from fastapi import APIRouter, Depends

from social_api.api.deps import Pagination, get_like_service
from social_api.schemas import LikeCreate, LikePage, LikeResponse
from social_api.services.social import LikeService

router = APIRouter(prefix="/likes", tags=["Likes"])


@router.get("", response_model=LikePage)
async def list_likes(
    page: Pagination = Depends(),
    likes: LikeService = Depends(get_like_service),
):
    items, total = await likes.list_likes(limit=page.limit, offset=page.offset)
    return LikePage(likes=items, total=total, limit=page.limit, offset=page.offset)


@router.get("/{like_id}", response_model=LikeResponse)
async def get_like(like_id: UUID, likes: LikeService = Depends(get_like_service)):
    return await likes.get_like(like_id)


@router.post("", response_model=LikeResponse, status_code=201)
async def create_like(data: LikeCreate, likes: LikeService = Depends(get_like_service)):
    """Like a post. A user can like a given post once."""
    return await likes.like(data)


@router.delete("/{like_id}", status_code=204)
async def delete_like(like_id: UUID, likes: LikeService = Depends(get_like_service)):
    await likes.unlike(like_id)
