from uuid import UUID

from fastapi import APIRouter, Depends

from social_api.api.deps import Pagination, get_hashtag_service
from social_api.schemas import HashtagCreate, HashtagPage, HashtagResponse, HashtagUpdate
from social_api.services.hashtags import HashtagService

router = APIRouter(prefix="/hashtags", tags=["Hashtags"])


@router.get("", response_model=HashtagPage)
async def list_hashtags(
    page: Pagination = Depends(),
    hashtags: HashtagService = Depends(get_hashtag_service),
):
    items, total = await hashtags.list_hashtags(limit=page.limit, offset=page.offset)
    return HashtagPage(hashtags=items, total=total, limit=page.limit, offset=page.offset)


@router.get("/{hashtag_id}", response_model=HashtagResponse)
async def get_hashtag(hashtag_id: UUID, hashtags: HashtagService = Depends(get_hashtag_service)):
    return await hashtags.get_hashtag(hashtag_id)


@router.post("", response_model=HashtagResponse, status_code=201)
async def create_hashtag(data: HashtagCreate, hashtags: HashtagService = Depends(get_hashtag_service)):
    return await hashtags.create_hashtag(data)


@router.put("/{hashtag_id}", response_model=HashtagResponse)
async def update_hashtag(
    hashtag_id: UUID,
    data: HashtagUpdate,
    hashtags: HashtagService = Depends(get_hashtag_service),
):
    return await hashtags.update_hashtag(hashtag_id, data)


@router.delete("/{hashtag_id}", status_code=204)
async def delete_hashtag(hashtag_id: UUID, hashtags: HashtagService = Depends(get_hashtag_service)):
    await hashtags.delete_hashtag(hashtag_id)
