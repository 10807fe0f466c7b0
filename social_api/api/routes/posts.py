from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from social_api.api.deps import Pagination, get_feed_service, get_post_service
from social_api.exceptions import BadRequest
from social_api.schemas import FeedPage, HashtagPostPage, PostCreate, PostPage, PostResponse, PostUpdate
from social_api.services.feed import FeedService
from social_api.services.posts import PostService

router = APIRouter(tags=["Posts"])


@router.get("/posts", response_model=PostPage)
async def list_posts(
    page: Pagination = Depends(),
    posts: PostService = Depends(get_post_service),
):
    """List posts, newest first, with author, hashtags and like count."""
    items, total = await posts.list_posts(limit=page.limit, offset=page.offset)
    return PostPage(posts=items, total=total, limit=page.limit, offset=page.offset)


@router.get("/posts/hashtag/{tag}", response_model=HashtagPostPage)
async def get_posts_by_hashtag(
    tag: str,
    page: Pagination = Depends(),
    feed: FeedService = Depends(get_feed_service),
):
    """
    Posts tagged with a hashtag.
    The tag is matched case-insensitively with or without a leading '#'.
    """
    return await feed.get_by_hashtag(tag, limit=page.limit, offset=page.offset)


@router.get("/posts/{post_id}", response_model=PostResponse)
async def get_post(post_id: UUID, posts: PostService = Depends(get_post_service)):
    return await posts.get_post(post_id)


@router.post("/posts", response_model=PostResponse, status_code=201)
async def create_post(data: PostCreate, posts: PostService = Depends(get_post_service)):
    """
    Create a new post.
    Hashtags are created on first use and a POST_CREATED activity is recorded.
    """
    return await posts.create_post(data)


@router.put("/posts/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: UUID,
    data: PostUpdate,
    posts: PostService = Depends(get_post_service),
):
    return await posts.update_post(post_id, data)


@router.delete("/posts/{post_id}", status_code=204)
async def delete_post(post_id: UUID, posts: PostService = Depends(get_post_service)):
    await posts.delete_post(post_id)


# ----- Feed -----
@router.get("/feed", response_model=FeedPage)
async def get_feed(
    user_id: Optional[UUID] = Query(None, alias="userId"),
    page: Pagination = Depends(),
    feed: FeedService = Depends(get_feed_service),
):
    """
    Get the timeline of a user: posts by everyone they follow, newest first.
    """
    if user_id is None:
        raise BadRequest("userId query parameter is required")
    return await feed.get_feed(user_id, limit=page.limit, offset=page.offset)
