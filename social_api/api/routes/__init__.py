from fastapi import APIRouter

from social_api.api.routes import activities, follows, hashtags, likes, posts, users

router = APIRouter()

router.include_router(users.router)
router.include_router(posts.router)
router.include_router(likes.router)
router.include_router(follows.router)
router.include_router(hashtags.router)
router.include_router(activities.router)
