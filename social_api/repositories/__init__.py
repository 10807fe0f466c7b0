from social_api.repositories.activities import ACTIVITY_RELATIONS, ActivityRepository
from social_api.repositories.base import Repository
from social_api.repositories.follows import FOLLOW_RELATIONS, FollowRepository
from social_api.repositories.hashtags import HashtagRepository
from social_api.repositories.likes import LIKE_RELATIONS, LikeRepository
from social_api.repositories.posts import POST_RELATIONS, PostRepository
from social_api.repositories.users import UserRepository

__all__ = [
    "Repository",
    "UserRepository",
    "PostRepository",
    "LikeRepository",
    "FollowRepository",
    "HashtagRepository",
    "ActivityRepository",
    "POST_RELATIONS",
    "LIKE_RELATIONS",
    "FOLLOW_RELATIONS",
    "ACTIVITY_RELATIONS",
]
