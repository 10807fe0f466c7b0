from datetime import datetime
from typing import Annotated, ClassVar, List, Optional
from urllib.parse import urlparse
from uuid import UUID

from email_validator import EmailNotValidError, validate_email
from pydantic import (
    AfterValidator, AliasChoices, BaseModel, Field, StringConstraints, field_validator, model_validator
)
from pydantic.alias_generators import to_camel

from social_api.models import ActivityType


def normalize_hashtag(tag: str) -> str:
    """Lowercase a tag and drop its leading '#'."""
    return tag.strip().lower().removeprefix("#")


def _check_email(value: str) -> str:
    # Validate only; the address is stored exactly as sent
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError(f"value is not a valid email address: {exc}") from exc
    return value


def _check_uri(value: Optional[str]) -> Optional[str]:
    if not value:
        return value
    parsed = urlparse(value)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("must be a valid uri")
    return value


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class RequestModel(CamelModel):
    # Fields that may be omitted but not sent as null
    not_nullable: ClassVar[tuple] = ()

    class Config:
        extra = "forbid"

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        for name in self.model_fields_set:
            if name in self.not_nullable and getattr(self, name) is None:
                raise ValueError(f"{name} must not be null")
        return self


# ============ User Schemas ============

Username = Annotated[str, StringConstraints(min_length=3, max_length=50, pattern=r"^[A-Za-z0-9]+$")]
FullName = Annotated[str, StringConstraints(min_length=1, max_length=100)]
TagName = Annotated[str, StringConstraints(min_length=1, max_length=100)]
Email = Annotated[str, StringConstraints(max_length=100), AfterValidator(_check_email)]


class UserCreate(RequestModel):
    username: Username
    email: Email
    full_name: FullName
    bio: Optional[str] = Field(None, max_length=500)
    avatar_url: Optional[str] = Field(None, max_length=255)

    @field_validator("avatar_url")
    @classmethod
    def check_avatar_uri(cls, value: Optional[str]) -> Optional[str]:
        return _check_uri(value)


class UserUpdate(UserCreate):
    username: Optional[Username] = None
    email: Optional[Email] = None
    full_name: Optional[FullName] = None

    not_nullable: ClassVar[tuple] = ("username", "email", "full_name")


class UserResponse(CamelModel):
    id: UUID
    username: str
    email: str
    full_name: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class FollowerResponse(UserResponse):
    followed_at: datetime


class AuthorSummary(CamelModel):
    id: UUID
    username: str
    full_name: str
    avatar_url: Optional[str] = None


# ============ Hashtag Schemas ============

class HashtagCreate(RequestModel):
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        value = normalize_hashtag(value)
        if not value:
            raise ValueError("must contain at least one character besides '#'")
        return value


class HashtagUpdate(HashtagCreate):
    pass


class HashtagSummary(CamelModel):
    id: UUID
    name: str


class HashtagResponse(HashtagSummary):
    created_at: datetime


# ============ Post Schemas ============

class PostCreate(RequestModel):
    content: str = Field(..., min_length=1, max_length=5000)
    author_id: UUID
    hashtags: Optional[List[TagName]] = None

    @field_validator("hashtags")
    @classmethod
    def check_tags(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        for tag in value or []:
            if not normalize_hashtag(tag):
                raise ValueError(f"'{tag}' is not a valid hashtag")
        return value


class PostUpdate(RequestModel):
    content: Optional[str] = Field(None, min_length=1, max_length=5000)

    not_nullable: ClassVar[tuple] = ("content",)


class PostSummary(CamelModel):
    id: UUID
    content: str
    author_id: UUID
    created_at: datetime
    updated_at: datetime


class PostResponse(PostSummary):
    author: UserResponse
    hashtags: List[HashtagResponse] = []
    like_count: int = 0


class FeedPostResponse(CamelModel):
    """Denormalized post used by the feed and hashtag listings."""

    id: UUID
    content: str
    created_at: datetime
    updated_at: datetime
    author: AuthorSummary
    hashtags: List[HashtagSummary] = []
    like_count: int = 0


# ============ Like Schemas ============

class LikeCreate(RequestModel):
    user_id: UUID
    post_id: UUID


class LikeResponse(CamelModel):
    id: UUID
    user_id: UUID
    post_id: UUID
    created_at: datetime
    user: UserResponse
    post: PostSummary


# ============ Follow Schemas ============

class FollowCreate(RequestModel):
    follower_id: UUID
    following_id: UUID


class FollowResponse(CamelModel):
    id: UUID
    follower_id: UUID
    following_id: UUID
    created_at: datetime
    follower: UserResponse
    following: UserResponse


# ============ Activity Schemas ============

class ActivityCreate(RequestModel):
    user_id: UUID
    activity_type: ActivityType
    target_id: Optional[UUID] = None
    metadata: Optional[dict] = None


class ActivityResponse(CamelModel):
    id: UUID
    user_id: UUID
    activity_type: ActivityType
    target_id: Optional[UUID] = None
    metadata: Optional[dict] = Field(None, validation_alias=AliasChoices("metadata_", "metadata"))
    created_at: datetime


class ActivityDetailResponse(ActivityResponse):
    user: UserResponse


# ============ Page Envelopes ============

class Page(CamelModel):
    total: int
    limit: int
    offset: int


class UserPage(Page):
    users: List[UserResponse]


class FollowerPage(Page):
    followers: List[FollowerResponse]


class FollowingPage(Page):
    following: List[FollowerResponse]


class PostPage(Page):
    posts: List[PostResponse]


class FeedPage(Page):
    posts: List[FeedPostResponse]


class HashtagPostPage(FeedPage):
    hashtag: str


class LikePage(Page):
    likes: List[LikeResponse]


class FollowPage(Page):
    follows: List[FollowResponse]


class HashtagPage(Page):
    hashtags: List[HashtagResponse]


class ActivityPage(Page):
    activities: List[ActivityResponse]


class ActivityDetailPage(Page):
    activities: List[ActivityDetailResponse]


class HealthResponse(BaseModel):
    status: str
    timestamp: str
