from sqlalchemy.orm import selectinload

from social_api.models import Activity
from social_api.repositories.base import Repository

ACTIVITY_RELATIONS = (selectinload(Activity.user),)


class ActivityRepository(Repository[Activity]):
    model = Activity
