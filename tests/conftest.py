import itertools
import os

# Must be set before social_api is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ.pop("REDIS_URL", None)

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from social_api.database import build_engine, build_session_maker, get_db, init_db
from social_api.main import app


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return build_session_maker(engine)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client):
    counter = itertools.count()

    async def _make_user(**overrides):
        n = next(counter)
        payload = {
            "username": f"user{n}",
            "email": f"user{n}@example.com",
            "fullName": f"User {n}",
        }
        payload.update(overrides)
        response = await client.post("/api/users", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _make_user


@pytest.fixture
def make_post(client):
    async def _make_post(author_id, content="hello world", hashtags=None):
        payload = {"content": content, "authorId": author_id}
        if hashtags is not None:
            payload["hashtags"] = hashtags
        response = await client.post("/api/posts", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _make_post


@pytest.fixture
def make_follow(client):
    async def _make_follow(follower_id, following_id):
        response = await client.post(
            "/api/follows", json={"followerId": follower_id, "followingId": following_id}
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make_follow
