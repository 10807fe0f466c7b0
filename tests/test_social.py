from uuid import uuid4

import pytest

from social_api.exceptions import NotFound
from social_api.repositories import ActivityRepository, FollowRepository, UserRepository
from social_api.services.social import FollowService


class TestFollows:
    """Follow graph operations and their activity records"""

    async def test_follow_returns_both_users(self, client, make_user, make_follow):
        alice = await make_user()
        bob = await make_user()

        follow = await make_follow(alice["id"], bob["id"])

        assert follow["followerId"] == alice["id"]
        assert follow["followingId"] == bob["id"]
        assert follow["follower"]["username"] == alice["username"]
        assert follow["following"]["username"] == bob["username"]

        response = await client.get(f"/api/follows/{follow['id']}")
        assert response.status_code == 200
        assert (await client.get("/api/follows")).json()["total"] == 1

    async def test_self_follow_rejected(self, client, make_user):
        """Self-follows fail with 400 whether or not the user exists"""
        alice = await make_user()

        for user_id in (alice["id"], str(uuid4())):
            response = await client.post(
                "/api/follows", json={"followerId": user_id, "followingId": user_id}
            )
            assert response.status_code == 400
            assert response.json() == {"error": "Users cannot follow themselves"}

    async def test_duplicate_follow_conflicts(self, client, make_user, make_follow):
        alice = await make_user()
        bob = await make_user()
        await make_follow(alice["id"], bob["id"])

        response = await client.post(
            "/api/follows", json={"followerId": alice["id"], "followingId": bob["id"]}
        )

        assert response.status_code == 409
        assert response.json() == {"error": "Already following this user"}

    async def test_follow_missing_user(self, client, make_user):
        alice = await make_user()

        response = await client.post(
            "/api/follows", json={"followerId": alice["id"], "followingId": str(uuid4())}
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Follower or Following user not found"}
        assert (await client.get(f"/api/users/{alice['id']}/activity")).json()["total"] == 0

    async def test_follow_and_unfollow_activities(self, client, make_user, make_follow):
        alice = await make_user()
        bob = await make_user()
        follow = await make_follow(alice["id"], bob["id"])

        response = await client.delete(f"/api/follows/{follow['id']}")
        assert response.status_code == 204

        assert (await client.get(f"/api/follows/{follow['id']}")).status_code == 404
        body = (await client.get(f"/api/users/{alice['id']}/activity")).json()
        assert [a["activityType"] for a in body["activities"]] == ["USER_UNFOLLOWED", "USER_FOLLOWED"]
        for activity in body["activities"]:
            assert activity["targetId"] == bob["id"]
            assert activity["metadata"] == {"followId": follow["id"]}

    async def test_unfollow_missing_follow(self, client):
        response = await client.delete(f"/api/follows/{uuid4()}")

        assert response.status_code == 404
        assert response.json() == {"error": "Follow not found"}

    async def test_refollow_after_unfollow(self, client, make_user, make_follow):
        alice = await make_user()
        bob = await make_user()
        follow = await make_follow(alice["id"], bob["id"])
        await client.delete(f"/api/follows/{follow['id']}")

        again = await make_follow(alice["id"], bob["id"])

        assert again["id"] != follow["id"]

    async def test_unfollow_of_concurrently_removed_follow(self, db, monkeypatch):
        """An unfollow whose row is already gone fails and records nothing"""
        users = UserRepository(db)
        alice = await users.create(username="alice", email="alice@example.com", full_name="Alice")
        bob = await users.create(username="bob", email="bob@example.com", full_name="Bob")
        follow = await FollowRepository(db).create(follower_id=alice.id, following_id=bob.id)
        await db.commit()

        service = FollowService(db)

        async def removed_elsewhere(follow_id):
            return 0

        monkeypatch.setattr(service.follows, "delete", removed_elsewhere)

        with pytest.raises(NotFound):
            await service.unfollow(follow.id)

        _, total = await ActivityRepository(db).list(limit=10, offset=0)
        assert total == 0


class TestLikes:
    """Likes and their activity records"""

    async def test_like_post(self, client, make_user, make_post):
        alice = await make_user()
        post = await make_post(alice["id"])

        response = await client.post("/api/likes", json={"userId": alice["id"], "postId": post["id"]})

        assert response.status_code == 201
        like = response.json()
        assert like["user"]["id"] == alice["id"]
        assert like["post"]["id"] == post["id"]

        body = (await client.get(f"/api/users/{alice['id']}/activity", params={"activityType": "POST_LIKED"})).json()
        assert body["total"] == 1
        assert body["activities"][0]["targetId"] == post["id"]
        assert body["activities"][0]["metadata"] == {"likeId": like["id"]}

    async def test_duplicate_like_conflicts(self, client, make_user, make_post):
        alice = await make_user()
        post = await make_post(alice["id"])
        payload = {"userId": alice["id"], "postId": post["id"]}
        await client.post("/api/likes", json=payload)

        response = await client.post("/api/likes", json=payload)

        assert response.status_code == 409
        assert response.json() == {"error": "Post already liked by this user"}

    async def test_like_missing_post(self, client, make_user):
        alice = await make_user()

        response = await client.post("/api/likes", json={"userId": alice["id"], "postId": str(uuid4())})

        assert response.status_code == 404
        assert response.json() == {"error": "User or Post not found"}

    async def test_unlike(self, client, make_user, make_post):
        alice = await make_user()
        post = await make_post(alice["id"])
        like = (await client.post("/api/likes", json={"userId": alice["id"], "postId": post["id"]})).json()

        assert (await client.delete(f"/api/likes/{like['id']}")).status_code == 204
        assert (await client.delete(f"/api/likes/{like['id']}")).status_code == 404
        assert (await client.get(f"/api/posts/{post['id']}")).json()["likeCount"] == 0


class TestUserDeletionCascade:
    """Deleting a user removes everything that references them"""

    async def test_cascade(self, client, make_user, make_post, make_follow):
        alice = await make_user()
        bob = await make_user()
        alice_post = await make_post(alice["id"])
        bob_post = await make_post(bob["id"])
        await make_follow(alice["id"], bob["id"])
        await make_follow(bob["id"], alice["id"])
        await client.post("/api/likes", json={"userId": alice["id"], "postId": bob_post["id"]})
        await client.post("/api/likes", json={"userId": bob["id"], "postId": alice_post["id"]})

        assert (await client.delete(f"/api/users/{alice['id']}")).status_code == 204

        assert (await client.get(f"/api/posts/{alice_post['id']}")).status_code == 404
        assert (await client.get("/api/follows")).json()["total"] == 0
        assert (await client.get("/api/likes")).json()["total"] == 0
        assert (await client.get(f"/api/posts/{bob_post['id']}")).json()["likeCount"] == 0
        activities = (await client.get("/api/activities", params={"limit": 100})).json()["activities"]
        assert all(a["userId"] == bob["id"] for a in activities)
