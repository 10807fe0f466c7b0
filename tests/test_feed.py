from uuid import uuid4


class TestFeed:
    """Pull-based timeline of followed users' posts"""

    async def test_user_id_required(self, client):
        response = await client.get("/api/feed")

        assert response.status_code == 400
        assert response.json() == {"error": "userId query parameter is required"}

    async def test_empty_feed_when_following_nobody(self, client, make_user, make_post):
        alice = await make_user()
        await make_post(alice["id"])

        response = await client.get("/api/feed", params={"userId": alice["id"]})

        assert response.status_code == 200
        assert response.json() == {"posts": [], "total": 0, "limit": 10, "offset": 0}

    async def test_feed_contains_only_followed_authors(self, client, make_user, make_post, make_follow):
        alice = await make_user()
        bob = await make_user()
        carol = await make_user()
        await make_follow(alice["id"], bob["id"])
        first = await make_post(bob["id"], "bob one", hashtags=["news"])
        await make_post(carol["id"], "carol one")
        second = await make_post(bob["id"], "bob two")
        await make_post(alice["id"], "own post")

        body = (await client.get("/api/feed", params={"userId": alice["id"]})).json()

        assert body["total"] == 2
        assert [p["id"] for p in body["posts"]] == [second["id"], first["id"]]
        post = body["posts"][1]
        assert set(post) == {"id", "content", "createdAt", "updatedAt", "author", "hashtags", "likeCount"}
        assert set(post["author"]) == {"id", "username", "fullName", "avatarUrl"}
        assert post["hashtags"] == [{"id": first["hashtags"][0]["id"], "name": "news"}]

    async def test_feed_pagination(self, client, make_user, make_post, make_follow):
        alice = await make_user()
        bob = await make_user()
        await make_follow(alice["id"], bob["id"])
        for i in range(3):
            await make_post(bob["id"], f"post {i}")

        body = (await client.get("/api/feed", params={"userId": alice["id"], "limit": 2, "offset": 2})).json()

        assert body["total"] == 3
        assert [p["content"] for p in body["posts"]] == ["post 0"]

    async def test_unfollow_removes_posts(self, client, make_user, make_post, make_follow):
        alice = await make_user()
        bob = await make_user()
        follow = await make_follow(alice["id"], bob["id"])
        await make_post(bob["id"])

        await client.delete(f"/api/follows/{follow['id']}")

        body = (await client.get("/api/feed", params={"userId": alice["id"]})).json()
        assert body["total"] == 0

    async def test_unknown_user_gets_empty_feed(self, client):
        body = (await client.get("/api/feed", params={"userId": str(uuid4())})).json()

        assert body["posts"] == []
        assert body["total"] == 0


class TestPostsByHashtag:
    """Hashtag timeline lookup"""

    async def test_unknown_hashtag_returns_empty_page(self, client):
        response = await client.get("/api/posts/hashtag/nothing")

        assert response.status_code == 200
        assert response.json() == {"posts": [], "total": 0, "limit": 10, "offset": 0, "hashtag": "nothing"}

    async def test_lookup_is_case_insensitive(self, client, make_user, make_post):
        alice = await make_user()
        tagged = await make_post(alice["id"], "tagged", hashtags=["Python"])
        await make_post(alice["id"], "untagged")

        response = await client.get("/api/posts/hashtag/PYTHON")

        body = response.json()
        assert body["hashtag"] == "python"
        assert body["total"] == 1
        assert body["posts"][0]["id"] == tagged["id"]

    async def test_hashtag_pagination(self, client, make_user, make_post):
        alice = await make_user()
        for i in range(3):
            await make_post(alice["id"], f"post {i}", hashtags=["daily"])

        body = (await client.get("/api/posts/hashtag/daily", params={"limit": 2})).json()

        assert body["total"] == 3
        assert [p["content"] for p in body["posts"]] == ["post 2", "post 1"]
