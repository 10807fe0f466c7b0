from uuid import uuid4


class TestPostCrud:
    """Post create/read/update/delete over HTTP"""

    async def test_create_post_with_hashtags(self, client, make_user):
        """Tags are normalized and deduplicated"""
        alice = await make_user()

        response = await client.post(
            "/api/posts",
            json={"content": "hi #Foo", "authorId": alice["id"], "hashtags": ["#Foo", "foo", "Bar"]},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["content"] == "hi #Foo"
        assert body["authorId"] == alice["id"]
        assert body["author"]["id"] == alice["id"]
        assert body["likeCount"] == 0
        assert sorted(tag["name"] for tag in body["hashtags"]) == ["bar", "foo"]

    async def test_hashtags_reused_across_posts(self, client, make_user, make_post):
        alice = await make_user()
        first = await make_post(alice["id"], hashtags=["python"])
        second = await make_post(alice["id"], hashtags=["#PYTHON"])

        assert first["hashtags"][0]["id"] == second["hashtags"][0]["id"]
        assert (await client.get("/api/hashtags")).json()["total"] == 1

    async def test_create_records_activity_with_preview(self, client, make_user, make_post):
        alice = await make_user()
        content = "x" * 150
        post = await make_post(alice["id"], content)

        body = (await client.get(f"/api/users/{alice['id']}/activity")).json()

        assert body["total"] == 1
        activity = body["activities"][0]
        assert activity["activityType"] == "POST_CREATED"
        assert activity["targetId"] == post["id"]
        assert activity["userId"] == alice["id"]
        assert activity["metadata"] == {"content": "x" * 100}

    async def test_missing_author_leaves_nothing_behind(self, client):
        """A failed create rolls back hashtags and activity too"""
        response = await client.post(
            "/api/posts",
            json={"content": "orphan", "authorId": str(uuid4()), "hashtags": ["lonely"]},
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Author not found"}
        assert (await client.get("/api/hashtags")).json()["total"] == 0
        assert (await client.get("/api/activities")).json()["total"] == 0
        assert (await client.get("/api/posts")).json()["total"] == 0

    async def test_invalid_post_payloads(self, client, make_user):
        alice = await make_user()

        for payload in [
            {"content": "", "authorId": alice["id"]},
            {"content": "x" * 5001, "authorId": alice["id"]},
            {"content": "ok"},
            {"content": "ok", "authorId": alice["id"], "hashtags": ["#"]},
            {"content": "ok", "authorId": alice["id"], "hashtags": ["   "]},
        ]:
            response = await client.post("/api/posts", json=payload)
            assert response.status_code == 400, payload

    async def test_update_post(self, client, make_user, make_post):
        alice = await make_user()
        post = await make_post(alice["id"], "before")

        response = await client.put(f"/api/posts/{post['id']}", json={"content": "after"})

        assert response.status_code == 200
        assert response.json()["content"] == "after"
        assert (await client.put(f"/api/posts/{post['id']}", json={"content": None})).status_code == 400
        assert (await client.put(f"/api/posts/{uuid4()}", json={"content": "x"})).status_code == 404

    async def test_like_count(self, client, make_user, make_post):
        alice = await make_user()
        bob = await make_user()
        post = await make_post(alice["id"])
        for user in (alice, bob):
            await client.post("/api/likes", json={"userId": user["id"], "postId": post["id"]})

        body = (await client.get(f"/api/posts/{post['id']}")).json()

        assert body["likeCount"] == 2

    async def test_delete_post_cascades_likes(self, client, make_user, make_post):
        alice = await make_user()
        post = await make_post(alice["id"], hashtags=["tag"])
        like = (await client.post("/api/likes", json={"userId": alice["id"], "postId": post["id"]})).json()

        assert (await client.delete(f"/api/posts/{post['id']}")).status_code == 204

        assert (await client.get(f"/api/posts/{post['id']}")).status_code == 404
        assert (await client.get(f"/api/likes/{like['id']}")).status_code == 404
        # The hashtag itself survives
        assert (await client.get("/api/hashtags")).json()["total"] == 1
        assert (await client.delete(f"/api/posts/{post['id']}")).status_code == 404

    async def test_list_posts(self, client, make_user, make_post):
        alice = await make_user()
        older = await make_post(alice["id"], "older")
        newer = await make_post(alice["id"], "newer")

        body = (await client.get("/api/posts")).json()

        assert body["total"] == 2
        assert [p["id"] for p in body["posts"]] == [newer["id"], older["id"]]
