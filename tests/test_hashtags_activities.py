from uuid import uuid4


class TestHashtags:
    """Hashtag CRUD"""

    async def test_create_normalizes_name(self, client):
        response = await client.post("/api/hashtags", json={"name": "#Python"})

        assert response.status_code == 201
        assert response.json()["name"] == "python"

    async def test_duplicate_conflicts(self, client):
        await client.post("/api/hashtags", json={"name": "python"})

        response = await client.post("/api/hashtags", json={"name": "PYTHON"})

        assert response.status_code == 409
        assert response.json() == {"error": "Hashtag already exists"}

    async def test_blank_name_rejected(self, client):
        for name in ["", "#", "  "]:
            response = await client.post("/api/hashtags", json={"name": name})
            assert response.status_code == 400, name

    async def test_update_and_delete(self, client):
        hashtag = (await client.post("/api/hashtags", json={"name": "old"})).json()
        await client.post("/api/hashtags", json={"name": "taken"})

        response = await client.put(f"/api/hashtags/{hashtag['id']}", json={"name": "#New"})
        assert response.status_code == 200
        assert response.json()["name"] == "new"

        response = await client.put(f"/api/hashtags/{hashtag['id']}", json={"name": "taken"})
        assert response.status_code == 409

        assert (await client.delete(f"/api/hashtags/{hashtag['id']}")).status_code == 204
        assert (await client.get(f"/api/hashtags/{hashtag['id']}")).status_code == 404
        assert (await client.delete(f"/api/hashtags/{hashtag['id']}")).status_code == 404

    async def test_delete_detaches_from_posts(self, client, make_user, make_post):
        alice = await make_user()
        post = await make_post(alice["id"], hashtags=["gone"])
        hashtag_id = post["hashtags"][0]["id"]

        await client.delete(f"/api/hashtags/{hashtag_id}")

        body = (await client.get(f"/api/posts/{post['id']}")).json()
        assert body["hashtags"] == []


class TestActivities:
    """Direct activity CRUD"""

    async def test_create_activity(self, client, make_user):
        alice = await make_user()
        target = str(uuid4())

        response = await client.post(
            "/api/activities",
            json={
                "userId": alice["id"],
                "activityType": "POST_LIKED",
                "targetId": target,
                "metadata": {"source": "import"},
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["activityType"] == "POST_LIKED"
        assert body["targetId"] == target
        assert body["metadata"] == {"source": "import"}
        assert body["user"]["id"] == alice["id"]

        fetched = (await client.get(f"/api/activities/{body['id']}")).json()
        assert fetched == body

    async def test_invalid_type_rejected(self, client, make_user):
        alice = await make_user()

        response = await client.post(
            "/api/activities", json={"userId": alice["id"], "activityType": "POST_SHARED"}
        )

        assert response.status_code == 400

    async def test_missing_user(self, client):
        response = await client.post(
            "/api/activities", json={"userId": str(uuid4()), "activityType": "POST_CREATED"}
        )

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}

    async def test_delete_activity(self, client, make_user):
        alice = await make_user()
        activity = (
            await client.post("/api/activities", json={"userId": alice["id"], "activityType": "POST_CREATED"})
        ).json()

        assert (await client.delete(f"/api/activities/{activity['id']}")).status_code == 204
        assert (await client.get(f"/api/activities/{activity['id']}")).status_code == 404
        assert (await client.delete(f"/api/activities/{activity['id']}")).status_code == 404
