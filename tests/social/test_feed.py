"""Social feed tests: posts, likes, comments and pagination."""

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from socialquest.auth.service import register_user
from socialquest.social.service import create_post, list_posts
from socialquest.timeutils import utcnow


async def _headers_for(login, username: str) -> dict[str, str]:
    body = await login(username)
    return {"Authorization": f"Bearer {body['accessToken']}"}


class TestCreatePost:
    async def test_create_post(self, authed_client: AsyncClient):
        response = await authed_client.post("/posts", json={"content": "Hello quest!"})
        assert response.status_code == 201
        post = response.json()
        assert post["content"] == "Hello quest!"
        assert post["author"]["username"] == "alice"
        assert post["author"]["title"] == "Newbie"
        assert post["likes"] == []
        assert post["likeCount"] == 0
        assert post["comments"] == []

    async def test_post_grants_10_xp(self, authed_client: AsyncClient):
        await authed_client.post("/posts", json={"content": "first"})
        profile = (await authed_client.get("/users/me")).json()
        assert profile["xp"] == 10

    async def test_empty_post_rejected(self, authed_client: AsyncClient):
        response = await authed_client.post("/posts", json={"content": ""})
        assert response.status_code == 400

    async def test_post_over_500_chars_rejected(self, authed_client: AsyncClient):
        response = await authed_client.post("/posts", json={"content": "x" * 501})
        assert response.status_code == 400

    async def test_post_requires_auth(self, client: AsyncClient):
        response = await client.post("/posts", json={"content": "anon"})
        assert response.status_code == 401


class TestLikes:
    async def test_like_toggles(self, client: AsyncClient, login):
        alice = await _headers_for(login, "alice")
        bob = await _headers_for(login, "bob")
        post = (await client.post("/posts", json={"content": "like me"}, headers=alice)).json()
        bob_id = (await client.get("/users/me", headers=bob)).json()["id"]

        liked = await client.post(f"/posts/{post['id']}/like", headers=bob)
        assert liked.status_code == 200
        assert liked.json()["likes"] == [bob_id]
        assert liked.json()["likedByMe"] is True

        unliked = await client.post(f"/posts/{post['id']}/like", headers=bob)
        assert unliked.json()["likes"] == []
        assert unliked.json()["likeCount"] == 0
        assert unliked.json()["likedByMe"] is False

    async def test_like_grants_xp_to_liker_only(self, client: AsyncClient, login):
        alice = await _headers_for(login, "alice")
        bob = await _headers_for(login, "bob")
        post = (await client.post("/posts", json={"content": "like me"}, headers=alice)).json()

        await client.post(f"/posts/{post['id']}/like", headers=bob)
        assert (await client.get("/users/me", headers=bob)).json()["xp"] == 5
        assert (await client.get("/users/me", headers=alice)).json()["xp"] == 10

        # Unliking keeps the XP; liking again grants it again.
        await client.post(f"/posts/{post['id']}/like", headers=bob)
        assert (await client.get("/users/me", headers=bob)).json()["xp"] == 5
        await client.post(f"/posts/{post['id']}/like", headers=bob)
        assert (await client.get("/users/me", headers=bob)).json()["xp"] == 10

    async def test_like_missing_post_is_404(self, authed_client: AsyncClient):
        response = await authed_client.post("/posts/4242/like")
        assert response.status_code == 404
        assert response.json()["detail"] == "Post not found"

    async def test_likes_from_several_users(self, client: AsyncClient, login):
        alice = await _headers_for(login, "alice")
        post = (await client.post("/posts", json={"content": "popular"}, headers=alice)).json()
        for name in ["bob", "carol", "dave"]:
            await client.post(f"/posts/{post['id']}/like", headers=await _headers_for(login, name))
        feed = (await client.get("/posts", headers=alice)).json()
        assert feed["posts"][0]["likeCount"] == 3
        assert feed["posts"][0]["likedByMe"] is False


class TestComments:
    async def test_add_comment(self, client: AsyncClient, login):
        alice = await _headers_for(login, "alice")
        bob = await _headers_for(login, "bob")
        post = (await client.post("/posts", json={"content": "discuss"}, headers=alice)).json()

        response = await client.post(f"/posts/{post['id']}/comments", json={"content": "nice"}, headers=bob)
        assert response.status_code == 201
        comments = response.json()["comments"]
        assert len(comments) == 1
        assert comments[0]["content"] == "nice"
        assert comments[0]["author"]["username"] == "bob"
        assert "timestamp" in comments[0]

    async def test_comments_keep_order(self, authed_client: AsyncClient):
        post = (await authed_client.post("/posts", json={"content": "thread"})).json()
        for text in ["one", "two", "three"]:
            await authed_client.post(f"/posts/{post['id']}/comments", json={"content": text})
        feed = (await authed_client.get("/posts")).json()
        assert [c["content"] for c in feed["posts"][0]["comments"]] == ["one", "two", "three"]

    async def test_comment_over_200_chars_rejected(self, authed_client: AsyncClient):
        post = (await authed_client.post("/posts", json={"content": "thread"})).json()
        response = await authed_client.post(f"/posts/{post['id']}/comments", json={"content": "x" * 201})
        assert response.status_code == 400

    async def test_comment_on_missing_post_is_404(self, authed_client: AsyncClient):
        response = await authed_client.post("/posts/999/comments", json={"content": "hello"})
        assert response.status_code == 404


class TestPagination:
    async def test_second_page_of_25(self, authed_client: AsyncClient):
        for i in range(25):
            await authed_client.post("/posts", json={"content": f"post {i}"})

        response = await authed_client.get("/posts", params={"page": 2, "limit": 10})
        assert response.status_code == 200
        data = response.json()
        assert len(data["posts"]) == 10
        assert data["total"] == 25
        assert data["page"] == 2
        assert data["pages"] == 3
        assert data["posts"][0]["content"] == "post 14"

    async def test_newest_first_default_page_size(self, authed_client: AsyncClient):
        for i in range(12):
            await authed_client.post("/posts", json={"content": f"post {i}"})
        data = (await authed_client.get("/posts")).json()
        assert len(data["posts"]) == 10
        assert data["posts"][0]["content"] == "post 11"

    async def test_empty_feed(self, authed_client: AsyncClient):
        data = (await authed_client.get("/posts")).json()
        assert data == {"posts": [], "total": 0, "page": 1, "pages": 0}

    async def test_page_past_end_is_empty(self, authed_client: AsyncClient):
        await authed_client.post("/posts", json={"content": "only"})
        data = (await authed_client.get("/posts", params={"page": 5})).json()
        assert data["posts"] == []
        assert data["total"] == 1

    async def test_invalid_page_rejected(self, authed_client: AsyncClient):
        response = await authed_client.get("/posts", params={"page": 0})
        assert response.status_code == 400

    async def test_huge_page_is_empty_not_an_error(self, authed_client: AsyncClient):
        await authed_client.post("/posts", json={"content": "only"})
        response = await authed_client.get("/posts", params={"page": 10**19, "limit": 10})
        assert response.status_code == 200
        data = response.json()
        assert data["posts"] == []
        assert data["total"] == 1
        assert data["pages"] == 1
        assert data["page"] == 10**19

    async def test_service_pagination(self, db_session: AsyncSession):
        user = await register_user(db_session, "erin", "password123")
        for i in range(7):
            await create_post(db_session, user, f"note {i}", now=utcnow())
        page = await list_posts(db_session, page=3, page_size=3)
        assert [p.content for p in page.posts] == ["note 0"]
        assert (page.total, page.pages) == (7, 3)
