"""Challenge listing, progress from feed events and lazy re-seeding."""

from datetime import timedelta

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from socialquest.auth.service import register_user
from socialquest.challenges.repository import ChallengeRepository
from socialquest.challenges.service import list_challenges
from socialquest.timeutils import utcnow


def _by_type(challenges: list[dict]) -> dict[str, dict]:
    return {c["type"]: c for c in challenges}


class TestListChallenges:
    async def test_registration_seeds_daily_and_weekly(self, authed_client: AsyncClient):
        response = await authed_client.get("/challenges")
        assert response.status_code == 200
        challenges = _by_type(response.json())
        assert set(challenges) == {"daily", "weekly"}
        assert challenges["daily"]["description"] == "Post 3 times today"
        assert challenges["daily"]["target"] == 3
        assert challenges["daily"]["reward"] == 50
        assert challenges["weekly"]["target"] == 50
        assert challenges["weekly"]["reward"] == 200
        assert all(c["progress"] == 0 and not c["completed"] and not c["expired"] for c in challenges.values())

    async def test_requires_auth(self, client: AsyncClient):
        response = await client.get("/challenges")
        assert response.status_code == 401


class TestProgress:
    async def test_posts_complete_daily_challenge(self, authed_client: AsyncClient):
        for i in range(3):
            await authed_client.post("/posts", json={"content": f"daily {i}"})

        daily = _by_type((await authed_client.get("/challenges")).json())["daily"]
        assert daily["progress"] == 3
        assert daily["completed"] is True

        profile = (await authed_client.get("/users/me")).json()
        assert profile["coins"] == 150
        assert profile["challengesCompleted"] == 1

    async def test_reward_paid_once(self, authed_client: AsyncClient):
        for i in range(5):
            await authed_client.post("/posts", json={"content": f"daily {i}"})
        daily = _by_type((await authed_client.get("/challenges")).json())["daily"]
        assert daily["progress"] == 3
        assert (await authed_client.get("/users/me")).json()["coins"] == 150

    async def test_likes_advance_author_weekly_challenge(self, client: AsyncClient, login):
        alice = await login("alice")
        alice_headers = {"Authorization": f"Bearer {alice['accessToken']}"}
        post = (await client.post("/posts", json={"content": "like me"}, headers=alice_headers)).json()

        bob = await login("bob")
        await client.post(f"/posts/{post['id']}/like", headers={"Authorization": f"Bearer {bob['accessToken']}"})

        weekly = _by_type((await client.get("/challenges", headers=alice_headers)).json())["weekly"]
        assert weekly["progress"] == 1


class TestReseed:
    async def test_expired_set_is_replaced(self, db_session: AsyncSession):
        past = utcnow() - timedelta(days=10)
        user = await register_user(db_session, "frank", "password123", now=past)

        challenges = await list_challenges(db_session, user)
        await db_session.commit()

        fresh = [c for c in challenges if c.created_at != past]
        assert {c.type for c in fresh} == {"daily", "weekly"}
        assert len(await ChallengeRepository(db_session).list_for_owner(user.id)) == 4

    async def test_active_set_is_kept(self, db_session: AsyncSession):
        user = await register_user(db_session, "grace", "password123")
        challenges = await list_challenges(db_session, user)
        assert len(challenges) == 2
