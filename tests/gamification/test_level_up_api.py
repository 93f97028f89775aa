"""POST /level-up tests."""

from httpx import AsyncClient

from socialquest.gamification.xp_service import REWARD_ITEMS


class TestLevelUpEndpoint:
    async def test_not_enough_xp(self, authed_client: AsyncClient):
        response = await authed_client.post("/level-up")
        assert response.status_code == 200
        assert response.json() == {"leveledUp": False}

    async def test_level_up_after_ten_posts(self, authed_client: AsyncClient):
        for i in range(10):
            await authed_client.post("/posts", json={"content": f"grind {i}"})
        before = (await authed_client.get("/users/me")).json()
        assert before["xp"] == 100

        response = await authed_client.post("/level-up")
        data = response.json()
        assert data["leveledUp"] is True
        assert data["newLevel"] == 2
        assert data["rewardItem"] in REWARD_ITEMS

        after = (await authed_client.get("/users/me")).json()
        assert after["level"] == 2
        assert after["xp"] == 0
        assert after["coins"] == before["coins"] + 100
        assert after["inventory"] == [data["rewardItem"]]
        assert after["title"] == "Newbie"

    async def test_second_check_does_nothing(self, authed_client: AsyncClient):
        for i in range(10):
            await authed_client.post("/posts", json={"content": f"grind {i}"})
        await authed_client.post("/level-up")
        response = await authed_client.post("/level-up")
        assert response.json() == {"leveledUp": False}

    async def test_requires_auth(self, client: AsyncClient):
        response = await client.post("/level-up")
        assert response.status_code == 401
