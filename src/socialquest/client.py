"""Async HTTP client for the SocialQuest API.

Tokens live on an explicit ``ClientSession`` passed to every authenticated
call, so several sessions can share one client. A 401 on an authenticated
call clears the session's tokens and raises ``SessionExpiredError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

logger = structlog.get_logger()

DEFAULT_TIMEOUT = 10.0


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class SessionExpiredError(ApiError):
    """The access token was absent or expired. The session has been invalidated."""


@dataclass
class ClientSession:
    """Tokens and the cached profile of one signed-in user."""

    access_token: str | None = None
    refresh_token: str | None = None
    user: dict[str, Any] | None = field(default=None)

    @property
    def authenticated(self) -> bool:
        return self.access_token is not None

    def invalidate(self) -> None:
        self.access_token = None
        self.refresh_token = None
        self.user = None


def _detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return str(body)


class SocialQuestClient:
    """Thin typed wrapper over ``httpx.AsyncClient``.

    Args:
        base_url: API root, e.g. ``http://localhost:5000``.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests pass an ``ASGITransport``).
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def __aenter__(self) -> SocialQuestClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        session: ClientSession | None = None,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:  # noqa: ANN401
        headers: dict[str, str] = {}
        if session is not None:
            if session.access_token is None:
                raise SessionExpiredError(401, "Not signed in")
            headers["Authorization"] = f"Bearer {session.access_token}"

        response = await self._http.request(method, path, json=json, params=params, headers=headers)

        if response.status_code == 401 and session is not None:
            session.invalidate()
            logger.info("client_session_expired", path=path)
            raise SessionExpiredError(401, _detail(response))
        if response.is_error:
            raise ApiError(response.status_code, _detail(response))
        return response.json()

    # ── Authentication ──

    async def register(self, username: str, password: str) -> int:
        """Create an account. Returns the new user id."""
        body = await self._request("POST", "/auth/register", json={"username": username, "password": password})
        return int(body["userId"])

    async def login(self, username: str, password: str) -> ClientSession:
        """Sign in and return a fresh session holding both tokens and the profile."""
        body = await self._request("POST", "/auth/login", json={"username": username, "password": password})
        return ClientSession(
            access_token=body["accessToken"],
            refresh_token=body["refreshToken"],
            user=body["user"],
        )

    async def refresh(self, session: ClientSession) -> ClientSession:
        """Rotate the session's tokens in place."""
        try:
            body = await self._request("POST", "/auth/refresh", json={"refreshToken": session.refresh_token})
        except ApiError as exc:
            if exc.status_code in (401, 403):
                session.invalidate()
                raise SessionExpiredError(exc.status_code, exc.detail) from exc
            raise
        session.access_token = body["accessToken"]
        session.refresh_token = body["refreshToken"]
        return session

    async def logout(self, session: ClientSession) -> None:
        """Revoke the refresh token on the server and clear the session."""
        try:
            await self._request("POST", "/auth/logout", json={"refreshToken": session.refresh_token})
        finally:
            session.invalidate()

    # ── Profile ──

    async def get_profile(self, session: ClientSession) -> dict[str, Any]:
        session.user = await self._request("GET", "/users/me", session=session)
        return session.user

    async def add_inventory_item(self, session: ClientSession, item: str) -> dict[str, Any]:
        session.user = await self._request("POST", "/users/inventory", session=session, json={"item": item})
        return session.user

    # ── Feed ──

    async def list_posts(self, session: ClientSession, page: int = 1, limit: int | None = None) -> dict[str, Any]:
        """One feed page: ``{"posts", "total", "page", "pages"}``."""
        params: dict[str, Any] = {"page": page}
        if limit is not None:
            params["limit"] = limit
        return await self._request("GET", "/posts", session=session, params=params)

    async def create_post(self, session: ClientSession, content: str) -> dict[str, Any]:
        return await self._request("POST", "/posts", session=session, json={"content": content})

    async def toggle_like(self, session: ClientSession, post_id: int) -> dict[str, Any]:
        return await self._request("POST", f"/posts/{post_id}/like", session=session)

    async def add_comment(self, session: ClientSession, post_id: int, content: str) -> dict[str, Any]:
        return await self._request("POST", f"/posts/{post_id}/comments", session=session, json={"content": content})

    # ── Gamification ──

    async def list_challenges(self, session: ClientSession) -> list[dict[str, Any]]:
        return await self._request("GET", "/challenges", session=session)

    async def check_level_up(self, session: ClientSession) -> dict[str, Any]:
        """Ask the server for a level-up check. ``leveledUp`` is always present."""
        return await self._request("POST", "/level-up", session=session)
