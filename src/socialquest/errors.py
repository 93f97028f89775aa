"""Domain exceptions translated to HTTP responses by the global error handler."""

from __future__ import annotations

from typing import Any


class SocialQuestError(Exception):
    """Base class for errors that map onto an HTTP status code."""

    status_code: int = 500

    def __init__(self, detail: str, *, status_code: int | None = None, field: str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.field = field
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Serialize for an API response body."""
        body: dict[str, Any] = {"detail": self.detail}
        if self.field is not None:
            body["field"] = self.field
        return body


class ValidationError(SocialQuestError):
    """Malformed or out-of-range input."""

    status_code = 400


class AuthError(SocialQuestError):
    """Missing, expired or rejected credentials.

    401 when credentials are absent or expired, 403 when they were presented
    and rejected.
    """

    status_code = 401

    @classmethod
    def rejected(cls, detail: str) -> AuthError:
        return cls(detail, status_code=403)


class NotFoundError(SocialQuestError):
    """Referenced user or post does not exist."""

    status_code = 404


class ConflictError(SocialQuestError):
    """Uniqueness violation, e.g. a duplicate username."""

    status_code = 409
