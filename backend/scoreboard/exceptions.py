from fastapi import HTTPException
from pydantic import BaseModel
from typing import Optional


class ProblemDetail(BaseModel):
    """RFC 7807 compliant error response."""

    type: str = "about:blank"
    title: str
    detail: Optional[str] = None
    status: int
    instance: Optional[str] = None
    code: str


class DomainException(Exception):
    """Base class for domain-specific exceptions."""

    def __init__(
        self,
        status_code: int,
        title: str,
        *,
        code: str,
        detail: str | None = None,
        type_: str = "about:blank",
    ) -> None:
        super().__init__(detail or title)
        self.status_code = status_code
        self.title = title
        self.detail = detail
        self.type = type_
        self.code = code


class PlayerAlreadyExists(DomainException):
    def __init__(self, player_id: str) -> None:
        super().__init__(
            status_code=409,
            title="Player exists",
            detail=f"player '{player_id}' already exists",
            code="player_exists",
        )


class PlayerNotFound(DomainException):
    def __init__(self, player_id: str) -> None:
        super().__init__(
            status_code=404,
            title="Player not found",
            detail=f"player '{player_id}' not found",
            code="player_not_found",
        )


class MatchNotFound(DomainException):
    def __init__(self, match_id: str) -> None:
        super().__init__(
            status_code=404,
            title="Match not found",
            detail=f"match '{match_id}' not found",
            code="match_not_found",
        )


class StorageUnavailable(DomainException):
    """The backing store could not be reached or failed transiently.

    The detail is deliberately generic; the underlying error is logged where it
    is caught and never sent to clients.
    """

    def __init__(self) -> None:
        super().__init__(
            status_code=503,
            title="Storage unavailable",
            detail="storage is temporarily unavailable, please try again",
            code="storage_unavailable",
        )


class MalformedRecord(ValueError):
    """A stored record could not be decoded into its domain type."""

    def __init__(self, record_id: str, reason: str) -> None:
        super().__init__(f"record '{record_id}' is malformed: {reason}")
        self.record_id = record_id
        self.reason = reason


def http_problem(
    status_code: int,
    detail: str,
    code: str,
    *,
    headers: Optional[dict[str, str]] = None,
) -> HTTPException:
    """Create an HTTPException with an attached problem code."""

    exc = HTTPException(status_code=status_code, detail=detail, headers=headers)
    setattr(exc, "code", code)
    return exc
