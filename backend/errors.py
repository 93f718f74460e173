"""Domain errors raised by the group, swipe and matching services.

The HTTP layer translates each class into a status code; nothing below the
app module imports FastAPI.
"""
from __future__ import annotations


class GroupSwipeError(Exception):
    """Base class for errors surfaced to the caller."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(GroupSwipeError):
    status_code = 404


class ForbiddenError(GroupSwipeError):
    status_code = 403


class NotGroupMemberError(ForbiddenError):
    def __init__(self, message: str = "User not in this group") -> None:
        super().__init__(message)


class InvalidRequestError(GroupSwipeError):
    status_code = 400
