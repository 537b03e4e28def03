"""Typed outcomes for account operations."""

from enum import Enum


class ResultStatus(Enum):
    """
    Outcome of an account CRUD call.

    Expected failure modes (duplicate, not found) are returned, not raised,
    so callers can choose their own messaging.
    """

    SUCCESS = (0, "success")
    DUPLICATE_RESOURCE = (1001, "resource already exists")
    RESOURCE_NOT_FOUND = (1002, "resource not found")
    BACKING_STORE_ERROR = (5001, "backing store operation failed")

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message

    @property
    def ok(self) -> bool:
        return self is ResultStatus.SUCCESS
