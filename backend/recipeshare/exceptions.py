"""Domain-level exceptions for follow requests, search and navigation."""

from __future__ import annotations


class RecipeshareError(Exception):
    """Base class for recipeshare errors."""

    reason: str = "unknown"

    def __init__(self, reason: str | None = None) -> None:
        super().__init__(reason or self.reason)
        if reason:
            self.reason = reason


class RelationNotFound(RecipeshareError):
    reason = "relation_not_found"


class RelationConflict(RecipeshareError):
    reason = "relation_exists"


class SelfFollowError(RelationConflict):
    reason = "self_follow"


class UserNotFound(RecipeshareError):
    reason = "user_not_found"


class SearchUnavailable(RecipeshareError):
    reason = "search_unavailable"


class InvalidTransition(RecipeshareError):
    reason = "invalid_transition"
