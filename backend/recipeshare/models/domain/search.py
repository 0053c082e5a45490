"""Search index hits and reconciled candidates."""

from pydantic import BaseModel, Field
from typing import Any, Optional


class SearchHit(BaseModel):
    """A ranked record returned by the full-text index."""
    object_id: str
    fields: dict[str, Any] = Field(default_factory=dict)
    highlight: Optional[dict[str, str]] = None


class SearchResponse(BaseModel):
    """Hits for one query, in index ranking order."""
    query: str
    hits: list[SearchHit] = Field(default_factory=list)


class CandidateUser(BaseModel):
    """A user search hit that may be invited, annotated with any pending request."""
    object_id: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    photo_url: Optional[str] = None
    highlight: Optional[dict[str, str]] = None
    requested: Optional[str] = None
