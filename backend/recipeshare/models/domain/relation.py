"""Relation domain model."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, timezone
from uuid import uuid4


class UserSnapshot(BaseModel):
    """Target user's profile as captured when the relation was written."""
    display_name: Optional[str] = None
    email: Optional[str] = None
    photo_url: Optional[str] = None


class Relation(BaseModel):
    """A directed follow edge from one user to another, pending or confirmed."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    from_user_id: str
    to_user_id: str
    confirmed: bool = False
    to_user: Optional[UserSnapshot] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
