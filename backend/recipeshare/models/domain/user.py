"""User domain models."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, timezone


class UserCreate(BaseModel):
    """Payload for registering a user profile."""
    uid: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    photo_url: Optional[str] = None


class SessionUser(BaseModel):
    """The signed-in user, as resolved by the session provider."""
    uid: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    photo_url: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
