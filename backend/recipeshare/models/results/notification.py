"""
Transient user-facing notification.
"""

from pydantic import BaseModel
from typing import Optional

from recipeshare.models.enums import NotificationIntent


class Notification(BaseModel):
    """A one-shot toast emitted by a controller."""
    title: str
    subtitle: Optional[str] = None
    intent: NotificationIntent = NotificationIntent.SUCCESS
