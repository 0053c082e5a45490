"""
Enum definitions for the Recipeshare core.
"""
from enum import Enum


class NotificationIntent(str, Enum):
    """Presentation intent of a transient notification."""
    SUCCESS = "success"
    DANGER = "danger"


class Pane(str, Enum):
    """Which pane of the two-pane following view is showing."""
    LIST = "list"
    DETAIL = "detail"


class ListMode(str, Enum):
    """Data source currently authoritative for the recipe list."""
    BROWSE = "browse"
    SEARCH = "search"


class RowAction(str, Enum):
    """Action offered on a following-list row."""
    OPEN = "open"
    CANCEL = "cancel"
    INVITE = "invite"
