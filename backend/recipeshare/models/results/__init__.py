"""Result models handed to the presentation layer."""

from recipeshare.models.results.notification import Notification
from recipeshare.models.results.views import (
    FeedState,
    FollowingListState,
    FollowingRow,
    RecipeListItem,
    RecipeListState,
)

__all__ = [
    "Notification",
    "FeedState", "FollowingListState", "FollowingRow", "RecipeListItem", "RecipeListState",
]
