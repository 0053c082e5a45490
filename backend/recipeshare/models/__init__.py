"""
Recipeshare models.

Usage:
    from recipeshare.models import Relation, SearchHit, CandidateUser
    from recipeshare.models import NotificationIntent, ListMode, Pane
    from recipeshare.models import Notification, FollowingListState
"""

# --- Enums ---
from recipeshare.models.enums import (
    ListMode,
    NotificationIntent,
    Pane,
    RowAction,
)

# --- Domain models ---
from recipeshare.models.domain import (
    SessionUser, UserCreate,
    Relation, UserSnapshot,
    Ingredient, Recipe, RecipeCreate, RecipeUpdate,
    CandidateUser, SearchHit, SearchResponse,
    ListState, NavigationState,
)

# --- Result models ---
from recipeshare.models.results import (
    Notification,
    FeedState, FollowingListState, FollowingRow, RecipeListItem, RecipeListState,
)

__all__ = [
    # Enums
    "ListMode", "NotificationIntent", "Pane", "RowAction",
    # Domain
    "SessionUser", "UserCreate",
    "Relation", "UserSnapshot",
    "Ingredient", "Recipe", "RecipeCreate", "RecipeUpdate",
    "CandidateUser", "SearchHit", "SearchResponse",
    "ListState", "NavigationState",
    # Results
    "Notification",
    "FeedState", "FollowingListState", "FollowingRow", "RecipeListItem", "RecipeListState",
]
