"""Domain models: users, follow relations, recipes, search hits and view state."""

from recipeshare.models.domain.user import SessionUser, UserCreate
from recipeshare.models.domain.relation import Relation, UserSnapshot
from recipeshare.models.domain.recipe import Ingredient, Recipe, RecipeCreate, RecipeUpdate
from recipeshare.models.domain.search import CandidateUser, SearchHit, SearchResponse
from recipeshare.models.domain.navigation import ListState, NavigationState

__all__ = [
    "SessionUser", "UserCreate",
    "Relation", "UserSnapshot",
    "Ingredient", "Recipe", "RecipeCreate", "RecipeUpdate",
    "CandidateUser", "SearchHit", "SearchResponse",
    "ListState", "NavigationState",
]
