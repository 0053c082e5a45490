"""Render-time fallbacks for user labels and recipe rows."""

from recipeshare.config import settings
from recipeshare.models import Recipe, RecipeListItem, SearchHit, UserSnapshot


def user_label(display_name: str | None, email: str | None) -> str:
    return display_name or email or settings.MISSING_USER_LABEL


def snapshot_label(snapshot: UserSnapshot | None) -> str:
    if snapshot is None:
        return settings.MISSING_USER_LABEL
    return user_label(snapshot.display_name, snapshot.email)


def recipe_item(recipe: Recipe, editable: bool = True) -> RecipeListItem:
    return RecipeListItem(
        id=recipe.id,
        title=recipe.title,
        author=recipe.author,
        image=recipe.image,
        editable=editable,
        primary=recipe.title,
        secondary=recipe.author,
    )


def recipe_item_from_hit(hit: SearchHit, current_user_id: str) -> RecipeListItem:
    """Search rows are editable only by their owner and render highlight markup."""
    fields = hit.fields
    highlight = hit.highlight or {}
    title = fields.get("title") or ""
    author = fields.get("author") or ""
    return RecipeListItem(
        id=hit.object_id,
        title=title,
        author=author,
        image=fields.get("image"),
        editable=fields.get("user_id") == current_user_id,
        primary=highlight.get("title") or title,
        secondary=highlight.get("author") or author,
    )
