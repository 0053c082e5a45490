"""Render-ready snapshots pushed to the presentation layer."""

from pydantic import BaseModel, Field
from typing import Optional

from recipeshare.models.domain.relation import Relation
from recipeshare.models.enums import ListMode, Pane, RowAction


class FollowingRow(BaseModel):
    """A single row of the following list: a search candidate or an existing relation."""
    user_id: str
    label: str
    photo_url: Optional[str] = None
    interactive: bool = True
    action: RowAction
    relation_id: Optional[str] = None


class RecipeListItem(BaseModel):
    """A recipe row; primary/secondary carry highlight markup in search mode."""
    id: str
    title: str
    author: str = ""
    image: Optional[str] = None
    editable: bool = False
    primary: str
    secondary: str


class FeedState(BaseModel):
    """Loading flags and items of a paginated feed."""
    loading: bool = True
    loading_error: Optional[str] = None
    loading_more: bool = False
    loading_more_error: Optional[str] = None
    has_more: bool = False
    items: list[RecipeListItem] = Field(default_factory=list)


class FollowingListState(BaseModel):
    """Everything the two-pane following view renders."""
    query: str = ""
    loading: bool = True
    no_users: bool = False
    search_rows: list[FollowingRow] = Field(default_factory=list)
    relation_rows: list[FollowingRow] = Field(default_factory=list)
    pane: Pane = Pane.LIST
    active_relation: Optional[Relation] = None
    active_label: Optional[str] = None
    detail: Optional[FeedState] = None


class RecipeListState(BaseModel):
    """Everything the hybrid recipe list renders."""
    mode: ListMode = ListMode.BROWSE
    query: str = ""
    feed: FeedState = Field(default_factory=FeedState)
    search_items: Optional[list[RecipeListItem]] = None
    empty: bool = False
    show_load_more: bool = False
