"""View state models for the following panes and the recipe list."""

from pydantic import BaseModel, model_validator
from typing import Optional

from recipeshare.models.domain.relation import Relation
from recipeshare.models.enums import ListMode, Pane


class NavigationState(BaseModel):
    """Which pane is showing and, on the detail pane, which relation."""
    pane: Pane = Pane.LIST
    active_relation: Optional[Relation] = None

    @model_validator(mode="after")
    def check_active_relation(self):
        if self.pane == Pane.DETAIL and self.active_relation is None:
            raise ValueError("detail pane requires an active relation")
        if self.pane == Pane.LIST and self.active_relation is not None:
            raise ValueError("list pane cannot hold an active relation")
        return self


class ListState(BaseModel):
    """Mode and query of the recipe list; a non-empty query means search."""
    mode: ListMode = ListMode.BROWSE
    query: str = ""

    @model_validator(mode="after")
    def check_mode_matches_query(self):
        expected = ListMode.SEARCH if self.query else ListMode.BROWSE
        if self.mode != expected:
            raise ValueError(f"mode {self.mode.value} does not match query {self.query!r}")
        return self
