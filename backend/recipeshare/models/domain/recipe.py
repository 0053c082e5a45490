"""Recipe domain model."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, timezone
from uuid import uuid4


class Ingredient(BaseModel):
    name: str
    amount: str = ""


class RecipeCreate(BaseModel):
    """Payload for creating a recipe."""
    user_id: str
    title: str
    author: str = ""
    description: str = ""
    plain: str = ""
    image: Optional[str] = None
    ingredients: list[Ingredient] = Field(default_factory=list)


class RecipeUpdate(BaseModel):
    """Payload for updating a recipe."""
    title: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    plain: Optional[str] = None
    image: Optional[str] = None
    ingredients: Optional[list[Ingredient]] = None


class Recipe(BaseModel):
    """A recipe owned by a single user."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    title: str
    author: str = ""
    description: str = ""
    plain: str = ""
    image: Optional[str] = None
    ingredients: list[Ingredient] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
