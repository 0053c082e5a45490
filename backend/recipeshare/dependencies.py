"""
Dependency injection for FastAPI routes.

Provides typed service dependencies that enable IDE navigation (Ctrl+Click).
"""

from typing import Annotated
from fastapi import Request, Depends

from recipeshare.services.recipes import RecipeService
from recipeshare.services.relation_backend import RelationBackend
from recipeshare.services.users import UserDirectory


def get_user_directory(request: Request) -> UserDirectory:
    return request.app.state.users


def get_recipe_service(request: Request) -> RecipeService:
    return request.app.state.recipe_service


def get_relation_backend(request: Request) -> RelationBackend:
    return request.app.state.relation_backend


UserDirectoryDep = Annotated[UserDirectory, Depends(get_user_directory)]
RecipeServiceDep = Annotated[RecipeService, Depends(get_recipe_service)]
RelationBackendDep = Annotated[RelationBackend, Depends(get_relation_backend)]
