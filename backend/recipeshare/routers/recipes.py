"""Recipe write endpoints; reads go through the realtime recipe list."""

from fastapi import APIRouter, HTTPException

from recipeshare.dependencies import RecipeServiceDep
from recipeshare.models import Recipe, RecipeCreate, RecipeUpdate

router = APIRouter()


@router.post("/", response_model=Recipe, status_code=201)
async def create_recipe(body: RecipeCreate, service: RecipeServiceDep):
    return await service.create_recipe(body)


@router.get("/{recipe_id}", response_model=Recipe)
async def get_recipe(recipe_id: str, service: RecipeServiceDep):
    recipe = await service.get_recipe(recipe_id)
    if not recipe:
        raise HTTPException(404, "Recipe not found")
    return recipe


@router.put("/{recipe_id}", response_model=Recipe)
async def update_recipe(recipe_id: str, body: RecipeUpdate, service: RecipeServiceDep):
    recipe = await service.update_recipe(recipe_id, body)
    if not recipe:
        raise HTTPException(404, "Recipe not found")
    return recipe


@router.delete("/{recipe_id}")
async def delete_recipe(recipe_id: str, service: RecipeServiceDep):
    deleted = await service.delete_recipe(recipe_id)
    if not deleted:
        raise HTTPException(404, "Recipe not found")
    return {"status": "deleted", "id": recipe_id}
