"""Recipe writes, mirrored into the recipes search index."""

import json
from datetime import datetime, timezone
from uuid import uuid4

import aiosqlite

from recipeshare.database.db import connect
from recipeshare.logging import get_logger
from recipeshare.models import Ingredient, Recipe, RecipeCreate, RecipeUpdate
from recipeshare.services.search_index import SqliteSearchIndex

logger = get_logger('services.recipes')


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def row_to_recipe(row: dict) -> Recipe:
    return Recipe(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        author=row["author"],
        description=row["description"],
        plain=row["plain"],
        image=row.get("image"),
        ingredients=[Ingredient(**i) for i in json.loads(row["ingredients"])],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class RecipeService:
    """CRUD for recipes; every write is re-indexed for full-text search."""

    def __init__(self, db_path: str, index: SqliteSearchIndex):
        self.db_path = db_path
        self.index = index

    async def _get_db(self) -> aiosqlite.Connection:
        return await connect(self.db_path)

    async def create_recipe(self, data: RecipeCreate) -> Recipe:
        now = _now()
        recipe = Recipe(
            id=str(uuid4()),
            user_id=data.user_id,
            title=data.title,
            author=data.author,
            description=data.description,
            plain=data.plain,
            image=data.image,
            ingredients=data.ingredients,
            created_at=now,
            updated_at=now,
        )
        db = await self._get_db()
        try:
            await db.execute(
                """INSERT INTO recipes
                   (id, user_id, title, author, description, plain, image, ingredients, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    recipe.id,
                    recipe.user_id,
                    recipe.title,
                    recipe.author,
                    recipe.description,
                    recipe.plain,
                    recipe.image,
                    json.dumps([i.model_dump() for i in recipe.ingredients]),
                    now,
                    now,
                ),
            )
            await db.commit()
        finally:
            await db.close()
        await self.index.save_recipe(recipe)
        logger.info(f"Created recipe {recipe.id} for {recipe.user_id}")
        return recipe

    async def get_recipe(self, recipe_id: str) -> Recipe | None:
        db = await self._get_db()
        try:
            cursor = await db.execute("SELECT * FROM recipes WHERE id = ?", (recipe_id,))
            row = await cursor.fetchone()
            return row_to_recipe(dict(row)) if row else None
        finally:
            await db.close()

    async def update_recipe(self, recipe_id: str, data: RecipeUpdate) -> Recipe | None:
        existing = await self.get_recipe(recipe_id)
        if not existing:
            return None
        fields: dict = {}
        for key in ("title", "author", "description", "plain", "image"):
            value = getattr(data, key)
            if value is not None:
                fields[key] = value
        if data.ingredients is not None:
            fields["ingredients"] = json.dumps([i.model_dump() for i in data.ingredients])
        if not fields:
            return existing
        fields["updated_at"] = _now()
        set_clause = ", ".join(f"{k} = ?" for k in fields)
        db = await self._get_db()
        try:
            await db.execute(
                f"UPDATE recipes SET {set_clause} WHERE id = ?",
                list(fields.values()) + [recipe_id],
            )
            await db.commit()
        finally:
            await db.close()
        recipe = await self.get_recipe(recipe_id)
        await self.index.save_recipe(recipe)
        return recipe

    async def delete_recipe(self, recipe_id: str) -> bool:
        db = await self._get_db()
        try:
            cursor = await db.execute("DELETE FROM recipes WHERE id = ?", (recipe_id,))
            await db.commit()
            deleted = cursor.rowcount > 0
        finally:
            await db.close()
        if deleted:
            await self.index.delete_object("recipes", recipe_id)
        return deleted
