"""SQLite FTS5 full-text index holding denormalized user and recipe records."""

import html
import re

import aiosqlite

from recipeshare.config import settings
from recipeshare.database.db import connect
from recipeshare.logging import get_logger
from recipeshare.models import Recipe, SearchHit, SessionUser

logger = get_logger('services.search_index')

# Column order must match init_db.sql; highlight() addresses columns by position.
INDEX_COLUMNS: dict[str, tuple[str, ...]] = {
    "users": ("object_id", "display_name", "email", "photo_url"),
    "recipes": ("object_id", "user_id", "title", "author", "description", "image"),
}
HIGHLIGHT_COLUMNS: dict[str, tuple[str, ...]] = {
    "users": ("display_name", "email"),
    "recipes": ("title", "author", "description"),
}

_MARK_OPEN = "\x02"
_MARK_CLOSE = "\x03"
_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


def build_match_expression(text: str) -> str | None:
    """Turn free text into an FTS5 expression matching every token as a prefix."""
    tokens = _TOKEN_RE.findall(text)
    if not tokens:
        return None
    return " ".join(f'"{token}"*' for token in tokens)


def render_highlight(marked: str | None) -> str:
    """Escape stored text and swap the internal match markers for the configured tags."""
    escaped = html.escape(marked or "")
    return (
        escaped
        .replace(_MARK_OPEN, settings.HIGHLIGHT_PRE_TAG)
        .replace(_MARK_CLOSE, settings.HIGHLIGHT_POST_TAG)
    )


class SqliteSearchIndex:
    """Writes and queries the `<name>_index` FTS5 tables."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    async def _get_db(self) -> aiosqlite.Connection:
        return await connect(self.db_path)

    def _table(self, index_name: str) -> str:
        if index_name not in INDEX_COLUMNS:
            raise ValueError(f"Unknown search index: {index_name}")
        return f"{index_name}_index"

    async def save_object(self, index_name: str, object_id: str, fields: dict) -> None:
        table = self._table(index_name)
        columns = INDEX_COLUMNS[index_name]
        values = [object_id] + [fields.get(col) or "" for col in columns[1:]]
        placeholders = ", ".join("?" for _ in columns)
        db = await self._get_db()
        try:
            await db.execute(f"DELETE FROM {table} WHERE object_id = ?", (object_id,))
            await db.execute(
                f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
                values,
            )
            await db.commit()
        finally:
            await db.close()

    async def delete_object(self, index_name: str, object_id: str) -> None:
        table = self._table(index_name)
        db = await self._get_db()
        try:
            await db.execute(f"DELETE FROM {table} WHERE object_id = ?", (object_id,))
            await db.commit()
        finally:
            await db.close()

    async def save_user(self, user: SessionUser) -> None:
        await self.save_object(
            "users",
            user.uid,
            {"display_name": user.display_name, "email": user.email, "photo_url": user.photo_url},
        )

    async def save_recipe(self, recipe: Recipe) -> None:
        await self.save_object(
            "recipes",
            recipe.id,
            {
                "user_id": recipe.user_id,
                "title": recipe.title,
                "author": recipe.author,
                "description": recipe.description,
                "image": recipe.image,
            },
        )

    async def search(self, index_name: str, text: str, limit: int) -> list[SearchHit]:
        """Ranked hits (best first) with per-field highlight markup."""
        table = self._table(index_name)
        expression = build_match_expression(text)
        if expression is None:
            return []

        columns = INDEX_COLUMNS[index_name]
        highlighted = HIGHLIGHT_COLUMNS[index_name]
        highlight_sql = ", ".join(
            f"highlight({table}, {columns.index(col)}, ?, ?) AS hl_{col}"
            for col in highlighted
        )
        query = (
            f"SELECT {', '.join(columns)}, {highlight_sql} FROM {table} "
            f"WHERE {table} MATCH ? ORDER BY rank LIMIT ?"
        )
        params = [_MARK_OPEN, _MARK_CLOSE] * len(highlighted) + [expression, limit]
        db = await self._get_db()
        try:
            cursor = await db.execute(query, params)
            rows = await cursor.fetchall()
        finally:
            await db.close()

        hits = []
        for row in rows:
            row = dict(row)
            hits.append(
                SearchHit(
                    object_id=row["object_id"],
                    fields={col: row[col] or None for col in columns[1:]},
                    highlight={col: render_highlight(row[f"hl_{col}"]) for col in highlighted},
                )
            )
        logger.debug("Index %s matched %d hits for %r", index_name, len(hits), text)
        return hits
