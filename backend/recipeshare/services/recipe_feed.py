"""Cursor-paginated feed of one user's recipes, newest update first."""

from collections.abc import Callable

import aiosqlite

from recipeshare.config import settings
from recipeshare.database.db import connect
from recipeshare.logging import get_logger
from recipeshare.models import FeedState, Recipe
from recipeshare.services.display import recipe_item
from recipeshare.services.recipes import row_to_recipe

logger = get_logger('services.recipe_feed')


class RecipeFeed:
    """
    Incrementally loaded window over ``recipes`` ordered by ``updated_at`` desc.

    Pages are fetched with a keyset cursor on ``(updated_at, id)``. Only one
    fetch runs at a time: ``load_more`` while a load is in flight returns
    without fetching.
    """

    def __init__(self, db_path: str, user_id: str, limit: int | None = None, editable: bool = True):
        self.db_path = db_path
        self.user_id = user_id
        self.limit = limit or settings.RECIPES_PAGE_SIZE
        self.editable = editable
        self.items: list[Recipe] = []
        self.loading = False
        self.loading_error: str | None = None
        self.loading_more = False
        self.loading_more_error: str | None = None
        self.has_more = False
        self._cursor: tuple[str, str] | None = None
        self._loaded = False
        self._listeners: list[Callable[[], None]] = []

    async def _get_db(self) -> aiosqlite.Connection:
        return await connect(self.db_path)

    def add_listener(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def close(self) -> None:
        self._listeners.clear()

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener()

    @property
    def busy(self) -> bool:
        return self.loading or self.loading_more

    async def _fetch_page(self) -> list[Recipe]:
        conditions = ["user_id = ?"]
        params: list = [self.user_id]
        if self._cursor is not None:
            updated_at, recipe_id = self._cursor
            conditions.append("(updated_at < ? OR (updated_at = ? AND id < ?))")
            params.extend([updated_at, updated_at, recipe_id])
        params.append(self.limit + 1)
        query = (
            f"SELECT * FROM recipes WHERE {' AND '.join(conditions)} "
            "ORDER BY updated_at DESC, id DESC LIMIT ?"
        )
        db = await self._get_db()
        try:
            cursor = await db.execute(query, params)
            rows = [dict(r) for r in await cursor.fetchall()]
        finally:
            await db.close()

        page = rows[:self.limit]
        self.has_more = len(rows) > self.limit
        if page:
            self._cursor = (page[-1]["updated_at"], page[-1]["id"])
        return [row_to_recipe(row) for row in page]

    async def load(self) -> None:
        """Fetch the first page; a no-op once loaded or while loading."""
        if self._loaded or self.busy:
            return
        self.loading = True
        self.loading_error = None
        self._changed()
        try:
            self.items = await self._fetch_page()
            self._loaded = True
        except Exception as exc:
            logger.error(f"Initial recipe page for {self.user_id} failed: {exc}")
            self.loading_error = str(exc)
        finally:
            self.loading = False
        logger.debug("Loaded %d recipes for %s (has_more=%s)", len(self.items), self.user_id, self.has_more)
        self._changed()

    async def load_more(self) -> bool:
        """Extend the window by one page. Returns False when nothing was fetched."""
        if self.busy or not self._loaded or not self.has_more:
            return False
        self.loading_more = True
        self.loading_more_error = None
        self._changed()
        try:
            self.items = self.items + await self._fetch_page()
        except Exception as exc:
            logger.error(f"Next recipe page for {self.user_id} failed: {exc}")
            self.loading_more_error = str(exc)
        finally:
            self.loading_more = False
        self._changed()
        return self.loading_more_error is None

    def snapshot(self) -> FeedState:
        return FeedState(
            loading=self.loading or not (self._loaded or self.loading_error),
            loading_error=self.loading_error,
            loading_more=self.loading_more,
            loading_more_error=self.loading_more_error,
            has_more=self.has_more,
            items=[recipe_item(recipe, editable=self.editable) for recipe in self.items],
        )


async def query_page(
    db_path: str,
    user_id: str,
    limit: int | None = None,
    editable: bool = True,
) -> RecipeFeed:
    """Open a feed of ``user_id``'s recipes and load its first page."""
    feed = RecipeFeed(db_path, user_id, limit=limit, editable=editable)
    await feed.load()
    return feed
