"""Browse/search arbitration for the recipe list."""

from collections.abc import Callable

from recipeshare.logging import get_logger
from recipeshare.models import (
    ListMode,
    ListState,
    Notification,
    NotificationIntent,
    RecipeListItem,
    RecipeListState,
    SearchHit,
)
from recipeshare.services.display import recipe_item_from_hit
from recipeshare.services.notifications import NotificationSink
from recipeshare.services.recipe_feed import RecipeFeed
from recipeshare.services.search import SearchAdapter

logger = get_logger('services.list_mode')


class ListModeController:
    """
    Owns the recipe list's mode and decides which source it renders.

    Browse renders the paginated feed of the current user's recipes. A
    non-empty query switches to search; each query carries a token and its
    response is committed only while that token is current, so results for an
    older query never replace a newer one. Clearing the query returns to
    browse without a network call.
    """

    def __init__(
        self,
        feed: RecipeFeed,
        search: SearchAdapter,
        current_user_id: str,
        notifier: NotificationSink,
    ):
        self.feed = feed
        self.search = search
        self.current_user_id = current_user_id
        self.notifier = notifier
        self._state = ListState()
        self._token = 0
        self._hits: list[SearchHit] | None = None
        self._listeners: list[Callable[[], None]] = []
        feed.add_listener(self._changed)

    @property
    def state(self) -> ListState:
        return self._state

    @property
    def mode(self) -> ListMode:
        return self._state.mode

    @property
    def query(self) -> str:
        return self._state.query

    def add_listener(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def close(self) -> None:
        self._listeners.clear()
        self.feed.close()

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener()

    async def set_query(self, query: str) -> None:
        query = query if query.strip() else ""
        self._token += 1
        token = self._token
        mode = ListMode.SEARCH if query else ListMode.BROWSE
        self._state = ListState(mode=mode, query=query)
        self._hits = None
        self._changed()
        if mode == ListMode.BROWSE:
            return

        logger.debug("Recipe search %d: %r", token, query)
        try:
            response = await self.search.search(query)
        except Exception as exc:
            if token != self._token:
                return
            logger.error(f"Recipe search failed for {query!r}: {exc}")
            self.notifier.notify(
                Notification(
                    title="An error occurred while searching your recipes.",
                    subtitle=str(exc),
                    intent=NotificationIntent.DANGER,
                )
            )
            return

        if token != self._token:
            logger.debug("Dropping stale recipe search %d (current %d)", token, self._token)
            return
        self._hits = response.hits
        self._changed()

    async def load_more(self) -> bool:
        """Extend the browse window; ignored in search mode and while a page is loading."""
        if self.mode == ListMode.SEARCH:
            return False
        return await self.feed.load_more()

    def search_items(self) -> list[RecipeListItem] | None:
        """Search rows for the current query, or None while its response is pending."""
        if self.mode != ListMode.SEARCH or self._hits is None:
            return None
        return [recipe_item_from_hit(hit, self.current_user_id) for hit in self._hits]

    def snapshot(self) -> RecipeListState:
        feed = self.feed.snapshot()
        browsing = self.mode == ListMode.BROWSE
        return RecipeListState(
            mode=self.mode,
            query=self.query,
            feed=feed,
            search_items=self.search_items(),
            empty=browsing and not feed.loading and not feed.loading_error and not feed.items,
            show_load_more=browsing and feed.has_more and not feed.loading_more,
        )
