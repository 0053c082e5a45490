"""One-shot full-text queries against a single named index."""

from typing import Protocol

import aiosqlite

from recipeshare.config import settings
from recipeshare.exceptions import SearchUnavailable
from recipeshare.logging import get_logger
from recipeshare.models import SearchHit, SearchResponse

logger = get_logger('services.search')


class SearchIndex(Protocol):
    async def search(self, index_name: str, text: str, limit: int) -> list[SearchHit]:
        ...


class SearchAdapter:
    """
    Explicitly constructed search client bound to one index.

    Holds no state between calls; each query returns the hits in the index's
    ranking order.
    """

    def __init__(self, index: SearchIndex, index_name: str, hit_limit: int | None = None):
        self.index = index
        self.index_name = index_name
        self.hit_limit = hit_limit or settings.SEARCH_HIT_LIMIT

    async def search(self, text: str) -> SearchResponse:
        try:
            hits = await self.index.search(self.index_name, text, self.hit_limit)
        except aiosqlite.Error as exc:
            logger.error(f"Search on {self.index_name} failed: {exc}")
            raise SearchUnavailable(str(exc)) from exc
        return SearchResponse(query=text, hits=hits)
