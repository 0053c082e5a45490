"""Merging user search hits with the signed-in user's follow requests."""

from collections.abc import Callable, Iterable

from recipeshare.logging import get_logger
from recipeshare.models import CandidateUser, NotificationIntent, Notification, Relation, SearchHit
from recipeshare.services.notifications import NotificationSink
from recipeshare.services.relation_store import RelationStore
from recipeshare.services.search import SearchAdapter

logger = get_logger('services.reconciler')


def reconcile(
    hits: Iterable[SearchHit],
    relations: Iterable[Relation],
    self_id: str,
) -> list[CandidateUser]:
    """
    Annotate user hits against existing relations.

    - Hits for ``self_id`` are dropped.
    - Hits with a confirmed relation are dropped; they already show in the relation list.
    - Hits with a pending relation are kept with ``requested`` set to its id.

    Hit order is preserved.
    """
    by_target = {relation.to_user_id: relation for relation in relations}
    candidates = []
    for hit in hits:
        if hit.object_id == self_id:
            continue
        relation = by_target.get(hit.object_id)
        if relation is not None and relation.confirmed:
            continue
        candidates.append(
            CandidateUser(
                object_id=hit.object_id,
                display_name=hit.fields.get("display_name"),
                email=hit.fields.get("email"),
                photo_url=hit.fields.get("photo_url"),
                highlight=hit.highlight,
                requested=relation.id if relation is not None else None,
            )
        )
    return candidates


class RelationReconciler:
    """
    Keeps the candidate list current as either the query or the relations change.

    Raw hits of the current query are cached so a relation change re-runs
    ``reconcile`` without a new search. Each query gets a token; a response is
    committed only if its token is still the latest.
    """

    def __init__(
        self,
        store: RelationStore,
        search: SearchAdapter,
        self_id: str,
        notifier: NotificationSink,
    ):
        self.store = store
        self.search = search
        self.self_id = self_id
        self.notifier = notifier
        self.query = ""
        self.candidates: list[CandidateUser] | None = None
        self._hits: list[SearchHit] | None = None
        self._token = 0
        self._listeners: list[Callable[[], None]] = []
        self._remove_store_listener = store.add_listener(self._on_relations)

    def add_listener(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def close(self) -> None:
        self._remove_store_listener()
        self._listeners.clear()

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener()

    def _recompute(self) -> None:
        if self._hits is None:
            self.candidates = None
        else:
            self.candidates = reconcile(self._hits, self.store.relations, self.self_id)
        self._changed()

    def _on_relations(self, relations: list[Relation]) -> None:
        if self.query:
            self._recompute()
        else:
            self._changed()

    async def set_query(self, query: str) -> None:
        query = query if query.strip() else ""
        self._token += 1
        token = self._token
        self.query = query
        self._hits = None
        self._recompute()
        if not query:
            return

        logger.debug("User search %d: %r", token, query)
        try:
            response = await self.search.search(query)
        except Exception as exc:
            if token != self._token:
                return
            logger.error(f"User search failed for {query!r}: {exc}")
            self.notifier.notify(
                Notification(
                    title="An error occurred while searching for users.",
                    subtitle=str(exc),
                    intent=NotificationIntent.DANGER,
                )
            )
            return

        if token != self._token:
            logger.debug("Dropping stale user search %d (current %d)", token, self._token)
            return
        self._hits = response.hits
        self._recompute()
