"""Live view of the signed-in user's outgoing follow requests."""

from collections.abc import Callable

from recipeshare.logging import get_logger
from recipeshare.models import Relation
from recipeshare.services.relation_backend import RelationBackend

logger = get_logger('services.relation_store')

Listener = Callable[[list[Relation]], None]


class RelationStore:
    """Holds the latest relation snapshot pushed by the backend and fans it out."""

    def __init__(self, backend: RelationBackend, user_id: str):
        self.backend = backend
        self.user_id = user_id
        self.loading = True
        self._relations: list[Relation] = []
        self._listeners: list[Listener] = []
        self._unsubscribe: Callable[[], None] | None = None
        self._closed = False

    @property
    def relations(self) -> list[Relation]:
        return list(self._relations)

    async def start(self) -> None:
        if self._unsubscribe is not None:
            return
        self._unsubscribe = await self.backend.observe_relations(self.user_id, self._on_snapshot)

    def close(self) -> None:
        self._closed = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._listeners.clear()

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def find(self, relation_id: str) -> Relation | None:
        for relation in self._relations:
            if relation.id == relation_id:
                return relation
        return None

    def _on_snapshot(self, relations: list[Relation]) -> None:
        if self._closed:
            return
        self._relations = relations
        self.loading = False
        logger.debug("Relation snapshot for %s: %d relations", self.user_id, len(relations))
        for listener in list(self._listeners):
            listener(self.relations)
