"""The two-pane following view: user search, follow requests, followed user's recipes."""

from collections.abc import Callable

from recipeshare.config import settings
from recipeshare.exceptions import InvalidTransition, RelationNotFound
from recipeshare.logging import get_logger
from recipeshare.models import (
    FollowingListState,
    FollowingRow,
    NavigationState,
    Pane,
    Relation,
    RowAction,
    SessionUser,
)
from recipeshare.services.display import snapshot_label, user_label
from recipeshare.services.follow import FollowController
from recipeshare.services.navigation import NavigationStateMachine
from recipeshare.services.notifications import NotificationSink
from recipeshare.services.recipe_feed import RecipeFeed
from recipeshare.services.reconciler import RelationReconciler
from recipeshare.services.relation_backend import RelationBackend
from recipeshare.services.relation_store import RelationStore
from recipeshare.services.search import SearchAdapter

logger = get_logger('services.following_list')


class FollowingListView:
    """
    Per-instance state of the following view.

    Owns its relation store subscription, the reconciler, navigation and the
    detail pane's recipe feed. Listeners are called after every change.
    """

    def __init__(
        self,
        user: SessionUser,
        backend: RelationBackend,
        search: SearchAdapter,
        notifier: NotificationSink,
        db_path: str,
    ):
        self.user = user
        self.db_path = db_path
        self.store = RelationStore(backend, user.uid)
        self.follow = FollowController(backend, notifier)
        self.reconciler = RelationReconciler(self.store, search, user.uid, notifier)
        self.navigation = NavigationStateMachine(self.follow)
        self.detail_feed: RecipeFeed | None = None
        self._listeners: list[Callable[[], None]] = []

        self.reconciler.add_listener(self._changed)
        self.navigation.add_listener(self._on_navigation)
        self.store.add_listener(self._on_relations)

    def add_listener(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener()

    async def start(self) -> None:
        await self.store.start()

    def close(self) -> None:
        self._listeners.clear()
        self._drop_detail_feed()
        self.reconciler.close()
        self.store.close()

    # ── Search & requests ──

    async def set_query(self, query: str) -> None:
        await self.reconciler.set_query(query)

    async def invite(self, user_id: str) -> None:
        candidates = self.reconciler.candidates or []
        candidate = next((c for c in candidates if c.object_id == user_id), None)
        if candidate is None:
            logger.warning(f"Invite for {user_id} ignored: not among current candidates")
            return
        if candidate.requested:
            logger.debug("Invite for %s ignored: request %s pending", user_id, candidate.requested)
            return
        await self.follow.request(self.user, candidate)

    async def cancel(self, relation_id: str) -> None:
        await self.follow.cancel(relation_id)

    # ── Navigation ──

    async def select(self, relation_id: str) -> NavigationState:
        relation = self.store.find(relation_id)
        if relation is None:
            raise RelationNotFound()
        if not relation.confirmed:
            raise InvalidTransition("only confirmed relations can be opened")
        feed = RecipeFeed(
            self.db_path,
            relation.to_user_id,
            limit=settings.FOLLOWING_RECIPES_PAGE_SIZE,
            editable=False,
        )
        self._drop_detail_feed()
        self.detail_feed = feed
        feed.add_listener(self._changed)
        state = self.navigation.select(relation)
        await feed.load()
        return state

    def back(self) -> NavigationState:
        return self.navigation.back()

    async def unfollow(self) -> NavigationState:
        return await self.navigation.unfollow()

    async def load_more_detail(self) -> bool:
        if self.detail_feed is None:
            return False
        return await self.detail_feed.load_more()

    def _drop_detail_feed(self) -> None:
        if self.detail_feed is not None:
            self.detail_feed.close()
            self.detail_feed = None

    def _on_navigation(self, state: NavigationState) -> None:
        if state.pane == Pane.LIST:
            self._drop_detail_feed()
        self._changed()

    def _on_relations(self, relations: list[Relation]) -> None:
        active = self.navigation.state.active_relation
        if active is None:
            return
        current = next((r for r in relations if r.id == active.id), None)
        if current is None:
            logger.debug("Active relation %s removed; returning to list", active.id)
            self.navigation.back()
        elif current != active:
            self.navigation.select(current)

    # ── Rendering ──

    def snapshot(self) -> FollowingListState:
        relations = self.store.relations
        query = self.reconciler.query
        search_rows = []
        if query and self.reconciler.candidates:
            search_rows = [
                FollowingRow(
                    user_id=c.object_id,
                    label=user_label(c.display_name, c.email),
                    photo_url=c.photo_url,
                    action=RowAction.CANCEL if c.requested else RowAction.INVITE,
                    relation_id=c.requested,
                )
                for c in self.reconciler.candidates
            ]
        relation_rows = [
            FollowingRow(
                user_id=r.to_user_id,
                label=snapshot_label(r.to_user),
                photo_url=r.to_user.photo_url if r.to_user else None,
                interactive=r.confirmed,
                action=RowAction.OPEN if r.confirmed else RowAction.CANCEL,
                relation_id=r.id,
            )
            for r in relations
        ]
        nav = self.navigation.state
        return FollowingListState(
            query=query,
            loading=self.store.loading,
            no_users=not self.store.loading and not query and not relations,
            search_rows=search_rows,
            relation_rows=relation_rows,
            pane=nav.pane,
            active_relation=nav.active_relation,
            active_label=snapshot_label(nav.active_relation.to_user) if nav.active_relation else None,
            detail=self.detail_feed.snapshot() if self.detail_feed else None,
        )
