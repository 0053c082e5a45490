"""
Socket.IO gateway: one following view and one recipe list per connection.
"""

import asyncio
from dataclasses import dataclass, field
from urllib.parse import parse_qs

import socketio

from recipeshare.exceptions import RecipeshareError, UserNotFound
from recipeshare.logging import get_logger
from recipeshare.models import SessionUser
from recipeshare.services.following_list import FollowingListView
from recipeshare.services.list_mode import ListModeController
from recipeshare.services.notifications import SocketNotificationSink
from recipeshare.services.recipe_feed import query_page
from recipeshare.services.relation_backend import RelationBackend
from recipeshare.services.search import SearchAdapter
from recipeshare.services.users import UserDirectory

logger = get_logger('realtime')


@dataclass
class ViewSession:
    user: SessionUser
    following: FollowingListView
    recipes: ListModeController
    pending: set[asyncio.Task] = field(default_factory=set)

    def close(self) -> None:
        self.following.close()
        self.recipes.close()


class RealtimeGateway:
    """Routes client events to the connection's views and pushes their state back."""

    def __init__(
        self,
        sio: socketio.AsyncServer,
        users: UserDirectory,
        relations: RelationBackend,
        user_search: SearchAdapter,
        recipe_search: SearchAdapter,
        db_path: str,
    ):
        self.sio = sio
        self.users = users
        self.relations = relations
        self.user_search = user_search
        self.recipe_search = recipe_search
        self.db_path = db_path
        self.sessions: dict[str, ViewSession] = {}

    def register(self) -> None:
        self.sio.on("connect", self.connect)
        self.sio.on("disconnect", self.disconnect)
        handlers = {
            "following:query": self.following_query,
            "following:invite": self.following_invite,
            "following:cancel": self.following_cancel,
            "following:select": self.following_select,
            "following:back": self.following_back,
            "following:unfollow": self.following_unfollow,
            "following:load_more": self.following_load_more,
            "recipes:query": self.recipes_query,
            "recipes:load_more": self.recipes_load_more,
        }
        for event, handler in handlers.items():
            self.sio.on(event, handler)

    def _emit(self, session: ViewSession, sid: str, event: str, payload: dict) -> None:
        task = asyncio.ensure_future(self.sio.emit(event, payload, room=sid))
        session.pending.add(task)
        task.add_done_callback(session.pending.discard)

    def _push_following(self, sid: str) -> None:
        session = self.sessions.get(sid)
        if session:
            self._emit(session, sid, "following:state", session.following.snapshot().model_dump(mode="json"))

    def _push_recipes(self, sid: str) -> None:
        session = self.sessions.get(sid)
        if session:
            self._emit(session, sid, "recipes:state", session.recipes.snapshot().model_dump(mode="json"))

    async def connect(self, sid, environ, auth=None):
        query = parse_qs(environ.get('QUERY_STRING', ''))
        uid = (query.get('uid') or [''])[0]
        try:
            user = await self.users.current_user(uid)
        except UserNotFound:
            logger.warning(f"Rejected connection {sid[:8]}...: unknown user")
            return False

        notifier = SocketNotificationSink(self.sio, sid)
        following = FollowingListView(user, self.relations, self.user_search, notifier, self.db_path)
        recipes = ListModeController(
            await query_page(self.db_path, user.uid),
            self.recipe_search,
            user.uid,
            notifier,
        )
        session = ViewSession(user=user, following=following, recipes=recipes)
        try:
            await following.start()
        except Exception as exc:
            logger.error(f"Rejected connection {sid[:8]}...: relations unavailable: {exc}")
            session.close()
            return False

        self.sessions[sid] = session
        following.add_listener(lambda: self._push_following(sid))
        recipes.add_listener(lambda: self._push_recipes(sid))
        logger.debug(f"Client {sid[:8]}... connected as {user.uid}")
        self._push_following(sid)
        self._push_recipes(sid)

    async def disconnect(self, sid):
        session = self.sessions.pop(sid, None)
        if session:
            session.close()
        logger.debug(f"Client {sid[:8]}... disconnected")

    async def _run(self, sid: str, action) -> dict:
        session = self.sessions.get(sid)
        if session is None:
            return {"ok": False, "error": "no_session"}
        try:
            await action(session)
        except RecipeshareError as exc:
            logger.warning(f"Client {sid[:8]}... action rejected: {exc.reason}")
            return {"ok": False, "error": exc.reason}
        return {"ok": True}

    # ── Following view ──

    async def following_query(self, sid, data):
        return await self._run(sid, lambda s: s.following.set_query((data or {}).get("query", "")))

    async def following_invite(self, sid, data):
        return await self._run(sid, lambda s: s.following.invite((data or {}).get("user_id", "")))

    async def following_cancel(self, sid, data):
        return await self._run(sid, lambda s: s.following.cancel((data or {}).get("relation_id", "")))

    async def following_select(self, sid, data):
        return await self._run(sid, lambda s: s.following.select((data or {}).get("relation_id", "")))

    async def following_back(self, sid, data=None):
        async def back(session: ViewSession):
            session.following.back()
        return await self._run(sid, back)

    async def following_unfollow(self, sid, data=None):
        return await self._run(sid, lambda s: s.following.unfollow())

    async def following_load_more(self, sid, data=None):
        return await self._run(sid, lambda s: s.following.load_more_detail())

    # ── Recipe list ──

    async def recipes_query(self, sid, data):
        return await self._run(sid, lambda s: s.recipes.set_query((data or {}).get("query", "")))

    async def recipes_load_more(self, sid, data=None):
        return await self._run(sid, lambda s: s.recipes.load_more())
