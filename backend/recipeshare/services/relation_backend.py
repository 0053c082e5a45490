"""Authoritative follow-request store with push-based observers."""

import asyncio
import json
from collections.abc import Callable
from datetime import datetime, timezone
from uuid import uuid4

import aiosqlite

from recipeshare.database.db import connect
from recipeshare.exceptions import RelationConflict, RelationNotFound, SelfFollowError
from recipeshare.logging import get_logger
from recipeshare.models import Relation, SessionUser, UserSnapshot

logger = get_logger('services.relation_backend')

RelationsCallback = Callable[[list[Relation]], None]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_relation(row: dict) -> Relation:
    to_user = json.loads(row["to_user"]) if row.get("to_user") else None
    return Relation(
        id=row["id"],
        from_user_id=row["from_user_id"],
        to_user_id=row["to_user_id"],
        confirmed=bool(row["confirmed"]),
        to_user=UserSnapshot(**to_user) if to_user else None,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class RelationBackend:
    """
    Relation writes plus live snapshots per requesting user.

    Every write re-reads the affected user's relations and schedules delivery
    of the fresh snapshot to each observer on the running loop.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._observers: dict[str, list[RelationsCallback]] = {}

    async def _get_db(self) -> aiosqlite.Connection:
        return await connect(self.db_path)

    async def list_relations(self, user_id: str) -> list[Relation]:
        db = await self._get_db()
        try:
            cursor = await db.execute(
                "SELECT * FROM relations WHERE from_user_id = ? ORDER BY created_at, id",
                (user_id,),
            )
            rows = await cursor.fetchall()
            return [_row_to_relation(dict(r)) for r in rows]
        finally:
            await db.close()

    async def get_relation(self, relation_id: str) -> Relation | None:
        db = await self._get_db()
        try:
            cursor = await db.execute("SELECT * FROM relations WHERE id = ?", (relation_id,))
            row = await cursor.fetchone()
            return _row_to_relation(dict(row)) if row else None
        finally:
            await db.close()

    async def observe_relations(self, user_id: str, callback: RelationsCallback) -> Callable[[], None]:
        """
        Subscribe to a user's outgoing relations.

        The current snapshot is delivered right away, then again after every
        write touching that user. Returns the unsubscribe function.
        """

        def unsubscribe() -> None:
            callbacks = self._observers.get(user_id)
            if not callbacks:
                return
            try:
                callbacks.remove(callback)
            except ValueError:
                return
            if not callbacks:
                self._observers.pop(user_id, None)

        self._observers.setdefault(user_id, []).append(callback)
        try:
            snapshot = await self.list_relations(user_id)
        except Exception:
            unsubscribe()
            raise
        self._deliver(callback, snapshot)
        return unsubscribe

    def _deliver(self, callback: RelationsCallback, snapshot: list[Relation]) -> None:
        asyncio.get_running_loop().call_soon(callback, list(snapshot))

    async def _publish(self, user_id: str) -> None:
        callbacks = list(self._observers.get(user_id, []))
        if not callbacks:
            return
        snapshot = await self.list_relations(user_id)
        logger.debug("Publishing %d relations for %s to %d observers", len(snapshot), user_id, len(callbacks))
        for callback in callbacks:
            self._deliver(callback, snapshot)

    async def create_relation(
        self,
        from_user: SessionUser,
        to_user_id: str,
        to_user: UserSnapshot | None = None,
    ) -> str:
        if from_user.uid == to_user_id:
            raise SelfFollowError()
        now = _now()
        relation_id = str(uuid4())
        db = await self._get_db()
        try:
            await db.execute(
                """INSERT INTO relations
                   (id, from_user_id, to_user_id, confirmed, to_user, created_at, updated_at)
                   VALUES (?, ?, ?, 0, ?, ?, ?)""",
                (
                    relation_id,
                    from_user.uid,
                    to_user_id,
                    to_user.model_dump_json() if to_user else None,
                    now,
                    now,
                ),
            )
            await db.commit()
        except aiosqlite.IntegrityError as exc:
            raise RelationConflict() from exc
        finally:
            await db.close()
        logger.info("Relation %s created: %s -> %s", relation_id, from_user.uid, to_user_id)
        await self._publish(from_user.uid)
        return relation_id

    async def delete_relation(self, relation_id: str) -> bool:
        """Delete by id; deleting an unknown id is a no-op returning False."""
        existing = await self.get_relation(relation_id)
        if not existing:
            logger.debug("Relation %s already gone", relation_id)
            return False
        db = await self._get_db()
        try:
            cursor = await db.execute("DELETE FROM relations WHERE id = ?", (relation_id,))
            await db.commit()
            deleted = cursor.rowcount > 0
        finally:
            await db.close()
        if deleted:
            logger.info("Relation %s deleted", relation_id)
            await self._publish(existing.from_user_id)
        return deleted

    async def confirm_relation(self, relation_id: str) -> Relation:
        """Accept a pending request; called by the target user's acceptance flow."""
        db = await self._get_db()
        try:
            cursor = await db.execute(
                "UPDATE relations SET confirmed = 1, updated_at = ? WHERE id = ?",
                (_now(), relation_id),
            )
            await db.commit()
            updated = cursor.rowcount > 0
        finally:
            await db.close()
        if not updated:
            raise RelationNotFound()
        relation = await self.get_relation(relation_id)
        if relation is None:
            raise RelationNotFound()
        logger.info("Relation %s confirmed", relation_id)
        await self._publish(relation.from_user_id)
        return relation
