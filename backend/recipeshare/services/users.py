"""User profiles and session resolution."""

from datetime import datetime, timezone

import aiosqlite

from recipeshare.database.db import connect
from recipeshare.exceptions import UserNotFound
from recipeshare.logging import get_logger
from recipeshare.models import SessionUser, UserCreate
from recipeshare.services.search_index import SqliteSearchIndex

logger = get_logger('services.users')


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_user(row: dict) -> SessionUser:
    return SessionUser(
        uid=row["uid"],
        display_name=row.get("display_name"),
        email=row.get("email"),
        photo_url=row.get("photo_url"),
        created_at=row["created_at"],
    )


class UserDirectory:
    """Stores profiles, keeps the users index in sync, and resolves sessions."""

    def __init__(self, db_path: str, index: SqliteSearchIndex):
        self.db_path = db_path
        self.index = index

    async def _get_db(self) -> aiosqlite.Connection:
        return await connect(self.db_path)

    async def save_user(self, data: UserCreate) -> SessionUser:
        now = _now()
        db = await self._get_db()
        try:
            await db.execute(
                """INSERT INTO users (uid, display_name, email, photo_url, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?)
                   ON CONFLICT(uid) DO UPDATE SET
                       display_name = excluded.display_name,
                       email = excluded.email,
                       photo_url = excluded.photo_url,
                       updated_at = excluded.updated_at""",
                (data.uid, data.display_name, data.email, data.photo_url, now, now),
            )
            await db.commit()
        finally:
            await db.close()
        user = await self.get_user(data.uid)
        await self.index.save_user(user)
        logger.info(f"Saved user {data.uid}")
        return user

    async def get_user(self, uid: str) -> SessionUser | None:
        db = await self._get_db()
        try:
            cursor = await db.execute("SELECT * FROM users WHERE uid = ?", (uid,))
            row = await cursor.fetchone()
            return _row_to_user(dict(row)) if row else None
        finally:
            await db.close()

    async def current_user(self, uid: str) -> SessionUser:
        """Resolve the signed-in user; unknown ids are rejected upstream of the views."""
        user = await self.get_user(uid)
        if user is None:
            raise UserNotFound()
        return user
