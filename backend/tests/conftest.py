import asyncio
import json

import aiosqlite
import pytest
import pytest_asyncio

from recipeshare.database.db import init_db
from recipeshare.models import Relation, SearchHit, SessionUser, UserCreate
from recipeshare.services.search_index import SqliteSearchIndex
from recipeshare.services.users import UserDirectory


class RecordingSink:
    """Collects notifications instead of showing them."""

    def __init__(self):
        self.notifications = []

    def notify(self, notification):
        self.notifications.append(notification)

    @property
    def intents(self):
        return [n.intent.value for n in self.notifications]


class ControlledIndex:
    """Search index whose responses are released by the test, in any order."""

    def __init__(self):
        self.calls: list[tuple[str, asyncio.Future]] = []

    async def search(self, index_name, text, limit):
        future = asyncio.get_running_loop().create_future()
        self.calls.append((text, future))
        return await future

    @property
    def queries(self):
        return [text for text, _ in self.calls]

    def _pending(self, text):
        for call_text, future in self.calls:
            if call_text == text and not future.done():
                return future
        raise AssertionError(f"no pending search for {text!r}")

    def resolve(self, text, hits):
        self._pending(text).set_result(hits)

    def fail(self, text, exc):
        self._pending(text).set_exception(exc)


class FakeRelationBackend:
    """In-memory relation backend; snapshots are pushed explicitly by the test."""

    def __init__(self):
        self.observers = []
        self.created = []
        self.deleted = []
        self.fail_with: Exception | None = None

    async def observe_relations(self, user_id, callback):
        self.observers.append(callback)

        def unsubscribe():
            if callback in self.observers:
                self.observers.remove(callback)

        return unsubscribe

    def push(self, relations):
        for callback in list(self.observers):
            callback(list(relations))

    async def create_relation(self, from_user, to_user_id, to_user=None):
        if self.fail_with:
            raise self.fail_with
        self.created.append((from_user.uid, to_user_id, to_user))
        return f"rel-{len(self.created)}"

    async def delete_relation(self, relation_id):
        if self.fail_with:
            raise self.fail_with
        self.deleted.append(relation_id)
        return True


def user_hit(object_id, display_name=None, email=None):
    return SearchHit(
        object_id=object_id,
        fields={"display_name": display_name, "email": email, "photo_url": None},
    )


def relation(relation_id, to_user_id, confirmed=False, from_user_id="u1"):
    return Relation(id=relation_id, from_user_id=from_user_id, to_user_id=to_user_id, confirmed=confirmed)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def controlled_index():
    return ControlledIndex()


@pytest.fixture
def fake_backend():
    return FakeRelationBackend()


@pytest.fixture
def me():
    return SessionUser(uid="u1", display_name="Me", email="me@example.com")


@pytest.fixture
def make_user_hit():
    return user_hit


@pytest.fixture
def make_relation():
    return relation


@pytest_asyncio.fixture
async def db_path(tmp_path):
    path = str(tmp_path / "recipeshare.db")
    await init_db(path)
    return path


@pytest.fixture
def search_index(db_path):
    return SqliteSearchIndex(db_path)


@pytest_asyncio.fixture
async def directory(db_path, search_index):
    users = UserDirectory(db_path, search_index)
    await users.save_user(UserCreate(uid="u1", display_name="Me Myself", email="me@example.com"))
    await users.save_user(UserCreate(uid="u2", display_name="Alice Smith", email="alice@example.com"))
    await users.save_user(UserCreate(uid="u3", display_name="Alicia Keys", email="alicia@example.com"))
    await users.save_user(UserCreate(uid="u4", email="bob@example.com"))
    return users


@pytest.fixture
def insert_recipe(db_path):
    """Insert a recipe row with an explicit updated_at, bypassing the index."""

    async def _insert(recipe_id, user_id, title, updated_at, author=""):
        async with aiosqlite.connect(db_path) as db:
            await db.execute(
                """INSERT INTO recipes
                   (id, user_id, title, author, description, plain, image, ingredients, created_at, updated_at)
                   VALUES (?, ?, ?, ?, '', '', NULL, ?, ?, ?)""",
                (recipe_id, user_id, title, author, json.dumps([]), updated_at, updated_at),
            )
            await db.commit()

    return _insert


async def settle():
    """Let callbacks scheduled with call_soon run."""
    for _ in range(3):
        await asyncio.sleep(0)


@pytest.fixture
def flush():
    return settle


@pytest.fixture
def count_fetches(monkeypatch):
    """Record each page fetch a feed makes from now on."""

    def _count(feed):
        calls = []
        fetch = feed._fetch_page

        async def counted():
            calls.append(feed._cursor)
            return await fetch()

        monkeypatch.setattr(feed, "_fetch_page", counted)
        return calls

    return _count
