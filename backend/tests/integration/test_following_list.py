import aiosqlite
import pytest
import pytest_asyncio

from recipeshare.exceptions import InvalidTransition, RelationNotFound
from recipeshare.models import Pane, RowAction
from recipeshare.services.following_list import FollowingListView
from recipeshare.services.relation_backend import RelationBackend
from recipeshare.services.search import SearchAdapter


@pytest.fixture
def backend(db_path):
    return RelationBackend(db_path)


@pytest_asyncio.fixture
async def view(directory, backend, search_index, sink, db_path, flush):
    user = await directory.current_user("u1")
    following = FollowingListView(user, backend, SearchAdapter(search_index, "users"), sink, db_path)
    await following.start()
    await flush()
    yield following
    following.close()


def rows_by_user(rows):
    return {row.user_id: row for row in rows}


async def test_fresh_user_sees_no_users_state(view):
    state = view.snapshot()

    assert state.loading is False
    assert state.no_users is True
    assert state.relation_rows == []


async def test_search_excludes_self_and_offers_invites(view):
    await view.set_query("example")

    rows = rows_by_user(view.snapshot().search_rows)
    assert set(rows) == {"u2", "u3", "u4"}
    assert all(row.action == RowAction.INVITE for row in rows.values())
    assert rows["u4"].label == "bob@example.com"
    assert view.snapshot().no_users is False


async def test_request_confirm_open_and_unfollow(view, backend, sink, insert_recipe, flush):
    await view.set_query("ali")
    await view.invite("u2")
    await flush()

    state = view.snapshot()
    assert sink.notifications[-1].title == "A request has been sent to Alice Smith"
    pending = rows_by_user(state.search_rows)["u2"]
    assert pending.action == RowAction.CANCEL
    relation_id = pending.relation_id
    [relation_row] = state.relation_rows
    assert relation_row.label == "Alice Smith"
    assert relation_row.interactive is False
    assert relation_row.action == RowAction.CANCEL

    await backend.confirm_relation(relation_id)
    await flush()

    state = view.snapshot()
    assert "u2" not in rows_by_user(state.search_rows)
    assert "u3" in rows_by_user(state.search_rows)
    [relation_row] = state.relation_rows
    assert relation_row.interactive is True
    assert relation_row.action == RowAction.OPEN

    await insert_recipe("r1", "u2", "Alice's bread", "2024-01-01T00:00:00+00:00")
    await view.select(relation_id)

    state = view.snapshot()
    assert state.pane == Pane.DETAIL
    assert state.active_label == "Alice Smith"
    assert [item.id for item in state.detail.items] == ["r1"]
    assert state.detail.items[0].editable is False

    await view.unfollow()
    await flush()

    state = view.snapshot()
    assert state.pane == Pane.LIST
    assert state.detail is None
    assert state.relation_rows == []
    assert rows_by_user(state.search_rows)["u2"].action == RowAction.INVITE


async def test_cancel_pending_request_from_search_row(view, flush):
    await view.set_query("alicia")
    await view.invite("u3")
    await flush()
    relation_id = view.snapshot().search_rows[0].relation_id

    await view.cancel(relation_id)
    await flush()

    state = view.snapshot()
    assert state.relation_rows == []
    assert state.search_rows[0].action == RowAction.INVITE
    assert state.no_users is False


async def test_duplicate_invite_is_not_sent(view, sink, flush):
    await view.set_query("alicia")
    await view.invite("u3")
    await flush()

    await view.invite("u3")
    await view.invite("u9")

    assert sink.intents == ["success"]
    assert len(view.snapshot().relation_rows) == 1


async def test_removed_active_relation_returns_to_list(view, backend, me, flush):
    relation_id = await backend.create_relation(me, "u2")
    await backend.confirm_relation(relation_id)
    await flush()
    await view.select(relation_id)

    await backend.delete_relation(relation_id)
    await flush()

    state = view.snapshot()
    assert state.pane == Pane.LIST
    assert state.active_relation is None
    assert state.detail is None


async def test_select_unknown_relation(view):
    with pytest.raises(RelationNotFound):
        await view.select("missing")
    assert view.snapshot().pane == Pane.LIST


async def test_relation_without_snapshot_shows_placeholder(view, backend, db_path, me, flush):
    async with aiosqlite.connect(db_path) as db:
        await db.execute(
            """INSERT INTO relations (id, from_user_id, to_user_id, confirmed, to_user, created_at, updated_at)
               VALUES ('bare', 'u1', 'u7', 1, NULL, '2020-01-01T00:00:00+00:00', '2020-01-01T00:00:00+00:00')"""
        )
        await db.commit()
    await backend.create_relation(me, "u2")
    await flush()

    rows = rows_by_user(view.snapshot().relation_rows)
    assert rows["u7"].label == "Unknown user"
    assert rows["u7"].photo_url is None


async def test_closed_view_ignores_later_snapshots(view, backend, me, flush):
    view.close()

    await backend.create_relation(me, "u2")
    await flush()

    assert view.store.relations == []


async def test_pending_relation_cannot_be_opened(view, backend, me, flush):
    relation_id = await backend.create_relation(me, "u2")
    await flush()

    with pytest.raises(InvalidTransition):
        await view.select(relation_id)

    state = view.snapshot()
    assert state.pane == Pane.LIST
    assert state.detail is None


async def test_switching_relations_never_pairs_old_recipes(view, backend, me, insert_recipe, flush):
    first = await backend.create_relation(me, "u2")
    second = await backend.create_relation(me, "u3")
    await backend.confirm_relation(first)
    await backend.confirm_relation(second)
    await insert_recipe("r2", "u2", "Alice's bread", "2024-01-01T00:00:00+00:00")
    await insert_recipe("r3", "u3", "Alicia's soup", "2024-01-01T00:00:00+00:00")
    await flush()

    pairs = []

    def record():
        if view.navigation.state.active_relation is not None:
            pairs.append((view.navigation.state.active_relation.to_user_id, view.detail_feed.user_id))

    view.add_listener(record)
    await view.select(first)
    await view.select(second)

    assert pairs
    assert all(active == shown for active, shown in pairs)
    assert [item.id for item in view.snapshot().detail.items] == ["r3"]
