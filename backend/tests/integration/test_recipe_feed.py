import asyncio

import pytest_asyncio

from recipeshare.services.recipe_feed import RecipeFeed, query_page


@pytest_asyncio.fixture
async def five_recipes(insert_recipe):
    for n in range(1, 6):
        await insert_recipe(f"r{n}", "u1", f"Recipe {n}", f"2024-01-0{n}T00:00:00+00:00")
    await insert_recipe("other", "u2", "Not mine", "2024-02-01T00:00:00+00:00")


async def test_first_page_is_newest_first(db_path, five_recipes):
    feed = await query_page(db_path, "u1", limit=2)

    assert [r.id for r in feed.items] == ["r5", "r4"]
    assert feed.has_more is True
    assert feed.snapshot().loading is False


async def test_load_more_walks_to_the_end(db_path, five_recipes, count_fetches):
    feed = await query_page(db_path, "u1", limit=2)
    fetches = count_fetches(feed)

    assert await feed.load_more() is True
    assert await feed.load_more() is True
    assert await feed.load_more() is False

    assert [r.id for r in feed.items] == ["r5", "r4", "r3", "r2", "r1"]
    assert feed.has_more is False
    assert len(fetches) == 2


async def test_ties_on_updated_at_are_not_skipped(db_path, insert_recipe):
    for recipe_id in ("a", "b", "c"):
        await insert_recipe(recipe_id, "u1", recipe_id, "2024-01-01T00:00:00+00:00")

    feed = await query_page(db_path, "u1", limit=2)
    await feed.load_more()

    assert [r.id for r in feed.items] == ["c", "b", "a"]


async def test_concurrent_load_more_fetches_once(db_path, five_recipes, count_fetches):
    feed = await query_page(db_path, "u1", limit=2)
    fetches = count_fetches(feed)

    results = await asyncio.gather(feed.load_more(), feed.load_more())

    assert list(results) == [True, False]
    assert len(fetches) == 1
    assert len(feed.items) == 4


async def test_load_is_idempotent(db_path, five_recipes, count_fetches):
    feed = await query_page(db_path, "u1", limit=2)
    fetches = count_fetches(feed)

    await feed.load()

    assert fetches == []


async def test_empty_feed(db_path):
    feed = await query_page(db_path, "nobody")

    state = feed.snapshot()
    assert state.items == []
    assert state.has_more is False
    assert state.loading is False


async def test_unloaded_feed_reports_loading(db_path):
    assert RecipeFeed(db_path, "u1").snapshot().loading is True


async def test_initial_failure_sets_loading_error(tmp_path):
    feed = await query_page(str(tmp_path / "empty.db"), "u1")

    state = feed.snapshot()
    assert "no such table" in state.loading_error
    assert state.loading is False
    assert state.loading_more_error is None


async def test_load_more_failure_keeps_loaded_items(db_path, five_recipes, monkeypatch):
    feed = await query_page(db_path, "u1", limit=2)

    async def broken():
        raise RuntimeError("disk gone")

    monkeypatch.setattr(feed, "_fetch_page", broken)

    assert await feed.load_more() is False
    state = feed.snapshot()
    assert state.loading_more_error == "disk gone"
    assert state.loading_error is None
    assert [item.id for item in state.items] == ["r5", "r4"]


async def test_read_only_feed_marks_items_not_editable(db_path, five_recipes):
    feed = await query_page(db_path, "u1", limit=2, editable=False)

    assert all(not item.editable for item in feed.snapshot().items)


async def test_listeners_see_loading_transitions(db_path, five_recipes):
    feed = RecipeFeed(db_path, "u1", limit=2)
    seen = []
    feed.add_listener(lambda: seen.append(feed.loading))

    await feed.load()

    assert seen == [True, False]
