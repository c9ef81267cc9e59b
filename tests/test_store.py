"""Tests for the in-memory content store."""

import pytest

from cms_categorizer.models import ContentItem
from cms_categorizer.providers import AssignmentSink, CategoryProvider, ContentProvider
from cms_categorizer.store import MemoryContentStore


def test_store_satisfies_collaborator_protocols(store):
    assert isinstance(store, CategoryProvider)
    assert isinstance(store, ContentProvider)
    assert isinstance(store, AssignmentSink)


@pytest.mark.asyncio
async def test_uncategorized_newest_first(store):
    items = await store.list_uncategorized()

    assert [item.id for item in items] == [2, 1]
    assert [item.id for item in await store.list_uncategorized(1)] == [2]


@pytest.mark.asyncio
async def test_recent_in_category(store):
    assert [p.id for p in await store.recent_in_category("baking", 10)] == [3]
    assert await store.recent_in_category("news", 10) == []
    assert await store.recent_in_category("baking", 0) == []


@pytest.mark.asyncio
async def test_ids_compare_as_strings(store):
    assert (await store.get_content("1")).id == 1
    assert (await store.get_category("baking")).name == "Baking"
    assert await store.get_content(None) is None


@pytest.mark.asyncio
async def test_assign_updates_post(store):
    await store.assign(1, "baking")

    assert (await store.get_content(1)).category_id == "baking"
    assert [p.id for p in await store.list_uncategorized()] == [2]

    with pytest.raises(KeyError):
        await store.assign(999, "baking")


@pytest.mark.asyncio
async def test_undated_posts_sort_last():
    store = MemoryContentStore(posts=[
        ContentItem(id="old"),
        ContentItem(id="new", created_at="2025-01-01T00:00:00"),
    ])

    assert [p.id for p in await store.list_uncategorized()] == ["new", "old"]


def test_from_catalog(catalog_file):
    store = MemoryContentStore.from_catalog(catalog_file)

    assert len(store.categories) == 2
    assert len(store.posts) == 2
    assert store.assignments == []
