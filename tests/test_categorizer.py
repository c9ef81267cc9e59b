"""Tests for the auto-categorization service and its batch policy."""

import pytest

from cms_categorizer.categorizer import AutoCategorizer, ReviewEntry
from cms_categorizer.exceptions import (
    CollaboratorError,
    ContentNotFoundError,
    InvalidSuggestionError,
)
from cms_categorizer.models import ContentItem
from cms_categorizer.processing.scoring import CategorySuggestion
from cms_categorizer.store import MemoryContentStore


def suggestion(category_id, confidence):
    return CategorySuggestion(
        category_id=category_id,
        category_name=category_id.title(),
        confidence=confidence,
        reasons=[],
    )


class PresetCategorizer(AutoCategorizer):
    """Returns preset suggestions per content id; raises for exceptions."""

    def __init__(self, store, presets, settings):
        super().__init__(store, store, store, settings=settings)
        self.presets = presets

    async def suggest_categories(self, item):
        preset = self.presets[item.id]
        if isinstance(preset, Exception):
            raise preset
        return preset


class FailingSink:
    async def assign(self, content_id, category_id):
        raise RuntimeError("database unavailable")


class FailingCategories:
    async def list_categories(self):
        raise ConnectionError("catalog offline")

    async def get_category(self, category_id):
        raise ConnectionError("catalog offline")


def queue_store(*ids):
    return MemoryContentStore(posts=[ContentItem(id=i, title=f"Post {i}") for i in ids])


@pytest.mark.asyncio
async def test_batch_assigns_queues_and_counts_failures(settings):
    store = queue_store("a", "b", "c")
    categorizer = PresetCategorizer(store, {
        "a": [suggestion("news", 0.95), suggestion("misc", 0.4)],
        "b": [suggestion("misc", 0.5)],
        "c": ValueError("malformed content"),
    }, settings)

    result = await categorizer.auto_categorize()

    assert (result.processed, result.categorized, result.failed) == (3, 1, 1)
    assert result.suggestions == [
        ReviewEntry(content_id="b", title="Post b", suggestions=[suggestion("misc", 0.5)])
    ]
    assert store.assignments == [("a", "news")]


@pytest.mark.asyncio
async def test_exact_threshold_goes_to_review(settings):
    store = queue_store("edge")
    categorizer = PresetCategorizer(store, {"edge": [suggestion("news", 0.8)]}, settings)

    result = await categorizer.auto_categorize()

    assert result.categorized == 0
    assert len(result.suggestions) == 1
    assert store.assignments == []


@pytest.mark.asyncio
async def test_item_without_suggestions_is_untouched(settings):
    store = queue_store("quiet")
    categorizer = PresetCategorizer(store, {"quiet": []}, settings)

    result = await categorizer.auto_categorize()

    assert (result.processed, result.categorized, result.failed) == (1, 0, 0)
    assert result.suggestions == []


@pytest.mark.asyncio
async def test_review_entry_keeps_top_three(settings):
    store = queue_store("many")
    ranked = [suggestion(f"c{i}", 0.7 - i * 0.05) for i in range(5)]
    categorizer = PresetCategorizer(store, {"many": ranked}, settings)

    result = await categorizer.auto_categorize()

    assert result.suggestions[0].suggestions == ranked[:3]


@pytest.mark.asyncio
async def test_sink_failure_counts_as_failed(settings):
    store = queue_store("a", "b")
    categorizer = PresetCategorizer(store, {
        "a": [suggestion("news", 0.9)],
        "b": [suggestion("news", 0.5)],
    }, settings)
    categorizer.sink = FailingSink()

    result = await categorizer.auto_categorize()

    assert (result.processed, result.categorized, result.failed) == (2, 0, 1)
    assert [entry.content_id for entry in result.suggestions] == ["b"]


@pytest.mark.asyncio
async def test_listing_failure_propagates(settings, store):
    async def broken(limit=None):
        raise ConnectionError("db down")

    store.list_uncategorized = broken
    categorizer = AutoCategorizer(store, store, store, settings=settings)

    with pytest.raises(CollaboratorError) as exc_info:
        await categorizer.auto_categorize()

    assert exc_info.value.operation == "list_uncategorized"
    assert isinstance(exc_info.value.error, ConnectionError)


@pytest.mark.asyncio
async def test_catalog_failure_propagates_from_single_call(settings, store, bread_post):
    categorizer = AutoCategorizer(FailingCategories(), store, store, settings=settings)

    with pytest.raises(CollaboratorError):
        await categorizer.suggest_categories(bread_post)


@pytest.mark.asyncio
async def test_catalog_outage_aborts_batch(settings, store):
    categorizer = AutoCategorizer(FailingCategories(), store, store, settings=settings)

    with pytest.raises(CollaboratorError) as exc_info:
        await categorizer.auto_categorize()

    assert exc_info.value.operation == "list_categories"
    assert store.assignments == []


@pytest.mark.asyncio
async def test_recent_posts_outage_aborts_batch(settings, store):
    async def broken(category_id, limit):
        raise TimeoutError("history query timed out")

    store.recent_in_category = broken
    categorizer = AutoCategorizer(store, store, store, settings=settings)

    with pytest.raises(CollaboratorError) as exc_info:
        await categorizer.auto_categorize()

    assert exc_info.value.operation == "recent_in_category"
    assert isinstance(exc_info.value.error, TimeoutError)


@pytest.mark.asyncio
async def test_batch_with_real_scoring(settings, store):
    categorizer = AutoCategorizer(store, store, store, settings=settings)

    result = await categorizer.auto_categorize()

    assert result.processed == 2
    assert result.failed == 0
    assert result.categorized + len(result.suggestions) <= result.processed
    for entry in result.suggestions:
        confidences = [s.confidence for s in entry.suggestions]
        assert confidences == sorted(confidences, reverse=True)
        assert all(0.3 < c <= 0.8 for c in confidences)


@pytest.mark.asyncio
async def test_suggest_categories_reads_history_sample(settings, store, bread_post):
    calls = []
    original = store.recent_in_category

    async def spy(category_id, limit):
        calls.append((category_id, limit))
        return await original(category_id, limit)

    store.recent_in_category = spy
    categorizer = AutoCategorizer(store, store, store, settings=settings)

    suggestions = await categorizer.suggest_categories(bread_post)

    assert [c for c, _ in calls] == ["tutorials", "news", "misc", "baking"]
    assert all(limit == settings.history_sample_size for _, limit in calls)
    assert suggestions[0].category_id == "baking"


@pytest.mark.asyncio
async def test_review_queue_does_not_assign(settings, store):
    categorizer = AutoCategorizer(store, store, store, settings=settings)

    queue = await categorizer.review_queue(limit=1)

    assert len(queue) <= 1
    assert store.assignments == []
    # Newest uncategorized post first
    if queue:
        assert queue[0].content_id == 2


@pytest.mark.asyncio
async def test_review_queue_honours_zero_limit(settings, store):
    seen = []
    original = store.list_uncategorized

    async def spy(limit=None):
        seen.append(limit)
        return await original(limit)

    store.list_uncategorized = spy
    categorizer = AutoCategorizer(store, store, store, settings=settings)

    assert await categorizer.review_queue(limit=0) == []
    await categorizer.review_queue()

    assert seen == [0, settings.review_queue_limit]


@pytest.mark.asyncio
async def test_suggest_for_content(settings, store):
    categorizer = AutoCategorizer(store, store, store, settings=settings)

    suggestions = await categorizer.suggest_for_content(1)
    assert all(s.confidence > 0.3 for s in suggestions)

    with pytest.raises(ContentNotFoundError):
        await categorizer.suggest_for_content(999)


@pytest.mark.asyncio
async def test_analyze_text(settings, store):
    categorizer = AutoCategorizer(store, store, store, settings=settings)

    report = await categorizer.analyze_text("How to Bake Bread", "First, mix flour and water.")

    assert report.analysis.content_type.value == "tutorial"
    assert report.word_count == 5
    assert report.to_dict()["analysis"]["content_type"] == "tutorial"

    with pytest.raises(InvalidSuggestionError):
        await categorizer.analyze_text("", "")


@pytest.mark.asyncio
async def test_analyze_text_analyzes_once(settings, store):
    class CountingCategorizer(AutoCategorizer):
        analyses = 0

        def analyze(self, item):
            self.analyses += 1
            return super().analyze(item)

    categorizer = CountingCategorizer(store, store, store, settings=settings)

    report = await categorizer.analyze_text("Homemade Bread", "Bread dough needs flour and yeast.")

    assert categorizer.analyses == 1
    assert report.suggestions[0].category_id == "baking"


@pytest.mark.asyncio
async def test_apply_suggestion(settings, store):
    categorizer = AutoCategorizer(store, store, store, settings=settings)

    await categorizer.apply_suggestion(1, "baking")

    assert (await store.get_content(1)).category_id == "baking"
    assert store.assignments == [(1, "baking")]


@pytest.mark.asyncio
@pytest.mark.parametrize("content_id, category_id, error", [
    (None, "baking", InvalidSuggestionError),
    (1, "", InvalidSuggestionError),
    (999, "baking", ContentNotFoundError),
    (1, "unknown", InvalidSuggestionError),
])
async def test_apply_suggestion_rejects_bad_ids(settings, store, content_id, category_id, error):
    categorizer = AutoCategorizer(store, store, store, settings=settings)

    with pytest.raises(error):
        await categorizer.apply_suggestion(content_id, category_id)
    assert store.assignments == []


@pytest.mark.asyncio
async def test_categorization_stats(settings, store):
    categorizer = AutoCategorizer(store, store, store, settings=settings)

    stats = await categorizer.categorization_stats()

    assert stats.total_posts == 4
    assert stats.categorized_posts == 2
    assert stats.uncategorized_posts == 2
    assert stats.categorization_rate == 50.0
    assert stats.posts_by_category == {None: 2, "baking": 1, "tutorials": 1}


@pytest.mark.asyncio
async def test_stats_on_empty_store(settings):
    store = MemoryContentStore()
    stats = await AutoCategorizer(store, store, store, settings=settings).categorization_stats()

    assert stats.total_posts == 0
    assert stats.categorization_rate == 0.0


@pytest.mark.asyncio
async def test_batch_result_to_dict(settings):
    store = queue_store("b")
    categorizer = PresetCategorizer(store, {"b": [suggestion("misc", 0.5)]}, settings)

    data = (await categorizer.auto_categorize()).to_dict()

    assert data["processed"] == 1
    assert data["suggestions"][0]["suggestions"][0]["category_id"] == "misc"
