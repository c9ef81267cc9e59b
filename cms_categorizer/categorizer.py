"""
Auto-categorization service for CMS content.

Wires the pure scoring engine to the CMS collaborators: reads the category
catalog and recent posts, scores uncategorized content, auto-assigns
high-confidence matches and queues the rest for manual review.
"""

from collections.abc import Awaitable, Sequence
from dataclasses import asdict, dataclass, field
from typing import Any, TypeVar

from .config import Settings, get_settings
from .exceptions import (
    CategorizerError,
    CollaboratorError,
    ContentNotFoundError,
    InvalidSuggestionError,
)
from .logging import BatchTimer, LoggingMixin, batch_summary, categorization_failure
from .models.content import CategoryId, ContentId, ContentItem
from .processing.analysis import ContentAnalysis, analyze_content
from .processing.scoring import CategoryScorer, CategorySuggestion
from .processing.text_utils import count_words
from .providers import AssignmentSink, CategoryProvider, ContentProvider

T = TypeVar('T')


@dataclass
class ReviewEntry:
    """A content item awaiting a human category decision."""
    content_id: ContentId | None
    title: str
    suggestions: list[CategorySuggestion]


@dataclass
class BatchCategorizationResult:
    """Summary of one auto-categorization run."""
    processed: int = 0
    categorized: int = 0
    failed: int = 0
    suggestions: list[ReviewEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ContentReport:
    """Analysis and suggestions for ad-hoc content."""
    analysis: ContentAnalysis
    suggestions: list[CategorySuggestion]
    word_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            'analysis': self.analysis.to_dict(),
            'suggestions': [s.to_dict() for s in self.suggestions],
            'word_count': self.word_count,
        }


@dataclass
class CategorizationStats:
    """Categorization coverage across all content."""
    total_posts: int
    categorized_posts: int
    uncategorized_posts: int
    categorization_rate: float
    posts_by_category: dict[CategoryId | None, int]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class AutoCategorizer(LoggingMixin):
    """Category suggestion and batch auto-assignment service."""

    def __init__(
        self,
        categories: CategoryProvider,
        content: ContentProvider,
        sink: AssignmentSink,
        settings: Settings | None = None,
        scorer: CategoryScorer | None = None,
    ):
        self.categories = categories
        self.content = content
        self.sink = sink
        self.settings = settings or get_settings()
        self.scorer = scorer or CategoryScorer(self.settings)

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        """Await a collaborator call, wrapping its failures."""
        try:
            return await awaitable
        except CategorizerError:
            raise
        except Exception as e:
            raise CollaboratorError(operation, e) from e

    def analyze(self, item: ContentItem) -> ContentAnalysis:
        return analyze_content(item, self.settings.words_per_minute)

    async def suggest_categories(self, item: ContentItem) -> list[CategorySuggestion]:
        """Rank catalog categories for a content item.

        Raises:
            CollaboratorError: if the catalog or recent posts cannot be read
        """
        return await self.suggest_for_analysis(self.analyze(item))

    async def suggest_for_analysis(self, analysis: ContentAnalysis) -> list[CategorySuggestion]:
        """Rank catalog categories for already-analyzed content."""
        catalog = await self._call("list_categories", self.categories.list_categories())

        recent_posts = {}
        for category in catalog:
            recent_posts[category.id] = await self._call(
                "recent_in_category",
                self.content.recent_in_category(category.id, self.settings.history_sample_size),
            )

        return self.scorer.suggest(analysis, catalog, recent_posts)

    async def suggest_for_content(self, content_id: ContentId) -> list[CategorySuggestion]:
        """Suggestions for a stored content item."""
        item = await self._call("get_content", self.content.get_content(content_id))
        if item is None:
            raise ContentNotFoundError(content_id)
        return await self.suggest_categories(item)

    async def analyze_text(self, title: str = "", body: str = "") -> ContentReport:
        """Analyze ad-hoc content and suggest categories for it."""
        if not title and not body:
            raise InvalidSuggestionError("Title or body is required")

        item = ContentItem(title=title or "", body=body or "")
        analysis = self.analyze(item)
        return ContentReport(
            analysis=analysis,
            suggestions=await self.suggest_for_analysis(analysis),
            word_count=count_words(item.body),
        )

    async def auto_categorize(self) -> BatchCategorizationResult:
        """Score every uncategorized item, assigning or queueing each.

        A scoring or assignment failure on one item is logged and counted;
        the run continues.

        Raises:
            CollaboratorError: if the uncategorized items, the catalog or
                recent category posts cannot be read
        """
        result = BatchCategorizationResult()
        top_n = self.settings.review_top_n

        with BatchTimer("auto_categorize", self.logger) as timer:
            items = await self._call("list_uncategorized", self.content.list_uncategorized())

            for item in items:
                result.processed += 1
                timer.tick()
                try:
                    suggestions = await self.suggest_categories(item)
                    if not suggestions:
                        continue

                    best = suggestions[0]
                    if best.confidence > self.settings.auto_assign_threshold:
                        await self.sink.assign(item.id, best.category_id)
                        result.categorized += 1
                        self.logger.info(
                            "content_auto_assigned",
                            content_id=item.id,
                            category_id=best.category_id,
                            confidence=round(best.confidence, 4),
                        )
                    else:
                        result.suggestions.append(ReviewEntry(
                            content_id=item.id,
                            title=item.title,
                            suggestions=suggestions[:top_n],
                        ))
                except CollaboratorError:
                    # Provider outage, not a per-item problem
                    raise
                except Exception as e:
                    result.failed += 1
                    self.logger.error(**categorization_failure(e, item.id))

            self.logger.info(**batch_summary(
                processed=result.processed,
                categorized=result.categorized,
                queued=len(result.suggestions),
                failed=result.failed,
            ))

        return result

    async def review_queue(self, limit: int | None = None) -> list[ReviewEntry]:
        """Suggestions for the newest uncategorized items, without assigning."""
        if limit is None:
            limit = self.settings.review_queue_limit
        items = await self._call("list_uncategorized", self.content.list_uncategorized(limit))

        queue = []
        for item in items:
            suggestions = await self.suggest_categories(item)
            if suggestions:
                queue.append(ReviewEntry(
                    content_id=item.id,
                    title=item.title,
                    suggestions=suggestions[:self.settings.review_top_n],
                ))
        return queue

    async def apply_suggestion(self, content_id: ContentId | None, category_id: CategoryId | None) -> None:
        """Apply a reviewed category to a content item.

        Raises:
            InvalidSuggestionError: if an id is missing or the category is unknown
            ContentNotFoundError: if the content item does not exist
        """
        if content_id in (None, "") or category_id in (None, ""):
            raise InvalidSuggestionError("Content ID and Category ID are required")

        item = await self._call("get_content", self.content.get_content(content_id))
        if item is None:
            raise ContentNotFoundError(content_id)

        category = await self._call("get_category", self.categories.get_category(category_id))
        if category is None:
            raise InvalidSuggestionError(f"Unknown category: {category_id}")

        await self._call("assign", self.sink.assign(content_id, category_id))
        self.logger.info("suggestion_applied", content_id=content_id, category_id=category_id)

    async def categorization_stats(self) -> CategorizationStats:
        """Count categorized and uncategorized content."""
        items: Sequence[ContentItem] = await self._call("list_all", self.content.list_all())

        posts_by_category: dict[CategoryId | None, int] = {}
        for item in items:
            posts_by_category[item.category_id] = posts_by_category.get(item.category_id, 0) + 1

        total = len(items)
        categorized = sum(1 for item in items if item.is_categorized)
        return CategorizationStats(
            total_posts=total,
            categorized_posts=categorized,
            uncategorized_posts=total - categorized,
            categorization_rate=(categorized / total) * 100 if total else 0.0,
            posts_by_category=posts_by_category,
        )
