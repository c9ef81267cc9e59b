"""In-memory content store backed by a YAML catalog."""

from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from .config import load_catalog
from .logging import get_logger
from .models.content import CategoryDescriptor, CategoryId, ContentId, ContentItem

logger = get_logger(__name__)

_OLDEST = datetime.min.replace(tzinfo=UTC)


def _newest_first(items: Iterable[ContentItem]) -> list[ContentItem]:
    def created(item: ContentItem) -> datetime:
        if item.created_at is None:
            return _OLDEST
        if item.created_at.tzinfo is None:
            return item.created_at.replace(tzinfo=UTC)
        return item.created_at

    return sorted(items, key=created, reverse=True)


def _same_id(left, right) -> bool:
    # YAML may carry integer ids while CLI arguments are strings
    return left is not None and right is not None and str(left) == str(right)


class MemoryContentStore:
    """Category provider, content provider and assignment sink in one.

    Used by the CLI over a YAML catalog and by tests; a CMS deployment
    supplies database-backed implementations instead.
    """

    def __init__(
        self,
        categories: Iterable[CategoryDescriptor] = (),
        posts: Iterable[ContentItem] = (),
    ):
        self.categories: list[CategoryDescriptor] = list(categories)
        self.posts: list[ContentItem] = list(posts)
        self.assignments: list[tuple[ContentId, CategoryId]] = []

    @classmethod
    def from_catalog(cls, path: str | Path | None = None) -> "MemoryContentStore":
        """Build a store from a YAML catalog file."""
        catalog = load_catalog(path)
        store = cls(catalog.get_categories(), catalog.get_posts())
        logger.info(
            "catalog_loaded",
            path=str(catalog.config_path),
            categories=len(store.categories),
            posts=len(store.posts),
        )
        return store

    async def list_categories(self) -> list[CategoryDescriptor]:
        return list(self.categories)

    async def get_category(self, category_id: CategoryId) -> CategoryDescriptor | None:
        return next((c for c in self.categories if _same_id(c.id, category_id)), None)

    async def list_uncategorized(self, limit: int | None = None) -> list[ContentItem]:
        items = _newest_first(p for p in self.posts if not p.is_categorized)
        return items if limit is None else items[:limit]

    async def recent_in_category(self, category_id: CategoryId, limit: int) -> list[ContentItem]:
        return _newest_first(
            p for p in self.posts
            if p.is_categorized and _same_id(p.category_id, category_id)
        )[:limit]

    async def get_content(self, content_id: ContentId) -> ContentItem | None:
        return next((p for p in self.posts if _same_id(p.id, content_id)), None)

    async def list_all(self) -> list[ContentItem]:
        return list(self.posts)

    async def assign(self, content_id: ContentId, category_id: CategoryId) -> None:
        for index, post in enumerate(self.posts):
            if _same_id(post.id, content_id):
                self.posts[index] = post.model_copy(update={'category_id': category_id})
                self.assignments.append((content_id, category_id))
                return
        raise KeyError(f"Unknown content id: {content_id}")
