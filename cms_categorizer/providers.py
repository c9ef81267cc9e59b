"""Collaborator interfaces the engine reads from and writes to."""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from .models.content import CategoryDescriptor, CategoryId, ContentId, ContentItem


@runtime_checkable
class CategoryProvider(Protocol):
    """Source of the category catalog."""

    async def list_categories(self) -> Sequence[CategoryDescriptor]:
        ...

    async def get_category(self, category_id: CategoryId) -> CategoryDescriptor | None:
        ...


@runtime_checkable
class ContentProvider(Protocol):
    """Source of content items, newest first."""

    async def list_uncategorized(self, limit: int | None = None) -> Sequence[ContentItem]:
        ...

    async def recent_in_category(self, category_id: CategoryId, limit: int) -> Sequence[ContentItem]:
        ...

    async def get_content(self, content_id: ContentId) -> ContentItem | None:
        ...

    async def list_all(self) -> Sequence[ContentItem]:
        ...


@runtime_checkable
class AssignmentSink(Protocol):
    """Persists a content-to-category assignment."""

    async def assign(self, content_id: ContentId, category_id: CategoryId) -> None:
        ...
