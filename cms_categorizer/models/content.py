"""Content and category records consumed by the scoring engine."""

from datetime import datetime

from pydantic import BaseModel, Field

CategoryId = str | int
ContentId = str | int


class CategoryDescriptor(BaseModel):
    """Read-only category reference data.

    ``description`` and ``keyword_hint`` are optional; an absent description
    skips the description-similarity term entirely.
    """
    id: CategoryId
    name: str
    description: str | None = None
    keyword_hint: str | None = Field(None, description="Free-form meta keywords")


class ContentItem(BaseModel):
    """A post or page as seen by the engine."""
    id: ContentId | None = None
    title: str = ""
    body: str = ""
    category_id: CategoryId | None = None
    created_at: datetime | None = None

    @property
    def is_categorized(self) -> bool:
        return self.category_id is not None
