"""Pytest configuration and fixtures."""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Generator

import pytest

# Set test environment
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["JSON_LOGGING"] = "false"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def settings():
    """Default settings, independent of the environment."""
    from cms_categorizer.config import Settings

    return Settings(_env_file=None)


@pytest.fixture
def baking_category():
    from cms_categorizer.models import CategoryDescriptor

    return CategoryDescriptor(
        id="baking",
        name="Baking",
        description="bread pastry and cake recipes",
        keyword_hint="bread dough flour oven yeast",
    )


@pytest.fixture
def bread_post():
    from cms_categorizer.models import ContentItem

    return ContentItem(
        id="bread",
        title="Homemade Bread",
        body="Bread dough needs flour and yeast. Bake the bread in a hot oven.",
    )


@pytest.fixture
def sample_categories(baking_category):
    """Sample category catalog."""
    from cms_categorizer.models import CategoryDescriptor

    return [
        CategoryDescriptor(
            id="tutorials",
            name="Tutorials & How-To",
            description="step by step programming tutorials and coding lessons",
            keyword_hint="python javascript coding lesson",
        ),
        CategoryDescriptor(
            id="news",
            name="Company News",
            description="product announcements releases and company updates",
        ),
        CategoryDescriptor(id="misc", name="Miscellaneous"),
        baking_category,
    ]


@pytest.fixture
def sample_posts():
    """Sample posts, two of them already categorized."""
    from cms_categorizer.models import ContentItem

    now = datetime.now(timezone.utc)
    return [
        ContentItem(
            id=1,
            title="How to Bake Bread at Home",
            body="First, mix the flour, yeast and water into a dough. "
                 "Next, let the dough rise before baking the bread in the oven.",
            created_at=now - timedelta(days=2),
        ),
        ContentItem(
            id=2,
            title="Breaking: Company Announces 2025 Roadmap",
            body="<h2>Roadmap</h2><p>The company shared product announcements.</p>",
            created_at=now - timedelta(days=1),
        ),
        ContentItem(
            id=3,
            title="Sourdough Basics",
            body="Sourdough bread uses a natural yeast starter, flour and water.",
            category_id="baking",
            created_at=now - timedelta(days=30),
        ),
        ContentItem(
            id=4,
            title="Python Decorators Explained",
            body="Decorators wrap python functions in this coding lesson.",
            category_id="tutorials",
            created_at=now - timedelta(days=20),
        ),
    ]


@pytest.fixture
def store(sample_categories, sample_posts):
    """In-memory store acting as every collaborator."""
    from cms_categorizer.store import MemoryContentStore

    return MemoryContentStore(sample_categories, sample_posts)


CATALOG_YAML = """
categories:
  - id: baking
    name: Baking
    description: bread pastry and cake recipes
    keyword_hint: bread dough flour oven yeast bake
  - id: news
    name: Company News
    description: product announcements and company updates
posts:
  - id: 1
    title: How to Bake Bread at Home
    body: "First, mix the flour and yeast into a bread dough, then bake it in the oven."
    created_at: 2025-08-10T09:00:00Z
  - id: 2
    title: Sourdough Basics
    body: "Sourdough bread uses a natural yeast starter."
    category_id: baking
    created_at: 2025-07-01T08:00:00Z
"""


@pytest.fixture
def catalog_file(temp_dir) -> Path:
    """YAML catalog on disk."""
    path = temp_dir / "catalog.yaml"
    path.write_text(CATALOG_YAML, encoding="utf-8")
    return path
