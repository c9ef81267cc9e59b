"""Per-category title rules derived from category names."""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..models.content import CategoryDescriptor, CategoryId
from .text_utils import extract_keywords

DEFAULT_RULE_CONFIDENCE = 0.8

# Extra title patterns for categories whose name mentions one of the keys
PRESET_TITLE_PATTERNS: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (('tutorial', 'guide'), (r'how to', r'tutorial', r'guide', r'step by step')),
    (('news', 'announcement'), (r'breaking', r'news', r'announcement', r'update')),
    (('review',), (r'review', r'rating', r'stars', r'pros and cons')),
)


@dataclass
class CategoryRule:
    """Title-matching rule for one category."""
    id: str
    name: str
    category_id: CategoryId
    keywords: list[str]
    title_patterns: list[re.Pattern] = field(default_factory=list)
    minimum_matches: int = 1
    confidence: float = DEFAULT_RULE_CONFIDENCE

    def count_title_matches(self, title: str) -> int:
        return sum(1 for pattern in self.title_patterns if pattern.search(title or ''))

    def matches_title(self, title: str) -> bool:
        return self.count_title_matches(title) >= self.minimum_matches


def generate_title_patterns(name: str) -> list[re.Pattern]:
    """Build case-insensitive title patterns for a category name."""
    patterns = [re.compile(re.escape(name), re.IGNORECASE)]

    lower_name = name.lower()
    for triggers, presets in PRESET_TITLE_PATTERNS:
        if any(trigger in lower_name for trigger in triggers):
            patterns.extend(re.compile(preset, re.IGNORECASE) for preset in presets)

    return patterns


def build_category_rules(categories: Sequence[CategoryDescriptor]) -> list[CategoryRule]:
    """Create one auto-rule per category."""
    return [
        CategoryRule(
            id=f"rule-{category.id}",
            name=f"{category.name} Auto-Rule",
            category_id=category.id,
            keywords=extract_keywords(category.name),
            title_patterns=generate_title_patterns(category.name),
        )
        for category in categories
    ]
