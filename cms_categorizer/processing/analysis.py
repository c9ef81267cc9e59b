"""
Content analysis for categorization.

This module turns a content item into a ContentAnalysis:
- Title and body keywords
- Structural markup flags (headings, lists, images, links)
- Content type detected from an ordered rule table
- Length and reading time
"""

import re
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from enum import Enum

from ..models.content import ContentItem
from .text_utils import contains_any, estimate_reading_time, extract_keywords

CONTENT_KEYWORD_LIMIT = 20


class ContentType(Enum):
    """Detected content types."""
    ARTICLE = "article"
    TUTORIAL = "tutorial"
    NEWS = "news"
    REVIEW = "review"
    GUIDE = "guide"
    OTHER = "other"  # Never produced by TYPE_RULES


@dataclass(frozen=True)
class ContentStructure:
    """Markup features present in a piece of content."""
    has_headings: bool = False
    has_lists: bool = False
    has_images: bool = False
    has_links: bool = False


@dataclass
class ContentAnalysis:
    """Derived view of one content item, created per scoring call."""
    title_keywords: list[str]
    content_keywords: list[str]
    structure: ContentStructure
    content_type: ContentType
    length: int
    reading_time: int

    @property
    def keywords(self) -> list[str]:
        """Title keywords followed by content keywords."""
        return [*self.title_keywords, *self.content_keywords]

    def to_dict(self) -> dict:
        data = asdict(self)
        data['content_type'] = self.content_type.value
        return data


HEADING_PATTERN = re.compile(r'<h[1-6](?:\s[^>]*)?>', re.IGNORECASE)
LIST_PATTERN = re.compile(r'<(?:ul|ol|li)(?:\s[^>]*)?>', re.IGNORECASE)
IMAGE_PATTERN = re.compile(r'<img\b', re.IGNORECASE)
LINK_PATTERN = re.compile(r'<a\s[^>]*\bhref\b', re.IGNORECASE)


def analyze_structure(markup: str) -> ContentStructure:
    """Detect headings, lists, images and links in HTML markup."""
    if not markup:
        return ContentStructure()

    return ContentStructure(
        has_headings=bool(HEADING_PATTERN.search(markup)),
        has_lists=bool(LIST_PATTERN.search(markup)),
        has_images=bool(IMAGE_PATTERN.search(markup)),
        has_links=bool(LINK_PATTERN.search(markup)),
    )


YEAR_PATTERN = re.compile(r'\d{4}')


@dataclass(frozen=True)
class TypeRule:
    """One entry of the content-type decision list."""
    content_type: ContentType
    title_terms: tuple[str, ...] = ()
    body_terms: tuple[str, ...] = ()
    title_check: Callable[[str], bool] | None = field(default=None, compare=False)

    def matches(self, title: str, body: str) -> bool:
        title = title.lower()
        if contains_any(title, self.title_terms):
            return True
        if self.title_check is not None and self.title_check(title):
            return True
        return contains_any(body, self.body_terms)


# Evaluated in order; the first matching rule wins
TYPE_RULES: tuple[TypeRule, ...] = (
    TypeRule(
        ContentType.TUTORIAL,
        title_terms=('how to', 'tutorial', 'step by step'),
        body_terms=('step 1', 'first,', 'next,'),
    ),
    TypeRule(
        ContentType.NEWS,
        title_terms=('breaking', 'news', 'announcement', 'update'),
        title_check=lambda title: bool(YEAR_PATTERN.search(title)),
    ),
    TypeRule(
        ContentType.REVIEW,
        title_terms=('review', 'rating', 'stars'),
        body_terms=('pros', 'cons', 'rating'),
    ),
    TypeRule(
        ContentType.GUIDE,
        title_terms=('guide', 'complete', 'ultimate'),
        body_terms=('guide', 'complete guide'),
    ),
)


def detect_content_type(
    title: str,
    body: str,
    rules: tuple[TypeRule, ...] = TYPE_RULES,
) -> ContentType:
    """Detect the content type of a title/body pair."""
    title = title or ""
    body = body or ""
    for rule in rules:
        if rule.matches(title, body):
            return rule.content_type
    return ContentType.ARTICLE


def analyze_content(item: ContentItem, words_per_minute: int = 200) -> ContentAnalysis:
    """Build the analysis of a content item.

    Args:
        item: Content to analyze
        words_per_minute: Reading speed used for the reading-time estimate

    Returns:
        Content analysis
    """
    title = item.title or ""
    body = item.body or ""

    return ContentAnalysis(
        title_keywords=extract_keywords(title),
        content_keywords=extract_keywords(body)[:CONTENT_KEYWORD_LIMIT],
        structure=analyze_structure(body),
        content_type=detect_content_type(title, body),
        length=len(body),
        reading_time=estimate_reading_time(body, words_per_minute),
    )
