"""
Weighted category-match scoring for content items.

Each category is scored independently from four factors:
- Keyword overlap with the category's name, description and keyword hint
- Similarity between the content keywords and the category description
- Affinity between the detected content type and the category name
- Keyword overlap with the category's most recent posts
"""

from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass, field

from ..config import Settings
from ..logging import get_logger
from ..models.content import CategoryDescriptor, CategoryId, ContentItem
from .analysis import ContentAnalysis, ContentType
from .text_utils import (
    calculate_text_similarity,
    extract_keywords,
    keyword_overlap_score,
)

logger = get_logger(__name__)

NEUTRAL_SCORE = 0.5
LONG_FORM_LENGTH = 1000
SHORT_FORM_LENGTH = 500
MAX_REASON_KEYWORDS = 3

# Category-name terms that mark an affinity with a content type
TYPE_AFFINITY_TERMS: Mapping[ContentType, tuple[str, ...]] = {
    ContentType.TUTORIAL: ('tutorial', 'how-to'),
    ContentType.NEWS: ('news', 'announcement'),
    ContentType.REVIEW: ('review', 'rating'),
    ContentType.GUIDE: ('guide', 'help'),
}


@dataclass
class ScoringWeights:
    """Configurable weights for the composite match score."""
    keyword: float = 0.4
    description: float = 0.3
    content_type: float = 0.2
    history: float = 0.1

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScoringWeights":
        return cls(
            keyword=settings.w_keyword,
            description=settings.w_description,
            content_type=settings.w_type,
            history=settings.w_history,
        )


@dataclass
class MatchScore:
    """Complete scoring breakdown for one (content, category) pair."""
    total: float
    keyword_score: float
    description_score: float | None
    type_score: float
    history_score: float


@dataclass
class CategorySuggestion:
    """A category proposed for a content item."""
    category_id: CategoryId
    category_name: str
    confidence: float
    reasons: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def keyword_match_score(
    keywords: Sequence[str],
    category: CategoryDescriptor,
    keyword_hint: str | None = None,
) -> float:
    """Score keywords against the keywords describing a category.

    Args:
        keywords: Content keywords
        category: Category to match
        keyword_hint: Overrides the category's own keyword hint

    Returns:
        Overlap score (0.0 to 1.0); 0.0 for a category with neither a
        keyword hint nor a description
    """
    hint = category.keyword_hint if keyword_hint is None else keyword_hint
    if not hint and not category.description:
        return 0.0

    category_keywords = extract_keywords(
        f"{hint or ''} {category.description or ''} {category.name}"
    )
    return keyword_overlap_score(keywords, category_keywords)


def content_type_score(content_type: ContentType, category: CategoryDescriptor) -> float:
    """1.0 when the category name suits the content type, else neutral."""
    category_name = category.name.lower()
    terms = TYPE_AFFINITY_TERMS.get(content_type, ())
    if any(term in category_name for term in terms):
        return 1.0
    return NEUTRAL_SCORE


def historical_pattern_score(
    analysis: ContentAnalysis,
    category: CategoryDescriptor,
    recent_posts: Sequence[ContentItem],
) -> float:
    """Average keyword overlap with the category's recent posts."""
    if not recent_posts:
        return NEUTRAL_SCORE

    keywords = analysis.keywords
    total_similarity = 0.0
    for post in recent_posts:
        post_keywords = extract_keywords(f"{post.title} {post.body or ''}")
        total_similarity += keyword_match_score(
            keywords, category, keyword_hint=' '.join(post_keywords)
        )

    return total_similarity / len(recent_posts)


def generate_reasons(analysis: ContentAnalysis, category: CategoryDescriptor) -> list[str]:
    """Explain a category match in human-readable terms."""
    reasons = []

    category_name = category.name.lower()
    description = (category.description or '').lower()
    keyword_matches = [
        keyword for keyword in analysis.title_keywords
        if keyword in category_name or (description and keyword in description)
    ]
    if keyword_matches:
        reasons.append(f"Keyword matches: {', '.join(keyword_matches[:MAX_REASON_KEYWORDS])}")

    if analysis.content_type is not ContentType.OTHER:
        reasons.append(f"Content type: {analysis.content_type.value}")

    if analysis.length > LONG_FORM_LENGTH:
        reasons.append("Long-form content")
    elif analysis.length < SHORT_FORM_LENGTH:
        reasons.append("Short-form content")

    return reasons


class CategoryScorer:
    """Weighted category-match scorer."""

    def __init__(self, settings: Settings, weights: ScoringWeights | None = None):
        self.settings = settings
        self.weights = weights or ScoringWeights.from_settings(settings)
        self.visibility_threshold = settings.visibility_threshold

    def score_breakdown(
        self,
        analysis: ContentAnalysis,
        category: CategoryDescriptor,
        recent_posts: Sequence[ContentItem] = (),
    ) -> MatchScore:
        """Calculate every sub-score and the clamped total."""
        keyword_score = keyword_match_score(analysis.keywords, category)

        description_score = None
        if category.description:
            description_score = calculate_text_similarity(
                ' '.join(analysis.content_keywords), category.description
            )

        type_score = content_type_score(analysis.content_type, category)
        history_score = historical_pattern_score(analysis, category, recent_posts)

        total = (
            self.weights.keyword * keyword_score
            + self.weights.content_type * type_score
            + self.weights.history * history_score
        )
        if description_score is not None:
            total += self.weights.description * description_score

        return MatchScore(
            total=max(0.0, min(1.0, total)),
            keyword_score=keyword_score,
            description_score=description_score,
            type_score=type_score,
            history_score=history_score,
        )

    def score_category(
        self,
        analysis: ContentAnalysis,
        category: CategoryDescriptor,
        recent_posts: Sequence[ContentItem] = (),
    ) -> float:
        """Confidence (0.0 to 1.0) that a category fits the content."""
        return self.score_breakdown(analysis, category, recent_posts).total

    def suggest(
        self,
        analysis: ContentAnalysis,
        categories: Sequence[CategoryDescriptor],
        recent_posts: Mapping[CategoryId, Sequence[ContentItem]] | None = None,
    ) -> list[CategorySuggestion]:
        """Score every category and rank those above the visibility threshold."""
        recent_posts = recent_posts or {}
        suggestions = []

        for category in categories:
            confidence = self.score_category(
                analysis, category, recent_posts.get(category.id, ())
            )
            if confidence > self.visibility_threshold:
                suggestions.append(CategorySuggestion(
                    category_id=category.id,
                    category_name=category.name,
                    confidence=confidence,
                    reasons=generate_reasons(analysis, category),
                ))

        # Stable sort keeps catalog order for equal confidences
        suggestions.sort(key=lambda s: s.confidence, reverse=True)

        logger.debug(
            "categories_scored",
            category_count=len(categories),
            suggestion_count=len(suggestions),
        )
        return suggestions


def suggest_categories(
    analysis: ContentAnalysis,
    categories: Sequence[CategoryDescriptor],
    settings: Settings,
    recent_posts: Mapping[CategoryId, Sequence[ContentItem]] | None = None,
    weights: ScoringWeights | None = None,
) -> list[CategorySuggestion]:
    """Convenience function for category suggestions."""
    scorer = CategoryScorer(settings, weights)
    return scorer.suggest(analysis, categories, recent_posts)
