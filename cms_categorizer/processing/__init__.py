"""Content processing module."""

from .analysis import (
    ContentAnalysis,
    ContentStructure,
    ContentType,
    TypeRule,
    analyze_content,
    analyze_structure,
    detect_content_type,
)
from .rules import CategoryRule, build_category_rules
from .scoring import (
    CategoryScorer,
    CategorySuggestion,
    MatchScore,
    ScoringWeights,
    generate_reasons,
    suggest_categories,
)
from .text_utils import extract_keywords, keyword_overlap_score

__all__ = [
    'analyze_content',
    'analyze_structure',
    'detect_content_type',
    'ContentAnalysis',
    'ContentStructure',
    'ContentType',
    'TypeRule',
    'CategoryScorer',
    'CategorySuggestion',
    'MatchScore',
    'ScoringWeights',
    'generate_reasons',
    'suggest_categories',
    'CategoryRule',
    'build_category_rules',
    'extract_keywords',
    'keyword_overlap_score',
]
