"""Text processing utilities for content categorization."""

import math
import re
from collections import Counter
from collections.abc import Iterable, Sequence

MAX_KEYWORDS = 10
MIN_KEYWORD_LENGTH = 3

# Common English function words excluded from keyword extraction
STOP_WORDS = frozenset({
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for',
    'of', 'with', 'by', 'is', 'are', 'was', 'were', 'be', 'been', 'being',
    'have', 'has', 'had', 'do', 'does', 'did', 'will', 'would', 'could',
    'should', 'may', 'might', 'must', 'can', 'this', 'that', 'these', 'those',
    'i', 'you', 'he', 'she', 'it', 'we', 'they', 'me', 'him', 'her', 'us',
    'them', 'my', 'your', 'his', 'its', 'our', 'their', 'mine', 'yours',
    'hers', 'ours', 'theirs',
})

_NON_WORD = re.compile(r'[^\w\s]')
_WHITESPACE = re.compile(r'\s+')


def normalize_text(text: str) -> str:
    """Lowercase text, turn punctuation into spaces and collapse whitespace.

    Args:
        text: Input text (may contain markup)

    Returns:
        Normalized text
    """
    if not text:
        return ""

    text = _NON_WORD.sub(' ', text.lower())
    return _WHITESPACE.sub(' ', text).strip()


def extract_keywords(
    text: str,
    limit: int = MAX_KEYWORDS,
    stop_words: frozenset[str] = STOP_WORDS,
) -> list[str]:
    """Extract the most frequent keywords from text.

    Tokens of two characters or fewer and stop words are dropped. Ties in
    frequency keep first-occurrence order.

    Args:
        text: Input text
        limit: Maximum number of keywords
        stop_words: Words to exclude

    Returns:
        Keywords ordered by descending frequency
    """
    if not text:
        return []

    frequency = Counter(
        word for word in normalize_text(text).split()
        if len(word) >= MIN_KEYWORD_LENGTH and word not in stop_words
    )

    return [word for word, _ in frequency.most_common(limit)]


def keyword_overlap_score(keywords: Sequence[str], reference_keywords: Sequence[str]) -> float:
    """Fraction of keywords that fuzzily match a reference keyword set.

    A keyword matches when it contains, or is contained in, any reference
    keyword (case-insensitive). The denominator is the larger of the two
    list sizes, not the size of their union.

    Args:
        keywords: Keywords of the content being scored
        reference_keywords: Keywords describing the target

    Returns:
        Overlap score (0.0 to 1.0)
    """
    denominator = max(len(keywords), len(reference_keywords))
    if denominator == 0:
        return 0.0

    reference = [ref.lower() for ref in reference_keywords]
    matches = 0
    for keyword in keywords:
        keyword = keyword.lower()
        if any(keyword in ref or ref in keyword for ref in reference):
            matches += 1

    return matches / denominator


def calculate_text_similarity(text1: str, text2: str) -> float:
    """Calculate word-overlap similarity using the Jaccard index.

    Args:
        text1: First text
        text2: Second text

    Returns:
        Similarity score (0.0 to 1.0)
    """
    words1 = set(text1.lower().split())
    words2 = set(text2.lower().split())

    union = words1 | words2
    if not union:
        return 0.0

    return len(words1 & words2) / len(union)


def count_words(text: str) -> int:
    """Count whitespace-separated words."""
    return len(text.split()) if text else 0


def estimate_reading_time(text: str, words_per_minute: int = 200) -> int:
    """Estimate reading time in whole minutes, rounded up.

    Args:
        text: Text to read
        words_per_minute: Reading speed

    Returns:
        Reading time in minutes
    """
    return math.ceil(count_words(text) / words_per_minute)


def contains_any(text: str, terms: Iterable[str]) -> bool:
    """Case-insensitive substring check against several terms."""
    text_lower = text.lower()
    return any(term in text_lower for term in terms)
