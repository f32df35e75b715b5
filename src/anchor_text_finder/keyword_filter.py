"""
Keyword metric and topic filtering.

This module decides which keyword records are worth sending to the
suggestion generator. A record passes when:
1. Its monthly search volume is at least the minimum (default 50)
2. Its keyword difficulty is below the ceiling (default 50)
3. No topic was given, or the keyword contains the topic (case-insensitive)

Records with unknown volume or difficulty never pass the metric checks.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from .models import KeywordRecord


DEFAULT_MIN_VOLUME = 50
DEFAULT_MAX_DIFFICULTY = 50


@dataclass
class KeywordFilterResult:
    """Result of keyword filtering with explanation."""
    record: KeywordRecord
    is_allowed: bool
    reason: str


def normalize_topic(topic: Optional[str]) -> Optional[str]:
    """
    Normalize a user topic for matching.

    Args:
        topic: Raw topic input.

    Returns:
        Lowercase, stripped topic, or None when blank.
    """
    if topic is None:
        return None
    cleaned = topic.strip().lower()
    return cleaned or None


def keyword_matches_topic(keyword: str, topic: Optional[str]) -> bool:
    """Check if a keyword contains the topic (always True without a topic)."""
    normalized = normalize_topic(topic)
    if normalized is None:
        return True
    return normalized in (keyword or "").lower()


def evaluate_keyword(
    record: KeywordRecord,
    topic: Optional[str] = None,
    min_volume: int = DEFAULT_MIN_VOLUME,
    max_difficulty: int = DEFAULT_MAX_DIFFICULTY,
) -> tuple[bool, str]:
    """
    Apply the volume, difficulty and topic checks to one record.

    Returns:
        Tuple of (is_allowed, reason).
    """
    if not record.keyword:
        return False, "Empty keyword"
    if record.volume is None:
        return False, "Unknown search volume"
    if record.volume < min_volume:
        return False, f"Volume {record.volume} < {min_volume}"
    if record.difficulty is None:
        return False, "Unknown keyword difficulty"
    if record.difficulty >= max_difficulty:
        return False, f"Difficulty {record.difficulty} >= {max_difficulty}"
    if not keyword_matches_topic(record.keyword, topic):
        return False, f"Does not contain topic '{topic}'"
    return True, "Meets volume, difficulty and topic criteria"


def filter_keywords(
    records: Iterable[KeywordRecord],
    topic: Optional[str] = None,
    min_volume: int = DEFAULT_MIN_VOLUME,
    max_difficulty: int = DEFAULT_MAX_DIFFICULTY,
) -> tuple[list[KeywordRecord], list[KeywordFilterResult]]:
    """
    Filter keyword records by metrics and topic.

    This is the main entry point for keyword filtering. Vendor order is
    preserved and every passing record is kept, repeats included.

    Args:
        records: Candidate records in vendor order.
        topic: Optional topic substring.
        min_volume: Minimum search volume (inclusive).
        max_difficulty: Difficulty ceiling (exclusive).

    Returns:
        Tuple of (allowed_records, all_filter_results).
    """
    results: list[KeywordFilterResult] = []
    allowed: list[KeywordRecord] = []

    for record in records:
        is_allowed, reason = evaluate_keyword(
            record,
            topic=topic,
            min_volume=min_volume,
            max_difficulty=max_difficulty,
        )
        results.append(KeywordFilterResult(record=record, is_allowed=is_allowed, reason=reason))
        if is_allowed:
            allowed.append(record)

    return allowed, results


def filter_by_topic(
    records: Iterable[KeywordRecord],
    topic: Optional[str] = None,
) -> tuple[list[KeywordRecord], list[KeywordFilterResult]]:
    """
    Filter records by topic only.

    Used for representative keywords that come without metrics.
    """
    results: list[KeywordFilterResult] = []
    allowed: list[KeywordRecord] = []

    for record in records:
        if not record.keyword:
            is_allowed, reason = False, "Empty keyword"
        elif not keyword_matches_topic(record.keyword, topic):
            is_allowed, reason = False, f"Does not contain topic '{topic}'"
        else:
            is_allowed, reason = True, "Matches topic"

        results.append(KeywordFilterResult(record=record, is_allowed=is_allowed, reason=reason))
        if is_allowed:
            allowed.append(record)

    return allowed, results


def summarize_filter_results(results: list[KeywordFilterResult]) -> str:
    """One-line allowed/rejected summary for debug logging."""
    allowed = [r.record.keyword for r in results if r.is_allowed]
    rejected = len(results) - len(allowed)
    return f"{len(allowed)} of {len(results)} allowed ({rejected} rejected): {allowed}"
