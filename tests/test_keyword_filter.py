"""
Tests for keyword metric and topic filtering.
"""

import pytest

from anchor_text_finder.keyword_filter import (
    evaluate_keyword,
    filter_by_topic,
    filter_keywords,
    keyword_matches_topic,
    summarize_filter_results,
    normalize_topic,
)
from anchor_text_finder.models import KeywordRecord


class TestNormalizeTopic:
    """Tests for topic normalization."""

    def test_none_stays_none(self):
        assert normalize_topic(None) is None

    def test_blank_topic_is_none(self):
        assert normalize_topic("   ") is None

    def test_strips_and_lowercases(self):
        assert normalize_topic("  Running Shoes ") == "running shoes"


class TestKeywordMatchesTopic:
    """Tests for the topic substring check."""

    def test_no_topic_matches_everything(self):
        assert keyword_matches_topic("anything", None)

    def test_case_insensitive_containment(self):
        assert keyword_matches_topic("Red SHOES sale", "shoes")
        assert keyword_matches_topic("red shoes", "SHOES")

    def test_missing_topic_substring(self):
        assert not keyword_matches_topic("hats", "shoes")


class TestEvaluateKeyword:
    """Tests for the single-record predicate."""

    @pytest.mark.parametrize(
        "volume,difficulty,expected",
        [
            (50, 49, True),
            (49, 10, False),
            (50, 50, False),
            (1000, 0, True),
            (50.0, 49.9, True),
        ],
    )
    def test_volume_and_difficulty_boundaries(self, volume, difficulty, expected):
        """Volume is inclusive at 50, difficulty exclusive at 50."""
        record = KeywordRecord("shoes", volume=volume, difficulty=difficulty)
        allowed, _ = evaluate_keyword(record)
        assert allowed is expected

    def test_unknown_volume_rejected(self):
        allowed, reason = evaluate_keyword(KeywordRecord("shoes", volume=None, difficulty=10))
        assert not allowed
        assert "volume" in reason.lower()

    def test_unknown_difficulty_rejected(self):
        allowed, reason = evaluate_keyword(KeywordRecord("shoes", volume=100, difficulty=None))
        assert not allowed
        assert "difficulty" in reason.lower()

    def test_empty_keyword_rejected(self):
        allowed, _ = evaluate_keyword(KeywordRecord("", volume=100, difficulty=10))
        assert not allowed

    def test_topic_applied_after_metrics(self):
        record = KeywordRecord("hats", volume=500, difficulty=10)
        allowed, reason = evaluate_keyword(record, topic="shoes")
        assert not allowed
        assert "topic" in reason

    def test_custom_thresholds(self):
        record = KeywordRecord("shoes", volume=80, difficulty=30)
        assert evaluate_keyword(record, min_volume=100)[0] is False
        assert evaluate_keyword(record, max_difficulty=30)[0] is False
        assert evaluate_keyword(record, min_volume=80, max_difficulty=31)[0] is True


class TestFilterKeywords:
    """Tests for filter_keywords."""

    def test_topic_example(self):
        """Topic filter excludes keywords without the topic."""
        records = [
            KeywordRecord("red shoes", volume=200, difficulty=20),
            KeywordRecord("hats", volume=500, difficulty=10),
        ]
        allowed, results = filter_keywords(records, topic="shoes")

        assert [r.keyword for r in allowed] == ["red shoes"]
        assert len(results) == 2

    def test_every_passing_record_included_and_others_excluded(self):
        records = [
            KeywordRecord("shoe store", volume=60, difficulty=49),
            KeywordRecord("Shoes outlet", volume=50, difficulty=0),
            KeywordRecord("cheap shoes", volume=49, difficulty=5),
            KeywordRecord("best shoes", volume=300, difficulty=50),
            KeywordRecord("sneakers", volume=900, difficulty=5),
        ]
        allowed, _ = filter_keywords(records, topic="sho")

        assert [r.keyword for r in allowed] == ["shoe store", "Shoes outlet"]

    def test_preserves_vendor_order(self):
        records = [
            KeywordRecord("b", volume=100, difficulty=1),
            KeywordRecord("a", volume=500, difficulty=1),
            KeywordRecord("c", volume=50, difficulty=1),
        ]
        allowed, _ = filter_keywords(records)
        assert [r.keyword for r in allowed] == ["b", "a", "c"]

    def test_repeated_keywords_all_kept(self):
        records = [
            KeywordRecord("Red Shoes", volume=200, difficulty=20),
            KeywordRecord("red shoes", volume=300, difficulty=10),
        ]
        allowed, results = filter_keywords(records)

        assert [r.keyword for r in allowed] == ["Red Shoes", "red shoes"]
        assert all(r.is_allowed for r in results)

    def test_repeated_topic_keywords_all_kept(self):
        records = [KeywordRecord("shoe shop"), KeywordRecord("Shoe Shop")]
        allowed, _ = filter_by_topic(records, "shoe")
        assert len(allowed) == 2


    def test_empty_input(self):
        allowed, results = filter_keywords([])
        assert allowed == []
        assert results == []


class TestFilterByTopic:
    """Tests for topic-only filtering of representative keywords."""

    def test_ignores_missing_metrics(self):
        records = [KeywordRecord("running shoes"), KeywordRecord("hats")]
        allowed, _ = filter_by_topic(records, "shoes")
        assert [r.keyword for r in allowed] == ["running shoes"]

    def test_no_topic_keeps_all_non_empty(self):
        records = [KeywordRecord("a"), KeywordRecord(""), KeywordRecord("b")]
        allowed, _ = filter_by_topic(records)
        assert [r.keyword for r in allowed] == ["a", "b"]


class TestSummarizeFilterResults:
    """Tests for the filtering summary."""

    def test_summary_counts(self):
        records = [
            KeywordRecord("red shoes", volume=200, difficulty=20),
            KeywordRecord("hats", volume=500, difficulty=10),
        ]
        _, results = filter_keywords(records, topic="shoes")

        assert summarize_filter_results(results) == "1 of 2 allowed (1 rejected): ['red shoes']"

    def test_empty_results(self):
        assert summarize_filter_results([]) == "0 of 0 allowed (0 rejected): []"
