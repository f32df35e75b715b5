"""
Data models for Anchor Text Finder.

This module defines the core data structures passed between the keyword
lookup, the suggestion generator and the HTTP/CLI layers. Nothing here is
persisted; every object lives for a single request.
"""

import math
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Union


def coerce_number(value: Any) -> Optional[Union[int, float]]:
    """
    Convert a vendor metric to a number.

    Args:
        value: Raw value from the API (int, float, numeric string or None).

    Returns:
        An int when the value is integral, a float otherwise, or None when
        the value is missing or not numeric.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return int(number) if number.is_integer() else number


@dataclass
class KeywordRecord:
    """A keyword with its search metrics."""
    keyword: str
    volume: Optional[Union[int, float]] = None
    difficulty: Optional[Union[int, float]] = None

    def __post_init__(self) -> None:
        """Normalize the keyword text."""
        self.keyword = (self.keyword or "").strip()

    @classmethod
    def from_row(cls, row: dict) -> "KeywordRecord":
        """Build a record from one vendor row.

        Volume may arrive as ``volume`` or ``search_volume``; difficulty as
        ``keyword_difficulty`` or ``difficulty``.
        """
        volume = row.get("volume")
        if volume is None:
            volume = row.get("search_volume")
        difficulty = row.get("keyword_difficulty")
        if difficulty is None:
            difficulty = row.get("difficulty")
        return cls(
            keyword=str(row.get("keyword") or ""),
            volume=coerce_number(volume),
            difficulty=coerce_number(difficulty),
        )

    @property
    def has_metrics(self) -> bool:
        """Check if both volume and difficulty are known."""
        return self.volume is not None and self.difficulty is not None


# ============================================================================
# Vendor response shapes
# ============================================================================

@dataclass
class KeywordsUnderDataField:
    """Organic keywords delivered under the ``data`` field."""
    records: list[KeywordRecord] = field(default_factory=list)
    source_field: ClassVar[str] = "data"


@dataclass
class KeywordsUnderKeywordsField:
    """Organic keywords delivered under the ``keywords`` field."""
    records: list[KeywordRecord] = field(default_factory=list)
    source_field: ClassVar[str] = "keywords"


KeywordsResponse = Union[KeywordsUnderDataField, KeywordsUnderKeywordsField]


@dataclass
class TopPage:
    """A top-ranking page reported for a target."""
    url: Optional[str] = None
    top_keyword: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "TopPage":
        url = str(row.get("url") or "").strip()
        top_keyword = str(row.get("top_keyword") or "").strip()
        return cls(url=url or None, top_keyword=top_keyword or None)


@dataclass
class PagesUnderDataField:
    """Top pages delivered under the ``data`` field."""
    pages: list[TopPage] = field(default_factory=list)
    source_field: ClassVar[str] = "data"


@dataclass
class PagesUnderPagesField:
    """Top pages delivered under the ``pages`` field."""
    pages: list[TopPage] = field(default_factory=list)
    source_field: ClassVar[str] = "pages"


TopPagesResponse = Union[PagesUnderDataField, PagesUnderPagesField]


# ============================================================================
# Refined keywords
# ============================================================================

@dataclass
class RefinedKeywordSet:
    """
    Keywords that passed the volume/difficulty/topic filter.

    Attributes:
        records: Passing records, in vendor order.
        candidate_count: Number of raw records the filter examined.
        used_fallback: True when the records came from competitor pages.
    """
    records: list[KeywordRecord] = field(default_factory=list)
    candidate_count: int = 0
    used_fallback: bool = False

    @property
    def keywords(self) -> list[str]:
        """Keyword strings in order."""
        return [r.keyword for r in self.records]

    @property
    def keyword_count(self) -> int:
        return len(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)


# ============================================================================
# Anchor text suggestions
# ============================================================================

@dataclass
class AnchorSuggestion:
    """A single anchor text suggestion as rendered to users."""
    category: str
    text: str
    search_volume: Union[str, int, float, None] = None
    difficulty: Optional[str] = None
    best_for: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict, category: str = "") -> "AnchorSuggestion":
        """Build a suggestion from loosely-shaped model output.

        Accepts ``text`` or ``anchorText`` for the label and ``type`` or
        ``category`` for the category; ``category`` is the fallback name.
        """
        text = data.get("text")
        if text is None:
            text = data.get("anchorText", "")
        difficulty = data.get("difficulty")
        best_for = data.get("bestFor")
        return cls(
            category=str(data.get("type") or data.get("category") or category),
            text=str(text),
            search_volume=data.get("searchVolume"),
            difficulty=None if difficulty is None else str(difficulty),
            best_for=None if best_for is None else str(best_for),
        )


@dataclass
class ParsedAnchorTexts:
    """
    Completion output that parsed as a JSON object.

    The object is kept exactly as the model returned it; ``primary``,
    ``alternatives`` and ``categories`` are read-only views over the two
    shapes the model is known to produce.
    """
    value: dict

    @property
    def primary(self) -> Optional[AnchorSuggestion]:
        primary = self.value.get("primary")
        if isinstance(primary, dict):
            return AnchorSuggestion.from_dict(primary, category="Exact Match")
        return None

    @property
    def alternatives(self) -> list[AnchorSuggestion]:
        alternatives = self.value.get("alternatives")
        if not isinstance(alternatives, list):
            return []
        return [
            AnchorSuggestion.from_dict(item, category="Alternative")
            for item in alternatives
            if isinstance(item, dict)
        ]

    @property
    def categories(self) -> dict[str, AnchorSuggestion]:
        """Category-keyed suggestions (e.g. "Exact Match", "Branded")."""
        if "primary" in self.value or "alternatives" in self.value:
            return {}
        return {
            name: AnchorSuggestion.from_dict(item, category=name)
            for name, item in self.value.items()
            if isinstance(item, dict)
        }

    def suggestions(self) -> list[AnchorSuggestion]:
        """All suggestions in display order, whatever the shape."""
        primary = self.primary
        if primary is not None or self.alternatives:
            return ([primary] if primary else []) + self.alternatives
        return list(self.categories.values())

    def to_payload(self) -> dict:
        return self.value


@dataclass
class RawAnchorText:
    """Completion output that could not be parsed as a JSON object."""
    text: str

    def suggestions(self) -> list[AnchorSuggestion]:
        return []

    def to_payload(self) -> str:
        return self.text


AnchorTextResult = Union[ParsedAnchorTexts, RawAnchorText]


@dataclass
class FinderResult:
    """Outcome of one anchor text lookup."""
    refined: RefinedKeywordSet
    anchor_texts: AnchorTextResult

    def to_payload(self) -> dict:
        """Serialize to the public response shape."""
        return {
            "anchorTexts": self.anchor_texts.to_payload(),
            "metrics": {
                "keywordCount": self.refined.keyword_count,
                "refinedKeywords": self.refined.keywords,
            },
        }
