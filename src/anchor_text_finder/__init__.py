"""
Anchor Text Finder

A small SEO tool that:
- Looks up the organic keywords a URL ranks for (Ahrefs)
- Keeps decent-volume, low-difficulty keywords, falling back to competitor pages
- Asks an LLM for backlink anchor text suggestions built on those keywords
"""

__version__ = "1.0.0"
__author__ = "Anchor Text Finder Team"

from .config import AnchorFinderConfig, FallbackStrategy

from .errors import (
    AnchorFinderError,
    ConfigurationError,
    MalformedResponseError,
    UpstreamError,
    ValidationError,
)

from .models import (
    AnchorSuggestion,
    AnchorTextResult,
    FinderResult,
    KeywordRecord,
    ParsedAnchorTexts,
    RawAnchorText,
    RefinedKeywordSet,
)

from .keyword_filter import filter_keywords
from .keyword_refiner import KeywordRefiner
from .suggestion_generator import SuggestionGenerator, build_prompt, parse_anchor_texts
from .finder import AnchorTextFinder, find_anchor_texts

__all__ = [
    "__version__",
    # Config
    "AnchorFinderConfig",
    "FallbackStrategy",
    # Errors
    "AnchorFinderError",
    "ConfigurationError",
    "MalformedResponseError",
    "UpstreamError",
    "ValidationError",
    # Models
    "AnchorSuggestion",
    "AnchorTextResult",
    "FinderResult",
    "KeywordRecord",
    "ParsedAnchorTexts",
    "RawAnchorText",
    "RefinedKeywordSet",
    # Pipeline
    "filter_keywords",
    "KeywordRefiner",
    "SuggestionGenerator",
    "build_prompt",
    "parse_anchor_texts",
    "AnchorTextFinder",
    "find_anchor_texts",
]
