# -*- coding: utf-8 -*-
"""
Centralized configuration for Anchor Text Finder.

This module provides a unified configuration dataclass that controls the
keyword lookup (market, limits, filter thresholds, fallback strategy) and
the completion call (model, token budget, temperature).
"""

import os
from dataclasses import dataclass
from typing import Literal, Optional

import httpx

from .errors import ConfigurationError


# Type alias for the competitor fallback strategy
# - "competitor_keywords": Fetch organic keywords for every top page URL and
#   re-apply the full volume/difficulty/topic filter.
# - "top_keyword": Use the single representative keyword the top-pages
#   endpoint reports per page, filtered by topic only.
FallbackStrategy = Literal["competitor_keywords", "top_keyword"]

FALLBACK_STRATEGIES = ("competitor_keywords", "top_keyword")

DEFAULT_AHREFS_BASE_URL = "https://api.ahrefs.com/v3"
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"


@dataclass
class AnchorFinderConfig:
    """
    Central configuration for an anchor text lookup.

    Attributes:
        ahrefs_api_key: Bearer token for the Ahrefs API (keywords + top pages).
        openai_api_key: Bearer token for the chat-completion API.

        ahrefs_base_url: Base URL of the Ahrefs v3 API.
        openai_base_url: Base URL of the OpenAI-compatible API.

        country: Two-letter market code sent with every keyword lookup.
        keyword_limit: Maximum organic keywords requested per URL.
        top_pages_limit: Maximum top pages requested during fallback.

        min_volume: Minimum monthly search volume (inclusive).
        max_difficulty: Keyword difficulty ceiling (exclusive).

        fallback_strategy: How competitor keywords are gathered when the
            primary lookup yields nothing:
            - "competitor_keywords": one organic-keyword lookup per top page
            - "top_keyword": the precomputed top keyword of each page

        model: Completion model identifier.
        max_tokens: Output token budget for the completion.
        temperature: Sampling temperature for the completion.

        timeout: Overall HTTP timeout in seconds.
        connect_timeout: Connection timeout in seconds.
    """

    ahrefs_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None

    ahrefs_base_url: str = DEFAULT_AHREFS_BASE_URL
    openai_base_url: str = DEFAULT_OPENAI_BASE_URL

    # Keyword lookup
    country: str = "de"
    keyword_limit: int = 100
    top_pages_limit: int = 5

    # Filter thresholds
    min_volume: int = 50
    max_difficulty: int = 50

    # Fallback
    fallback_strategy: FallbackStrategy = "competitor_keywords"

    # Completion
    model: str = "gpt-4o-mini"
    max_tokens: int = 300
    temperature: float = 0.7

    # HTTP
    timeout: float = 60.0
    connect_timeout: float = 30.0

    def __post_init__(self):
        """Validate configuration values."""
        if self.fallback_strategy not in FALLBACK_STRATEGIES:
            raise ValueError(
                f"fallback_strategy must be 'competitor_keywords' or 'top_keyword', "
                f"got '{self.fallback_strategy}'"
            )
        if self.keyword_limit < 1:
            raise ValueError(f"keyword_limit must be >= 1, got {self.keyword_limit}")
        if self.top_pages_limit < 1:
            raise ValueError(f"top_pages_limit must be >= 1, got {self.top_pages_limit}")
        if self.max_tokens < 1:
            raise ValueError(f"max_tokens must be >= 1, got {self.max_tokens}")
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError(f"temperature must be between 0 and 2, got {self.temperature}")

    @property
    def http_timeout(self) -> httpx.Timeout:
        """Timeout applied to every outbound request."""
        return httpx.Timeout(self.timeout, connect=self.connect_timeout)

    def require_api_keys(self) -> None:
        """Raise ConfigurationError unless both provider keys are set."""
        missing = []
        if not self.ahrefs_api_key:
            missing.append("AHREFS_API_KEY")
        if not self.openai_api_key:
            missing.append("OPENAI_API_KEY")
        if missing:
            raise ConfigurationError(
                f"Missing API credentials: {', '.join(missing)}. "
                "Set the environment variables or pass them explicitly."
            )

    @classmethod
    def from_env(cls, **overrides) -> "AnchorFinderConfig":
        """Create config from environment variables.

        Explicit keyword arguments win over the environment; None values in
        overrides are ignored so CLI options can be passed straight through.

        Args:
            **overrides: Override any config values.

        Returns:
            AnchorFinderConfig populated from the environment.
        """
        values = {
            "ahrefs_api_key": os.environ.get("AHREFS_API_KEY"),
            "openai_api_key": os.environ.get("OPENAI_API_KEY"),
            "ahrefs_base_url": os.environ.get("AHREFS_BASE_URL", DEFAULT_AHREFS_BASE_URL),
            "openai_base_url": os.environ.get("OPENAI_BASE_URL", DEFAULT_OPENAI_BASE_URL),
            "country": os.environ.get("ANCHOR_FINDER_COUNTRY", "de"),
            "fallback_strategy": os.environ.get("ANCHOR_FINDER_FALLBACK", "competitor_keywords"),
            "model": os.environ.get("OPENAI_MODEL", "gpt-4o-mini"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
