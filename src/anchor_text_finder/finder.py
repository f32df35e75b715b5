"""
Request orchestration.

AnchorTextFinder runs one lookup end to end: validate input, refine
keywords, generate suggestions. Each run opens and closes its own HTTP
client so no state is shared between requests.
"""

import logging
from typing import Optional

import httpx

from .ahrefs_client import AhrefsClient
from .config import AnchorFinderConfig
from .errors import ValidationError
from .keyword_refiner import KeywordRefiner
from .llm_client import LLMClient
from .models import FinderResult
from .suggestion_generator import SuggestionGenerator

logger = logging.getLogger(__name__)


class AnchorTextFinder:
    """
    Entry point for anchor text lookups.

    Args:
        config: Lookup configuration. Defaults to AnchorFinderConfig.from_env().
        transport: Optional httpx transport, used to stub vendors in tests.
    """

    def __init__(
        self,
        config: Optional[AnchorFinderConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or AnchorFinderConfig.from_env()
        self.transport = transport

    async def run(self, target_url: Optional[str], topic: Optional[str] = None) -> FinderResult:
        """
        Look up keywords for a URL and generate anchor text suggestions.

        Args:
            target_url: Page to build anchors for. Required.
            topic: Optional niche used to filter keywords and steer the prompt.

        Returns:
            FinderResult with the refined keywords and the suggestions.

        Raises:
            ValidationError: If target_url is missing or blank.
            ConfigurationError: If an API key is missing.
            UpstreamError: If a required upstream call fails.
            MalformedResponseError: If an upstream body is unusable.
            httpx.HTTPError: On transport failures of required calls.
        """
        target_url = (target_url or "").strip()
        if not target_url:
            raise ValidationError("Target URL is required")
        topic = (topic or "").strip() or None

        self.config.require_api_keys()

        async with httpx.AsyncClient(
            timeout=self.config.http_timeout,
            follow_redirects=True,
            transport=self.transport,
        ) as http:
            refiner = KeywordRefiner(
                AhrefsClient(
                    http,
                    api_key=self.config.ahrefs_api_key,
                    base_url=self.config.ahrefs_base_url,
                    country=self.config.country,
                    keyword_limit=self.config.keyword_limit,
                    top_pages_limit=self.config.top_pages_limit,
                ),
                min_volume=self.config.min_volume,
                max_difficulty=self.config.max_difficulty,
                fallback_strategy=self.config.fallback_strategy,
            )
            generator = SuggestionGenerator(
                LLMClient(
                    http,
                    api_key=self.config.openai_api_key,
                    model=self.config.model,
                    base_url=self.config.openai_base_url,
                    max_tokens=self.config.max_tokens,
                    temperature=self.config.temperature,
                )
            )

            refined = await refiner.refine(target_url, topic)
            anchor_texts = await generator.generate(refined.records, target_url, topic)

        return FinderResult(refined=refined, anchor_texts=anchor_texts)


async def find_anchor_texts(
    target_url: str,
    topic: Optional[str] = None,
    config: Optional[AnchorFinderConfig] = None,
) -> FinderResult:
    """
    Convenience function to run a single lookup.

    Args:
        target_url: Page to build anchors for.
        topic: Optional niche.
        config: Optional configuration; read from the environment otherwise.

    Returns:
        FinderResult for the lookup.
    """
    finder = AnchorTextFinder(config=config)
    return await finder.run(target_url, topic)
