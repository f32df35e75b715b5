"""
Keyword refinement for a target URL.

Looks up the organic keywords a URL ranks for, keeps the ones that pass the
metric/topic filter and, when none do, falls back once to the keywords of
the target's top-ranking pages.
"""

import asyncio
import logging
from typing import Optional

import httpx

from .ahrefs_client import AhrefsClient
from .config import FallbackStrategy
from .errors import AnchorFinderError
from .keyword_filter import (
    DEFAULT_MAX_DIFFICULTY,
    DEFAULT_MIN_VOLUME,
    filter_by_topic,
    filter_keywords,
    summarize_filter_results,
)
from .models import KeywordRecord, RefinedKeywordSet

logger = logging.getLogger(__name__)


class KeywordRefiner:
    """
    Produces the refined keyword set for a target URL.

    Only the primary lookup may fail the request. Every fallback call
    degrades to an empty result instead.
    """

    def __init__(
        self,
        ahrefs: AhrefsClient,
        min_volume: int = DEFAULT_MIN_VOLUME,
        max_difficulty: int = DEFAULT_MAX_DIFFICULTY,
        fallback_strategy: FallbackStrategy = "competitor_keywords",
    ):
        self.ahrefs = ahrefs
        self.min_volume = min_volume
        self.max_difficulty = max_difficulty
        self.fallback_strategy = fallback_strategy

    async def refine(self, target_url: str, topic: Optional[str] = None) -> RefinedKeywordSet:
        """
        Build the refined keyword set for a URL.

        Args:
            target_url: URL whose ranking keywords are looked up.
            topic: Optional topic every keyword must contain.

        Returns:
            RefinedKeywordSet, possibly empty.

        Raises:
            UpstreamError: If the primary keyword lookup fails.
            MalformedResponseError: If the primary response is unusable.
        """
        response = await self.ahrefs.organic_keywords(target_url)
        allowed, results = filter_keywords(
            response.records,
            topic=topic,
            min_volume=self.min_volume,
            max_difficulty=self.max_difficulty,
        )
        logger.debug(f"Primary keyword filter: {summarize_filter_results(results)}")

        if allowed:
            refined = RefinedKeywordSet(records=allowed, candidate_count=len(results))
        else:
            logger.warning(
                "No organic keywords found meeting criteria. Fetching competitor keywords."
            )
            refined = await self._fallback(target_url, topic)

        logger.info(f"Final refined keywords: {refined.keywords}")
        return refined

    async def _fallback(self, target_url: str, topic: Optional[str]) -> RefinedKeywordSet:
        select = "top_keyword" if self.fallback_strategy == "top_keyword" else "url"
        try:
            pages = (await self.ahrefs.top_pages(target_url, select=select)).pages
        except (AnchorFinderError, httpx.HTTPError) as e:
            logger.error(f"Top pages lookup failed for {target_url}: {e}")
            return RefinedKeywordSet(used_fallback=True)

        if self.fallback_strategy == "top_keyword":
            candidates = [
                KeywordRecord(keyword=page.top_keyword)
                for page in pages
                if page.top_keyword
            ]
            allowed, results = filter_by_topic(candidates, topic)
        else:
            competitor_urls = [page.url for page in pages if page.url]
            logger.info(f"Competitor URLs: {competitor_urls}")
            keyword_lists = await asyncio.gather(
                *(self._competitor_keywords(url) for url in competitor_urls),
                return_exceptions=True,
            )
            candidates = []
            for url, records in zip(competitor_urls, keyword_lists):
                if isinstance(records, Exception):
                    logger.error(f"Competitor organic keywords lookup failed for {url}: {records}")
                    continue
                candidates.extend(records)
            allowed, results = filter_keywords(
                candidates,
                topic=topic,
                min_volume=self.min_volume,
                max_difficulty=self.max_difficulty,
            )

        logger.debug(f"Competitor keyword filter: {summarize_filter_results(results)}")
        return RefinedKeywordSet(
            records=allowed,
            candidate_count=len(results),
            used_fallback=True,
        )

    async def _competitor_keywords(self, url: str) -> list[KeywordRecord]:
        try:
            response = await self.ahrefs.organic_keywords(url)
        except (AnchorFinderError, httpx.HTTPError) as e:
            logger.error(f"Competitor organic keywords lookup failed for {url}: {e}")
            return []
        return response.records
