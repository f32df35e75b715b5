"""
Ahrefs Site Explorer integration.

This module wraps the two Site Explorer endpoints the keyword refiner needs:
organic keywords for a URL and the top pages of a target. Responses are
resolved into tagged unions here so the rest of the package never deals with
the vendor's inconsistent field names.
"""

import json
import logging
from datetime import date, datetime, timezone
from typing import Any, Optional

import httpx

from .config import DEFAULT_AHREFS_BASE_URL
from .errors import ConfigurationError, MalformedResponseError, UpstreamError
from .models import (
    KeywordRecord,
    KeywordsResponse,
    KeywordsUnderDataField,
    KeywordsUnderKeywordsField,
    PagesUnderDataField,
    PagesUnderPagesField,
    TopPage,
    TopPagesResponse,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "Ahrefs"

ORGANIC_KEYWORDS_PATH = "/site-explorer/organic-keywords"
TOP_PAGES_PATH = "/site-explorer/top-pages"

KEYWORD_FIELDS = "keyword,volume,keyword_difficulty"


def get_formatted_date(today: Optional[date] = None) -> str:
    """
    Return the as-of date Ahrefs expects (``YYYY-MM-DD``, UTC).

    Args:
        today: Date to format. Defaults to the current UTC date.
    """
    if today is None:
        today = datetime.now(timezone.utc).date()
    return today.isoformat()


def parse_keywords_response(body: Any) -> KeywordsResponse:
    """
    Resolve an organic-keywords body into its tagged variant.

    ``data`` takes precedence over ``keywords``; a body with neither yields an
    empty data-field variant.

    Raises:
        MalformedResponseError: If the body is not a JSON object.
    """
    if not isinstance(body, dict):
        raise MalformedResponseError(SERVICE_NAME, "expected a JSON object")

    if isinstance(body.get("data"), list):
        return KeywordsUnderDataField(records=_parse_keyword_rows(body["data"]))
    if isinstance(body.get("keywords"), list):
        return KeywordsUnderKeywordsField(records=_parse_keyword_rows(body["keywords"]))
    return KeywordsUnderDataField(records=[])


def parse_top_pages_response(body: Any) -> TopPagesResponse:
    """
    Resolve a top-pages body into its tagged variant.

    Raises:
        MalformedResponseError: If the body is not a JSON object.
    """
    if not isinstance(body, dict):
        raise MalformedResponseError(SERVICE_NAME, "expected a JSON object")

    if isinstance(body.get("data"), list):
        return PagesUnderDataField(pages=_parse_page_rows(body["data"]))
    if isinstance(body.get("pages"), list):
        return PagesUnderPagesField(pages=_parse_page_rows(body["pages"]))
    return PagesUnderDataField(pages=[])


def _parse_keyword_rows(rows: list) -> list[KeywordRecord]:
    return [KeywordRecord.from_row(row) for row in rows if isinstance(row, dict)]


def _parse_page_rows(rows: list) -> list[TopPage]:
    return [TopPage.from_row(row) for row in rows if isinstance(row, dict)]


class AhrefsClient:
    """
    Async client for the Ahrefs Site Explorer v3 API.

    The HTTP client is owned by the caller so one connection pool can serve
    every lookup made while handling a single request.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: Optional[str],
        base_url: str = DEFAULT_AHREFS_BASE_URL,
        country: str = "de",
        keyword_limit: int = 100,
        top_pages_limit: int = 5,
    ):
        """
        Initialize the Ahrefs client.

        Args:
            http: Shared async HTTP client.
            api_key: Ahrefs API token, sent as a bearer header.
            base_url: API root, without trailing slash.
            country: Market code for keyword metrics.
            keyword_limit: Maximum keywords per organic-keywords lookup.
            top_pages_limit: Maximum pages per top-pages lookup.
        """
        if not api_key:
            raise ConfigurationError(
                "No Ahrefs API key provided. Set AHREFS_API_KEY environment variable."
            )
        self.http = http
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.country = country
        self.keyword_limit = keyword_limit
        self.top_pages_limit = top_pages_limit

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    async def organic_keywords(self, target: str) -> KeywordsResponse:
        """
        Fetch organic keywords ranking for a URL.

        Args:
            target: URL or domain to look up.

        Returns:
            The parsed keyword list variant.

        Raises:
            UpstreamError: On a non-2xx status.
            MalformedResponseError: If the body is not a JSON object.
        """
        params = {
            "target": target,
            "country": self.country,
            "limit": self.keyword_limit,
            "select": KEYWORD_FIELDS,
            "date": get_formatted_date(),
        }
        body = await self._get_json(ORGANIC_KEYWORDS_PATH, params)
        response = parse_keywords_response(body)
        logger.debug(
            f"Organic keywords for {target}: {len(response.records)} rows "
            f"(field '{response.source_field}')"
        )
        return response

    async def top_pages(self, target: str, select: str = "url") -> TopPagesResponse:
        """
        Fetch the top-ranking pages for a target.

        Args:
            target: URL or domain to look up.
            select: Comma-separated fields (``url``, ``top_keyword``).

        Returns:
            The parsed page list variant.
        """
        params = {
            "target": target,
            "country": self.country,
            "limit": self.top_pages_limit,
            "select": select,
            "date": get_formatted_date(),
        }
        body = await self._get_json(TOP_PAGES_PATH, params)
        response = parse_top_pages_response(body)
        logger.debug(
            f"Top pages for {target}: {len(response.pages)} rows "
            f"(field '{response.source_field}')"
        )
        return response

    async def _get_json(self, path: str, params: dict) -> Any:
        response = await self.http.get(
            f"{self.base_url}{path}",
            params=params,
            headers=self.headers,
        )
        url = str(response.request.url)

        if not response.is_success:
            logger.error(
                f"{SERVICE_NAME} API error: status={response.status_code} "
                f"url={url} body={response.text}"
            )
            raise UpstreamError(SERVICE_NAME, response.status_code, url, response.text)

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedResponseError(SERVICE_NAME, f"undecodable JSON body: {e}", response.text)

        logger.debug(f"{SERVICE_NAME} response from {url}: {json.dumps(body, indent=2)}")
        return body
