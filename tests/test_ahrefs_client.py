"""Tests for the Ahrefs Site Explorer client."""

from datetime import date

import httpx
import pytest

from anchor_text_finder.ahrefs_client import (
    AhrefsClient,
    get_formatted_date,
    parse_keywords_response,
    parse_top_pages_response,
)
from anchor_text_finder.errors import ConfigurationError, MalformedResponseError, UpstreamError
from anchor_text_finder.models import (
    KeywordsUnderDataField,
    KeywordsUnderKeywordsField,
    PagesUnderDataField,
    PagesUnderPagesField,
)

from conftest import ORGANIC_KEYWORDS, TOP_PAGES, kw


def _client(http: httpx.AsyncClient, **kwargs) -> AhrefsClient:
    return AhrefsClient(http, api_key="ahrefs-test-key", **kwargs)


class TestGetFormattedDate:
    """Tests for the as-of date."""

    def test_formats_given_date(self):
        assert get_formatted_date(date(2025, 2, 21)) == "2025-02-21"

    def test_defaults_to_today(self):
        value = get_formatted_date()
        assert len(value) == 10
        assert value[4] == "-" and value[7] == "-"


class TestParseKeywordsResponse:
    """Tests for resolving the keyword list shape."""

    def test_data_field(self):
        response = parse_keywords_response({"data": [kw("red shoes", 200, 20)]})
        assert isinstance(response, KeywordsUnderDataField)
        assert response.records[0].keyword == "red shoes"

    def test_keywords_field(self):
        response = parse_keywords_response({"keywords": [kw("hats", 500, 10)]})
        assert isinstance(response, KeywordsUnderKeywordsField)
        assert response.records[0].volume == 500

    def test_data_wins_when_both_present(self):
        response = parse_keywords_response({"data": [], "keywords": [kw("hats", 500, 10)]})
        assert isinstance(response, KeywordsUnderDataField)
        assert response.records == []

    def test_missing_fields_default_to_empty(self):
        response = parse_keywords_response({"meta": {}})
        assert response.records == []

    def test_non_dict_rows_skipped(self):
        response = parse_keywords_response({"keywords": ["oops", kw("hats", 500, 10)]})
        assert [r.keyword for r in response.records] == ["hats"]

    def test_non_object_body_is_malformed(self):
        with pytest.raises(MalformedResponseError):
            parse_keywords_response([kw("hats", 500, 10)])


class TestParseTopPagesResponse:
    """Tests for resolving the top pages shape."""

    def test_pages_field(self):
        response = parse_top_pages_response({"pages": [{"top_keyword": "shoes"}]})
        assert isinstance(response, PagesUnderPagesField)
        assert response.pages[0].top_keyword == "shoes"

    def test_data_field(self):
        response = parse_top_pages_response({"data": [{"url": "https://a.example/"}]})
        assert isinstance(response, PagesUnderDataField)
        assert response.pages[0].url == "https://a.example/"

    def test_missing_fields(self):
        assert parse_top_pages_response({}).pages == []


class TestAhrefsClient:
    """Tests for AhrefsClient requests."""

    def test_requires_api_key(self):
        with pytest.raises(ConfigurationError):
            AhrefsClient(None, api_key=None)

    @pytest.mark.asyncio
    async def test_organic_keywords_request(self, vendors):
        vendors.keywords["example.com/a b"] = (200, {"keywords": [kw("red shoes", 200, 20)]})

        async with httpx.AsyncClient(transport=vendors.transport) as http:
            response = await _client(http, country="us", keyword_limit=25).organic_keywords("example.com/a b")

        assert [r.keyword for r in response.records] == ["red shoes"]
        request = vendors.calls(ORGANIC_KEYWORDS)[0]
        params = request.url.params
        assert params["target"] == "example.com/a b"
        assert params["country"] == "us"
        assert params["limit"] == "25"
        assert params["select"] == "keyword,volume,keyword_difficulty"
        assert params["date"] == get_formatted_date()
        assert request.headers["Authorization"] == "Bearer ahrefs-test-key"
        assert "token" not in params
        assert "ahrefs-test-key" not in str(request.url)

    @pytest.mark.asyncio
    async def test_top_pages_request(self, vendors):
        vendors.top_pages = (200, {"pages": [{"url": "https://a.example/"}]})

        async with httpx.AsyncClient(transport=vendors.transport) as http:
            response = await _client(http, top_pages_limit=3).top_pages("example.com", select="url")

        assert response.pages[0].url == "https://a.example/"
        params = vendors.calls(TOP_PAGES)[0].url.params
        assert params["limit"] == "3"
        assert params["select"] == "url"
        assert params["country"] == "de"

    @pytest.mark.asyncio
    async def test_upstream_error_carries_status_and_body(self, vendors):
        vendors.default_keywords = (403, "Forbidden: invalid token")

        async with httpx.AsyncClient(transport=vendors.transport) as http:
            with pytest.raises(UpstreamError) as exc_info:
                await _client(http).organic_keywords("example.com")

        error = exc_info.value
        assert error.status_code == 403
        assert error.body == "Forbidden: invalid token"
        assert error.service == "Ahrefs"
        assert "organic-keywords" in error.url

    @pytest.mark.asyncio
    async def test_invalid_json_is_malformed(self, vendors):
        vendors.default_keywords = (200, "<html>not json</html>")

        async with httpx.AsyncClient(transport=vendors.transport) as http:
            with pytest.raises(MalformedResponseError):
                await _client(http).organic_keywords("example.com")

    @pytest.mark.asyncio
    async def test_undecodable_body_is_malformed(self, vendors):
        vendors.default_keywords = (200, b"\xff\xfe\xfa garbage")

        async with httpx.AsyncClient(transport=vendors.transport) as http:
            with pytest.raises(MalformedResponseError):
                await _client(http).organic_keywords("example.com")

    @pytest.mark.asyncio
    async def test_base_url_trailing_slash(self, vendors):
        async with httpx.AsyncClient(transport=vendors.transport) as http:
            await _client(http, base_url="https://ahrefs.test/v3/").organic_keywords("example.com")

        assert vendors.requests[0].url.path == "/v3/site-explorer/organic-keywords"
