"""
Pytest fixtures and configuration for Anchor Text Finder tests.
"""

import json
from typing import Any, Optional

import httpx
import pytest

from anchor_text_finder.config import AnchorFinderConfig
from anchor_text_finder.finder import AnchorTextFinder


ORGANIC_KEYWORDS = "/site-explorer/organic-keywords"
TOP_PAGES = "/site-explorer/top-pages"
CHAT_COMPLETIONS = "/chat/completions"

DEFAULT_ANCHOR_JSON = {
    "primary": {
        "text": "red shoes",
        "searchVolume": "200",
        "difficulty": "Low",
    },
    "alternatives": [
        {
            "type": "Partial Match",
            "text": "shop red shoes online",
            "searchVolume": "150",
            "difficulty": "Low",
        },
        {
            "type": "Generic",
            "text": "click here",
            "searchVolume": "N/A",
            "difficulty": "Low",
        },
    ],
}


def kw(keyword: str, volume: Any, difficulty: Any) -> dict:
    """Build an Ahrefs organic-keyword row."""
    return {"keyword": keyword, "volume": volume, "keyword_difficulty": difficulty}


def completion_body(content: Optional[str]) -> dict:
    """Build a chat-completion response body."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}},
        ],
    }


class FakeVendors:
    """
    In-process stand-in for the Ahrefs and OpenAI APIs.

    Responses are configured per endpoint as (status, body) pairs. A body may
    be a dict (sent as JSON), a str (sent as text), raw bytes or an exception
    (raised).
    Every request is recorded.
    """

    def __init__(self):
        self.keywords: dict[str, tuple[int, Any]] = {}
        self.default_keywords: tuple[int, Any] = (200, {"keywords": []})
        self.top_pages: tuple[int, Any] = (200, {"pages": []})
        self.completion: tuple[int, Any] = (200, completion_body(json.dumps(DEFAULT_ANCHOR_JSON)))
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.endswith(ORGANIC_KEYWORDS):
            status, body = self.keywords.get(
                request.url.params.get("target"), self.default_keywords
            )
        elif path.endswith(TOP_PAGES):
            status, body = self.top_pages
        elif path.endswith(CHAT_COMPLETIONS):
            status, body = self.completion
        else:
            return httpx.Response(404, text="not found")

        if isinstance(body, Exception):
            raise body
        if isinstance(body, bytes):
            return httpx.Response(status, content=body)
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, path_suffix: str) -> list[httpx.Request]:
        """Recorded requests whose path ends with ``path_suffix``."""
        return [r for r in self.requests if r.url.path.endswith(path_suffix)]

    def set_completion_content(self, content: Optional[str]) -> None:
        self.completion = (200, completion_body(content))


@pytest.fixture
def vendors() -> FakeVendors:
    """Fresh fake vendor APIs."""
    return FakeVendors()


@pytest.fixture
def config() -> AnchorFinderConfig:
    """Config with dummy credentials and default thresholds."""
    return AnchorFinderConfig(
        ahrefs_api_key="ahrefs-test-key",
        openai_api_key="openai-test-key",
    )


@pytest.fixture
def finder(config: AnchorFinderConfig, vendors: FakeVendors) -> AnchorTextFinder:
    """Finder wired to the fake vendors."""
    return AnchorTextFinder(config=config, transport=vendors.transport)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every environment variable the config reads."""
    for name in (
        "AHREFS_API_KEY",
        "OPENAI_API_KEY",
        "AHREFS_BASE_URL",
        "OPENAI_BASE_URL",
        "ANCHOR_FINDER_COUNTRY",
        "ANCHOR_FINDER_FALLBACK",
        "OPENAI_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
