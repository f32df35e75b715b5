"""
LLM client abstraction for anchor text generation.

This module provides an interface for calling an OpenAI-compatible
chat-completion API directly over httpx.
"""

import logging
from typing import Any, Optional

import httpx

from .config import DEFAULT_OPENAI_BASE_URL
from .errors import ConfigurationError, MalformedResponseError, UpstreamError

logger = logging.getLogger(__name__)

SERVICE_NAME = "OpenAI"

CHAT_COMPLETIONS_PATH = "/chat/completions"

# System prompt for anchor text suggestions
SEO_SYSTEM_PROMPT = "You are a very helpful SEO and backlinks assistant."


def extract_message_content(body: Any) -> str:
    """
    Pull ``choices[0].message.content`` out of a completion body.

    Raises:
        MalformedResponseError: If the field is missing or empty.
    """
    try:
        content = body["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        logger.error(f"Unexpected {SERVICE_NAME} response structure: {body}")
        raise MalformedResponseError(SERVICE_NAME, "missing choices[0].message.content")

    if not isinstance(content, str) or not content.strip():
        logger.error(f"Empty {SERVICE_NAME} message content: {body}")
        raise MalformedResponseError(SERVICE_NAME, "empty choices[0].message.content")
    return content


class LLMClient:
    """
    Client for chat completions.

    Supports the OpenAI Chat Completions API and compatible endpoints.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: Optional[str],
        model: str = "gpt-4o-mini",
        base_url: str = DEFAULT_OPENAI_BASE_URL,
        max_tokens: int = 300,
        temperature: float = 0.7,
    ):
        """
        Initialize the LLM client.

        Args:
            http: Shared async HTTP client.
            api_key: API key for the completion provider.
            model: Model identifier to use.
            base_url: API root, without trailing slash.
            max_tokens: Output token budget per completion.
            temperature: Sampling temperature.
        """
        if not api_key:
            raise ConfigurationError(
                "No API key provided. Set OPENAI_API_KEY environment variable "
                "or pass api_key parameter."
            )
        self.http = http
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def complete(self, prompt: str, system_prompt: str = SEO_SYSTEM_PROMPT) -> str:
        """
        Run a single chat completion.

        Args:
            prompt: User message.
            system_prompt: System instruction.

        Returns:
            The assistant message text, untouched.

        Raises:
            UpstreamError: On a non-2xx status.
            MalformedResponseError: If the body lacks the message content.
        """
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        url = f"{self.base_url}{CHAT_COMPLETIONS_PATH}"
        response = await self.http.post(
            url,
            json=payload,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
        )

        if not response.is_success:
            logger.error(f"{SERVICE_NAME} API error: status={response.status_code} body={response.text}")
            raise UpstreamError(SERVICE_NAME, response.status_code, url, response.text)

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedResponseError(SERVICE_NAME, f"undecodable JSON body: {e}", response.text)

        return extract_message_content(body)
