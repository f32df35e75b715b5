"""
Anchor text suggestion generation.

Turns a refined keyword set into a prompt, sends it to the completion API
and makes a best-effort attempt at reading the answer as JSON. Output that
is not a JSON object is handed back as raw text rather than failing.
"""

import json
import logging
import re
from typing import Iterable, Optional

from .llm_client import LLMClient
from .models import AnchorTextResult, KeywordRecord, ParsedAnchorTexts, RawAnchorText

logger = logging.getLogger(__name__)

DEFAULT_TOPIC = "general"

# ```json ... ``` or ``` ... ``` wrapping the whole answer
CODE_FENCE_RE = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\n?(.*?)\n?```$", re.DOTALL)

ANCHOR_SCHEMA = """{
  "primary": {
      "text": "Primary anchor text suggestion using an exact match",
      "searchVolume": "Estimated search volume",
      "difficulty": "Estimated keyword difficulty"
  },
  "alternatives": [
      {
          "type": "Partial Match",
          "text": "Anchor text suggestion variation",
          "searchVolume": "Estimated search volume",
          "difficulty": "Estimated keyword difficulty"
      },
      {
          "type": "Branded",
          "text": "Anchor text suggestion including a brand name",
          "searchVolume": "Estimated search volume",
          "difficulty": "Estimated keyword difficulty"
      },
      {
          "type": "Natural/LSI",
          "text": "Anchor text suggestion with semantic variation",
          "searchVolume": "Estimated search volume",
          "difficulty": "Estimated keyword difficulty"
      },
      {
          "type": "Generic",
          "text": "Generic anchor text suggestion",
          "searchVolume": "Estimated search volume",
          "difficulty": "Estimated keyword difficulty"
      }
  ]
}"""


def format_keyword(record: KeywordRecord) -> str:
    """Render a keyword for the prompt, with metrics when known."""
    details = []
    if record.volume is not None:
        details.append(f"volume {record.volume}")
    if record.difficulty is not None:
        details.append(f"difficulty {record.difficulty}")
    if details:
        return f"{record.keyword} ({', '.join(details)})"
    return record.keyword


def build_prompt(
    keywords: Iterable[KeywordRecord],
    target_url: str,
    topic: Optional[str] = None,
) -> str:
    """
    Build the anchor text prompt.

    Args:
        keywords: Refined keyword records.
        target_url: Page the backlinks will point to.
        topic: Business niche; "general" when absent.

    Returns:
        The user prompt text.
    """
    keyword_list = ", ".join(format_keyword(k) for k in keywords)
    niche = (topic or "").strip() or DEFAULT_TOPIC

    return f"""Given the following refined keywords: [{keyword_list}] from the website {target_url},
and considering the business niche: {niche},
generate a structured JSON object with SEO-optimized anchor text suggestions.
The JSON object should have the following structure:
{ANCHOR_SCHEMA}
Ensure that the suggestions are realistic and diverse to help improve SEO rankings.
Return ONLY the JSON object, with no explanation."""


def strip_code_fences(text: str) -> str:
    """
    Remove Markdown code-fence wrapping from model output.

    Args:
        text: Raw completion text.

    Returns:
        The fenced body when the whole text is one fenced block, otherwise
        the stripped text.
    """
    stripped = text.strip()
    match = CODE_FENCE_RE.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def parse_anchor_texts(content: str) -> AnchorTextResult:
    """
    Interpret completion output.

    Args:
        content: Completion message content.

    Returns:
        ParsedAnchorTexts when the (unfenced) text is a JSON object,
        otherwise RawAnchorText holding ``content`` unchanged.
    """
    try:
        value = json.loads(strip_code_fences(content))
    except json.JSONDecodeError:
        logger.warning("Failed to parse completion as JSON. Returning raw text.")
        return RawAnchorText(text=content)

    if not isinstance(value, dict):
        logger.warning(
            f"Completion parsed as {type(value).__name__}, not an object. Returning raw text."
        )
        return RawAnchorText(text=content)
    return ParsedAnchorTexts(value=value)


class SuggestionGenerator:
    """Generates anchor text suggestions for a refined keyword set."""

    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def generate(
        self,
        keywords: Iterable[KeywordRecord],
        target_url: str,
        topic: Optional[str] = None,
    ) -> AnchorTextResult:
        """
        Ask the completion API for anchor texts.

        Raises:
            UpstreamError: If the completion call fails.
            MalformedResponseError: If the completion body lacks content.
        """
        prompt = build_prompt(keywords, target_url, topic)
        content = await self.llm.complete(prompt)
        return parse_anchor_texts(content)
