"""
Exception types for Anchor Text Finder.

Every failure the pipeline can raise derives from AnchorFinderError so the
HTTP layer and the CLI can map them with a single except clause.
"""

from typing import Optional


class AnchorFinderError(Exception):
    """Base class for all Anchor Text Finder errors."""
    pass


class ConfigurationError(AnchorFinderError):
    """Raised when required settings (API keys, strategy) are missing or invalid."""
    pass


class ValidationError(AnchorFinderError):
    """Raised when required user input is missing."""
    pass


class UpstreamError(AnchorFinderError):
    """
    Raised when an outbound dependency answers with a non-success status.

    Attributes:
        service: Human-readable name of the upstream API.
        status_code: HTTP status returned by the upstream.
        url: Request URL (never includes credentials).
        body: Raw response body, kept for diagnostics only.
    """

    def __init__(
        self,
        service: str,
        status_code: int,
        url: str,
        body: str = "",
    ):
        self.service = service
        self.status_code = status_code
        self.url = url
        self.body = body
        super().__init__(f"{service} API error: HTTP {status_code}")


class MalformedResponseError(AnchorFinderError):
    """Raised when an upstream answers 2xx but the body lacks expected fields."""

    def __init__(self, service: str, message: str, body: Optional[str] = None):
        self.service = service
        self.body = body
        super().__init__(f"{service} API returned an unexpected response: {message}")
