"""
FastAPI wrapper for Anchor Text Finder - Vercel Serverless Function.

This module exposes the anchor text lookup as a REST API and serves the
browser form that calls it.
"""

import logging
import os
from typing import Optional, Union

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse
from pydantic import BaseModel, Field

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from anchor_text_finder import __version__
from anchor_text_finder.errors import ValidationError
from anchor_text_finder.finder import AnchorTextFinder
from anchor_text_finder.logging_config import configure_logging

configure_logging(os.environ.get("LOG_LEVEL", "INFO"))
logger = logging.getLogger("anchor_text_finder.api")

app = FastAPI(
    title="Anchor Text Finder API",
    description="Keyword-driven anchor text suggestions for backlink building",
    version=__version__,
)

# Enable CORS for all origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

TARGET_URL_REQUIRED = "Target URL is required"
INVALID_REQUEST_BODY = "Invalid request body"
INTERNAL_SERVER_ERROR = "Internal server error"


class GenerateRequest(BaseModel):
    """Request model for anchor text generation."""
    target_url: Optional[str] = Field(None, alias="targetUrl", description="Page the backlinks point to")
    topic: Optional[str] = Field(None, description="Optional business niche used to filter keywords")


class Metrics(BaseModel):
    """Keyword metrics returned alongside the suggestions."""
    keywordCount: int
    refinedKeywords: list[str]


class GenerateResponse(BaseModel):
    """Response model for anchor text generation.

    ``anchorTexts`` is the parsed JSON object from the model, or its raw
    text when the output was not valid JSON.
    """
    anchorTexts: Union[dict, str]
    metrics: Metrics


class ErrorResponse(BaseModel):
    """Error body for 4xx/5xx responses."""
    error: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


def create_finder() -> AnchorTextFinder:
    """Build the finder for one request from the environment."""
    return AnchorTextFinder()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Map body validation failures to the API's error shape."""
    for error in exc.errors():
        loc = tuple(error.get("loc", ()))
        if error.get("type") == "missing" and loc in (("body",), ("body", "targetUrl")):
            return _error(400, TARGET_URL_REQUIRED)
    return _error(400, INVALID_REQUEST_BODY)


# Path to public directory for static files
PUBLIC_DIR = Path(__file__).parent.parent / "public"


@app.get("/", response_class=HTMLResponse)
async def root():
    """Serve the main UI."""
    index_path = PUBLIC_DIR / "index.html"
    if index_path.exists():
        return FileResponse(index_path, media_type="text/html")
    # Fallback when no frontend is bundled
    return HTMLResponse(content="<h1>Anchor Text Finder API</h1><p>Visit <a href='/docs'>/docs</a> for API documentation.</p>")


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


@app.post(
    "/api/generate",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate(request: GenerateRequest):
    """
    Generate anchor text suggestions for a target URL.

    Upstream and configuration failures are logged in full and answered
    with a generic 500.
    """
    if not (request.target_url or "").strip():
        return _error(400, TARGET_URL_REQUIRED)

    try:
        finder = create_finder()
        result = await finder.run(request.target_url, request.topic)
    except ValidationError as e:
        return _error(400, str(e))
    except Exception as e:
        logger.exception(f"Anchor text generation failed: {e}")
        return _error(500, INTERNAL_SERVER_ERROR)

    return result.to_payload()


@app.get("/api/info")
async def api_info():
    """Get API information and usage instructions."""
    return {
        "name": "Anchor Text Finder API",
        "version": __version__,
        "description": "Keyword-driven anchor text suggestions",
        "endpoints": {
            "GET /": "Browser form",
            "GET /api/health": "Health check",
            "POST /api/generate": "Generate anchor texts for {targetUrl, topic?}",
            "GET /api/info": "This endpoint",
        },
        "documentation": "/docs",
        "openapi": "/openapi.json",
    }


@app.get("/styles.css")
async def serve_css():
    """Serve CSS file."""
    css_path = PUBLIC_DIR / "styles.css"
    if css_path.exists():
        return FileResponse(css_path, media_type="text/css")
    return _error(404, "CSS file not found")


@app.get("/app.js")
async def serve_js():
    """Serve JavaScript file."""
    js_path = PUBLIC_DIR / "app.js"
    if js_path.exists():
        return FileResponse(js_path, media_type="application/javascript")
    return _error(404, "JavaScript file not found")
