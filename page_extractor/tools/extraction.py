"""Content extraction tools for Playwright browser.

Each tool runs the extraction engine against the browser's current page
(optionally navigating first) and returns the result record as JSON:

- ``check_page``           is the current page a video watch page?
- ``extract_transcript``   caption/transcript strategy chain
- ``extract_page_content`` article-body selector chain
- ``extract``              picks the mode from the page URL
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from page_extractor.browser_manager import BrowserManager
from page_extractor.captions.fetcher import CaptionFetcher
from page_extractor.config import load_config
from page_extractor.engine import ExtractionEngine, detect_mode
from page_extractor.models import ExtractionMode, ExtractionRequest
from page_extractor.schemas import (
    ExtractInput,
    ExtractPageContentInput,
    ExtractTranscriptInput,
)
from page_extractor.tools.navigation import goto
from page_extractor.utils.errors import format_error
from page_extractor.utils.urls import is_video_page, video_id

logger = logging.getLogger(__name__)

_BLANK_URLS = ("", "about:blank", "about:srcdoc")


async def _current_page(url: Optional[str]):
    """Return the live page, navigating to ``url`` first when given."""
    manager = await BrowserManager.get_instance()
    page = await manager.ensure_page()
    if url:
        await goto(page, url, timeout_ms=load_config().extraction.navigation_timeout_ms)
    return page


def _no_page_response(url: str) -> str:
    return json.dumps({
        "status": "no_page",
        "url": url or "about:blank",
        "message": (
            "No page is loaded. The browser is on a blank page. "
            "Call navigate(url) first, or pass url to this tool."
        ),
    }, indent=2)


async def _run(page, mode: ExtractionMode) -> str:
    current_url = (page.url or "").strip()
    if current_url in _BLANK_URLS:
        return _no_page_response(current_url)

    settings = load_config().extraction
    async with CaptionFetcher(timeout=settings.http_timeout_s) as fetcher:
        engine = ExtractionEngine(
            page,
            fetcher=fetcher,
            language=settings.language,
        )
        result = await engine.run(ExtractionRequest(page_identifier=current_url, mode=mode))

    response = {
        "status": "success" if result.ok else "error",
        **result.to_dict(),
    }
    if result.content:
        response["content_length"] = len(result.content)
    return json.dumps(response, indent=2)


# ---------------------------------------------------------------------------
# Page check
# ---------------------------------------------------------------------------

async def check_page(arguments: dict) -> str:
    """Report whether the current page is a video page and which mode applies."""
    try:
        manager = await BrowserManager.get_instance()
        page = await manager.ensure_page()
        url = page.url or ""

        result = {
            "status": "success",
            "url": url,
            "is_video": is_video_page(url),
            "video_id": video_id(url) if is_video_page(url) else None,
            "mode": detect_mode(url).value,
        }
        return json.dumps(result, indent=2)

    except Exception as e:
        return format_error("check_page", e)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

async def extract_transcript(arguments: dict) -> str:
    """Extract the transcript of the current (or given) video page."""
    try:
        input_data = ExtractTranscriptInput(**arguments)
        page = await _current_page(input_data.url)
        return await _run(page, ExtractionMode.TRANSCRIPT)

    except Exception as e:
        return format_error(
            "extract_transcript",
            e,
            "Make sure the browser is on a video watch page (URL with ?v=...).",
        )


async def extract_page_content(arguments: dict) -> str:
    """Extract the main text of the current (or given) page."""
    try:
        input_data = ExtractPageContentInput(**arguments)
        page = await _current_page(input_data.url)
        return await _run(page, ExtractionMode.GENERIC)

    except Exception as e:
        return format_error("extract_page_content", e)


async def extract(arguments: dict) -> str:
    """Extract with the mode chosen explicitly or detected from the URL."""
    try:
        input_data = ExtractInput(**arguments)
        page = await _current_page(input_data.url)
        if input_data.mode == "auto":
            mode = detect_mode(page.url or "")
        else:
            mode = ExtractionMode(input_data.mode)
        logger.debug("extract: mode=%s url=%s", mode.value, page.url)
        return await _run(page, mode)

    except Exception as e:
        return format_error("extract", e)
