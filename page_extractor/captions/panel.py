"""Transcript panel activation (UI-driving fallback).

Side effect: clicks controls on the live page.  The rendered document is
reached only through those clicks followed by fixed settle delays, so the
result is read with a bounded polling loop rather than a completion signal.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from playwright.async_api import Page

from page_extractor.utils.errors import PanelActivationFailed

logger = logging.getLogger(__name__)

# Settle delays (ms) after each interaction
_EXPAND_DELAY_MS = 300
_ACTIVATE_DELAY_MS = 1000
_MENU_DELAY_MS = 300
_READ_DELAY_MS = 500

_POLL_INTERVAL_MS = 250
POLL_TIMEOUT_MS = 3000
_VISIBLE_TIMEOUT_MS = 200
_CLICK_TIMEOUT_MS = 2000

_EXPAND_SELECTOR = "tp-yt-paper-button#expand"
_TRANSCRIPT_CONTROL_SELECTOR = (
    "ytd-video-description-transcript-section-renderer button, "
    "button.yt-spec-button-shape-next"
)
_MORE_ACTIONS_SELECTORS = [
    'button.ytp-button[aria-label="More actions"]',
    'ytd-menu-renderer button[aria-label="More actions"]',
    "ytd-button-renderer.ytd-menu-renderer button",
]
_MENU_ITEM_SELECTOR = "ytd-menu-service-item-renderer, tp-yt-paper-item"
SEGMENT_SELECTOR = "ytd-transcript-segment-renderer"

_READ_SEGMENTS_JS = """
() => Array.from(document.querySelectorAll('ytd-transcript-segment-renderer'))
    .map(el => {
        const node = el.querySelector('yt-formatted-string.segment-text') ||
                     el.querySelector('.segment-text');
        return node ? (node.textContent || '') : '';
    })
"""


async def _click_first_visible(page: Page, selector: str, label: str | None = None) -> bool:
    """Click the first visible match of ``selector`` (optionally filtered by label text)."""
    candidates = page.locator(selector)
    if label:
        candidates = candidates.filter(has_text=label)
    btn = candidates.first
    try:
        if await btn.is_visible(timeout=_VISIBLE_TIMEOUT_MS):
            await btn.click(timeout=_CLICK_TIMEOUT_MS)
            return True
    except Exception as e:
        logger.debug("Click on '%s' failed: %s", selector, e)
    return False


async def _expand_description(page: Page) -> None:
    if await _click_first_visible(page, _EXPAND_SELECTOR):
        await page.wait_for_timeout(_EXPAND_DELAY_MS)


async def _click_transcript_control(page: Page) -> None:
    if not await _click_first_visible(page, _TRANSCRIPT_CONTROL_SELECTOR, label="transcript"):
        raise PanelActivationFailed("no visible transcript control")
    await page.wait_for_timeout(_ACTIVATE_DELAY_MS)


async def _open_from_menu(page: Page) -> None:
    for selector in _MORE_ACTIONS_SELECTORS:
        if await _click_first_visible(page, selector):
            await page.wait_for_timeout(_MENU_DELAY_MS)
            break
    else:
        raise PanelActivationFailed("no overflow menu button")

    if not await _click_first_visible(page, _MENU_ITEM_SELECTOR, label="transcript"):
        raise PanelActivationFailed("no transcript item in overflow menu")
    await page.wait_for_timeout(_ACTIVATE_DELAY_MS)


async def _has_segments(page: Page) -> bool:
    try:
        return await page.locator(SEGMENT_SELECTOR).count() > 0
    except Exception:
        return False


async def _wait_for_segments(page: Page, timeout_ms: int) -> bool:
    deadline = time.monotonic() + timeout_ms / 1000
    while True:
        if await _has_segments(page):
            return True
        if time.monotonic() >= deadline:
            return False
        await asyncio.sleep(_POLL_INTERVAL_MS / 1000)


async def activate_transcript_panel(page: Page) -> Optional[str]:
    """Open the transcript panel and read its rendered lines.

    Each interaction step is best effort.  A single activation attempt is
    made; None when no transcript lines render within ``POLL_TIMEOUT_MS``.
    """
    await _expand_description(page)

    try:
        await _click_transcript_control(page)
    except PanelActivationFailed as e:
        logger.debug("Transcript control step skipped: %s", e)

    if not await _has_segments(page):
        try:
            await _open_from_menu(page)
        except PanelActivationFailed as e:
            logger.debug("Overflow menu step skipped: %s", e)

    await page.wait_for_timeout(_READ_DELAY_MS)
    if not await _wait_for_segments(page, POLL_TIMEOUT_MS):
        logger.debug("No transcript lines rendered within %dms", POLL_TIMEOUT_MS)
        return None

    lines = await page.evaluate(_READ_SEGMENTS_JS) or []
    cleaned = [" ".join(line.split()) for line in lines if isinstance(line, str)]
    text = " ".join(line for line in cleaned if line)
    return text or None
