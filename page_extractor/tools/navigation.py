"""Navigation tools for Playwright browser."""

from __future__ import annotations

import json
import logging
from page_extractor.browser_manager import BrowserManager
from page_extractor.config import BrowserConfig
from page_extractor.schemas import BrowserLaunchInput, NavigateInput
from page_extractor.utils.errors import format_error

logger = logging.getLogger(__name__)

NAVIGATION_TIMEOUT_MS = 60000


async def goto(page, url: str, wait_until: str = "domcontentloaded",
               timeout_ms: int = NAVIGATION_TIMEOUT_MS) -> dict:
    """Navigate ``page`` to ``url`` and report where it landed."""
    response = await page.goto(url, wait_until=wait_until, timeout=timeout_ms)
    status = response.status if response else "unknown"
    logger.info("Navigated to %s (HTTP %s)", page.url, status)
    return {
        "title": await page.title(),
        "url": page.url,
        "http_status": status,
    }


async def browser_launch(arguments: dict) -> str:
    """Launch Chromium browser via Playwright."""
    try:
        input_data = BrowserLaunchInput(**arguments)
        manager = await BrowserManager.get_instance()

        result = await manager.launch(BrowserConfig(
            headless=input_data.headless,
            viewport_width=input_data.viewport_width,
            viewport_height=input_data.viewport_height,
        ))

        return json.dumps(result, indent=2)

    except Exception as e:
        return format_error("browser_launch", e)


async def navigate(arguments: dict) -> str:
    """Navigate to a URL."""
    try:
        input_data = NavigateInput(**arguments)
        manager = await BrowserManager.get_instance()
        page = await manager.ensure_page()

        info = await goto(page, input_data.url, wait_until=input_data.wait_until)

        result = {
            "status": "success",
            **info,
            "message": f"Successfully navigated to {info['url']}"
        }

        return json.dumps(result, indent=2)

    except Exception as e:
        return format_error("navigate", e, "Check if the URL is valid and accessible.")


async def browser_close(arguments: dict) -> str:
    """Close the browser and cleanup resources."""
    try:
        manager = await BrowserManager.get_instance()
        result = await manager.close()

        return json.dumps(result, indent=2)

    except Exception as e:
        return format_error("browser_close", e)
