"""Singleton browser manager for Playwright."""

from typing import Optional
from playwright.async_api import async_playwright, Browser, Page, Playwright

from page_extractor.config import BrowserConfig


# Realistic Chrome user-agent (kept current)
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)

LAUNCH_ARGS = [
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-infobars',
    # Autoplay would start the video and shift the transcript panel layout
    '--autoplay-policy=user-gesture-required',
]


async def open_page(playwright: Playwright, config: BrowserConfig) -> tuple[Browser, Page]:
    """Launch Chromium with a realistic context and return (browser, page)."""
    browser = await playwright.chromium.launch(headless=config.headless, args=LAUNCH_ARGS)
    context = await browser.new_context(
        viewport={'width': config.viewport_width, 'height': config.viewport_height},
        user_agent=DEFAULT_USER_AGENT,
        locale='en-US',
        java_script_enabled=True,
    )
    page = await context.new_page()
    return browser, page


class BrowserManager:
    """Singleton owner of the Playwright browser and the page tools act on."""

    _instance: Optional['BrowserManager'] = None
    _playwright: Optional[Playwright] = None
    _browser: Optional[Browser] = None
    _page: Optional[Page] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    async def get_instance(cls) -> 'BrowserManager':
        """Get or create the singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    async def launch(self, config: BrowserConfig) -> dict:
        """Launch the browser if not already running."""
        if self._browser is not None and self._page is not None:
            return {
                "status": "already_running",
                "message": "Browser is already launched and ready.",
                "url": self._page.url,
            }

        self._playwright = await async_playwright().start()
        self._browser, self._page = await open_page(self._playwright, config)

        return {
            "status": "launched",
            "message": f"Browser launched successfully ({'headless' if config.headless else 'headed'} mode).",
            "viewport": f"{config.viewport_width}x{config.viewport_height}",
        }

    async def ensure_page(self) -> Page:
        """Get the current page or raise an error if browser not launched."""
        if self._page is None:
            raise RuntimeError(
                "Browser not launched. Please call browser_launch first."
            )
        return self._page

    async def close(self) -> dict:
        """Close the browser and cleanup resources."""
        if self._browser is None:
            return {
                "status": "not_running",
                "message": "Browser is not running."
            }

        await self._browser.close()
        if self._playwright:
            await self._playwright.stop()

        self._browser = None
        self._page = None
        self._playwright = None

        return {
            "status": "closed",
            "message": "Browser closed successfully."
        }
