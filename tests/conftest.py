"""Shared fixtures: a stand-in for a Playwright page and httpx mock clients."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from page_extractor.captions.fetcher import CaptionFetcher
from page_extractor.captions import panel
from page_extractor.captions.panel import SEGMENT_SELECTOR


class FakeLocator:
    """Minimal locator: visibility, clicks and counts backed by FakePage state."""

    def __init__(self, page: "FakePage", selector: str, label: str | None = None):
        self.page = page
        self.selector = selector
        self.label = label

    @property
    def first(self) -> "FakeLocator":
        return self

    def filter(self, has_text: str | None = None) -> "FakeLocator":
        return FakeLocator(self.page, self.selector, has_text)

    def _match(self) -> str | None:
        for key, text in self.page.controls.items():
            if key not in self.selector:
                continue
            if self.label is None or self.label.lower() in text.lower():
                return key
        return None

    async def is_visible(self, timeout: int | None = None) -> bool:
        return self._match() is not None

    async def click(self, timeout: int | None = None) -> None:
        key = self._match()
        if key is None:
            raise RuntimeError(f"no element for {self.selector}")
        self.page.clicks.append(key)
        reveal = self.page.on_click.get(key)
        if reveal:
            reveal(self.page)

    async def count(self) -> int:
        if self.selector == SEGMENT_SELECTOR:
            return len(self.page.rendered_segments)
        return 1 if self._match() else 0


class FakePage:
    """Just enough of ``playwright.async_api.Page`` for the extraction engine."""

    def __init__(
        self,
        url: str = "https://www.youtube.com/watch?v=abc123",
        title: str = "A Video - YouTube",
        html: str = "<html><body></body></html>",
        player_tracks: list | None = None,
    ):
        self.url = url
        self._title = title
        self.html = html
        self.player_tracks = player_tracks
        self.controls: dict[str, str] = {}
        self.on_click: dict[str, Callable[["FakePage"], None]] = {}
        self.rendered_segments: list[str] = []
        self.clicks: list[str] = []
        self.waits: list[int] = []
        self.evaluated: list[str] = []
        self.title_error: Exception | None = None
        self.evaluate_error: Exception | None = None

    async def title(self) -> str:
        if self.title_error:
            raise self.title_error
        return self._title

    async def content(self) -> str:
        return self.html

    async def evaluate(self, script: str, *args):
        self.evaluated.append(script)
        if self.evaluate_error:
            raise self.evaluate_error
        if "ytInitialPlayerResponse" in script:
            return self.player_tracks
        if SEGMENT_SELECTOR in script:
            return list(self.rendered_segments)
        return None

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    async def wait_for_timeout(self, ms: int) -> None:
        self.waits.append(ms)

    @property
    def touched(self) -> bool:
        """True once any UI interaction happened."""
        return bool(self.clicks or self.waits)


def make_fetcher(handler: Callable[[httpx.Request], httpx.Response]) -> CaptionFetcher:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CaptionFetcher(client=client)


def json3_payload(*texts: str) -> str:
    return json.dumps({"events": [{"segs": [{"utf8": t}]} for t in texts]})


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture
def english_track() -> dict:
    return {
        "baseUrl": "https://www.youtube.com/api/timedtext?v=abc123&lang=en",
        "languageCode": "en",
        "name": {"simpleText": "English"},
    }


@pytest.fixture(autouse=True)
def instant_panel_polling(monkeypatch):
    """Give up on unrendered transcript lines immediately."""
    monkeypatch.setattr(panel, "POLL_TIMEOUT_MS", 0)
