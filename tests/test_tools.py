import json

import pytest

from page_extractor.browser_manager import BrowserManager
from page_extractor.tools import extraction

from conftest import FakePage

ARTICLE = "An article body that is long enough to be picked by the article selector. " * 3


@pytest.fixture
def browser_page(monkeypatch):
    """Install a FakePage as the BrowserManager's current page."""
    page = FakePage(
        url="https://example.com/story",
        title="Story",
        html=f"<html><body><nav>menu</nav><article>{ARTICLE}</article></body></html>",
    )
    manager = BrowserManager()
    monkeypatch.setattr(manager, "_page", page)
    monkeypatch.setattr(manager, "_browser", object())
    return page


async def test_check_page(browser_page):
    data = json.loads(await extraction.check_page({}))
    assert data["is_video"] is False
    assert data["video_id"] is None
    assert data["mode"] == "generic"

    browser_page.url = "https://www.youtube.com/watch?v=abc123"
    data = json.loads(await extraction.check_page({}))
    assert data["is_video"] is True
    assert data["video_id"] == "abc123"
    assert data["mode"] == "transcript"


async def test_extract_page_content(browser_page):
    data = json.loads(await extraction.extract_page_content({}))
    assert data["status"] == "success"
    assert data["sourceKind"] == "document"
    assert data["content"] == ARTICLE.strip()
    assert data["content_length"] == len(ARTICLE.strip())


async def test_auto_mode_on_document(browser_page):
    data = json.loads(await extraction.extract({"mode": "auto"}))
    assert data["sourceKind"] == "document"


async def test_blank_page(browser_page):
    browser_page.url = "about:blank"
    data = json.loads(await extraction.extract_page_content({}))
    assert data["status"] == "no_page"


async def test_invalid_mode_is_reported(browser_page):
    out = await extraction.extract({"mode": "video"})
    assert out.startswith("## ❌ Error in extract")


async def test_browser_not_launched(monkeypatch):
    manager = BrowserManager()
    monkeypatch.setattr(manager, "_page", None)
    out = await extraction.extract_page_content({})
    assert "Browser not launched" in out
