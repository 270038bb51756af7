import json
import logging

import httpx
import pytest

from page_extractor.engine import ExtractionEngine, detect_mode
from page_extractor.models import ErrorKind, ExtractionMode, ExtractionRequest, SourceKind
from page_extractor.utils.errors import PageUnavailable
from page_extractor.utils.normalize import normalize

from conftest import FakePage, json3_payload, make_fetcher

VIDEO_URL = "https://www.youtube.com/watch?v=abc123"
DESCRIPTION_BUTTON = "ytd-video-description-transcript-section-renderer button"


def _transcript_request(url: str = VIDEO_URL) -> ExtractionRequest:
    return ExtractionRequest(page_identifier=url, mode=ExtractionMode.TRANSCRIPT)


def _not_found(request: httpx.Request) -> httpx.Response:
    return httpx.Response(404)


def _engine(page, handler) -> ExtractionEngine:
    return ExtractionEngine(page, fetcher=make_fetcher(handler))


async def test_structured_payload_end_to_end(english_track):
    payload = '{"events":[{"segs":[{"utf8":"Hello "}]},{"segs":[{"utf8":"world"}]}]}'
    page = FakePage(player_tracks=[english_track])
    page.controls = {DESCRIPTION_BUTTON: "Show transcript"}

    result = await _engine(page, lambda request: httpx.Response(200, text=payload)).run(
        _transcript_request()
    )

    assert result.ok
    assert result.content == "Hello world"
    assert result.title == "A Video"
    assert result.url == VIDEO_URL
    assert result.source_kind == SourceKind.VIDEO
    assert result.caption_language == "English"
    # the panel strategy never ran
    assert not page.touched


async def test_no_captions_anywhere():
    requested = []

    def handler(request):
        requested.append(request.url)
        return httpx.Response(404)

    page = FakePage(html="<html><body>no data</body></html>", player_tracks=None)
    result = await _engine(page, handler).run(_transcript_request())

    assert not result.ok
    assert result.error == ErrorKind.NO_CAPTIONS_AVAILABLE
    assert result.content is None
    assert result.title == "A Video"
    assert result.url == VIDEO_URL
    # constructed locator tried with and without the format hint
    assert [u.params.get("fmt") for u in requested] == ["json3", None]
    assert all(u.params["v"] == "abc123" for u in requested)


async def test_secondary_fetch_used_when_primary_empty(english_track):
    def handler(request):
        if request.url.params.get("fmt") == "json3":
            return httpx.Response(200, text='{"events": []}')
        return httpx.Response(200, text='<transcript><text>from &amp;amp; xml</text></transcript>')

    page = FakePage(player_tracks=[english_track])
    result = await _engine(page, handler).run(_transcript_request())

    assert result.content == "from & xml"
    assert result.caption_language == "English"


async def test_embedded_segments_after_fetch_failures():
    segments = [{"transcriptSegmentRenderer": {"snippet": {"runs": [{"text": "embedded [Music] text"}]}}}]
    html = '{"transcriptSegmentListRenderer": {"segments": ' + json.dumps(segments) + "}}"
    page = FakePage(html=html)

    result = await _engine(page, _not_found).run(_transcript_request())

    assert result.content == "embedded text"
    assert result.caption_language is None
    assert not page.touched


async def test_fetch_failures_logged_as_warnings(caplog):
    page = FakePage(html="<html><body>no data</body></html>", player_tracks=None)

    with caplog.at_level(logging.WARNING, logger="page_extractor.engine"):
        await _engine(page, _not_found).run(_transcript_request())

    warnings = [r for r in caplog.records if r.name == "page_extractor.engine" and r.levelno == logging.WARNING]
    assert [r.getMessage().split(" (")[0] for r in warnings] == [
        "Strategy caption_json3 failed",
        "Strategy caption_plain failed",
    ]
    assert all("fetch_failed" in r.getMessage() for r in warnings)


async def test_panel_is_last_resort():
    page = FakePage()
    page.controls = {DESCRIPTION_BUTTON: "Show transcript"}
    page.on_click = {DESCRIPTION_BUTTON: lambda p: setattr(p, "rendered_segments", ["from", "panel"])}

    result = await _engine(page, _not_found).run(_transcript_request())

    assert result.content == "from panel"
    assert page.clicks == [DESCRIPTION_BUTTON]


async def test_strategy_exception_does_not_abort_chain(english_track):
    def handler(request):
        raise RuntimeError("unexpected")

    segments = [{"transcriptSegmentRenderer": {"snippet": {"runs": [{"text": "survived"}]}}}]
    html = '"transcriptSegmentListRenderer": {"segments": ' + json.dumps(segments) + "}"
    page = FakePage(html=html, player_tracks=[english_track])

    result = await _engine(page, handler).run(_transcript_request())

    assert result.content == "survived"


async def test_missing_video_id():
    page = FakePage(url="https://www.youtube.com/watch")
    result = await _engine(page, _not_found).run(_transcript_request("https://www.youtube.com/watch"))

    assert result.error == ErrorKind.NO_IDENTIFIER
    assert page.evaluated == []
    assert not page.touched


async def test_unreadable_page_is_terminal():
    page = FakePage()
    page.title_error = RuntimeError("target closed")
    with pytest.raises(PageUnavailable):
        await _engine(page, _not_found).run(_transcript_request())


async def test_transcript_is_length_bounded(english_track):
    long_text = "word " * 5000
    page = FakePage(player_tracks=[english_track])
    engine = ExtractionEngine(
        page,
        fetcher=make_fetcher(lambda request: httpx.Response(200, text=json3_payload(long_text))),
        max_length=100,
    )
    result = await engine.run(_transcript_request())
    assert len(result.content) == 100 + len("...")


async def test_generic_full_body_fallback():
    body_text = ("Readable sentence number one in the body of this page. " * 5).strip()[:250]
    html = f"""
    <html><body>
      <nav>Navigation Menu Items</nav>
      <header>Header Banner</header>
      <div>{body_text}</div>
      <footer>Footer Links</footer>
    </body></html>
    """
    page = FakePage(url="https://example.com/post", title="A Post", html=html)
    result = await _engine(page, _not_found).run(
        ExtractionRequest(page_identifier=page.url, mode=ExtractionMode.GENERIC)
    )

    assert len(body_text) == 250
    assert result.ok
    assert result.content == normalize(body_text)
    assert result.source_kind == SourceKind.DOCUMENT
    assert result.title == "A Post"
    assert "Navigation" not in result.content


async def test_generic_empty_document():
    page = FakePage(url="https://example.com/", title="Empty", html="<html><body></body></html>")
    result = await _engine(page, _not_found).run(
        ExtractionRequest(page_identifier=page.url, mode=ExtractionMode.GENERIC)
    )
    assert result.error == ErrorKind.EMPTY_DOCUMENT
    assert result.to_dict() == {
        "title": "Empty",
        "url": "https://example.com/",
        "sourceKind": "document",
        "error": "empty_document",
        "message": "Could not extract page content",
    }


def test_detect_mode():
    assert detect_mode(VIDEO_URL) == ExtractionMode.TRANSCRIPT
    assert detect_mode("https://example.com/watch?v=abc") == ExtractionMode.GENERIC
