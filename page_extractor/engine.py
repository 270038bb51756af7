"""Strategy chain executor.

Runs an ordered list of extraction strategies against one page and stops at
the first that produces non-empty normalized text.  A strategy that raises
counts as "no result"; only exhaustion of the whole chain is reported as an
error on the returned record.

Transcript mode order:
1. caption_json3       locate a caption track, fetch with the structured-format hint
2. caption_plain       fetch the same track without the hint
3. embedded_segments   transcript segments serialized into the page markup
4. transcript_panel    open the transcript UI panel and read rendered lines

Generic mode: article-body selectors, then the pruned full body.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Optional

from playwright.async_api import Page

from page_extractor.captions import locator
from page_extractor.captions.fetcher import CaptionFetcher
from page_extractor.captions.panel import activate_transcript_panel
from page_extractor.models import (
    CaptionTrack,
    ErrorKind,
    ExtractionMode,
    ExtractionRequest,
    ExtractionResult,
    SourceKind,
)
from page_extractor.utils.errors import ExtractionError, FetchFailed, PageUnavailable
from page_extractor.utils.normalize import MAX_CONTENT_LENGTH, normalize
from page_extractor.utils.parser import parse_embedded_segments
from page_extractor.utils.selector import select_content
from page_extractor.utils.urls import is_video_page, video_id

logger = logging.getLogger(__name__)

_TITLE_SUFFIX = " - YouTube"

NO_IDENTIFIER_MESSAGE = "Could not get video ID"
NO_CAPTIONS_MESSAGE = (
    "Could not extract transcript. Try opening the transcript panel manually "
    "(click \"...\" below the video, then \"Show transcript\") and try again."
)
EMPTY_DOCUMENT_MESSAGE = "Could not extract page content"

Strategy = tuple[str, Callable[[], Awaitable[Optional[str]]]]


def detect_mode(url: str) -> ExtractionMode:
    """Transcript mode for video watch pages, generic mode for everything else."""
    return ExtractionMode.TRANSCRIPT if is_video_page(url) else ExtractionMode.GENERIC


class ExtractionEngine:
    """Extract one bounded plain-text result from a live page.

    The engine holds no state between ``run`` calls; the fetcher is shared
    only for its HTTP connection pool.
    """

    def __init__(
        self,
        page: Page,
        fetcher: Optional[CaptionFetcher] = None,
        max_length: int = MAX_CONTENT_LENGTH,
        language: str = locator.DEFAULT_LANGUAGE,
    ):
        self.page = page
        self.fetcher = fetcher
        self.max_length = max_length
        self.language = language

    async def run(self, request: ExtractionRequest) -> ExtractionResult:
        if request.mode == ExtractionMode.TRANSCRIPT:
            return await self._run_transcript(request)
        return await self._run_generic(request)

    # ------------------------------------------------------------------
    # Page identity
    # ------------------------------------------------------------------

    async def _page_identity(self, source_kind: SourceKind) -> tuple[str, str]:
        """Read title and URL once, up front. Raises PageUnavailable."""
        try:
            title = (await self.page.title()) or ""
            url = self.page.url or ""
        except Exception as e:
            raise PageUnavailable(f"could not read page title/url: {e}") from e
        if source_kind == SourceKind.VIDEO and title.endswith(_TITLE_SUFFIX):
            title = title[: -len(_TITLE_SUFFIX)]
        return title.strip(), url

    # ------------------------------------------------------------------
    # Chain
    # ------------------------------------------------------------------

    async def _first_success(self, strategies: list[Strategy]) -> tuple[Optional[str], Optional[str]]:
        """Run strategies in order. Returns (content, strategy name) of the first hit."""
        for name, attempt in strategies:
            try:
                raw = await attempt()
            except FetchFailed as e:
                logger.warning("Strategy %s failed (%s): %s", name, e.kind.value, e)
                continue
            except ExtractionError as e:
                logger.debug("Strategy %s failed (%s): %s", name, e.kind.value, e)
                continue
            except Exception as e:
                logger.debug("Strategy %s raised: %s", name, e, exc_info=True)
                continue

            content = normalize(raw, self.max_length)
            if content:
                logger.info("Strategy %s produced %d chars", name, len(content))
                return content, name
            logger.debug("Strategy %s yielded nothing", name)
        return None, None

    async def _run_transcript(self, request: ExtractionRequest) -> ExtractionResult:
        title, url = await self._page_identity(SourceKind.VIDEO)

        vid = video_id(request.page_identifier)
        if not vid:
            return ExtractionResult.failure(
                title, url, SourceKind.VIDEO, ErrorKind.NO_IDENTIFIER, NO_IDENTIFIER_MESSAGE,
            )

        fetcher = self.fetcher or CaptionFetcher()
        track: Optional[CaptionTrack] = None

        async def caption_json3() -> Optional[str]:
            nonlocal track
            track = await locator.locate(self.page, vid, self.language)
            return await fetcher.fetch_structured(track.source_locator)

        async def caption_plain() -> Optional[str]:
            if track is None:
                return None
            return await fetcher.fetch_plain(track.source_locator)

        async def embedded_segments() -> Optional[str]:
            return parse_embedded_segments(await self.page.content())

        async def transcript_panel() -> Optional[str]:
            return await activate_transcript_panel(self.page)

        try:
            content, winner = await self._first_success([
                ("caption_json3", caption_json3),
                ("caption_plain", caption_plain),
                ("embedded_segments", embedded_segments),
                ("transcript_panel", transcript_panel),
            ])
        finally:
            if self.fetcher is None:
                await fetcher.aclose()

        if not content:
            logger.info("All transcript strategies exhausted for %s", vid)
            return ExtractionResult.failure(
                title, url, SourceKind.VIDEO, ErrorKind.NO_CAPTIONS_AVAILABLE, NO_CAPTIONS_MESSAGE,
            )

        caption_language = None
        if winner in ("caption_json3", "caption_plain") and track is not None:
            caption_language = track.display_name
        return ExtractionResult.success(
            title, url, SourceKind.VIDEO, content, caption_language=caption_language,
        )

    async def _run_generic(self, request: ExtractionRequest) -> ExtractionResult:
        title, url = await self._page_identity(SourceKind.DOCUMENT)

        async def article_body() -> Optional[str]:
            return select_content(await self.page.content())

        content, _ = await self._first_success([("article_body", article_body)])
        if not content:
            return ExtractionResult.failure(
                title, url, SourceKind.DOCUMENT, ErrorKind.EMPTY_DOCUMENT, EMPTY_DOCUMENT_MESSAGE,
            )
        return ExtractionResult.success(title, url, SourceKind.DOCUMENT, content)
