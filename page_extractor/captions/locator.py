"""Caption source discovery.

Three ordered sub-strategies, each yielding at most one CaptionTrack:
1. the player state object the host page injects into its script environment
2. a scan of the serialized markup for the ``"captionTracks":`` array
3. a locator constructed from the video id (best effort, may not exist)
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlencode

from playwright.async_api import Page

from page_extractor.models import CaptionTrack
from page_extractor.utils.parser import find_json_array

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
TIMEDTEXT_URL = "https://www.youtube.com/api/timedtext"
CONSTRUCTED_DISPLAY_NAME = "Auto"

_CAPTION_TRACKS_LABEL = '"captionTracks":'

# Optional chaining at every level; the page may have cleared or reshaped it
_PLAYER_STATE_JS = """
() => {
    const tracks = window.ytInitialPlayerResponse?.captions
        ?.playerCaptionsTracklistRenderer?.captionTracks;
    return Array.isArray(tracks) ? tracks : null;
}
"""


def select_track(tracks: list[CaptionTrack]) -> Optional[CaptionTrack]:
    """Prefer exact English, then any ``en*`` code, then the first track."""
    if not tracks:
        return None
    for track in tracks:
        if track.language_code == DEFAULT_LANGUAGE:
            return track
    for track in tracks:
        if track.language_code.startswith(DEFAULT_LANGUAGE):
            return track
    return tracks[0]


def _select_from_raw(raw_tracks: object) -> Optional[CaptionTrack]:
    if not isinstance(raw_tracks, list):
        return None
    tracks = [t for t in (CaptionTrack.from_raw(r) for r in raw_tracks) if t is not None]
    return select_track(tracks)


async def from_player_state(page: Page) -> Optional[CaptionTrack]:
    """Read caption tracks from the injected player response object."""
    raw_tracks = await page.evaluate(_PLAYER_STATE_JS)
    track = _select_from_raw(raw_tracks)
    if track:
        logger.debug("Player state track: %s", track.language_code)
    return track


def from_markup(page_html: str) -> Optional[CaptionTrack]:
    """Find the caption track list in serialized markup, independent of script state."""
    track = _select_from_raw(find_json_array(page_html or "", _CAPTION_TRACKS_LABEL))
    if track:
        logger.debug("Markup scan track: %s", track.language_code)
    return track


def constructed(video_id: str, language: str = DEFAULT_LANGUAGE) -> CaptionTrack:
    """Synthesize a caption locator from the video id. Nothing guarantees it exists."""
    query = urlencode({"v": video_id, "lang": language})
    return CaptionTrack(
        language_code=language,
        display_name=CONSTRUCTED_DISPLAY_NAME,
        source_locator=f"{TIMEDTEXT_URL}?{query}",
    )


async def locate(
    page: Page,
    video_id: str,
    language: str = DEFAULT_LANGUAGE,
) -> CaptionTrack:
    """Run the sub-strategies in order and return the first track found.

    Always returns a track: the constructed locator is the last resort.
    """
    try:
        track = await from_player_state(page)
        if track:
            return track
    except Exception as e:
        logger.debug("Player state lookup failed: %s", e)

    try:
        track = from_markup(await page.content())
        if track:
            return track
    except Exception as e:
        logger.debug("Markup scan failed: %s", e)

    logger.debug("No caption track discovered, constructing locator for %s", video_id)
    return constructed(video_id, language)
