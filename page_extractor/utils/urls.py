"""Video page detection and video identifier extraction."""

from __future__ import annotations

from typing import Optional
from urllib.parse import parse_qs, urlparse

_VIDEO_HOSTS = {"youtube.com", "www.youtube.com", "m.youtube.com"}


def video_id(url: str) -> Optional[str]:
    """Return the ``v`` query parameter of ``url``, or None."""
    try:
        parsed = urlparse(url or "")
    except ValueError:
        return None
    values = parse_qs(parsed.query).get("v")
    if not values or not values[0].strip():
        return None
    return values[0].strip()


def is_video_page(url: str) -> bool:
    """True for watch pages on the video host that carry a video id."""
    try:
        parsed = urlparse(url or "")
    except ValueError:
        return False
    return (
        (parsed.hostname or "").lower() in _VIDEO_HOSTS
        and parsed.path == "/watch"
        and video_id(url) is not None
    )
