"""Whitespace/annotation cleanup and length bounding for extracted text."""

from __future__ import annotations

import re

MAX_CONTENT_LENGTH = 15000
TRUNCATION_MARKER = "..."

# Non-speech markers such as "[Music]" or "[Applause]"
_ANNOTATION_RE = re.compile(r"\[.*?\]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize(raw: str | None, max_length: int = MAX_CONTENT_LENGTH) -> str:
    """Strip annotations, collapse whitespace, trim, and bound the length.

    Text longer than ``max_length`` is cut to ``max_length`` characters and
    gets ``TRUNCATION_MARKER`` appended.
    """
    if not raw:
        return ""
    text = _ANNOTATION_RE.sub("", raw)
    text = _WHITESPACE_RE.sub(" ", text).strip()
    if len(text) > max_length:
        text = text[:max_length] + TRUNCATION_MARKER
    return text
