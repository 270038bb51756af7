"""Caption payload parsing.

Two timed-caption formats are recognised in a single payload:
- structured event lists (``{"events": [{"segs": [{"utf8": ...}]}]}``)
- tagged markup (repeated ``<text>`` elements holding entity-encoded spans)

Detection is a discriminated parse: decode as structured data first and
fall back to tag detection only when that decode fails.  The format is never
assumed from how the payload was requested.

Also parses transcript segments embedded in the serialized page markup.
"""

from __future__ import annotations

import html
import json
import logging
from typing import Optional

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

_TAGGED_MARKER = "<text"
_SEGMENT_LIST_LABEL = '"transcriptSegmentListRenderer"'
_SEGMENTS_LABEL = '"segments":'

_decoder = json.JSONDecoder()


# ---------------------------------------------------------------------------
# Entity decoding
# ---------------------------------------------------------------------------

def decode_entities(text: str) -> str:
    """Decode HTML character entities, keeping the literal text on failure.

    Caption servers double-escape (``&amp;#39;``); the markup parser undoes
    the first level and this undoes the second.  Partial entities such as
    ``&amp`` or ``&#xZZ;`` are left as they are.
    """
    try:
        return html.unescape(text)
    except Exception:
        return text


# ---------------------------------------------------------------------------
# Structured event payloads
# ---------------------------------------------------------------------------

def parse_structured(payload: str) -> Optional[str]:
    """Concatenate every ``utf8`` segment of every event, in order.

    Raises ValueError when the payload is not JSON at all.  Returns None when
    it is JSON but carries no text.
    """
    data = json.loads(payload)
    if not isinstance(data, dict):
        return None
    events = data.get("events")
    if not isinstance(events, list):
        return None

    parts: list[str] = []
    for event in events:
        if not isinstance(event, dict):
            continue
        segs = event.get("segs")
        if not isinstance(segs, list):
            continue
        for seg in segs:
            if isinstance(seg, dict) and isinstance(seg.get("utf8"), str):
                parts.append(seg["utf8"])

    text = "".join(parts)
    return text if text.strip() else None


# ---------------------------------------------------------------------------
# Tagged markup payloads
# ---------------------------------------------------------------------------

def parse_markup_tagged(payload: str) -> Optional[str]:
    """Space-join the entity-decoded content of every ``<text>`` element."""
    if _TAGGED_MARKER not in payload:
        return None

    # The lenient HTML parser keeps raw "&" and stray "<" as literal text
    soup = BeautifulSoup(payload, "lxml")
    nodes = [decode_entities(el.get_text()) for el in soup.find_all("text")]
    text = " ".join(nodes)
    return text if text.strip() else None


def parse_payload(payload: Optional[str]) -> Optional[str]:
    """Detect the payload format and return its text, or None."""
    if not payload or not payload.strip():
        return None
    try:
        return parse_structured(payload)
    except ValueError:
        pass

    text = parse_markup_tagged(payload)
    if text is None:
        logger.debug("Payload matched no caption format (%d chars)", len(payload))
    return text


# ---------------------------------------------------------------------------
# Embedded data in serialized page markup
# ---------------------------------------------------------------------------

def find_json_array(text: str, label: str, start: int = 0) -> Optional[list]:
    """Decode the JSON array that follows ``label`` in ``text``.

    Returns None if the label is absent, no array follows it, or the array
    does not decode.
    """
    idx = text.find(label, start)
    if idx == -1:
        return None
    bracket = text.find("[", idx + len(label))
    if bracket == -1:
        return None
    # Only whitespace may sit between the label and the array
    if text[idx + len(label):bracket].strip():
        return None
    try:
        value, _ = _decoder.raw_decode(text, bracket)
    except ValueError:
        return None
    return value if isinstance(value, list) else None


def parse_embedded_segments(page_html: str) -> Optional[str]:
    """Extract transcript segments embedded in the page's initial data."""
    idx = page_html.find(_SEGMENT_LIST_LABEL)
    if idx == -1:
        return None
    label_idx = page_html.find(_SEGMENTS_LABEL, idx)
    if label_idx == -1:
        return None
    segments = find_json_array(page_html, _SEGMENTS_LABEL, label_idx)
    if not segments:
        return None

    lines: list[str] = []
    for seg in segments:
        if not isinstance(seg, dict):
            continue
        renderer = seg.get("transcriptSegmentRenderer")
        snippet = renderer.get("snippet") if isinstance(renderer, dict) else None
        runs = snippet.get("runs") if isinstance(snippet, dict) else None
        if not isinstance(runs, list):
            continue
        line = "".join(
            run["text"] for run in runs
            if isinstance(run, dict) and isinstance(run.get("text"), str)
        )
        if line:
            lines.append(line)

    text = " ".join(lines)
    return text if text.strip() else None
