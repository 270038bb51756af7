"""Article-body selection for pages without a transcript.

Tries a fixed priority list of structural selectors and accepts the first
element with enough text; otherwise prunes non-content regions from the body
and takes what remains.  Pruning is structural (whole elements are removed)
so boilerplate phrases never leak into the result.
"""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

# Priority order matters: first qualifying match wins
CONTENT_SELECTORS = (
    "article",
    "main",
    '[role="main"]',
    ".post-content",
    ".article-content",
    ".entry-content",
    "#content",
    ".content",
)

# Regions removed before the full-body fallback
BOILERPLATE_SELECTORS = (
    "script, style, nav, header, footer, aside, "
    ".sidebar, .nav, .menu, .advertisement, .ads"
)

# Never visible, whichever branch is taken
_INVISIBLE_TAGS = ["script", "style", "noscript", "template"]

# Block elements get line breaks around them, roughly like innerText
_BLOCK_ELEMENTS = [
    "p", "div", "br", "hr", "h1", "h2", "h3", "h4", "h5", "h6",
    "li", "tr", "td", "th", "blockquote", "pre", "table", "section", "article",
]

MIN_SELECTOR_TEXT_LENGTH = 100


def _visible_text(tag: Tag) -> str:
    """Text of ``tag`` with invisible elements dropped and blocks separated."""
    for el in tag.find_all(_INVISIBLE_TAGS):
        el.decompose()
    for el in tag.find_all(_BLOCK_ELEMENTS):
        el.insert_before("\n")
        el.insert_after("\n")
    text = tag.get_text()
    text = re.sub(r"[^\S\n]+", " ", text)
    return "\n".join(line.strip() for line in text.splitlines() if line.strip())


def select_content(html: str) -> str:
    """Return the text of the page's main content region.

    Returns an empty string only when the document has no text at all.
    """
    soup = BeautifulSoup(html or "", "lxml")

    for selector in CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        # Measure on a copy; a rejected candidate must stay intact for the fallback
        text = _visible_text(BeautifulSoup(str(element), "lxml"))
        if len(text.strip()) > MIN_SELECTOR_TEXT_LENGTH:
            logger.debug("Content selector '%s' matched (%d chars)", selector, len(text))
            return text

    body = soup.body or soup
    removed = 0
    for el in body.select(BOILERPLATE_SELECTORS):
        if el.decomposed:
            continue
        el.decompose()
        removed += 1
    logger.debug("Full-body fallback after pruning %d regions", removed)
    return _visible_text(body)
