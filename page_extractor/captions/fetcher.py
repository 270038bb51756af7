"""HTTP retrieval of caption payloads."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

import httpx

from page_extractor.browser_manager import DEFAULT_USER_AGENT
from page_extractor.utils.errors import FetchFailed
from page_extractor.utils.parser import parse_payload

logger = logging.getLogger(__name__)

STRUCTURED_FORMAT = "json3"

_HTTPX_HEADERS = {
    "User-Agent": DEFAULT_USER_AGENT,
    "Accept": "application/json, text/xml;q=0.9, */*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


def with_format_hint(locator: str, fmt: str = STRUCTURED_FORMAT) -> str:
    """Return ``locator`` with its ``fmt`` query parameter set to ``fmt``."""
    parsed = urlparse(locator)
    query = [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True) if k != "fmt"]
    query.append(("fmt", fmt))
    return urlunparse(parsed._replace(query=urlencode(query)))


class CaptionFetcher:
    """Fetch caption payloads over HTTP and hand them to the format parsers.

    Owns its httpx client unless one is injected.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 15.0):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers=_HTTPX_HEADERS,
            timeout=timeout,
            follow_redirects=True,
        )

    async def __aenter__(self) -> "CaptionFetcher":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, locator: str) -> Optional[str]:
        """GET ``locator``; None for an empty body, FetchFailed for any HTTP failure."""
        try:
            resp = await self._client.get(locator)
        except httpx.HTTPError as e:
            raise FetchFailed(f"request to caption source failed: {e}") from e

        if resp.status_code >= 400:
            raise FetchFailed(
                f"caption source returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        text = resp.text
        if not text or not text.strip():
            logger.debug("Empty caption payload from %s", locator)
            return None
        return text

    async def fetch_structured(self, locator: str) -> Optional[str]:
        """Primary attempt: request the structured format explicitly."""
        payload = await self.fetch(with_format_hint(locator))
        return parse_payload(payload)

    async def fetch_plain(self, locator: str) -> Optional[str]:
        """Secondary attempt: the same locator, no format hint."""
        payload = await self.fetch(locator)
        return parse_payload(payload)
