from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time

from playwright.async_api import async_playwright

from page_extractor.browser_manager import open_page
from page_extractor.captions.fetcher import CaptionFetcher
from page_extractor.config import load_config
from page_extractor.engine import ExtractionEngine, detect_mode
from page_extractor.models import ExtractionMode, ExtractionRequest, ExtractionResult
from page_extractor.tools.navigation import goto

logger = logging.getLogger(__name__)


async def run(url: str, mode: ExtractionMode | None, config_path: str | None) -> ExtractionResult:
    config = load_config(config_path)
    settings = config.extraction

    t0 = time.monotonic()
    async with async_playwright() as pw:
        browser, page = await open_page(pw, config.browser)
        try:
            await goto(page, url, timeout_ms=settings.navigation_timeout_ms)
            request = ExtractionRequest(
                page_identifier=page.url,
                mode=mode or detect_mode(page.url),
            )
            logger.info("mode        = %s", request.mode.value)

            async with CaptionFetcher(timeout=settings.http_timeout_s) as fetcher:
                engine = ExtractionEngine(
                    page,
                    fetcher=fetcher,
                    language=settings.language,
                )
                result = await engine.run(request)
        finally:
            await browser.close()

    logger.info("elapsed     = %.1f s", time.monotonic() - t0)
    return result


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Extract a video transcript or article body from a web page"
    )
    parser.add_argument("url", help="page to extract from")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in ExtractionMode],
        default=None,
        help="extraction mode (default: transcript for video watch pages, else generic)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="path to config.yaml (default: $PAGE_EXTRACTOR_CONFIG or the packaged config.yaml)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        stream=sys.stderr,
    )

    mode = ExtractionMode(args.mode) if args.mode else None
    try:
        result = asyncio.run(run(args.url, mode, args.config))
    except Exception:
        logger.exception("Extraction failed")
        raise

    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    if not result.ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
