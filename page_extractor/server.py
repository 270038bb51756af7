"""FastMCP server exposing browser navigation and page/transcript extraction tools."""

from fastmcp import FastMCP
from page_extractor.tools import navigation, extraction

# Create MCP server
mcp = FastMCP("page-extractor")


# Register navigation tools
@mcp.tool()
async def browser_launch(
    headless: bool = True,
    viewport_width: int = 1920,
    viewport_height: int = 1080
) -> str:
    """Launch Chromium browser. Call this before any other tool.

    Args:
        headless: Run browser in headless mode (no UI)
        viewport_width: Browser viewport width in pixels
        viewport_height: Browser viewport height in pixels
    """
    return await navigation.browser_launch({
        "headless": headless,
        "viewport_width": viewport_width,
        "viewport_height": viewport_height
    })


@mcp.tool()
async def navigate(url: str, wait_until: str = "domcontentloaded") -> str:
    """Navigate to a URL.

    Args:
        url: The URL to navigate to
        wait_until: When to consider navigation complete (load, domcontentloaded, networkidle)
    """
    return await navigation.navigate({"url": url, "wait_until": wait_until})


@mcp.tool()
async def browser_close() -> str:
    """Close the browser and cleanup resources."""
    return await navigation.browser_close({})


# Register extraction tools
@mcp.tool()
async def check_page() -> str:
    """Report whether the current page is a video watch page and which extraction mode applies."""
    return await extraction.check_page({})


@mcp.tool()
async def extract_transcript(url: str = None) -> str:
    """Extract the transcript of a video page as plain text (max 15000 chars).

    Tries, in order: the page's caption track (structured format, then plain),
    transcript segments embedded in the page markup, and finally opening the
    transcript panel in the page UI.

    Args:
        url: Video watch page to navigate to first (optional, defaults to the current page)
    """
    return await extraction.extract_transcript({"url": url})


@mcp.tool()
async def extract_page_content(url: str = None) -> str:
    """Extract the main text of a page as plain text (max 15000 chars).

    Args:
        url: Page to navigate to first (optional, defaults to the current page)
    """
    return await extraction.extract_page_content({"url": url})


@mcp.tool()
async def extract(mode: str = "auto", url: str = None) -> str:
    """Extract a transcript or article body, choosing the mode from the URL by default.

    Args:
        mode: auto, transcript, or generic
        url: Page to navigate to first (optional, defaults to the current page)
    """
    return await extraction.extract({"mode": mode, "url": url})


# Run the server
if __name__ == "__main__":
    mcp.run()
