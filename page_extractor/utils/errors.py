"""Error taxonomy for the extraction engine and error formatting for tool responses."""

from page_extractor.models import ErrorKind


class ExtractionError(Exception):
    """Base class for classified extraction failures."""

    kind: ErrorKind

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind.value)


class FetchFailed(ExtractionError):
    kind = ErrorKind.FETCH_FAILED

    def __init__(self, message: str = "", status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PanelActivationFailed(ExtractionError):
    kind = ErrorKind.PANEL_ACTIVATION_FAILED


class PageUnavailable(ExtractionError):
    """Title/URL could not be read from the page at all."""

    kind = ErrorKind.PAGE_UNAVAILABLE


def format_error(tool_name: str, error: Exception, suggestion: str = "") -> str:
    """Format an error message for MCP tool response."""
    error_msg = f"## ❌ Error in {tool_name}\n\n"
    if isinstance(error, ExtractionError):
        error_msg += f"**Error ({error.kind.value}):** {str(error)}\n\n"
    else:
        error_msg += f"**Error:** {str(error)}\n\n"

    if suggestion:
        error_msg += f"**Suggestion:** {suggestion}\n"
    elif isinstance(error, PageUnavailable):
        error_msg += "**Suggestion:** The page could not be read. Navigate to it again and retry.\n"
    else:
        # Provide default suggestions based on error type
        error_str = str(error).lower()
        if "browser not launched" in error_str:
            error_msg += "**Suggestion:** Call browser_launch first.\n"
        elif "timeout" in error_str:
            error_msg += "**Suggestion:** The page took too long to load. Try increasing timeout or check your internet connection.\n"
        elif "network" in error_str or "connection" in error_str:
            error_msg += "**Suggestion:** Check your internet connection and try again.\n"
        else:
            error_msg += "**Suggestion:** Please check the error message and try again with different parameters.\n"

    return error_msg
