from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ExtractionMode(str, Enum):
    TRANSCRIPT = "transcript"
    GENERIC = "generic"


class SourceKind(str, Enum):
    VIDEO = "video"
    DOCUMENT = "document"


class ErrorKind(str, Enum):
    NO_IDENTIFIER = "no_identifier"
    NO_CAPTIONS_AVAILABLE = "no_captions_available"
    EMPTY_DOCUMENT = "empty_document"
    FETCH_FAILED = "fetch_failed"
    PARSE_FAILED = "parse_failed"
    PANEL_ACTIVATION_FAILED = "panel_activation_failed"
    PAGE_UNAVAILABLE = "page_unavailable"


@dataclass(frozen=True)
class ExtractionRequest:
    page_identifier: str
    mode: ExtractionMode


@dataclass(frozen=True)
class CaptionTrack:
    language_code: str
    display_name: str
    source_locator: str

    @classmethod
    def from_raw(cls, raw: object) -> CaptionTrack | None:
        """Build a track from a host-page ``captionTracks`` entry.

        Entries come from page script state, so every field is optional.
        Returns None when the language code or locator is missing.
        """
        if not isinstance(raw, dict):
            return None
        language_code = raw.get("languageCode")
        locator = raw.get("baseUrl")
        if not isinstance(language_code, str) or not language_code:
            return None
        if not isinstance(locator, str) or not locator:
            return None

        display_name = None
        name = raw.get("name")
        if isinstance(name, dict):
            display_name = name.get("simpleText")
            runs = name.get("runs")
            if not display_name and isinstance(runs, list) and runs and isinstance(runs[0], dict):
                display_name = runs[0].get("text")
        if not isinstance(display_name, str) or not display_name:
            display_name = language_code

        return cls(
            language_code=language_code,
            display_name=display_name,
            source_locator=locator,
        )


@dataclass(frozen=True)
class ExtractionResult:
    title: str
    url: str
    source_kind: SourceKind
    content: str | None = None
    caption_language: str | None = None
    error: ErrorKind | None = None
    message: str | None = None

    def __post_init__(self) -> None:
        has_content = bool(self.content)
        has_error = self.error is not None
        if has_content == has_error:
            raise ValueError("ExtractionResult needs exactly one of content or error")

    @classmethod
    def success(
        cls,
        title: str,
        url: str,
        source_kind: SourceKind,
        content: str,
        caption_language: str | None = None,
    ) -> ExtractionResult:
        return cls(
            title=title,
            url=url,
            source_kind=source_kind,
            content=content,
            caption_language=caption_language,
        )

    @classmethod
    def failure(
        cls,
        title: str,
        url: str,
        source_kind: SourceKind,
        error: ErrorKind,
        message: str | None = None,
    ) -> ExtractionResult:
        return cls(
            title=title,
            url=url,
            source_kind=source_kind,
            error=error,
            message=message,
        )

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        d = {
            "title": self.title,
            "url": self.url,
            "sourceKind": self.source_kind.value,
        }
        if self.content:
            d["content"] = self.content
        if self.caption_language:
            d["captionLanguage"] = self.caption_language
        if self.error is not None:
            d["error"] = self.error.value
        if self.message:
            d["message"] = self.message
        return d
