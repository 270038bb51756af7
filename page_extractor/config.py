from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, field

import yaml

DEFAULT_CONFIG_PATH = pathlib.Path(__file__).parent / "config.yaml"
CONFIG_ENV_VAR = "PAGE_EXTRACTOR_CONFIG"


@dataclass(frozen=True)
class BrowserConfig:
    headless: bool = True
    viewport_width: int = 1920
    viewport_height: int = 1080


@dataclass(frozen=True)
class ExtractionConfig:
    language: str = "en"
    http_timeout_s: float = 15.0
    navigation_timeout_ms: int = 60000


@dataclass(frozen=True)
class Config:
    browser: BrowserConfig = field(default_factory=BrowserConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)


def _section(data: dict, name: str) -> dict:
    raw = data.get(name) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"config section '{name}' must be a mapping, got {type(raw).__name__}")
    return raw


def _load_browser(raw: dict) -> BrowserConfig:
    defaults = BrowserConfig()
    headless = bool(raw.get("headless", defaults.headless))
    viewport_width = int(raw.get("viewport_width", defaults.viewport_width))
    viewport_height = int(raw.get("viewport_height", defaults.viewport_height))

    if viewport_width <= 0 or viewport_height <= 0:
        raise ValueError(
            f"viewport must be positive, got {viewport_width}x{viewport_height}"
        )
    return BrowserConfig(
        headless=headless,
        viewport_width=viewport_width,
        viewport_height=viewport_height,
    )


def _load_extraction(raw: dict) -> ExtractionConfig:
    defaults = ExtractionConfig()
    language = str(raw.get("language", defaults.language)).strip()
    http_timeout_s = float(raw.get("http_timeout_s", defaults.http_timeout_s))
    navigation_timeout_ms = int(raw.get("navigation_timeout_ms", defaults.navigation_timeout_ms))

    if not language:
        raise ValueError("extraction.language must not be empty")
    if http_timeout_s <= 0:
        raise ValueError(f"extraction.http_timeout_s must be > 0, got {http_timeout_s}")
    if navigation_timeout_ms <= 0:
        raise ValueError(
            f"extraction.navigation_timeout_ms must be > 0, got {navigation_timeout_ms}"
        )

    return ExtractionConfig(
        language=language,
        http_timeout_s=http_timeout_s,
        navigation_timeout_ms=navigation_timeout_ms,
    )


def load_config(path: str | pathlib.Path | None = None) -> Config:
    """Load configuration from ``path``, $PAGE_EXTRACTOR_CONFIG, or the packaged default."""
    path = path or os.environ.get(CONFIG_ENV_VAR)
    config_path = pathlib.Path(path) if path else DEFAULT_CONFIG_PATH
    raw = config_path.read_text(encoding="utf-8")
    data = yaml.safe_load(raw)
    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ValueError(f"config file must be a YAML mapping, got {type(data).__name__}")

    unknown = data.keys() - {"browser", "extraction"}
    if unknown:
        raise ValueError(f"unknown config sections: {', '.join(sorted(unknown))}")

    return Config(
        browser=_load_browser(_section(data, "browser")),
        extraction=_load_extraction(_section(data, "extraction")),
    )
