"""Pydantic schemas for tool input validation."""

from pydantic import BaseModel, Field
from typing import Optional, Literal


# Navigation tool schemas
class BrowserLaunchInput(BaseModel):
    headless: bool = Field(default=True, description="Launch browser in headless mode")
    viewport_width: int = Field(default=1920, gt=0, description="Browser viewport width")
    viewport_height: int = Field(default=1080, gt=0, description="Browser viewport height")


class NavigateInput(BaseModel):
    url: str = Field(description="URL to navigate to")
    wait_until: Literal["load", "domcontentloaded", "networkidle"] = Field(
        default="domcontentloaded",
        description="When to consider navigation complete"
    )


# Extraction tool schemas
class ExtractInput(BaseModel):
    mode: Literal["auto", "transcript", "generic"] = Field(
        default="auto",
        description="Extraction mode. 'auto' picks transcript mode on video watch pages."
    )
    url: Optional[str] = Field(
        default=None,
        description="Navigate here before extracting. Defaults to the current page."
    )


class ExtractTranscriptInput(BaseModel):
    url: Optional[str] = Field(
        default=None,
        description="Video watch page to navigate to before extracting. Defaults to the current page."
    )


class ExtractPageContentInput(BaseModel):
    url: Optional[str] = Field(
        default=None,
        description="Page to navigate to before extracting. Defaults to the current page."
    )
