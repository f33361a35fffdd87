"""Caller-facing option models for the three scraper operations."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Literal

from pydantic import BaseModel, ConfigDict

ResponseMode = Literal["auto", "json", "tool"]
ContentFormat = Literal["html", "raw_html", "markdown", "text", "image", "custom"]

# Async callable that turns a Playwright page into prompt text.
FormatFunction = Callable[[Any], Awaitable[str]]


class ScraperLLMOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    prompt: str | None = None
    temperature: float | None = None
    max_output_tokens: int | None = None
    top_p: float | None = None
    mode: ResponseMode | None = None


class PreprocessOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    format: ContentFormat = "html"
    format_function: FormatFunction | None = None
    full_page: bool = True


class ScraperRunOptions(ScraperLLMOptions, PreprocessOptions):
    """Options accepted by ``run`` and ``stream``."""


class ScraperGenerateOptions(BaseModel):
    """Options accepted by ``generate``.

    Code generation needs markup to write selectors against, so only the
    HTML representations are offered and there is no response-shape hint.
    """

    model_config = ConfigDict(extra="forbid")

    prompt: str | None = None
    temperature: float | None = None
    max_output_tokens: int | None = None
    top_p: float | None = None
    format: Literal["html", "raw_html"] = "html"
