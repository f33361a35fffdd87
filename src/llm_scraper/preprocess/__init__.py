"""Page preprocessing — turns a rendered page into model-ready content."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Awaitable, Callable

from playwright.async_api import Error as PlaywrightError

from ..errors import PageUnavailableError, UnsupportedFormatError
from ..options import PreprocessOptions
from .cleanup import HtmlToMarkdown, clean_html
from .models import PagePayload

if TYPE_CHECKING:
    from playwright.async_api import Page

__all__ = [
    "HtmlToMarkdown",
    "PagePayload",
    "clean_html",
    "preprocess",
]

logger = logging.getLogger(__name__)

Formatter = Callable[["Page", PreprocessOptions], Awaitable["str | bytes"]]

_CLOSED_MARKERS = ("has been closed", "Target closed", "detached")


async def _raw_html(page: Page, options: PreprocessOptions) -> str:
    return await page.content()


async def _html(page: Page, options: PreprocessOptions) -> str:
    return clean_html(await page.content())


async def _markdown(page: Page, options: PreprocessOptions) -> str:
    return HtmlToMarkdown().convert(clean_html(await page.content()), page.url)


async def _text(page: Page, options: PreprocessOptions) -> str:
    title = await page.title()
    body = await page.inner_text("body")
    return f"Page Title: {title}\n{body}"


async def _image(page: Page, options: PreprocessOptions) -> bytes:
    return await page.screenshot(full_page=options.full_page, type="png")


async def _custom(page: Page, options: PreprocessOptions) -> str:
    if options.format_function is None:
        raise UnsupportedFormatError("format 'custom' requires a format_function")
    content = await options.format_function(page)
    if not isinstance(content, str):
        raise UnsupportedFormatError(
            f"format_function must return str, got {type(content).__name__}"
        )
    return content


FORMATTERS: dict[str, Formatter] = {
    "raw_html": _raw_html,
    "html": _html,
    "markdown": _markdown,
    "text": _text,
    "image": _image,
    "custom": _custom,
}


def _is_closed_error(exc: PlaywrightError) -> bool:
    message = str(exc)
    return any(marker in message for marker in _CLOSED_MARKERS)


async def preprocess(
    page: Page,
    options: PreprocessOptions | None = None,
) -> PagePayload:
    """Read *page* in the requested format and return a payload tagged with its URL.

    The URL is captured before any content is read so the payload keeps the
    address the content came from even if the page navigates afterwards.
    Page state is only read, never modified.
    """
    options = options or PreprocessOptions()
    formatter = FORMATTERS.get(options.format)
    if formatter is None:
        raise UnsupportedFormatError(f"unsupported format: {options.format!r}")

    if page.is_closed():
        raise PageUnavailableError("page is closed")

    url = page.url
    logger.debug("preprocessing page", extra={"url": url, "format": options.format})

    try:
        content = await formatter(page, options)
    except PlaywrightError as exc:
        if page.is_closed() or _is_closed_error(exc):
            raise PageUnavailableError(f"page became unavailable: {exc}") from exc
        raise UnsupportedFormatError(
            f"could not produce {options.format!r} content: {exc}"
        ) from exc

    logger.debug(
        "page preprocessed",
        extra={"url": url, "format": options.format, "content_length": len(content)},
    )
    return PagePayload(format=options.format, content=content, url=url)
