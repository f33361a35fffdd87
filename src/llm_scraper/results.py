"""Result envelopes returned by the scraper."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, AsyncIterator, Generic, TypeVar

T = TypeVar("T")

# One optional language tag must end at a newline, otherwise only the fence goes
_LEADING_FENCE = re.compile(r"^```(?:[\w+#.-]*[ \t]*\r?\n|\s*)")
_TRAILING_FENCE = re.compile(r"\s*```$")


def strip_markdown_backticks(text: str) -> str:
    """Remove a single outer Markdown code fence from *text*.

    Only the outermost pair is removed, in one pass anchored at the start and
    end of the trimmed text. Text without a fence is returned trimmed.
    """
    stripped = text.strip()
    stripped = _LEADING_FENCE.sub("", stripped, count=1)
    stripped = _TRAILING_FENCE.sub("", stripped, count=1)
    return stripped.strip()


@dataclass(frozen=True)
class ScrapeResult(Generic[T]):
    data: T
    url: str


@dataclass(frozen=True)
class StreamResult(Generic[T]):
    """A lazy sequence of partial objects plus the page URL.

    The model is only called once iteration starts. Leaving an
    ``async with`` block closes the sequence and releases the transport,
    even if it was never exhausted.
    """

    stream: AsyncIterator[T]
    url: str

    def __aiter__(self) -> AsyncIterator[T]:
        return self.stream

    async def aclose(self) -> None:
        aclose = getattr(self.stream, "aclose", None)
        if aclose is not None:
            await aclose()

    async def __aenter__(self) -> StreamResult[T]:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


@dataclass(frozen=True)
class CodeResult:
    code: str
    url: str


def data_result(data: T, url: str) -> ScrapeResult[T]:
    return ScrapeResult(data=data, url=url)


def stream_result(stream: AsyncIterator[T], url: str) -> StreamResult[T]:
    return StreamResult(stream=stream, url=url)


def code_result(text: str, url: str) -> CodeResult:
    return CodeResult(code=strip_markdown_backticks(text), url=url)
