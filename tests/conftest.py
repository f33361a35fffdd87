"""Fixtures — fake Playwright pages."""

from unittest.mock import AsyncMock, MagicMock

import pytest

SAMPLE_HTML = """\
<html>
  <head><title>Example</title><style>body { color: red }</style></head>
  <body>
    <nav><a href="/home">Home</a></nav>
    <script>window.tracking = true;</script>
    <h1 class="headline" data-id="7">Hello World</h1>
    <p onclick="steal()">Some <a href="/more" aria-label="more">content</a>.</p>
    <!-- comment -->
  </body>
</html>
"""

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


def _make_page(
    html: str = SAMPLE_HTML,
    url: str = "https://example.com/article",
    title: str = "Example",
    body_text: str = "Hello World\nSome content.",
    screenshot: bytes = PNG_BYTES,
    closed: bool = False,
) -> MagicMock:
    page = MagicMock()
    page.url = url
    page.is_closed = MagicMock(return_value=closed)
    page.content = AsyncMock(return_value=html)
    page.title = AsyncMock(return_value=title)
    page.inner_text = AsyncMock(return_value=body_text)
    page.screenshot = AsyncMock(return_value=screenshot)
    return page


@pytest.fixture
def make_page():
    """Factory for a MagicMock standing in for a Playwright ``Page``."""
    return _make_page


@pytest.fixture
def page(make_page):
    return make_page()
