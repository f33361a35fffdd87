"""Page preprocessing tests."""

import pytest
from playwright.async_api import Error as PlaywrightError

from llm_scraper.errors import PageUnavailableError, UnsupportedFormatError
from llm_scraper.options import PreprocessOptions
from llm_scraper.preprocess import HtmlToMarkdown, clean_html, preprocess


# --- clean_html / markdown (sync) ---


def test_clean_html_removes_scripts_styles_and_chrome():
    html = "<html><head><style>x</style></head><body><nav>Menu</nav><script>a()</script><p>Keep</p></body></html>"
    cleaned = clean_html(html)
    assert "Keep" in cleaned
    assert "<script" not in cleaned
    assert "<style" not in cleaned
    assert "Menu" not in cleaned


def test_clean_html_strips_noisy_attributes():
    cleaned = clean_html('<a href="/x" onclick="y()" data-id="1" aria-label="z" class="c">link</a>')
    assert 'href="/x"' in cleaned
    assert 'class="c"' in cleaned
    assert "onclick" not in cleaned
    assert "data-id" not in cleaned
    assert "aria-label" not in cleaned


def test_clean_html_drops_comments():
    assert "secret" not in clean_html("<p>a</p><!-- secret -->")


def test_html_to_markdown_headings_and_links():
    markdown = HtmlToMarkdown().convert(
        '<h1>Title</h1><p>See <a href="https://example.com/docs">docs</a></p>',
        "https://example.com/",
    )
    assert markdown.startswith("# Title")
    assert "[docs](https://example.com/docs)" in markdown


# --- preprocess (async) ---


@pytest.mark.parametrize("fmt", ["html", "raw_html", "markdown", "text", "image"])
@pytest.mark.asyncio
async def test_format_tag_matches_request(page, fmt):
    payload = await preprocess(page, PreprocessOptions(format=fmt))
    assert payload.format == fmt
    assert payload.url == "https://example.com/article"


@pytest.mark.asyncio
async def test_custom_format_tag_matches_request(page):
    async def title_only(p):
        return await p.title()

    payload = await preprocess(page, PreprocessOptions(format="custom", format_function=title_only))
    assert payload.format == "custom"
    assert payload.content == "Example"


@pytest.mark.asyncio
async def test_default_format_is_cleaned_html(page):
    payload = await preprocess(page)
    assert payload.format == "html"
    assert "Hello World" in payload.content
    assert "window.tracking" not in payload.content


@pytest.mark.asyncio
async def test_raw_html_is_verbatim(page):
    payload = await preprocess(page, PreprocessOptions(format="raw_html"))
    assert payload.content == page.content.return_value


@pytest.mark.asyncio
async def test_markdown_format(page):
    payload = await preprocess(page, PreprocessOptions(format="markdown"))
    assert "# Hello World" in payload.content
    assert "window.tracking" not in payload.content


@pytest.mark.asyncio
async def test_text_format(page):
    payload = await preprocess(page, PreprocessOptions(format="text"))
    assert payload.content == "Page Title: Example\nHello World\nSome content."
    page.inner_text.assert_awaited_once_with("body")


@pytest.mark.asyncio
async def test_image_format_returns_bytes(page):
    payload = await preprocess(page, PreprocessOptions(format="image"))
    assert isinstance(payload.content, bytes)
    assert payload.is_image
    page.screenshot.assert_awaited_once_with(full_page=True, type="png")


@pytest.mark.asyncio
async def test_image_viewport_only(page):
    await preprocess(page, PreprocessOptions(format="image", full_page=False))
    page.screenshot.assert_awaited_once_with(full_page=False, type="png")


@pytest.mark.asyncio
async def test_text_formats_return_str(page):
    for fmt in ("html", "raw_html", "markdown", "text"):
        payload = await preprocess(page, PreprocessOptions(format=fmt))
        assert isinstance(payload.content, str)


@pytest.mark.asyncio
async def test_page_is_not_mutated(page):
    await preprocess(page, PreprocessOptions(format="html"))
    page.evaluate.assert_not_called()
    page.set_content.assert_not_called()


@pytest.mark.asyncio
async def test_url_captured_before_reading(page):
    async def navigate_while_reading():
        page.url = "https://example.com/elsewhere"
        return "<p>late</p>"

    page.content.side_effect = navigate_while_reading
    payload = await preprocess(page, PreprocessOptions(format="raw_html"))
    assert payload.url == "https://example.com/article"


@pytest.mark.asyncio
async def test_closed_page_raises(make_page):
    page = make_page(closed=True)
    with pytest.raises(PageUnavailableError):
        await preprocess(page)
    page.content.assert_not_awaited()


@pytest.mark.asyncio
async def test_page_closed_during_read_raises(page):
    page.content.side_effect = PlaywrightError("Target page, context or browser has been closed")
    with pytest.raises(PageUnavailableError):
        await preprocess(page)


@pytest.mark.asyncio
async def test_screenshot_failure_is_unsupported_format(page):
    page.screenshot.side_effect = PlaywrightError("Cannot take screenshot with 0 width.")
    with pytest.raises(UnsupportedFormatError):
        await preprocess(page, PreprocessOptions(format="image"))


@pytest.mark.asyncio
async def test_custom_without_function_raises(page):
    with pytest.raises(UnsupportedFormatError):
        await preprocess(page, PreprocessOptions(format="custom"))


@pytest.mark.asyncio
async def test_custom_must_return_str(page):
    async def returns_bytes(p):
        return b"nope"

    with pytest.raises(UnsupportedFormatError):
        await preprocess(page, PreprocessOptions(format="custom", format_function=returns_bytes))


@pytest.mark.asyncio
async def test_unknown_format_raises(page):
    options = PreprocessOptions.model_construct(format="pdf", format_function=None, full_page=True)
    with pytest.raises(UnsupportedFormatError):
        await preprocess(page, options)
