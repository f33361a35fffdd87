"""HTML cleanup and Markdown conversion for prompt content."""

from __future__ import annotations

import re

import html2text
from bs4 import BeautifulSoup, Comment

# Elements that never carry extractable content
REMOVE_TAGS = [
    "script",
    "style",
    "noscript",
    "iframe",
    "svg",
    "img",
    "audio",
    "video",
    "canvas",
    "map",
    "source",
    "dialog",
    "menu",
    "menuitem",
    "track",
    "object",
    "embed",
    "form",
    "input",
    "button",
    "select",
    "textarea",
    "label",
    "option",
    "optgroup",
    "aside",
    "footer",
    "header",
    "nav",
    "head",
]

# Attribute names (or prefixes) stripped from every remaining element
REMOVE_ATTRIBUTE_PREFIXES = (
    "style",
    "src",
    "alt",
    "title",
    "role",
    "aria-",
    "tabindex",
    "on",
    "data-",
)


def clean_html(html: str) -> str:
    """Return *html* with scripts, styles, media, forms and page chrome removed."""
    soup = BeautifulSoup(html, "html.parser")

    for tag in soup(REMOVE_TAGS):
        tag.decompose()

    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()

    for tag in soup.find_all(True):
        tag.attrs = {
            name: value
            for name, value in tag.attrs.items()
            if not name.startswith(REMOVE_ATTRIBUTE_PREFIXES)
        }

    return str(soup)


class HtmlToMarkdown:
    """
    Converts HTML content to Markdown for the model prompt.

    Example:
        converter = HtmlToMarkdown()
        markdown = converter.convert(html_string, "https://example.com/page")
    """

    def __init__(self, body_width: int = 0, ignore_images: bool = True):
        self._converter = html2text.HTML2Text()

        # 0 disables wrapping so table rows stay on one line
        self._converter.body_width = body_width
        self._converter.ignore_images = ignore_images
        self._converter.inline_links = True
        self._converter.unicode_snob = True
        self._converter.mark_code = True

    def convert(self, html: str, url: str) -> str:
        self._converter.baseurl = url
        markdown = self._converter.handle(html)
        markdown = re.sub(r"\n{3,}", "\n\n", markdown)
        return "\n".join(line.rstrip() for line in markdown.split("\n")).strip()
