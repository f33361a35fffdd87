"""Default system prompts and user-content templates."""

import json
from typing import Any

DEFAULT_PROMPT = (
    "You are a sophisticated web scraper. Extract the contents of the webpage"
)

DEFAULT_CODE_PROMPT = (
    "Provide a scraping function in JavaScript that extracts and returns data "
    "according to a schema from the current page. The function must be IIFE. "
    "No comments or imports. No console.log. The code you generate will be "
    "executed straight away, you shouldn't output anything besides runnable code."
)

CODE_CONTENT_TEMPLATE = """\
Website: {url}
Schema: {schema}
Content: {content}"""


def format_code_content(url: str, schema: dict[str, Any], content: str) -> str:
    return CODE_CONTENT_TEMPLATE.format(
        url=url,
        schema=json.dumps(schema),
        content=content,
    )
