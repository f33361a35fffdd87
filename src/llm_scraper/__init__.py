"""Extract structured data from web pages with a language model."""

from .errors import (
    ModelCallError,
    PageUnavailableError,
    SchemaValidationError,
    ScraperError,
    UnsupportedFormatError,
    UnsupportedSchemaError,
)
from .options import (
    PreprocessOptions,
    ScraperGenerateOptions,
    ScraperLLMOptions,
    ScraperRunOptions,
)
from .preprocess import PagePayload, preprocess
from .results import CodeResult, ScrapeResult, StreamResult, strip_markdown_backticks
from .schema import DescriptionSchema, ValidatorSchema
from .scraper import LLMScraper

__all__ = [
    "CodeResult",
    "DescriptionSchema",
    "LLMScraper",
    "ModelCallError",
    "PagePayload",
    "PageUnavailableError",
    "PreprocessOptions",
    "SchemaValidationError",
    "ScrapeResult",
    "ScraperError",
    "ScraperGenerateOptions",
    "ScraperLLMOptions",
    "ScraperRunOptions",
    "StreamResult",
    "UnsupportedFormatError",
    "UnsupportedSchemaError",
    "ValidatorSchema",
    "preprocess",
    "strip_markdown_backticks",
]
