"""Exceptions raised by the scraping pipeline."""


class ScraperError(Exception):
    """Base class for every error surfaced by the scraper."""


class PageUnavailableError(ScraperError):
    """The page handle is closed or detached."""


class UnsupportedFormatError(ScraperError):
    """The requested content representation cannot be produced."""


class UnsupportedSchemaError(ScraperError):
    """The schema is neither a validator nor a JSON schema description."""


class ModelCallError(ScraperError):
    """Transport or provider failure while calling the model."""


class SchemaValidationError(ScraperError):
    """The model output does not satisfy the schema."""
