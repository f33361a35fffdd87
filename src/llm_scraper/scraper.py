"""LLM scraper — formats a page, calls the model and normalizes the result."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, AsyncIterator

from pydantic import ValidationError
from pydantic_ai import Agent
from pydantic_ai.exceptions import AgentRunError, ToolRetryError, UnexpectedModelBehavior

from .config import Settings, get_settings
from .errors import ModelCallError, SchemaValidationError, ScraperError
from .models import ExtractionRequest, build_code_request, build_request
from .options import PreprocessOptions, ScraperGenerateOptions, ScraperRunOptions
from .preprocess import preprocess
from .results import (
    CodeResult,
    ScrapeResult,
    StreamResult,
    code_result,
    data_result,
    stream_result,
)
from .schema import resolve_schema

if TYPE_CHECKING:
    from playwright.async_api import Page
    from pydantic_ai.models import Model

logger = logging.getLogger(__name__)


def _is_validation_failure(exc: BaseException) -> bool:
    """Whether *exc* was caused by output that failed schema validation."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, (ValidationError, ToolRetryError)):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False


def _model_error(exc: AgentRunError) -> ScraperError:
    """Translate a pydantic-ai run failure into the scraper's error taxonomy."""
    if isinstance(exc, UnexpectedModelBehavior) and _is_validation_failure(exc):
        return SchemaValidationError(exc.message)
    return ModelCallError(exc.message)


class LLMScraper:
    """Extracts typed data, or extraction code, from rendered pages.

    The model handle is shared read-only across calls, so one scraper can
    serve concurrent calls as long as each call gets its own page.
    """

    def __init__(self, model: Model | str) -> None:
        self._model = model

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> LLMScraper:
        settings = settings or get_settings()
        return cls(settings.model)

    def _agent(self, request: ExtractionRequest) -> Agent[None, Any]:
        # Validation failures surface to the caller instead of being retried
        return Agent(
            self._model,
            output_type=request.agent_output_type(),
            system_prompt=request.system_prompt,
            retries=0,
            output_retries=0,
        )

    async def run(
        self,
        page: Page,
        schema: Any,
        options: ScraperRunOptions | None = None,
    ) -> ScrapeResult[Any]:
        """Extract a complete object matching *schema* from *page*."""
        options = options or ScraperRunOptions()
        handle = resolve_schema(schema)
        payload = await preprocess(page, options)
        request = build_request(payload, handle, options)

        logger.info(
            "extraction started",
            extra={"url": payload.url, "format": payload.format, "mode": options.mode},
        )
        try:
            result = await self._agent(request).run(
                request.user_content,
                model_settings=request.model_settings,
            )
        except AgentRunError as exc:
            logger.warning("extraction failed", extra={"url": payload.url, "error": exc.message})
            raise _model_error(exc) from exc

        logger.info("extraction completed", extra={"url": payload.url})
        return data_result(result.output, payload.url)

    async def stream(
        self,
        page: Page,
        schema: Any,
        options: ScraperRunOptions | None = None,
    ) -> StreamResult[Any]:
        """Return a lazy sequence of progressively complete partial objects.

        The page is read before this returns; the model is called on the
        first advance of ``result.stream``.
        """
        options = options or ScraperRunOptions()
        handle = resolve_schema(schema)
        payload = await preprocess(page, options)
        request = build_request(payload, handle, options)

        logger.info(
            "stream prepared",
            extra={"url": payload.url, "format": payload.format, "mode": options.mode},
        )
        return stream_result(self._stream_partials(request, payload.url), payload.url)

    async def _stream_partials(self, request: ExtractionRequest, url: str) -> AsyncIterator[Any]:
        agent = self._agent(request)
        partials = 0
        try:
            async with agent.run_stream(
                request.user_content,
                model_settings=request.model_settings,
            ) as result:
                async for partial in result.stream_output(debounce_by=None):
                    partials += 1
                    yield partial
        except AgentRunError as exc:
            logger.warning(
                "stream failed",
                extra={"url": url, "partials": partials, "error": exc.message},
            )
            raise _model_error(exc) from exc
        except (ValidationError, ToolRetryError) as exc:
            logger.warning("stream output invalid", extra={"url": url, "partials": partials})
            raise SchemaValidationError(str(exc)) from exc

        logger.info("stream completed", extra={"url": url, "partials": partials})

    async def generate(
        self,
        page: Page,
        schema: Any,
        options: ScraperGenerateOptions | None = None,
    ) -> CodeResult:
        """Ask the model for a JavaScript function that extracts *schema* from *page*.

        The returned code is not checked for syntax; callers run it at their own risk.
        """
        options = options or ScraperGenerateOptions()
        handle = resolve_schema(schema)
        payload = await preprocess(page, PreprocessOptions(format=options.format))
        request = build_code_request(payload, handle, options)

        logger.info("code generation started", extra={"url": payload.url, "format": payload.format})
        try:
            result = await self._agent(request).run(
                request.user_content,
                model_settings=request.model_settings,
            )
        except AgentRunError as exc:
            logger.warning("code generation failed", extra={"url": payload.url, "error": exc.message})
            raise ModelCallError(exc.message) from exc

        logger.info("code generation completed", extra={"url": payload.url})
        return code_result(result.output, payload.url)
