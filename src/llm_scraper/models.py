"""Request builder — assembles the model invocation for each call kind."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from pydantic_ai import BinaryContent, NativeOutput, ToolOutput
from pydantic_ai.messages import UserContent
from pydantic_ai.settings import ModelSettings

from .options import ResponseMode, ScraperGenerateOptions, ScraperLLMOptions
from .preprocess import PagePayload
from .prompts import DEFAULT_CODE_PROMPT, DEFAULT_PROMPT, format_code_content
from .schema import SchemaHandle, to_description
from .schema import output_type as schema_output_type


@dataclass
class ExtractionRequest:
    """Everything the model-call capability needs for one invocation."""

    system_prompt: str
    user_content: Sequence[UserContent]
    model_settings: ModelSettings = field(default_factory=dict)
    output_type: Any = None
    mode: ResponseMode | None = None

    def agent_output_type(self) -> Any:
        """Apply the response-shape hint to the output type."""
        if self.output_type is None:
            return str
        if self.mode == "json":
            return NativeOutput(self.output_type)
        if self.mode == "tool":
            return ToolOutput(self.output_type)
        return self.output_type


def user_content(payload: PagePayload) -> list[UserContent]:
    if payload.is_image:
        return [BinaryContent(data=payload.content, media_type="image/png")]
    return [payload.content]


def model_settings(options: ScraperLLMOptions | ScraperGenerateOptions) -> ModelSettings:
    """Pass generation parameters through, leaving unset ones out entirely."""
    settings = ModelSettings()
    if options.temperature is not None:
        settings["temperature"] = options.temperature
    if options.max_output_tokens is not None:
        settings["max_tokens"] = options.max_output_tokens
    if options.top_p is not None:
        settings["top_p"] = options.top_p
    return settings


def build_request(
    payload: PagePayload,
    schema: SchemaHandle,
    options: ScraperLLMOptions,
) -> ExtractionRequest:
    """Build a structured-output request for ``run`` and ``stream``."""
    return ExtractionRequest(
        system_prompt=options.prompt or DEFAULT_PROMPT,
        user_content=user_content(payload),
        model_settings=model_settings(options),
        output_type=schema_output_type(schema),
        mode=options.mode,
    )


def build_code_request(
    payload: PagePayload,
    schema: SchemaHandle,
    options: ScraperGenerateOptions,
) -> ExtractionRequest:
    """Build a free-text request asking for an extraction function."""
    content = format_code_content(payload.url, to_description(schema), payload.content)
    return ExtractionRequest(
        system_prompt=options.prompt or DEFAULT_CODE_PROMPT,
        user_content=[content],
        model_settings=model_settings(options),
    )
