from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import ValidationError

from app.domain.exceptions import InvalidInput, InvalidUpstreamResponse
from app.prompts.prompt import (
    ANALYZE_PROMPT_SYSTEM,
    FEEDBACK_SYSTEM,
    GENERATE_PROMPT_SYSTEM,
    build_components_user_content,
    build_prompt_text_user_content,
)
from app.prompts.schemas import GeneratePromptIn, PromptAnalysis, PromptTextIn

MISSING_COMPONENTS_MESSAGE = "프롬프트 구성 요소가 없습니다."
MISSING_PROMPT_TEXT_MESSAGE = "분석할 텍스트가 없습니다."
INPUT_TOO_LONG_MESSAGE = "입력한 내용이 너무 깁니다."
INVALID_ANALYSIS_MESSAGE = "AI 응답 형식이 올바르지 않습니다."
MISSING_ANALYSIS_DATA_MESSAGE = "AI 응답에 필요한 데이터가 누락되었습니다."


@dataclass(frozen=True)
class PromptInput:
    """User input extracted from the request body, ready for the upstream call."""

    user_content: str
    size: int


@dataclass(frozen=True)
class PromptVariant:
    """One prompt function: the same façade with its own prompt, model and output contract."""

    name: str
    input_field: str
    system_prompt: str
    model: str
    temperature: float
    max_tokens: int
    read_input: Callable[[dict[str, Any]], PromptInput]
    normalize: Callable[[str], dict[str, Any]]
    upstream_error_message: str
    json_mode: bool = False

    @property
    def response_format(self) -> dict[str, Any] | None:
        return {"type": "json_object"} if self.json_mode else None


def read_components(body: dict[str, Any]) -> PromptInput:
    try:
        parsed = GeneratePromptIn.model_validate(body)
    except ValidationError as exc:
        raise InvalidInput(MISSING_COMPONENTS_MESSAGE) from exc
    if not parsed.components:
        raise InvalidInput(MISSING_COMPONENTS_MESSAGE)

    return PromptInput(
        user_content=build_components_user_content(parsed.components),
        size=sum(len(k) + len(v) for k, v in parsed.components.items()),
    )


def read_prompt_text(body: dict[str, Any]) -> PromptInput:
    try:
        parsed = PromptTextIn.model_validate(body)
    except ValidationError as exc:
        raise InvalidInput(MISSING_PROMPT_TEXT_MESSAGE) from exc
    if not parsed.promptText.strip():
        raise InvalidInput(MISSING_PROMPT_TEXT_MESSAGE)

    return PromptInput(
        user_content=build_prompt_text_user_content(parsed.promptText),
        size=len(parsed.promptText),
    )


def relay_as(field: str) -> Callable[[str], dict[str, Any]]:
    """Relay the completion text verbatim under `field`."""

    def normalize(content: str) -> dict[str, Any]:
        return {field: content}

    return normalize


def parse_analysis(content: str) -> dict[str, Any]:
    """Parse JSON-mode output and check the summary/feedback/components contract."""

    try:
        parsed = json.loads(content)
    except ValueError as exc:
        raise InvalidUpstreamResponse(INVALID_ANALYSIS_MESSAGE) from exc
    if not isinstance(parsed, dict):
        raise InvalidUpstreamResponse(INVALID_ANALYSIS_MESSAGE)

    try:
        PromptAnalysis.model_validate(parsed)
    except ValidationError as exc:
        raise InvalidUpstreamResponse(MISSING_ANALYSIS_DATA_MESSAGE) from exc

    return parsed


GENERATE_PROMPT = PromptVariant(
    name="generate-prompt",
    input_field="components",
    system_prompt=GENERATE_PROMPT_SYSTEM,
    model="gpt-4",
    temperature=0.7,
    max_tokens=1000,
    read_input=read_components,
    normalize=relay_as("finalPrompt"),
    upstream_error_message="OpenAI API에서 프롬프트 생성 중 오류가 발생했습니다.",
)

PROMPT_FEEDBACK = PromptVariant(
    name="openai-proxy",
    input_field="promptText",
    system_prompt=FEEDBACK_SYSTEM,
    model="gpt-3.5-turbo",
    temperature=0.7,
    max_tokens=500,
    read_input=read_prompt_text,
    normalize=relay_as("feedback"),
    upstream_error_message="OpenAI API에서 오류가 발생했습니다.",
)

ANALYZE_PROMPT = PromptVariant(
    name="analyze-prompt",
    input_field="promptText",
    system_prompt=ANALYZE_PROMPT_SYSTEM,
    model="gpt-4o-mini",
    temperature=0.3,
    max_tokens=1000,
    read_input=read_prompt_text,
    normalize=parse_analysis,
    upstream_error_message="OpenAI API에서 프롬프트 분석 중 오류가 발생했습니다.",
    json_mode=True,
)

VARIANTS: tuple[PromptVariant, ...] = (GENERATE_PROMPT, PROMPT_FEEDBACK, ANALYZE_PROMPT)
