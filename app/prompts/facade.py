from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from app.core.llm.openai_client import ChatClient, LLMConfig
from app.core.llm.schemas import ChatCompletionRequest, ChatMessage
from app.core.metrics import record_facade_outcome
from app.domain.exceptions import (
    FacadeError,
    InvalidInput,
    InvalidUpstreamResponse,
    MethodNotAllowed,
    Misconfigured,
    UpstreamError,
)
from app.prompts.variants import INPUT_TOO_LONG_MESSAGE, PromptVariant

logger = logging.getLogger("app.prompts")

METHOD_NOT_ALLOWED_MESSAGE = "허용되지 않은 메소드입니다."
INVALID_JSON_MESSAGE = "요청 본문이 올바른 JSON 형식이 아닙니다."
MISCONFIGURED_MESSAGE = "OpenAI API 키가 설정되지 않았습니다."
EMPTY_COMPLETION_MESSAGE = "OpenAI API의 응답 형식이 올바르지 않습니다."
INTERNAL_ERROR_MESSAGE = "요청을 처리하는 중 알 수 없는 오류가 발생했습니다."


@dataclass(frozen=True)
class FacadeResponse:
    status_code: int
    body: dict[str, Any]


class PromptFacade:
    """
    Turns one browser request into at most one upstream chat completion.

    `handle` never raises: every failure becomes a `{"message": ...}` body with the
    matching status code. Nothing is retried and nothing is kept between calls.
    """

    def __init__(
        self,
        *,
        variant: PromptVariant,
        config: LLMConfig,
        client: ChatClient,
        max_input_chars: int,
    ):
        self._variant = variant
        self._config = config
        self._client = client
        self._max_input_chars = max_input_chars

    async def handle(
        self, *, method: str, body: bytes | str | None, request_id: str | None = None
    ) -> FacadeResponse:
        log_extra = {"request_id": request_id, "variant": self._variant.name}
        try:
            payload = await self._process(method=method, body=body)
        except FacadeError as exc:
            self._log_failure(exc, log_extra)
            record_facade_outcome(variant=self._variant.name, outcome=exc.code)
            return FacadeResponse(status_code=exc.status_code, body={"message": exc.message})
        except Exception:  # noqa: BLE001 - no fault may reach the transport layer
            logger.exception(
                "Prompt function crashed",
                extra={**log_extra, "status_code": 500, "error": "internal_error"},
            )
            record_facade_outcome(variant=self._variant.name, outcome="internal_error")
            return FacadeResponse(status_code=500, body={"message": INTERNAL_ERROR_MESSAGE})

        record_facade_outcome(variant=self._variant.name, outcome="ok")
        return FacadeResponse(status_code=200, body=payload)

    async def _process(self, *, method: str, body: bytes | str | None) -> dict[str, Any]:
        if method.upper() != "POST":
            raise MethodNotAllowed(METHOD_NOT_ALLOWED_MESSAGE)

        prompt_input = self._variant.read_input(_parse_body(body))
        if prompt_input.size > self._max_input_chars:
            raise InvalidInput(INPUT_TOO_LONG_MESSAGE)

        if not self._config.is_configured:
            raise Misconfigured(MISCONFIGURED_MESSAGE)

        request = ChatCompletionRequest(
            model=self._config.model_override or self._variant.model,
            messages=[
                ChatMessage(role="system", content=self._variant.system_prompt),
                ChatMessage(role="user", content=prompt_input.user_content),
            ],
            temperature=self._variant.temperature,
            max_tokens=self._variant.max_tokens,
            response_format=self._variant.response_format,
        )

        try:
            completion = await self._client.send(request)
        except UpstreamError as exc:
            # Only the upstream message string is forwarded, never its payload.
            raise UpstreamError(
                exc.upstream_message or self._variant.upstream_error_message,
                upstream_status=exc.upstream_status,
                upstream_message=exc.upstream_message,
            ) from exc

        content = completion.first_content()
        if content is None:
            raise InvalidUpstreamResponse(EMPTY_COMPLETION_MESSAGE)

        return self._variant.normalize(content)

    def _log_failure(self, exc: FacadeError, log_extra: dict[str, Any]) -> None:
        extra = {
            **log_extra,
            "status_code": exc.status_code,
            "error": exc.code,
            "detail": exc.message,
        }
        if isinstance(exc, UpstreamError):
            extra["upstream_status"] = exc.upstream_status

        if exc.status_code >= 500:
            logger.error("Prompt function failed", extra=extra, exc_info=exc.__cause__ is not None)
        else:
            logger.info("Prompt function rejected request", extra=extra)


def _parse_body(body: bytes | str | None) -> dict[str, Any]:
    if not body:
        raise InvalidInput(INVALID_JSON_MESSAGE)
    try:
        parsed = json.loads(body)
    except ValueError as exc:
        raise InvalidInput(INVALID_JSON_MESSAGE) from exc
    if not isinstance(parsed, dict):
        raise InvalidInput(INVALID_JSON_MESSAGE)
    return parsed
