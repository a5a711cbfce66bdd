from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from app.core.llm.schemas import ChatCompletionRequest, ChatCompletionResponse
from app.domain.exceptions import InvalidUpstreamResponse, UpstreamError

UPSTREAM_FAILED_MESSAGE = "OpenAI API에서 오류가 발생했습니다."
UPSTREAM_UNREACHABLE_MESSAGE = "OpenAI API에 연결하지 못했습니다."
UPSTREAM_INVALID_MESSAGE = "OpenAI API의 응답 형식이 올바르지 않습니다."


@dataclass(frozen=True)
class LLMConfig:
    """Upstream configuration, resolved once at startup and read-only afterwards."""

    api_key: str | None
    base_url: str
    model_override: str | None = None
    timeout_seconds: float | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


class ChatClient(Protocol):
    async def send(self, request: ChatCompletionRequest) -> ChatCompletionResponse: ...


def extract_error_message(resp: httpx.Response) -> str | None:
    """Return the upstream error `message`, if the body carries one.

    OpenAI nests it under `error`; some proxies put it at the top level.
    """

    try:
        body = resp.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None

    error = body.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str) and error["message"]:
        return error["message"]
    if isinstance(body.get("message"), str) and body["message"]:
        return body["message"]
    return None


class OpenAIChatClient:
    """
    Minimal client for the OpenAI chat-completion endpoint.

    - One request per call; no retries.
    - No logging here: callers decide what is safe to log.
    - Errors are raised as `UpstreamError` / `InvalidUpstreamResponse`.
    """

    def __init__(self, *, config: LLMConfig, transport: httpx.AsyncBaseTransport | None = None):
        self._config = config
        self._transport = transport

    async def send(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        url = f"{self._config.base_url.rstrip('/')}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
        }
        payload: dict[str, Any] = request.to_payload()

        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout_seconds, transport=self._transport
            ) as client:
                resp = await client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            raise UpstreamError(UPSTREAM_UNREACHABLE_MESSAGE) from exc

        if not resp.is_success:
            upstream_message = extract_error_message(resp)
            raise UpstreamError(
                upstream_message or UPSTREAM_FAILED_MESSAGE,
                upstream_status=resp.status_code,
                upstream_message=upstream_message,
            )

        try:
            return ChatCompletionResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise InvalidUpstreamResponse(UPSTREAM_INVALID_MESSAGE) from exc
