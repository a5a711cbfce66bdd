"""Test doubles for the prompt functions."""

from __future__ import annotations

from app.core.llm.schemas import ChatCompletionRequest, ChatCompletionResponse


def completion(content: str | None) -> ChatCompletionResponse:
    return ChatCompletionResponse.model_validate(
        {
            "id": "chatcmpl-test",
            "model": "stub",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content},
                    "finish_reason": "stop",
                }
            ],
        }
    )


class StubChatClient:
    """Deterministic ChatClient that records every request it receives."""

    def __init__(self, *, content: str | None = "stub output", error: Exception | None = None):
        self.content = content
        self.error = error
        self.calls: list[ChatCompletionRequest] = []

    async def send(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return completion(self.content)
