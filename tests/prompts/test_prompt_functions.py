from __future__ import annotations

import json
import logging

import pytest
from fastapi.testclient import TestClient

from app.core.llm.deps import get_chat_client, get_llm_config
from app.core.llm.openai_client import LLMConfig
from app.domain.exceptions import UpstreamError
from app.main import create_app
from app.prompts.facade import (
    INVALID_JSON_MESSAGE,
    METHOD_NOT_ALLOWED_MESSAGE,
    MISCONFIGURED_MESSAGE,
)
from app.prompts.variants import (
    INVALID_ANALYSIS_MESSAGE,
    MISSING_ANALYSIS_DATA_MESSAGE,
    MISSING_COMPONENTS_MESSAGE,
    MISSING_PROMPT_TEXT_MESSAGE,
)
from tests.prompts._helpers import StubChatClient

PREFIX = "/.netlify/functions"
ALL_FUNCTIONS = ["generate-prompt", "openai-proxy", "analyze-prompt"]


def _make_client(stub: StubChatClient, *, config: LLMConfig | None = None) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_chat_client] = lambda: stub
    if config is not None:
        app.dependency_overrides[get_llm_config] = lambda: config
    return TestClient(app)


@pytest.mark.parametrize("function", ALL_FUNCTIONS)
@pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
def test_non_post_methods_return_405(function: str, method: str) -> None:
    stub = StubChatClient()
    with _make_client(stub) as client:
        res = client.request(method, f"{PREFIX}/{function}")

    assert res.status_code == 405
    assert res.json() == {"message": METHOD_NOT_ALLOWED_MESSAGE}
    assert stub.calls == []


@pytest.mark.parametrize(
    ("function", "body", "message"),
    [
        ("generate-prompt", {}, MISSING_COMPONENTS_MESSAGE),
        ("generate-prompt", {"components": {}}, MISSING_COMPONENTS_MESSAGE),
        ("generate-prompt", {"components": None}, MISSING_COMPONENTS_MESSAGE),
        ("generate-prompt", {"components": "역할: 가이드"}, MISSING_COMPONENTS_MESSAGE),
        ("openai-proxy", {}, MISSING_PROMPT_TEXT_MESSAGE),
        ("openai-proxy", {"promptText": ""}, MISSING_PROMPT_TEXT_MESSAGE),
        ("openai-proxy", {"promptText": "   \n"}, MISSING_PROMPT_TEXT_MESSAGE),
        ("analyze-prompt", {"promptText": None}, MISSING_PROMPT_TEXT_MESSAGE),
        ("analyze-prompt", {"text": "wrong field"}, MISSING_PROMPT_TEXT_MESSAGE),
    ],
)
def test_missing_or_empty_input_returns_400(function: str, body: dict, message: str) -> None:
    stub = StubChatClient()
    with _make_client(stub) as client:
        res = client.post(f"{PREFIX}/{function}", json=body)

    assert res.status_code == 400
    assert res.json() == {"message": message}
    assert stub.calls == []


@pytest.mark.parametrize("raw", [b"", b"not json", b"[1, 2]", b'"promptText"'])
def test_non_object_body_returns_400(raw: bytes) -> None:
    stub = StubChatClient()
    with _make_client(stub) as client:
        res = client.post(
            f"{PREFIX}/openai-proxy", content=raw, headers={"Content-Type": "application/json"}
        )

    assert res.status_code == 400
    assert res.json() == {"message": INVALID_JSON_MESSAGE}
    assert stub.calls == []


@pytest.mark.parametrize("function", ALL_FUNCTIONS)
def test_missing_credential_returns_500_without_upstream_call(function: str) -> None:
    stub = StubChatClient()
    config = LLMConfig(api_key=None, base_url="https://api.openai.test/v1")
    body = {"components": {"역할": "가이드"}} if function == "generate-prompt" else {"promptText": "hi"}

    with _make_client(stub, config=config) as client:
        res = client.post(f"{PREFIX}/{function}", json=body)

    assert res.status_code == 500
    assert res.json() == {"message": MISCONFIGURED_MESSAGE}
    assert len(stub.calls) == 0


def test_missing_credential_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    from app.core.settings import get_settings

    monkeypatch.setenv("OPENAI_API_KEY", "")
    get_settings.cache_clear()

    stub = StubChatClient()
    with _make_client(stub) as client:
        res = client.post(f"{PREFIX}/openai-proxy", json={"promptText": "hi"})

    assert res.status_code == 500
    assert res.json() == {"message": MISCONFIGURED_MESSAGE}
    assert stub.calls == []


def test_generate_prompt_composes_upstream_request() -> None:
    stub = StubChatClient(content="# 역할\n여행 가이드")
    components = {"역할": "여행 가이드", "작업": "3일 일정 추천"}

    with _make_client(stub) as client:
        res = client.post(f"{PREFIX}/generate-prompt", json={"components": components})

    assert res.status_code == 200, res.text
    assert res.json() == {"finalPrompt": "# 역할\n여행 가이드"}

    assert len(stub.calls) == 1
    sent = stub.calls[0]
    assert sent.model == "gpt-4"
    assert sent.temperature == 0.7
    assert sent.max_tokens == 1000
    assert sent.response_format is None
    assert [m.role for m in sent.messages] == ["system", "user"]
    assert json.dumps(components, ensure_ascii=False, indent=2) in sent.messages[1].content


def test_openai_proxy_relays_feedback_verbatim() -> None:
    feedback = "## 요약\n좋은 프롬프트입니다.\n\n- 잘한 점: 명확함"
    stub = StubChatClient(content=feedback)

    with _make_client(stub) as client:
        res = client.post(f"{PREFIX}/openai-proxy", json={"promptText": "너는 여행 가이드야."})

    assert res.status_code == 200, res.text
    assert res.json() == {"feedback": feedback}
    assert "X-Request-ID" in res.headers

    sent = stub.calls[0]
    assert sent.model == "gpt-3.5-turbo"
    assert sent.max_tokens == 500
    assert sent.messages[1].content == "너는 여행 가이드야."


def test_analyze_prompt_returns_parsed_json() -> None:
    stub = StubChatClient(content='{"summary":"s","feedback":"f","components":["역할"]}')

    with _make_client(stub) as client:
        res = client.post(f"{PREFIX}/analyze-prompt", json={"promptText": "너는 가이드야."})

    assert res.status_code == 200, res.text
    assert res.json() == {"summary": "s", "feedback": "f", "components": ["역할"]}
    assert stub.calls[0].response_format == {"type": "json_object"}


def test_analyze_prompt_rejects_non_json_output() -> None:
    stub = StubChatClient(content="not json")

    with _make_client(stub) as client:
        res = client.post(f"{PREFIX}/analyze-prompt", json={"promptText": "x"})

    assert res.status_code == 500
    assert res.json() == {"message": INVALID_ANALYSIS_MESSAGE}


@pytest.mark.parametrize(
    "content",
    [
        '{"summary":"s","feedback":"f"}',
        '{"summary":"","feedback":"f","components":[]}',
        '{"summary":"s","feedback":"f","components":"역할"}',
    ],
)
def test_analyze_prompt_rejects_incomplete_output(content: str) -> None:
    stub = StubChatClient(content=content)

    with _make_client(stub) as client:
        res = client.post(f"{PREFIX}/analyze-prompt", json={"promptText": "x"})

    assert res.status_code == 500
    assert res.json() == {"message": MISSING_ANALYSIS_DATA_MESSAGE}


def test_upstream_error_message_is_forwarded() -> None:
    stub = StubChatClient(
        error=UpstreamError(
            "Rate limit reached", upstream_status=429, upstream_message="Rate limit reached"
        )
    )

    with _make_client(stub) as client:
        res = client.post(f"{PREFIX}/openai-proxy", json={"promptText": "x"})

    assert res.status_code == 500
    assert res.json() == {"message": "Rate limit reached"}


def test_upstream_error_without_message_uses_fallback() -> None:
    stub = StubChatClient(error=UpstreamError("ignored", upstream_status=502))

    with _make_client(stub) as client:
        res = client.post(f"{PREFIX}/generate-prompt", json={"components": {"역할": "가이드"}})

    assert res.status_code == 500
    assert res.json() == {"message": "OpenAI API에서 프롬프트 생성 중 오류가 발생했습니다."}


def test_same_request_twice_yields_identical_independent_responses() -> None:
    stub = StubChatClient(content='{"summary":"s","feedback":"f","components":["역할","작업"]}')

    with _make_client(stub) as client:
        first = client.post(f"{PREFIX}/analyze-prompt", json={"promptText": "같은 입력"})
        second = client.post(f"{PREFIX}/analyze-prompt", json={"promptText": "같은 입력"})

    assert first.status_code == second.status_code == 200
    assert first.json() == second.json()
    assert len(stub.calls) == 2
    assert stub.calls[0] is not stub.calls[1]


def test_failure_is_logged_without_prompt_text(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="app.prompts")
    stub = StubChatClient(content="not json")

    with _make_client(stub) as client:
        res = client.post(
            f"{PREFIX}/analyze-prompt",
            json={"promptText": "secret prompt"},
            headers={"X-Request-ID": "req_analyze_1"},
        )

    assert res.status_code == 500
    records = [r for r in caplog.records if r.name == "app.prompts"]
    assert len(records) == 1

    record = records[0]
    assert record.levelno == logging.ERROR
    assert record.__dict__["request_id"] == "req_analyze_1"
    assert record.__dict__["variant"] == "analyze-prompt"
    assert record.__dict__["error"] == "invalid_upstream_response"
    assert record.__dict__["status_code"] == 500
    assert "secret prompt" not in record.getMessage()


def test_input_over_size_cap_returns_400(monkeypatch: pytest.MonkeyPatch) -> None:
    from app.core.settings import get_settings

    monkeypatch.setenv("MAX_INPUT_CHARS", "10")
    get_settings.cache_clear()
    stub = StubChatClient()

    with _make_client(stub) as client:
        res = client.post(f"{PREFIX}/openai-proxy", json={"promptText": "x" * 11})

    assert res.status_code == 400
    assert stub.calls == []


def test_model_override_applies_to_every_function() -> None:
    stub = StubChatClient()
    config = LLMConfig(
        api_key="sk-test", base_url="https://api.openai.test/v1", model_override="gpt-4o"
    )

    with _make_client(stub, config=config) as client:
        client.post(f"{PREFIX}/openai-proxy", json={"promptText": "x"})
        client.post(f"{PREFIX}/generate-prompt", json={"components": {"작업": "요약"}})

    assert [c.model for c in stub.calls] == ["gpt-4o", "gpt-4o"]
