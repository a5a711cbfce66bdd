from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.core.llm.deps import get_chat_client, get_llm_config
from app.core.llm.openai_client import ChatClient, LLMConfig
from app.core.settings import get_settings
from app.prompts.facade import PromptFacade
from app.prompts.schemas import (
    FeedbackOut,
    GeneratePromptIn,
    GeneratePromptOut,
    MessageOut,
    PromptAnalysis,
    PromptTextIn,
)
from app.prompts.variants import VARIANTS, PromptVariant

router = APIRouter(tags=["prompt-functions"])

# Every method is routed to the façade so that it, not the framework, answers 405.
_ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

_DOCS: dict[str, dict[str, Any]] = {
    "generate-prompt": {
        "summary": "Compose a final prompt from named components",
        "input": GeneratePromptIn,
        "output": GeneratePromptOut,
    },
    "openai-proxy": {
        "summary": "Markdown feedback on a prompt",
        "input": PromptTextIn,
        "output": FeedbackOut,
    },
    "analyze-prompt": {
        "summary": "Structured (JSON-mode) prompt analysis",
        "input": PromptTextIn,
        "output": PromptAnalysis,
    },
}


def _make_endpoint(variant: PromptVariant):
    async def endpoint(
        request: Request,
        config: LLMConfig = Depends(get_llm_config),
        client: ChatClient = Depends(get_chat_client),
    ) -> JSONResponse:
        facade = PromptFacade(
            variant=variant,
            config=config,
            client=client,
            max_input_chars=get_settings().max_input_chars,
        )
        result = await facade.handle(
            method=request.method,
            body=await request.body(),
            request_id=getattr(request.state, "request_id", None),
        )
        return JSONResponse(status_code=result.status_code, content=result.body)

    endpoint.__name__ = variant.name.replace("-", "_")
    return endpoint


for _variant in VARIANTS:
    _doc = _DOCS[_variant.name]
    router.add_api_route(
        f"/{_variant.name}",
        _make_endpoint(_variant),
        methods=_ALL_METHODS,
        name=_variant.name,
        summary=_doc["summary"],
        description=(
            f"Only `POST` is accepted, with a JSON body carrying `{_variant.input_field}`. "
            f"Upstream model: `{_variant.model}` "
            f"(JSON mode: {'on' if _variant.json_mode else 'off'})."
        ),
        openapi_extra={
            "requestBody": {
                "required": True,
                "content": {
                    "application/json": {"schema": _doc["input"].model_json_schema()}
                },
            }
        },
        responses={
            200: {"model": _doc["output"]},
            400: {"model": MessageOut, "description": "Missing or empty input"},
            405: {"model": MessageOut, "description": "Method other than POST"},
            500: {"model": MessageOut, "description": "Misconfiguration or upstream failure"},
        },
        response_class=JSONResponse,
    )
