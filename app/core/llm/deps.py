from __future__ import annotations

from fastapi import Request

from app.core.llm.openai_client import ChatClient, LLMConfig, OpenAIChatClient
from app.core.settings import Settings, get_settings


def build_llm_config(settings: Settings) -> LLMConfig:
    return LLMConfig(
        api_key=settings.openai_api_key or None,
        base_url=settings.openai_base_url,
        model_override=settings.openai_model or None,
        timeout_seconds=settings.openai_timeout_seconds,
    )


def get_llm_config(request: Request) -> LLMConfig:
    """
    Dependency provider for the startup-resolved LLMConfig.

    The lifespan hook stores it on `app.state`; fall back to settings when the app
    runs without lifespan (e.g. some serverless adapters).
    """

    config = getattr(request.app.state, "llm_config", None)
    if config is None:
        config = build_llm_config(get_settings())
        request.app.state.llm_config = config
    return config


def get_chat_client(request: Request) -> ChatClient:
    return OpenAIChatClient(config=get_llm_config(request))
