from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.exception_handlers import register_exception_handlers
from app.api.schemas import HealthOut
from app.core.llm.deps import build_llm_config
from app.core.logging import setup_logging
from app.core.metrics import PrometheusMetricsMiddleware, metrics_router
from app.core.middleware.http_logging import HttpLoggingMiddleware
from app.core.settings import get_settings
from app.prompts.router import router as prompts_router

setup_logging()


def create_app() -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # The credential is read once here and stays read-only for the process lifetime.
        app.state.llm_config = build_llm_config(get_settings())
        yield

    app = FastAPI(
        title="Prompt Studio Functions",
        description=(
            "Server-side functions behind the Prompt Studio web client.\n\n"
            "Each function validates the browser request, makes exactly one call to the "
            "OpenAI chat-completion API with a fixed system instruction, and relays the "
            "result. Failures always come back as `{\"message\": ...}`.\n\n"
            "- The OpenAI key stays on the server.\n"
            "- Prompt text and model output are never logged."
        ),
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url=None,
        openapi_tags=[
            {
                "name": "health",
                "description": "Basic uptime check for load balancers and monitoring.",
            },
            {
                "name": "prompt-functions",
                "description": "Prompt composition, feedback and analysis backed by OpenAI.",
            },
            {
                "name": "metrics",
                "description": "Prometheus-compatible metrics endpoint.",
            },
        ],
    )

    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(HttpLoggingMiddleware)
    if settings.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allow_origins,
            allow_methods=["POST"],
            allow_headers=["Content-Type", "X-Request-ID"],
            expose_headers=["X-Request-ID"],
        )

    register_exception_handlers(app)

    @app.get(
        "/health",
        response_model=HealthOut,
        tags=["health"],
        summary="Health check",
        description=(
            "Lightweight endpoint to verify the process is running.\n\n"
            "It does not call OpenAI and does not check that the API key is configured."
        ),
    )
    async def health() -> HealthOut:
        return HealthOut(status="ok")

    app.include_router(metrics_router)
    app.include_router(prompts_router, prefix=settings.functions_prefix.rstrip("/"))
    return app


app = create_app()
