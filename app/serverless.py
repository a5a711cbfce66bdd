"""Entry point for function hosts that speak the AWS Lambda event format.

Deploy with `app.serverless.handler` as the handler name.
"""

from __future__ import annotations

from mangum import Mangum

from app.main import app

# lifespan="auto" runs the startup hook on cold start so the LLM config is resolved once.
handler = Mangum(app, lifespan="auto")
