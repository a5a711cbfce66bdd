"""LLM integration layer.

This package is intentionally small:
- One chat-completion call per request, no retries.
- No prompt/output logging.
- Configured once from environment variables at startup.
"""
