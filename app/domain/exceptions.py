from __future__ import annotations


class FacadeError(Exception):
    """Base for every failure a prompt function reports to the browser.

    `message` is user-facing and ends up as the `message` field of the JSON body.
    """

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MethodNotAllowed(FacadeError):
    status_code = 405
    code = "method_not_allowed"


class InvalidInput(FacadeError):
    """Request body is not JSON or the required field is missing/empty."""

    status_code = 400
    code = "invalid_input"


class Misconfigured(FacadeError):
    """The upstream credential is not configured."""

    code = "misconfigured"


class UpstreamError(FacadeError):
    """The upstream API answered with a non-success status or could not be reached.

    `upstream_message` is the `message` field of the upstream error body, when there was one.
    """

    code = "upstream_error"

    def __init__(
        self,
        message: str,
        *,
        upstream_status: int | None = None,
        upstream_message: str | None = None,
    ):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.upstream_message = upstream_message


class InvalidUpstreamResponse(FacadeError):
    """The upstream answered 2xx but its payload is unusable."""

    code = "invalid_upstream_response"
