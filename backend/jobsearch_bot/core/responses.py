"""Response envelope models for the webhook API.

Errors use the {"error": {...}} envelope.
"""

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Error detail for response body.

    Attributes:
        code: Machine-readable error code (e.g., "UPSTREAM_UNAVAILABLE").
        message: Human-readable error message.
        details: Optional list of field-level errors (for validation).
    """

    code: str
    message: str
    details: list[dict] | None = None


class ErrorResponse(BaseModel):
    """Standard error response envelope.

    Usage in exception handlers:
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=ErrorDetail(code=exc.code, message=exc.message)
            ).model_dump(),
        )
    """

    error: ErrorDetail


class WebhookAck(BaseModel):
    """Body returned to Telegram for every accepted update."""

    ok: bool = True
