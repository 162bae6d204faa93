"""
errors.py — Exception taxonomy and the handlers that turn it into JSON.

Every error leaves the API as ``{"error": "<message>"}``. Only the
``public_message`` of an exception is ever sent to the client; the
detail (upstream bodies, missing env vars) stays in the server log.

  ValidationError     400  bad / missing / oversized input
  RateLimitExceeded   429  raised by slowapi, tier-specific message
  ConfigurationError  500  missing credential or instructions file
  UpstreamError       500  completion API failed or replied with garbage
  PayloadTooLarge     413  request body over MAX_BODY_BYTES

Wire into app (in main.py):
    from craft_gateway.core.errors import register_exception_handlers
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, detail: str = "", public_message: str | None = None) -> None:
        super().__init__(detail or public_message or self.public_message)
        self.detail = detail
        if public_message is not None:
            self.public_message = public_message


class ValidationError(GatewayError):
    """Client input was missing, of the wrong type, or too long."""

    status_code = 400

    def __init__(self, message: str) -> None:
        # Validation messages are safe to echo back verbatim.
        super().__init__(message, public_message=message)


class ConfigurationError(GatewayError):
    status_code = 500
    public_message = "Server configuration error"


class UpstreamError(GatewayError):
    status_code = 500
    public_message = "Failed to create combination"


class PayloadTooLarge(HTTPException):
    """
    Raised from inside the body stream (see core/body_limit.py).

    An HTTPException, not a GatewayError: FastAPI turns anything else raised
    while reading the body into a generic 400.
    """

    message = "Request body too large"

    def __init__(self) -> None:
        super().__init__(status_code=413, detail=self.message)


# ── Handlers ──────────────────────────────────────────────────────────────────

async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s on %s %s: %s",
            type(exc).__name__, request.method, request.url.path, exc.detail or exc,
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Like slowapi's _rate_limit_exceeded_handler, but returns the tier's
    own message (set via error_message=) without the "Rate limit exceeded:"
    prefix.
    """
    logger.info("Rate limit hit for %s on %s", request.client.host if request.client else "?", request.url.path)
    return JSONResponse(status_code=429, content={"error": exc.detail})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON or a non-object body: 400 instead of FastAPI's 422."""
    logger.debug("Rejected body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


async def payload_too_large_handler(request: Request, exc: PayloadTooLarge) -> JSONResponse:
    return JSONResponse(status_code=413, content={"error": exc.detail})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(PayloadTooLarge, payload_too_large_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
