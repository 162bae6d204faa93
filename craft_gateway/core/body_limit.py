"""
body_limit.py — Caps request body size.

Pure ASGI middleware rather than @app.middleware("http"): it has to see the
body as it streams in, so chunked uploads without a Content-Length are
capped too.

  - Declared Content-Length over the cap → 413 before the app runs.
  - Otherwise `receive` is wrapped and counts bytes; once the running total
    passes the cap it raises PayloadTooLarge. FastAPI re-raises
    HTTPExceptions from body parsing, so the registered handler answers 413.

Wire into app (in main.py):
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)
"""

import logging

from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from craft_gateway.core.errors import PayloadTooLarge

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware:
    def __init__(self, app: ASGIApp, max_bytes: int) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > self.max_bytes:
            logger.info("Rejected %s byte body on %s", declared, scope.get("path"))
            response = JSONResponse(status_code=413, content={"error": PayloadTooLarge.message})
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    logger.info("Streamed body on %s passed %d bytes", scope.get("path"), self.max_bytes)
                    raise PayloadTooLarge()
            return message

        await self.app(scope, limited_receive, send)
