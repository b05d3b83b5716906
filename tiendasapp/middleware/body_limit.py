"""
Tiendas Backend — Request Body Size Middleware
================================================

What:  Rejects requests whose body is larger than MAX_REQUEST_SIZE.
Why:   Multipart parsing and JSON decoding both buffer the body; an
       oversized upload must be cut off before it is fully buffered.
How:   Pure ASGI middleware with two checks:
         1. A declared Content-Length over the limit is answered with 413
            without calling the app.
         2. Otherwise `receive` is wrapped and counts the bytes actually
            delivered. Chunked uploads carry no Content-Length, so this is
            what bounds them. Once the count passes the limit the wrapped
            receive raises PayloadTooLargeError, whatever response the app
            produced for it is dropped, and a 413 is sent instead.

Error body: {"error": "La solicitud excede el tamaño máximo permitido (10MB)"}
"""

import logging
from typing import Optional

from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from tiendasapp.config import settings
from tiendasapp.exceptions import PayloadTooLargeError

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware:
    """Answers 413 {"error": ...} for bodies over the configured limit."""

    def __init__(self, app: ASGIApp, max_body_size: Optional[int] = None):
        self.app = app
        self.max_body_size = max_body_size or settings.max_request_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers") or [])
        content_length = headers.get(b"content-length")
        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                response = JSONResponse(
                    status_code=400,
                    content={"error": "Cabecera Content-Length inválida"},
                )
                await response(scope, receive, send)
                return

            if declared > self.max_body_size:
                await self._reject(scope, receive, send, declared)
                return

        received = 0
        exceeded = False
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received, exceeded
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_size:
                    exceeded = True
                    raise PayloadTooLargeError(limit=self.max_body_size)
            return message

        async def guarded_send(message: Message) -> None:
            nonlocal response_started
            # Whatever the app answers to a truncated body is replaced by the 413
            if exceeded and not response_started:
                return
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, guarded_send)
        except Exception:
            if not exceeded:
                raise

        if exceeded and not response_started:
            await self._reject(scope, receive, send, received)

    async def _reject(self, scope: Scope, receive: Receive, send: Send, size: int) -> None:
        exc = PayloadTooLargeError(limit=self.max_body_size, context={"received": size})
        logger.warning(
            "Rejected %s %s: body of %d+ bytes exceeds %d",
            scope.get("method"),
            scope.get("path"),
            size,
            self.max_body_size,
        )
        response = JSONResponse(status_code=413, content={"error": exc.message})
        await response(scope, receive, send)
