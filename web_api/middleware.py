"""
Request body size cap.

Counts the bytes actually received, so chunked requests without a
Content-Length header are capped too. A declared Content-Length over the
limit is rejected before any of the body is read.
"""

import logging

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from web_api.responses import error_response

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware:
    def __init__(self, app: ASGIApp, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        raw_length = Headers(scope=scope).get("content-length")
        if raw_length is not None:
            try:
                length = int(raw_length)
            except ValueError:
                response = error_response(400, "Invalid Content-Length header")
                await response(scope, receive, send)
                return
            if length > self.max_body_bytes:
                await self._reject(scope, receive, send, length)
                return

        chunks = []
        received = 0
        while True:
            message = await receive()
            if message["type"] != "http.request":
                # Client went away before sending the whole body
                return
            chunk = message.get("body", b"")
            received += len(chunk)
            if received > self.max_body_bytes:
                await self._reject(scope, receive, send, received)
                return
            chunks.append(chunk)
            if not message.get("more_body", False):
                break

        body = b"".join(chunks)
        body_sent = False

        async def replay() -> Message:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send, size: int) -> None:
        logger.warning(
            f"Rejected {scope['method']} {scope['path']}: "
            f"body of at least {size} bytes exceeds {self.max_body_bytes}"
        )
        response = error_response(413, "Request body too large")
        await response(scope, receive, send)
