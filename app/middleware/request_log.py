# app/middleware/request_log.py
from __future__ import annotations

"""
Access log middleware: one line per request, `METHOD path -> status (ms)`.

Runs inside RequestIDMiddleware so the line carries the request id.
"""

import time

from loguru import logger
from starlette.types import ASGIApp, Message, Receive, Scope, Send


class RequestLogMiddleware:
    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            return await self.app(scope, receive, send)

        started = time.perf_counter()
        status_holder = {"code": 500}

        async def _send_wrapper(message: Message) -> None:
            if message.get("type") == "http.response.start":
                status_holder["code"] = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, _send_wrapper)
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                "{} {} -> {} ({:.1f} ms)",
                scope.get("method", "-"),
                scope.get("path", "-"),
                status_holder["code"],
                elapsed_ms,
            )


__all__ = ["RequestLogMiddleware"]
