"""ASGI middleware that puts a Fault in front of an application."""

from __future__ import annotations

import logging

from .errors import RequestAborted
from .fault import Fault
from .injectors.base import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)


class FaultMiddleware:
    """Routes every request through ``fault.handler(app)``.

    A RequestAborted raised by a RejectInjector is logged as an injected fault
    and re-raised, with nothing sent on the response channel. Install the
    middleware as the outermost layer, e.g. ``FaultMiddleware(FastAPI(...),
    fault=fault)``. Registered through ``app.add_middleware`` it sits inside
    Starlette's ServerErrorMiddleware, which answers the exception with an
    ordinary 500 response.

    What the client sees then depends on the ASGI server. uvicorn logs the
    exception and, as no response was started, writes a bare
    ``500 Internal Server Error`` with ``connection: close`` before closing the
    connection. That reply carries no ``X-Content-Type-Options`` header, which
    is how it differs from an ErrorInjector(500).
    """

    def __init__(self, app: ASGIApp, fault: Fault):
        self.app = app
        self.fault = fault
        self._handler = fault.handler(app)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await self._handler(scope, receive, send)
        except RequestAborted:
            logger.debug("request to %s rejected by fault injection", scope.get("path"))
            raise
