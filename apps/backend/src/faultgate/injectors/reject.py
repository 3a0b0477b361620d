"""Injector that drops the request without sending any response."""

from __future__ import annotations

from ..errors import RequestAborted
from ..reporter import InjectorState, NoopReporter, Reporter, safe_report
from .base import ASGIApp, Injector, Receive, Scope, Send


class RejectInjector(Injector):
    """Aborts the request by raising RequestAborted, simulating a dropped connection.

    Nothing is ever sent on the response channel. Both lifecycle events are
    reported before the abort propagates.
    """

    def __init__(self, *, reporter: Reporter | None = None):
        self.reporter = reporter or NoopReporter()

    def handler(self, next_app: ASGIApp) -> ASGIApp:
        async def app(scope: Scope, receive: Receive, send: Send) -> None:
            safe_report(self.reporter, self.name, InjectorState.STARTED)
            safe_report(self.reporter, self.name, InjectorState.FINISHED)
            raise RequestAborted()

        return app

    def __repr__(self) -> str:
        return "RejectInjector()"
