"""Injector that short-circuits the request with an HTTP error."""

from __future__ import annotations

from http import HTTPStatus

from starlette.responses import PlainTextResponse

from ..errors import FaultConfigError, InvalidStatusCodeError
from ..reporter import InjectorState, NoopReporter, Reporter, safe_report
from .base import ASGIApp, Injector, Receive, Scope, Send


def reason_phrase(code: int) -> str | None:
    """Return the standard reason phrase for ``code``, or None if it is unknown."""
    try:
        return HTTPStatus(code).phrase
    except (ValueError, TypeError):
        return None


class ErrorInjector(Injector):
    """Immediately responds with a status code and its message, never calling next."""

    def __init__(
        self,
        status_code: int,
        *,
        status_text: str | None = None,
        reporter: Reporter | None = None,
    ):
        default_text = _lookup_status_text(status_code)
        if status_text is not None and not isinstance(status_text, str):
            raise FaultConfigError(f"status text must be a string, got {status_text!r}", "invalid_status_text")
        self.status_code = status_code
        self.status_text = default_text if status_text is None else status_text
        self.reporter = reporter or NoopReporter()

    def handler(self, next_app: ASGIApp) -> ASGIApp:
        async def app(scope: Scope, receive: Receive, send: Send) -> None:
            # Pass the request on if this instance was left without a usable code
            if reason_phrase(self.status_code) is None:
                await next_app(scope, receive, send)
                return

            safe_report(self.reporter, self.name, InjectorState.STARTED)
            response = PlainTextResponse(
                self.status_text + "\n",
                status_code=self.status_code,
                headers={"X-Content-Type-Options": "nosniff"},
            )
            try:
                await response(scope, receive, send)
            finally:
                safe_report(self.reporter, self.name, InjectorState.FINISHED)

        return app

    def __repr__(self) -> str:
        return f"ErrorInjector(status_code={self.status_code!r}, status_text={self.status_text!r})"


def _lookup_status_text(code: int) -> str:
    if isinstance(code, bool) or not isinstance(code, int):
        raise InvalidStatusCodeError(code)
    text = reason_phrase(code)
    if text is None:
        raise InvalidStatusCodeError(code)
    return text
