"""Injector that delays a request and then lets it continue."""

from __future__ import annotations

import asyncio
import inspect
import math
from collections.abc import Awaitable, Callable
from datetime import timedelta

from .. import trail
from ..errors import FaultConfigError
from ..reporter import InjectorState, NoopReporter, Reporter, safe_report
from .base import ASGIApp, Injector, Receive, Scope, Send

WaitFunc = Callable[[float], Awaitable[None] | None]


def _check_duration(duration: float | timedelta) -> float:
    if isinstance(duration, timedelta):
        duration = duration.total_seconds()
    if isinstance(duration, bool) or not isinstance(duration, (int, float)):
        raise FaultConfigError(f"duration must be a number of seconds, got {duration!r}", "invalid_duration")
    if math.isnan(duration) or duration < 0:
        raise FaultConfigError(f"duration cannot be negative or NaN, got {duration}", "invalid_duration")
    return float(duration)


class SlowInjector(Injector):
    """Waits ``duration`` seconds and then continues the request.

    ``wait_func`` receives the duration in seconds and may be a plain function
    or a coroutine function. It defaults to ``asyncio.sleep``, which suspends
    only the current request.
    """

    def __init__(
        self,
        duration: float | timedelta,
        *,
        wait_func: WaitFunc | None = None,
        reporter: Reporter | None = None,
    ):
        self.duration = _check_duration(duration)
        self.wait_func = wait_func or asyncio.sleep
        self.reporter = reporter or NoopReporter()

    def handler(self, next_app: ASGIApp) -> ASGIApp:
        async def app(scope: Scope, receive: Receive, send: Send) -> None:
            safe_report(self.reporter, self.name, InjectorState.STARTED)
            result = self.wait_func(self.duration)
            if inspect.isawaitable(result):
                await result
            safe_report(self.reporter, self.name, InjectorState.FINISHED)
            await next_app(trail.with_tag(scope, trail.SLOW_INJECTOR), receive, send)

        return app

    def __repr__(self) -> str:
        return f"SlowInjector(duration={self.duration!r})"
