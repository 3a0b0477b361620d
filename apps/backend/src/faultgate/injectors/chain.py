"""Injector that runs several injectors in order."""

from __future__ import annotations

from collections.abc import Sequence

from .. import trail
from .base import ASGIApp, Injector, Receive, Scope, Send, check_injectors, wrap


class ChainInjector(Injector):
    """Combines many Injectors into a single Injector that runs them in order.

    Each step receives the rest of the chain as its downstream app, so a step
    that never calls it (ErrorInjector, RejectInjector) halts everything after
    it. An empty chain passes the request straight to ``next_app``.
    """

    def __init__(self, injectors: Sequence[Injector] | None = None, *, allow_empty: bool = True):
        self.injectors = check_injectors(injectors, "ChainInjector", allow_empty)

    def handler(self, next_app: ASGIApp) -> ASGIApp:
        # Build in reverse so the first injector runs first
        chained = next_app
        for injector in reversed(self.injectors):
            chained = wrap(injector, chained)

        async def app(scope: Scope, receive: Receive, send: Send) -> None:
            await chained(trail.with_tag(scope, trail.CHAIN_INJECTOR), receive, send)

        return app

    def __repr__(self) -> str:
        return f"ChainInjector({list(self.injectors)!r})"
