"""Injector that runs one randomly chosen injector per request."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .. import trail
from ..randomness import DEFAULT_RAND_SEED, RandomSource
from .base import ASGIApp, Injector, Receive, Scope, Send, check_injectors, wrap


class RandomInjector(Injector):
    """Combines many Injectors into a single Injector that runs one randomly.

    ``rand_int_func(n)`` replaces the seeded draw and must return an int in
    [0, n). Each RandomInjector owns its random source, so composing several of
    them never couples their sequences.
    """

    def __init__(
        self,
        injectors: Sequence[Injector] | None = None,
        *,
        rand_seed: int = DEFAULT_RAND_SEED,
        rand_int_func: Callable[[int], int] | None = None,
        allow_empty: bool = True,
    ):
        self.injectors = check_injectors(injectors, "RandomInjector", allow_empty)
        self.rand = RandomSource(rand_seed, int_func=rand_int_func)

    def handler(self, next_app: ASGIApp) -> ASGIApp:
        # Choices are fixed after construction, so each one is wrapped only once
        handlers = [wrap(injector, next_app) for injector in self.injectors]

        async def app(scope: Scope, receive: Receive, send: Send) -> None:
            if not handlers:
                await next_app(scope, receive, send)
                return
            idx = self.rand.next_int(len(handlers))
            await handlers[idx](trail.with_tag(scope, trail.RANDOM_INJECTOR), receive, send)

        return app

    def __repr__(self) -> str:
        return f"RandomInjector({list(self.injectors)!r}, rand_seed={self.rand.seed!r})"
