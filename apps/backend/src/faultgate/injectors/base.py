"""Base interface for all fault injectors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from ..errors import EmptyInjectorListError, NilInjectorError

Scope = dict[str, Any]
Message = dict[str, Any]
Receive = Callable[[], Awaitable[Message]]
Send = Callable[[Message], Awaitable[None]]
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]


class Injector(ABC):
    """Wraps a downstream ASGI app with an alternate behavior.

    Injectors are wrapped into Faults, which decide whether the injector runs
    for a given request. The app returned by ``handler`` decides for itself
    whether ``next_app`` is called at all.
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def handler(self, next_app: ASGIApp) -> ASGIApp:
        ...


def wrap(injector: Injector | None, next_app: ASGIApp) -> ASGIApp:
    """Return ``injector.handler(next_app)``, or ``next_app`` if there is no injector."""
    if injector is None:
        return next_app
    return injector.handler(next_app)


def check_injectors(
    injectors: Sequence[Injector | None] | None, kind: str, allow_empty: bool
) -> tuple[Injector, ...]:
    """Validate the members of a composite injector and freeze their order."""
    members = tuple(injectors or ())
    for idx, injector in enumerate(members):
        if injector is None:
            raise NilInjectorError(idx)
    if not members and not allow_empty:
        raise EmptyInjectorListError(kind)
    return members
