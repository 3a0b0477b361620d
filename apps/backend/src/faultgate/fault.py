"""Fault: decides per request whether its Injector should run.

A Fault wraps exactly one Injector (which may itself be a ChainInjector or a
RandomInjector) with admission policy:

    1. disabled faults pass every request on without looking at anything else
    2. a blocklisted path is never admitted; a non-empty path allowlist admits
       only the paths it lists
    3. headers are checked the same way, and a single matching key/value pair
       is enough to trigger either list
    4. the remaining requests are admitted when a random draw in [0, 1) is
       strictly less than ``participation``

Header names are compared case-insensitively and values exactly. Only the first
value of a repeated header is considered. A header list naming the same header
twice in different case is rejected at construction.
"""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Callable, Iterable, Mapping

from . import trail
from .errors import FaultConfigError, InvalidParticipationError, NilInjectorError
from .injectors.base import ASGIApp, Injector, Receive, Scope, Send
from .randomness import DEFAULT_RAND_SEED, RandomSource

logger = logging.getLogger(__name__)


def _check_participation(value: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidParticipationError(value)
    if math.isnan(value) or value < 0.0 or value > 1.0:
        raise InvalidParticipationError(value)
    return float(value)


def _normalize_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    normalized: dict[str, str] = {}
    for key, value in (headers or {}).items():
        name = key.lower()
        if name in normalized:
            raise FaultConfigError(f"header {key!r} is listed more than once", "duplicate_header")
        normalized[name] = value
    return normalized


class Fault:
    """Admission controller wrapping a single Injector."""

    def __init__(
        self,
        injector: Injector,
        *,
        enabled: bool = False,
        participation: float = 0.0,
        path_blocklist: Iterable[str] | None = None,
        path_allowlist: Iterable[str] | None = None,
        header_blocklist: Mapping[str, str] | None = None,
        header_allowlist: Mapping[str, str] | None = None,
        rand_seed: int = DEFAULT_RAND_SEED,
        rand_float_func: Callable[[], float] | None = None,
    ):
        if injector is None:
            raise NilInjectorError()

        self.injector = injector
        self.name = type(injector).__name__
        self._enabled = bool(enabled)
        self._participation = _check_participation(participation)
        self.path_blocklist = frozenset(path_blocklist or ())
        self.path_allowlist = frozenset(path_allowlist or ())
        self.header_blocklist = _normalize_headers(header_blocklist)
        self.header_allowlist = _normalize_headers(header_allowlist)
        self.rand = RandomSource(rand_seed, float_func=rand_float_func)
        # Protects _enabled and _participation for live updates
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        with self._lock:
            return self._enabled

    @property
    def participation(self) -> float:
        with self._lock:
            return self._participation

    def set_enabled(self, enabled: bool) -> None:
        """Turn the fault on or off while it is serving requests."""
        with self._lock:
            self._enabled = bool(enabled)
        logger.info("fault %s %s", self.name, "enabled" if enabled else "disabled")

    def set_participation(self, participation: float) -> None:
        """Update the participation rate. An invalid value keeps the old rate."""
        value = _check_participation(participation)
        with self._lock:
            self._participation = value
        logger.info("fault %s participation set to %s", self.name, value)

    def handler(self, next_app: ASGIApp) -> ASGIApp:
        """Return an ASGI app that runs the injector for admitted requests."""
        injected = self.injector.handler(next_app)

        async def app(scope: Scope, receive: Receive, send: Send) -> None:
            if scope.get("type") != "http":
                await next_app(scope, receive, send)
                return

            if not self.enabled:
                await next_app(trail.with_tag(scope, trail.FAULT_DISABLED), receive, send)
                return

            if not self.admit(scope):
                await next_app(trail.with_tag(scope, trail.FAULT_SKIPPED), receive, send)
                return

            logger.debug("fault %s injected on %s", self.name, scope.get("path"))
            await injected(trail.with_tag(scope, trail.FAULT_INJECTED), receive, send)

        return app

    def admit(self, scope: Scope) -> bool:
        """Apply path, header and participation policy to an HTTP request."""
        if not self._check_path(scope.get("path", "")):
            return False
        if not self._check_headers(scope.get("headers") or ()):
            return False
        return self.participate()

    def participate(self) -> bool:
        """Randomly return True ``participation`` of the time."""
        participation = self.participation
        return self.rand.next_float() < participation

    def _check_path(self, path: str) -> bool:
        if path in self.path_blocklist:
            return False
        if self.path_allowlist and path not in self.path_allowlist:
            return False
        return True

    def _check_headers(self, raw_headers: Iterable[tuple[bytes, bytes]]) -> bool:
        if not self.header_blocklist and not self.header_allowlist:
            return True

        headers: dict[str, str] = {}
        for raw_key, raw_value in raw_headers:
            headers.setdefault(raw_key.decode("latin-1").lower(), raw_value.decode("latin-1"))

        if _any_match(self.header_blocklist, headers):
            return False
        if self.header_allowlist and not _any_match(self.header_allowlist, headers):
            return False
        return True

    def __repr__(self) -> str:
        return (
            f"Fault(injector={self.injector!r}, enabled={self.enabled!r}, "
            f"participation={self.participation!r})"
        )


def _any_match(policy: Mapping[str, str], headers: Mapping[str, str]) -> bool:
    return any(key in headers and headers[key] == value for key, value in policy.items())
