"""Reporters receive lifecycle events from injectors for logging and stats."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum

logger = logging.getLogger(__name__)


class InjectorState(str, Enum):
    """Lifecycle state of an injector for a single request."""

    STARTED = "started"
    FINISHED = "finished"


class Reporter(ABC):
    """Receives event data from injected faults.

    Implementations are called inline on the request path and should return
    quickly. Exceptions they raise are logged and discarded.
    """

    @abstractmethod
    def report(self, name: str, state: InjectorState) -> None:
        ...


class NoopReporter(Reporter):
    """A reporter that does nothing."""

    def report(self, name: str, state: InjectorState) -> None:
        pass


class LoggingReporter(Reporter):
    """Writes one log record per injector event."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.INFO):
        self.logger = logger or logging.getLogger(__name__)
        self.level = level

    def report(self, name: str, state: InjectorState) -> None:
        self.logger.log(self.level, "fault injector %s %s", name, state.value)


def safe_report(reporter: Reporter | None, name: str, state: InjectorState) -> None:
    """Send an event to ``reporter`` without letting it fail the request."""
    if reporter is None:
        return
    try:
        reporter.report(name, state)
    except Exception:
        logger.exception("reporter %r failed for %s %s", reporter, name, state.value)
