"""faultgate: fault injection middleware for ASGI services."""

from .errors import (
    EmptyInjectorListError,
    FaultConfigError,
    InvalidParticipationError,
    InvalidStatusCodeError,
    NilInjectorError,
    RequestAborted,
)
from .fault import Fault
from .injectors import (
    ChainInjector,
    ErrorInjector,
    Injector,
    RandomInjector,
    RejectInjector,
    SlowInjector,
)
from .middleware import FaultMiddleware
from .randomness import DEFAULT_RAND_SEED, RandomSource
from .reporter import InjectorState, LoggingReporter, NoopReporter, Reporter

__all__ = [
    "DEFAULT_RAND_SEED",
    "ChainInjector",
    "EmptyInjectorListError",
    "ErrorInjector",
    "Fault",
    "FaultConfigError",
    "FaultMiddleware",
    "Injector",
    "InjectorState",
    "InvalidParticipationError",
    "InvalidStatusCodeError",
    "LoggingReporter",
    "NilInjectorError",
    "NoopReporter",
    "RandomInjector",
    "RandomSource",
    "RejectInjector",
    "Reporter",
    "RequestAborted",
    "SlowInjector",
]
