"""Composable fault behaviors that wrap a downstream ASGI app."""

from .base import ASGIApp, Injector, wrap
from .chain import ChainInjector
from .choice import RandomInjector
from .error import ErrorInjector
from .reject import RejectInjector
from .slow import SlowInjector

__all__ = [
    "ASGIApp",
    "ChainInjector",
    "ErrorInjector",
    "Injector",
    "RandomInjector",
    "RejectInjector",
    "SlowInjector",
    "wrap",
]
