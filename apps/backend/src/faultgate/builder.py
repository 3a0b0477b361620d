"""Turns declarative specs into live Faults and Injectors."""

from __future__ import annotations

import logging

from .fault import Fault
from .injectors import (
    ChainInjector,
    ErrorInjector,
    Injector,
    RandomInjector,
    RejectInjector,
    SlowInjector,
)
from .reporter import Reporter
from .schema import (
    ChainInjectorSpec,
    ErrorInjectorSpec,
    FaultSpec,
    InjectorSpec,
    RandomInjectorSpec,
    RejectInjectorSpec,
    SlowInjectorSpec,
)

logger = logging.getLogger(__name__)


def build_injector(spec: InjectorSpec, reporter: Reporter | None = None) -> Injector:
    """Build an injector tree. Composites declared in config must not be empty."""
    if isinstance(spec, ErrorInjectorSpec):
        return ErrorInjector(spec.status_code, status_text=spec.status_text, reporter=reporter)
    if isinstance(spec, SlowInjectorSpec):
        return SlowInjector(spec.duration_ms / 1000.0, reporter=reporter)
    if isinstance(spec, RejectInjectorSpec):
        return RejectInjector(reporter=reporter)
    if isinstance(spec, ChainInjectorSpec):
        steps = [build_injector(step, reporter) for step in spec.steps]
        return ChainInjector(steps, allow_empty=False)
    if isinstance(spec, RandomInjectorSpec):
        choices = [build_injector(choice, reporter) for choice in spec.choices]
        return RandomInjector(choices, rand_seed=spec.rand_seed, allow_empty=False)
    raise TypeError(f"unknown injector spec: {spec!r}")


def build_fault(spec: FaultSpec, reporter: Reporter | None = None) -> Fault:
    """Build a Fault and its injector from a FaultSpec."""
    injector = build_injector(spec.injector, reporter)
    fault = Fault(
        injector,
        enabled=spec.enabled,
        participation=spec.participation,
        path_blocklist=spec.path_blocklist,
        path_allowlist=spec.path_allowlist,
        header_blocklist=spec.header_blocklist,
        header_allowlist=spec.header_allowlist,
        rand_seed=spec.rand_seed,
    )
    logger.info(
        "built fault %r (path blocklist=%s, path allowlist=%s)",
        fault,
        sorted(fault.path_blocklist),
        sorted(fault.path_allowlist),
    )
    return fault
