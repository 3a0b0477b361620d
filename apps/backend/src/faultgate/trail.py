"""Per-request record of what the fault middleware did.

Each Fault and injector that evaluates a request appends a tag to
``scope["state"]["fault"]``. Downstream Starlette/FastAPI handlers can read the
list as ``request.state.fault``.
"""

from __future__ import annotations

from typing import Any

STATE_KEY = "fault"

# Added at the Fault level
FAULT_DISABLED = "fault-disabled"
FAULT_SKIPPED = "fault-skipped"
FAULT_INJECTED = "fault-injected"

# Added by injectors that let the request continue
CHAIN_INJECTOR = "chain-injector"
RANDOM_INJECTOR = "random-injector"
SLOW_INJECTOR = "slow-injector"


def with_tag(scope: dict[str, Any], tag: str) -> dict[str, Any]:
    """Return a shallow copy of ``scope`` with ``tag`` appended to the trail."""
    state = dict(scope.get("state") or {})
    state[STATE_KEY] = [*state.get(STATE_KEY, []), tag]
    return {**scope, "state": state}


def get_trail(scope: dict[str, Any]) -> list[str]:
    """Return the tags recorded for this request, oldest first."""
    state = scope.get("state") or {}
    return list(state.get(STATE_KEY, []))
