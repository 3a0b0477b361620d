"""Pydantic models describing faults and injectors declaratively."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from .randomness import DEFAULT_RAND_SEED


class ErrorInjectorSpec(BaseModel):
    """Respond immediately with an HTTP error."""

    type: Literal["error"] = "error"
    status_code: int
    status_text: str | None = None  # defaults to the standard reason phrase


class SlowInjectorSpec(BaseModel):
    """Delay the request, then continue."""

    type: Literal["slow"] = "slow"
    duration_ms: float = Field(..., ge=0)


class RejectInjectorSpec(BaseModel):
    """Drop the request without a response."""

    type: Literal["reject"] = "reject"


class ChainInjectorSpec(BaseModel):
    """Run several injectors in order."""

    type: Literal["chain"] = "chain"
    steps: list["InjectorSpec"]


class RandomInjectorSpec(BaseModel):
    """Run one of several injectors, chosen at random per request."""

    type: Literal["random"] = "random"
    choices: list["InjectorSpec"]
    rand_seed: int = DEFAULT_RAND_SEED


InjectorSpec = Annotated[
    Union[
        ErrorInjectorSpec,
        SlowInjectorSpec,
        RejectInjectorSpec,
        ChainInjectorSpec,
        RandomInjectorSpec,
    ],
    Field(discriminator="type"),
]

ChainInjectorSpec.model_rebuild()
RandomInjectorSpec.model_rebuild()


class FaultSpec(BaseModel):
    """Admission policy plus the injector it guards."""

    enabled: bool = False
    participation: float = Field(0.0, ge=0.0, le=1.0)
    path_blocklist: list[str] = []
    path_allowlist: list[str] = []
    header_blocklist: dict[str, str] = {}
    header_allowlist: dict[str, str] = {}
    rand_seed: int = DEFAULT_RAND_SEED
    injector: InjectorSpec
