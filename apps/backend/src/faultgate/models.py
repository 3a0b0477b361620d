"""API models for the faultgate demo service."""

from typing import Optional

from pydantic import BaseModel, Field


class FaultStatus(BaseModel):
    """Live admission settings of the service's Fault."""

    injector: str
    enabled: bool
    participation: float


class FaultUpdateRequest(BaseModel):
    """Request to change the Fault while the service is running."""

    enabled: Optional[bool] = Field(None, description="Turn fault injection on or off")
    participation: Optional[float] = Field(
        None,
        description="Fraction of eligible requests to inject, 0.0 <= participation <= 1.0",
    )


class PingResponse(BaseModel):
    """Response of the demo endpoint that faults are injected into."""

    status: str = "ok"
    fault: list[str] = Field(default_factory=list, description="What the fault middleware did")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str = "faultgate"
