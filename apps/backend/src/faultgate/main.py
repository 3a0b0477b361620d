import logging

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request

from .builder import build_fault
from .config import get_settings
from .errors import InvalidParticipationError
from .middleware import FaultMiddleware
from .models import FaultStatus, FaultUpdateRequest, HealthResponse, PingResponse
from .reporter import LoggingReporter

load_dotenv()

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

# The admin surface is never faulted, whatever the configured lists say
ADMIN_PATHS = ["/api/health", "/api/fault"]

spec = settings.to_fault_spec()
spec = spec.model_copy(update={"path_blocklist": [*spec.path_blocklist, *ADMIN_PATHS]})
fault = build_fault(spec, reporter=LoggingReporter() if settings.fault_report else None)

api = FastAPI(
    title="faultgate",
    description="Fault injection middleware for resilience testing",
    version="0.1.0",
)


@api.get("/api/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok")


@api.get("/api/fault", response_model=FaultStatus)
def get_fault():
    return FaultStatus(injector=fault.name, enabled=fault.enabled, participation=fault.participation)


@api.put("/api/fault", response_model=FaultStatus)
def update_fault(request: FaultUpdateRequest):
    """Change enabled/participation without restarting the service."""
    if request.participation is not None:
        try:
            fault.set_participation(request.participation)
        except InvalidParticipationError as e:
            raise HTTPException(status_code=422, detail=str(e))
    if request.enabled is not None:
        fault.set_enabled(request.enabled)
    return get_fault()


@api.get("/api/ping", response_model=PingResponse)
def ping(request: Request):
    return PingResponse(fault=getattr(request.state, "fault", []))


# Wrapped outside FastAPI's error handling so a rejected request reaches the
# server without a response. Serve with ``uvicorn faultgate.main:app``.
app = FaultMiddleware(api, fault=fault)
