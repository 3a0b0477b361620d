from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

from .randomness import DEFAULT_RAND_SEED
from .schema import ErrorInjectorSpec, FaultSpec, InjectorSpec


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ------------------------------------------------------------------
    # Admission policy
    # ------------------------------------------------------------------
    fault_enabled: bool = False
    fault_participation: float = Field(0.0, ge=0.0, le=1.0)

    # Lists and maps are read as JSON, e.g. FAULT_PATH_BLOCKLIST='["/ping"]'
    fault_path_blocklist: list[str] = []
    fault_path_allowlist: list[str] = []
    fault_header_blocklist: dict[str, str] = {}  # {"X-Fault-Opt-Out": "1"}
    fault_header_allowlist: dict[str, str] = {}

    fault_rand_seed: int = DEFAULT_RAND_SEED

    # ------------------------------------------------------------------
    # Injector tree (JSON), e.g.
    # FAULT_INJECTOR='{"type": "chain", "steps": [
    #     {"type": "slow", "duration_ms": 10},
    #     {"type": "error", "status_code": 503}]}'
    # ------------------------------------------------------------------
    fault_injector: InjectorSpec = ErrorInjectorSpec(status_code=500)

    # Send injector lifecycle events to the log
    fault_report: bool = False

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

    def to_fault_spec(self) -> FaultSpec:
        """Collect the fault_* settings into a FaultSpec."""
        return FaultSpec(
            enabled=self.fault_enabled,
            participation=self.fault_participation,
            path_blocklist=self.fault_path_blocklist,
            path_allowlist=self.fault_path_allowlist,
            header_blocklist=self.fault_header_blocklist,
            header_allowlist=self.fault_header_allowlist,
            rand_seed=self.fault_rand_seed,
            injector=self.fault_injector,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
