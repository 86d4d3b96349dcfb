"""
Engine settings.

Defaults live on the model; a deployment can override them through
environment variables:

    PQCALC_MAX_PASSES=500          - hard cap on scheduler queue pops
    PQCALC_UNITS_CACHE_TTL=60      - lifetime of cached unit lists (seconds)
"""

import os
from typing import Optional

from pydantic import BaseModel, Field


MAX_PASSES_ENV = "PQCALC_MAX_PASSES"
UNITS_CACHE_TTL_ENV = "PQCALC_UNITS_CACHE_TTL"


class EngineSettings(BaseModel):
    """Tunable limits for one calculator instance."""

    max_passes: Optional[int] = Field(
        default=None,
        gt=0,
        description="Maximum queue pops per calculation. None means quantity count squared.",
    )
    units_cache_ttl_seconds: float = Field(
        default=300.0,
        ge=0,
        description="How long advertised unit lists stay cached",
    )

    model_config = {"frozen": True}

    def pass_budget(self, quantity_count: int) -> int:
        """Number of queue pops the scheduler may spend."""
        if self.max_passes is not None:
            return self.max_passes
        return max(1, quantity_count * quantity_count)

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "EngineSettings":
        """Build settings, letting environment variables override defaults."""
        env = os.environ if environ is None else environ
        values = {}
        if env.get(MAX_PASSES_ENV):
            values["max_passes"] = int(env[MAX_PASSES_ENV])
        if env.get(UNITS_CACHE_TTL_ENV):
            values["units_cache_ttl_seconds"] = float(env[UNITS_CACHE_TTL_ENV])
        return cls(**values)
