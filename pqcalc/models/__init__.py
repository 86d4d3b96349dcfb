"""
Pydantic models for calculation requests and responses.
"""

from pqcalc.models.inputs import (
    QuantityDefinition,
    InputOverride,
    OutputPreference,
    CalculationRequest,
)
from pqcalc.models.outputs import (
    QuantityState,
    QuantityKind,
    QuantityResult,
    CalculationSummary,
    CalculationResponse,
    QuantityInfo,
    CalculationMetadata,
)

__all__ = [
    "QuantityDefinition",
    "InputOverride",
    "OutputPreference",
    "CalculationRequest",
    "QuantityState",
    "QuantityKind",
    "QuantityResult",
    "CalculationSummary",
    "CalculationResponse",
    "QuantityInfo",
    "CalculationMetadata",
]
