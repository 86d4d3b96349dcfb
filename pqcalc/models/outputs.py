"""
Output models for calculation results.

These models define the response of a calculation and the description of a
calculation's quantities.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from pqcalc.models.inputs import MODEL_CONFIG


class QuantityState(str, Enum):
    """Resolution state of one quantity during a calculation."""
    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"
    FAILED = "failed"


class QuantityKind(str, Enum):
    """Whether a quantity is supplied or calculated."""
    INPUT = "input"
    OUTPUT = "output"


class QuantityResult(BaseModel):
    """
    Reported value of one quantity.

    Failed quantities still get an entry: value and base value are 0, the
    unit is the quantity's own face unit and `error` says what went wrong.
    """
    symbol: str = Field(..., description="Quantity symbol")
    value: float = Field(..., description="Value in `unit`")
    unit: str = Field(..., description="Reporting unit")
    base_value: float = Field(..., description="Value in the base unit")
    base_unit: str = Field(..., description="Base unit")
    expression: Optional[str] = Field(default=None, description="Formula for derived quantities")
    error: Optional[str] = Field(default=None, description="Failure message, if any")

    model_config = MODEL_CONFIG

    @property
    def ok(self) -> bool:
        return self.error is None


class CalculationSummary(BaseModel):
    """Counts describing one calculation."""
    total_quantities: int = Field(..., ge=0)
    input_count: int = Field(..., ge=0, description="Entries in the inputs view")
    output_count: int = Field(..., ge=0, description="Entries in the outputs view")
    failed_count: int = Field(..., ge=0, description="Quantities that failed to resolve")

    model_config = MODEL_CONFIG


class CalculationResponse(BaseModel):
    """
    Result of a calculation.

    `inputs` echoes the overridden input quantities, `outputs` holds the
    requested (or all remaining) quantities.
    """
    inputs: dict[str, QuantityResult] = Field(default_factory=dict)
    outputs: dict[str, QuantityResult] = Field(default_factory=dict)
    metadata: CalculationSummary

    model_config = MODEL_CONFIG

    @property
    def failed(self) -> list[str]:
        """Symbols whose output entry carries an error."""
        return [s for s, r in self.outputs.items() if not r.ok]

    def to_payload(self) -> dict:
        """JSON-ready dict with camelCase keys and no empty optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class QuantityInfo(BaseModel):
    """Description of one quantity for callers building a request."""
    symbol: str
    description: Optional[str] = None
    unit: str = Field(..., description="Face unit")
    base_unit: str
    category_id: str
    kind: QuantityKind
    expression: Optional[str] = None
    face_value: float = Field(default=0.0, description="Default face value")

    model_config = MODEL_CONFIG


class CalculationMetadata(BaseModel):
    """What a calculation accepts and produces."""
    total_quantities: int = Field(..., ge=0)
    input_quantities: list[QuantityInfo] = Field(default_factory=list)
    output_quantities: list[QuantityInfo] = Field(default_factory=list)
    available_units: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Category id -> units a caller may use",
    )

    model_config = MODEL_CONFIG
