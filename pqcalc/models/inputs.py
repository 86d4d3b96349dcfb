"""
Input models for a calculation request.

These models define the quantity definitions, input overrides and output
preferences a caller sends. Overrides, preferences and the request itself
are closed records: unknown keys and inconsistent references are rejected
before any calculation starts.
"""

from typing import Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from pqcalc.expressions.tokens import SYMBOL_RE
from pqcalc.units.registry import UNITLESS, UNITLESS_CATEGORY

MODEL_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "extra": "forbid",
}


class QuantityDefinition(BaseModel):
    """
    One physical quantity in a calculation.

    A quantity without an expression is an input; one with an expression is
    derived from other quantities. Values are carried twice: in the base unit
    used for arithmetic and in the face unit shown to the caller.
    """

    symbol: str = Field(
        ...,
        validation_alias=AliasChoices("symbol", "sym"),
        description="Identifier, unique within the calculation",
    )
    expression: Optional[str] = Field(
        default=None,
        description="Formula over other symbols. Absent for input quantities",
    )
    category_id: str = Field(
        default=UNITLESS_CATEGORY,
        description="Unit category id (e.g. 901 length, 903 time, 220 velocity)",
    )
    base_value: float = Field(default=0.0, description="Value in the base unit")
    base_unit: str = Field(default=UNITLESS, description="Canonical unit used for arithmetic")
    face_value: float = Field(default=0.0, description="Value in the face unit")
    face_unit: str = Field(default="", description="Unit shown to and supplied by the caller")
    description: Optional[str] = Field(default=None, description="Human readable label")

    # Harvested definitions carry display attributes (decimal places, ids, ...)
    model_config = {**MODEL_CONFIG, "extra": "ignore"}

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        """Symbols must be plain identifiers so expressions can reference them."""
        if not SYMBOL_RE.match(v):
            raise ValueError(f"'{v}' is not a valid symbol (letters, digits, underscore)")
        return v

    @field_validator("expression", mode="before")
    @classmethod
    def blank_expression_is_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("category_id", mode="before")
    @classmethod
    def category_id_as_str(cls, v):
        return str(v)

    @property
    def is_input(self) -> bool:
        return self.expression is None

    @property
    def is_derived(self) -> bool:
        return self.expression is not None


class InputOverride(BaseModel):
    """
    Caller-supplied value for an input quantity.

    A missing value or unit falls back to the quantity's own face value or
    face unit.
    """

    value: Optional[float] = Field(default=None, description="New face value")
    unit: Optional[str] = Field(default=None, description="Unit of the supplied value")

    model_config = MODEL_CONFIG

    @field_validator("unit", mode="before")
    @classmethod
    def blank_unit_is_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class OutputPreference(BaseModel):
    """Request to report a quantity, optionally in a specific unit."""

    unit: Optional[str] = Field(default=None, description="Preferred reporting unit")

    model_config = MODEL_CONFIG

    @field_validator("unit", mode="before")
    @classmethod
    def blank_unit_is_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class CalculationRequest(BaseModel):
    """
    Everything needed for one stateless calculation.

    `output_preferences` acts as a filter: when omitted (or empty) every
    non-overridden quantity is returned. Overrides of calculated quantities
    are accepted but have no effect on their value.
    """

    quantity_definitions: list[QuantityDefinition] = Field(
        ...,
        min_length=1,
        description="All quantities of the calculation",
    )
    input_overrides: dict[str, InputOverride] = Field(
        default_factory=dict,
        description="Symbol -> new value/unit for input quantities",
    )
    output_preferences: Optional[dict[str, OutputPreference]] = Field(
        default=None,
        description="Symbol -> preferred unit. Restricts the outputs returned",
    )

    @model_validator(mode="after")
    def validate_references(self) -> "CalculationRequest":
        """Reject duplicate symbols and overrides of undefined symbols."""
        seen = set()
        for definition in self.quantity_definitions:
            if definition.symbol in seen:
                raise ValueError(f"Duplicate symbol '{definition.symbol}'")
            seen.add(definition.symbol)

        by_symbol = self.definitions_by_symbol()
        for symbol in self.input_overrides:
            if symbol not in by_symbol:
                raise ValueError(f"Input override for unknown symbol '{symbol}'")
        return self

    def definitions_by_symbol(self) -> dict[str, QuantityDefinition]:
        return {d.symbol: d for d in self.quantity_definitions}

    model_config = {
        **MODEL_CONFIG,
        "json_schema_extra": {
            "example": {
                "quantityDefinitions": [
                    {"symbol": "D", "categoryId": "901", "baseValue": 1000,
                     "baseUnit": "m", "faceValue": 1, "faceUnit": "km"},
                    {"symbol": "t", "categoryId": "903", "baseValue": 3600,
                     "baseUnit": "s", "faceValue": 1, "faceUnit": "h"},
                    {"symbol": "v", "expression": "D/t", "categoryId": "220",
                     "baseUnit": "m/s", "faceUnit": "km/h"},
                ],
                "inputOverrides": {
                    "D": {"value": 300, "unit": "km"},
                    "t": {"value": 6, "unit": "h"},
                },
                "outputPreferences": {"v": {"unit": "mph"}},
            }
        },
    }
