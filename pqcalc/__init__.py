"""
Physical-Quantity Calculator (pqcalc)

A stateless calculation engine for physical quantities. Given quantity
definitions (inputs with values and units, derived quantities with
expressions), it resolves every value in dependency order, converts between
units, and returns the quantities the caller asked for in the units the
caller asked for.

Usage:
    from pqcalc import calculate

    response = calculate({
        "quantityDefinitions": [...],
        "inputOverrides": {"D": {"value": 300, "unit": "km"}},
        "outputPreferences": {"v": {"unit": "mph"}},
    })
"""

__version__ = "0.1.0"
__author__ = "pqcalc contributors"

from pqcalc.config import EngineSettings
from pqcalc.errors import (
    PQCalcError,
    UnitError,
    EvalError,
    DefinitionError,
    UnresolvableDependencyError,
    CircularDependencyError,
)
from pqcalc.models.inputs import (
    QuantityDefinition,
    InputOverride,
    OutputPreference,
    CalculationRequest,
)
from pqcalc.models.outputs import (
    QuantityResult,
    CalculationResponse,
    CalculationMetadata,
)
from pqcalc.engine.calculator import Calculator, calculate
from pqcalc.inspection import describe_calculation, verify_definitions, count_by_kind

__all__ = [
    "EngineSettings",
    "PQCalcError",
    "UnitError",
    "EvalError",
    "DefinitionError",
    "UnresolvableDependencyError",
    "CircularDependencyError",
    "QuantityDefinition",
    "InputOverride",
    "OutputPreference",
    "CalculationRequest",
    "QuantityResult",
    "CalculationResponse",
    "CalculationMetadata",
    "Calculator",
    "calculate",
    "describe_calculation",
    "verify_definitions",
    "count_by_kind",
]
