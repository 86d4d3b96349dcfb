"""
Pytest configuration and shared fixtures.
"""

import pytest

from pqcalc.config import EngineSettings
from pqcalc.engine.calculator import Calculator
from pqcalc.expressions.evaluator import ExpressionEvaluator
from pqcalc.models.inputs import QuantityDefinition
from pqcalc.units.gateway import UnitGateway


@pytest.fixture
def gateway() -> UnitGateway:
    """Provide the default pint-backed unit gateway."""
    return UnitGateway()


@pytest.fixture
def evaluator() -> ExpressionEvaluator:
    """Provide the default sympy-backed evaluator."""
    return ExpressionEvaluator()


@pytest.fixture
def calculator() -> Calculator:
    """Provide a calculator with default settings."""
    return Calculator(settings=EngineSettings())


@pytest.fixture
def velocity_definitions() -> list[dict]:
    """Distance, time and the velocity derived from them (JSON shape)."""
    return [
        {"symbol": "D", "categoryId": "901", "baseValue": 1000.0, "baseUnit": "m",
         "faceValue": 1.0, "faceUnit": "km", "description": "Distance"},
        {"symbol": "t", "categoryId": "903", "baseValue": 3600.0, "baseUnit": "s",
         "faceValue": 1.0, "faceUnit": "h", "description": "Time"},
        {"symbol": "v", "expression": "D/t", "categoryId": "220", "baseValue": 0.0,
         "baseUnit": "m/s", "faceValue": 0.0, "faceUnit": "km/h", "description": "Velocity"},
    ]


@pytest.fixture
def velocity_quantities(velocity_definitions) -> list[QuantityDefinition]:
    """Velocity scenario as validated definitions."""
    return [QuantityDefinition.model_validate(d) for d in velocity_definitions]


@pytest.fixture
def velocity_request(velocity_definitions) -> dict:
    """The D/t scenario with D=300 km and t=6 h."""
    return {
        "quantityDefinitions": velocity_definitions,
        "inputOverrides": {
            "D": {"value": 300, "unit": "km"},
            "t": {"value": 6, "unit": "h"},
        },
    }


@pytest.fixture
def unitless():
    """Factory for unitless definitions."""
    def make(symbol: str, expression: str = None, value: float = 0.0) -> QuantityDefinition:
        return QuantityDefinition(
            symbol=symbol,
            expression=expression,
            base_value=value,
            face_value=value,
        )
    return make
