"""
Tests for request and response models.
"""

import pytest
from pydantic import ValidationError

from pqcalc.models.inputs import (
    CalculationRequest,
    InputOverride,
    OutputPreference,
    QuantityDefinition,
)
from pqcalc.models.outputs import CalculationResponse, CalculationSummary, QuantityResult


class TestQuantityDefinition:
    """Tests for QuantityDefinition parsing."""

    def test_defaults(self):
        """Test missing fields take the unitless defaults."""
        definition = QuantityDefinition(symbol="k")
        assert definition.category_id == "900"
        assert definition.base_unit == "ul"
        assert definition.face_unit == ""
        assert definition.base_value == 0.0
        assert definition.face_value == 0.0
        assert definition.is_input

    def test_camel_case_keys(self, velocity_definitions):
        """Test JSON-style keys are accepted."""
        definition = QuantityDefinition.model_validate(velocity_definitions[2])
        assert definition.expression == "D/t"
        assert definition.category_id == "220"
        assert definition.base_unit == "m/s"
        assert definition.face_unit == "km/h"
        assert definition.is_derived

    def test_sym_alias(self):
        """Test 'sym' is accepted for the symbol."""
        assert QuantityDefinition.model_validate({"sym": "x"}).symbol == "x"

    def test_blank_expression_is_input(self):
        """Test a whitespace expression makes an input quantity."""
        definition = QuantityDefinition(symbol="x", expression="   ")
        assert definition.expression is None
        assert definition.is_input

    def test_numeric_category_id(self):
        """Test numeric category ids are coerced to strings."""
        assert QuantityDefinition.model_validate({"symbol": "x", "categoryId": 901}).category_id == "901"

    @pytest.mark.parametrize("symbol", ["2x", "a-b", "", "a b"])
    def test_invalid_symbol(self, symbol):
        """Test symbols must be identifiers."""
        with pytest.raises(ValidationError):
            QuantityDefinition(symbol=symbol)

    def test_extra_keys_ignored(self):
        """Test display attributes on definitions are ignored."""
        definition = QuantityDefinition.model_validate({"symbol": "x", "decimalPlaces": 3})
        assert not hasattr(definition, "decimal_places")


class TestOverridesAndPreferences:
    """Tests for InputOverride and OutputPreference."""

    def test_override_fields_optional(self):
        """Test an empty override is valid."""
        override = InputOverride()
        assert override.value is None
        assert override.unit is None

    def test_blank_unit_is_none(self):
        """Test blank units mean no unit."""
        assert InputOverride(value=1, unit=" ").unit is None
        assert OutputPreference(unit="").unit is None

    def test_unknown_keys_rejected(self):
        """Test overrides are closed records."""
        with pytest.raises(ValidationError):
            InputOverride.model_validate({"value": 1, "units": "km"})


class TestCalculationRequest:
    """Tests for CalculationRequest validation."""

    def test_valid_request(self, velocity_request):
        """Test the velocity scenario parses."""
        request = CalculationRequest.model_validate(velocity_request)
        assert [d.symbol for d in request.quantity_definitions] == ["D", "t", "v"]
        assert request.input_overrides["D"].unit == "km"
        assert request.output_preferences is None

    def test_empty_definitions_rejected(self):
        """Test at least one definition is required."""
        with pytest.raises(ValidationError):
            CalculationRequest.model_validate({"quantityDefinitions": []})

    def test_duplicate_symbol_rejected(self, velocity_definitions):
        """Test duplicate symbols are rejected."""
        payload = {"quantityDefinitions": velocity_definitions + [velocity_definitions[0]]}
        with pytest.raises(ValidationError, match="Duplicate symbol 'D'"):
            CalculationRequest.model_validate(payload)

    def test_unknown_override_rejected(self, velocity_definitions):
        """Test overrides must name a defined quantity."""
        payload = {
            "quantityDefinitions": velocity_definitions,
            "inputOverrides": {"x": {"value": 1}},
        }
        with pytest.raises(ValidationError, match="unknown symbol 'x'"):
            CalculationRequest.model_validate(payload)

    def test_derived_override_accepted(self, velocity_definitions):
        """Test an override of a calculated quantity passes validation."""
        payload = {
            "quantityDefinitions": velocity_definitions,
            "inputOverrides": {"v": {"value": 10, "unit": "km/h"}},
        }
        request = CalculationRequest.model_validate(payload)
        assert request.input_overrides["v"].value == 10

    def test_unknown_top_level_key_rejected(self, velocity_definitions):
        """Test misspelled request keys are reported."""
        with pytest.raises(ValidationError):
            CalculationRequest.model_validate(
                {"quantityDefinitions": velocity_definitions, "outputs": {}}
            )


class TestCalculationResponse:
    """Tests for CalculationResponse serialization."""

    def test_payload_uses_camel_case(self):
        """Test payload keys are camelCase and empty fields are dropped."""
        response = CalculationResponse(
            inputs={},
            outputs={
                "v": QuantityResult(
                    symbol="v", value=50.0, unit="km/h",
                    base_value=13.9, base_unit="m/s", expression="D/t",
                ),
            },
            metadata=CalculationSummary(
                total_quantities=3, input_count=0, output_count=1, failed_count=0,
            ),
        )
        payload = response.to_payload()
        assert payload["outputs"]["v"]["baseValue"] == 13.9
        assert "error" not in payload["outputs"]["v"]
        assert payload["metadata"]["failedCount"] == 0
        assert response.failed == []
