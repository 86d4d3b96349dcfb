"""
Tests for unit handling.

Tests the conversion gateway, the category catalog and the units cache.
"""

import pytest

from pqcalc.config import EngineSettings
from pqcalc.errors import UnitError
from pqcalc.units.cache import UnitsCache
from pqcalc.units.catalog import DEFAULT_CATALOG


class TestConvertToBase:
    """Tests for UnitGateway.convert_to_base."""

    def test_kilometres_to_metres(self, gateway):
        """Test length converts to metres."""
        assert gateway.convert_to_base(300, "km") == pytest.approx(300_000.0)

    def test_hours_to_seconds(self, gateway):
        """Test that 'h' is the hour."""
        assert gateway.convert_to_base(6, "h") == pytest.approx(21_600.0)

    def test_compound_unit(self, gateway):
        """Test km/h converts to m/s."""
        assert gateway.convert_to_base(36, "km/h") == pytest.approx(10.0)

    def test_offset_unit(self, gateway):
        """Test Celsius converts to kelvin with its offset."""
        assert gateway.convert_to_base(25, "degC") == pytest.approx(298.15)

    def test_unitless(self, gateway):
        """Test the unitless marker and the empty unit."""
        assert gateway.convert_to_base(3.5, "ul") == pytest.approx(3.5)
        assert gateway.convert_to_base(3.5, "") == pytest.approx(3.5)

    def test_unknown_unit_raises(self, gateway):
        """Test that an unknown unit raises UnitError."""
        with pytest.raises(UnitError):
            gateway.convert_to_base(1, "furlongz")


class TestConvertToFace:
    """Tests for UnitGateway.convert_to_face."""

    def test_metres_per_second_to_kmh(self, gateway):
        """Test base velocity converts to km/h."""
        assert gateway.convert_to_face(300_000 / 21_600, "km/h") == pytest.approx(50.0)

    def test_kelvin_to_celsius(self, gateway):
        """Test base temperature converts back to Celsius."""
        assert gateway.convert_to_face(273.15, "degC") == pytest.approx(0.0, abs=1e-9)

    def test_unknown_unit_raises(self, gateway):
        """Test that an unknown unit raises UnitError."""
        with pytest.raises(UnitError):
            gateway.convert_to_face(1, "furlongz")

    @pytest.mark.parametrize("value,unit", [
        (12.5, "km"),
        (3.0, "mph"),
        (-40.0, "degF"),
        (101.3, "kPa"),
        (2.0, "kWh"),
    ])
    def test_round_trip(self, gateway, value, unit):
        """Test face -> base -> face returns the original value."""
        base = gateway.convert_to_base(value, unit)
        assert gateway.convert_to_face(base, unit) == pytest.approx(value)


class TestConvert:
    """Tests for UnitGateway.convert between concrete units."""

    def test_kmh_to_mph(self, gateway):
        """Test conversion between two velocity units."""
        assert gateway.convert(50, "km/h", "mph") == pytest.approx(31.0686, rel=1e-4)

    def test_incompatible_units_raise(self, gateway):
        """Test that mixing dimensions raises UnitError."""
        with pytest.raises(UnitError, match="not compatible"):
            gateway.convert(1, "m", "s")

    def test_unknown_target_raises(self, gateway):
        """Test that an unknown target unit raises UnitError."""
        with pytest.raises(UnitError):
            gateway.convert(1, "m", "blorp")


class TestUnitQueries:
    """Tests for base-unit and compatibility helpers."""

    def test_base_unit_of(self, gateway):
        """Test the base unit of a velocity unit is m/s."""
        assert gateway.base_unit_of("km/h") == "m / s"

    @pytest.mark.parametrize("unit", ["m", "m/s", "kg", "N", "K", "ul", ""])
    def test_base_units(self, gateway, unit):
        """Test canonical units are recognised as base units."""
        assert gateway.is_base_unit(unit)

    @pytest.mark.parametrize("unit", ["km", "h", "degC", "percent"])
    def test_non_base_units(self, gateway, unit):
        """Test scaled and offset units are not base units."""
        assert not gateway.is_base_unit(unit)

    def test_is_compatible(self, gateway):
        """Test dimension comparison."""
        assert gateway.is_compatible("km", "mi")
        assert not gateway.is_compatible("km", "h")

    def test_is_known(self, gateway):
        """Test unit recognition."""
        assert gateway.is_known("km/h")
        assert not gateway.is_known("furlongz")

    def test_category_for(self, gateway):
        """Test catalog lookup by id."""
        assert gateway.category_for("220").name == "Velocity/Speed"
        assert gateway.category_for("does-not-exist") is None


class TestCompatibleUnits:
    """Tests for UnitGateway.compatible_units."""

    def test_velocity_units(self, gateway):
        """Test velocity units are advertised for km/h."""
        units = gateway.compatible_units("km/h")
        assert units[0] == "km/h"
        assert "mph" in units
        assert "m/s" in units

    def test_no_duplicates(self, gateway):
        """Test the requested unit is not repeated."""
        units = gateway.compatible_units("m")
        assert units.count("m") == 1

    def test_uncatalogued_dimension_falls_back(self, gateway):
        """Test units without a category return the unit and its base unit."""
        units = gateway.compatible_units("mol")
        assert units == ["mol"]

    def test_catalog_units_are_known(self, gateway):
        """Test every catalog unit parses."""
        for category in DEFAULT_CATALOG:
            assert gateway.is_known(category.base_unit)
            for unit in category.units:
                assert gateway.is_known(unit), f"{unit} in {category.name}"

    def test_catalog_base_units_are_canonical(self, gateway):
        """Test every catalog base unit is its own base unit."""
        for category in DEFAULT_CATALOG:
            assert gateway.is_base_unit(category.base_unit), category.name


class FakeClock:
    """Manually advanced clock."""

    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestUnitsCache:
    """Tests for the TTL cache of advertised units."""

    def test_get_missing(self):
        """Test a missing key returns None."""
        assert UnitsCache().get("901") is None

    def test_set_and_get(self):
        """Test stored units are returned."""
        cache = UnitsCache()
        cache.set("901", ["m", "km"])
        assert cache.get("901") == ["m", "km"]

    def test_entries_expire(self):
        """Test entries disappear after the TTL."""
        clock = FakeClock()
        cache = UnitsCache(ttl_seconds=10, clock=clock)
        cache.set("901", ["m"])
        clock.now = 9.9
        assert cache.get("901") == ["m"]
        clock.now = 10.0
        assert cache.get("901") is None
        assert len(cache) == 0

    def test_returned_list_is_a_copy(self):
        """Test callers cannot mutate cached entries."""
        cache = UnitsCache()
        cache.set("901", ["m"])
        cache.get("901").append("km")
        assert cache.get("901") == ["m"]

    def test_invalidate_and_clear(self):
        """Test explicit invalidation."""
        cache = UnitsCache()
        cache.set("901", ["m"])
        cache.set("903", ["s"])
        cache.invalidate("901")
        assert cache.get("901") is None
        assert len(cache) == 1
        cache.clear()
        assert len(cache) == 0

    def test_negative_ttl_rejected(self):
        """Test the TTL must be non-negative."""
        with pytest.raises(ValueError):
            UnitsCache(ttl_seconds=-1)

    def test_ttl_from_settings(self):
        """Test the cache TTL follows the engine settings."""
        cache = UnitsCache.from_settings(EngineSettings(units_cache_ttl_seconds=12.0))
        assert cache.ttl_seconds == 12.0
